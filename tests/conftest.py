import copy
import itertools
import os

os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key-that-is-long-enough-for-hs256')
os.environ.setdefault('REPORTING_TIMEZONE', 'UTC')

import pytest  # noqa: E402
from google.api_core.exceptions import NotFound  # noqa: E402

from admin_backend.auth.revocation import revoked_tokens  # noqa: E402

_OPERATORS = {
    '==': lambda left, right: left == right,
    '!=': lambda left, right: left != right,
}

_auto_ids = itertools.count(1)


class FakeDocumentSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = copy.deepcopy(data)

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocumentReference:
    def __init__(self, collection, document_id):
        self._collection = collection
        self.id = document_id

    def get(self):
        return FakeDocumentSnapshot(self, self._collection.documents.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self._collection.documents:
            self._collection.documents[self.id].update(copy.deepcopy(data))
        else:
            self._collection.documents[self.id] = copy.deepcopy(data)
        self._collection.writes += 1

    def update(self, data):
        if self.id not in self._collection.documents:
            raise NotFound(f'No document to update: {self._collection.name}/{self.id}')
        self._collection.documents[self.id].update(copy.deepcopy(data))
        self._collection.writes += 1

    def delete(self):
        self._collection.documents.pop(self.id, None)
        self._collection.writes += 1


class FakeWatch:
    def __init__(self):
        self.unsubscribed = False

    def unsubscribe(self):
        self.unsubscribed = True


class FakeQuery:
    def __init__(self, collection, filters=(), limit=None):
        self._collection = collection
        self._filters = tuple(filters)
        self._limit = limit

    def where(self, filter=None):
        return FakeQuery(self._collection, self._filters + (filter,), self._limit)

    def limit(self, count):
        return FakeQuery(self._collection, self._filters, count)

    def stream(self):
        if self._collection.fail_with is not None:
            raise self._collection.fail_with
        matches = []
        for document_id, data in self._collection.documents.items():
            if all(
                _OPERATORS[field_filter.op_string](data.get(field_filter.field_path), field_filter.value)
                for field_filter in self._filters
            ):
                matches.append(FakeDocumentSnapshot(FakeDocumentReference(self._collection, document_id), data))
        if self._limit is not None:
            matches = matches[:self._limit]
        return iter(matches)

    def get(self):
        return list(self.stream())


class FakeCollection(FakeQuery):
    def __init__(self, name):
        self.name = name
        self.documents = {}
        self.writes = 0
        self.fail_with = None
        self.listeners = []
        self.watches = []
        super().__init__(self)

    def document(self, document_id=None):
        return FakeDocumentReference(self, document_id or f'auto-{next(_auto_ids)}')

    def on_snapshot(self, callback):
        self.listeners.append(callback)
        callback(list(self.stream()), [], None)
        watch = FakeWatch()
        self.watches.append(watch)
        return watch

    def push_snapshot(self):
        for callback in self.listeners:
            callback(list(self.stream()), [], None)


class FakeWriteBatch:
    def __init__(self):
        self._updates = []

    def update(self, reference, data):
        self._updates.append((reference, data))

    def commit(self):
        for reference, _ in self._updates:
            if not reference.get().exists:
                raise NotFound(f'No document to update: {reference.id}')
        for reference, data in self._updates:
            reference.update(data)


class FakeFirestore:
    """In-memory stand-in for the parts of the Firestore client the app uses."""

    def __init__(self):
        self._collections = {}

    def collection(self, name):
        if name not in self._collections:
            self._collections[name] = FakeCollection(name)
        return self._collections[name]

    def batch(self):
        return FakeWriteBatch()

    def seed(self, collection, document_id, data):
        self.collection(collection).documents[document_id] = copy.deepcopy(data)

    def data(self, collection, document_id):
        return self.collection(collection).documents.get(document_id)

    def write_count(self):
        return sum(collection.writes for collection in self._collections.values())


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture(autouse=True)
def clear_revoked_tokens():
    revoked_tokens.clear()
    yield
    revoked_tokens.clear()
