import bcrypt
import pytest
from fastapi.testclient import TestClient

from admin_backend.auth import jwt_handler
from admin_backend.database import BOOKINGS_COLLECTION, TUTOR_APPLICATIONS_COLLECTION, USERS_COLLECTION, get_db
from admin_backend.main import app

SECRET_HASH = bcrypt.hashpw(b'secret', bcrypt.gensalt(rounds=4)).decode()


@pytest.fixture
def client(fake_db):
    fake_db.seed(USERS_COLLECTION, 'admin-1', {
        'email': 'a@x.com',
        'role': 'admin',
        'hashedPassword': SECRET_HASH,
    })
    fake_db.seed(USERS_COLLECTION, 'student-1', {'email': 's@x.com', 'role': 'student'})
    fake_db.seed(TUTOR_APPLICATIONS_COLLECTION, 'app-1', {'uid': 'student-1', 'status': 'pending'})
    fake_db.seed(BOOKINGS_COLLECTION, 'b-1', {'status': 'completed', 'price': 120})

    app.dependency_overrides[get_db] = lambda: fake_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


def _login(client: TestClient) -> str:
    response = client.post('/api/admin/login', json={'email': 'a@x.com', 'password': 'secret'})
    assert response.status_code == 200
    return response.json()['token']


def test_login_then_me_returns_same_identity(client: TestClient) -> None:
    response = client.post('/api/admin/login', json={'email': 'a@x.com', 'password': 'secret'})

    body = response.json()
    assert response.status_code == 200
    assert body['token']
    assert body['admin'] == {'uid': 'admin-1', 'email': 'a@x.com', 'displayName': 'Admin', 'role': 'admin'}

    me = client.get('/api/admin/me', headers={'Authorization': f"Bearer {body['token']}"})

    assert me.status_code == 200
    assert me.json()['uid'] == 'admin-1'
    assert me.json()['email'] == 'a@x.com'


def test_errors_are_reported_as_message_bodies(client: TestClient) -> None:
    response = client.post('/api/admin/login', json={'email': 'a@x.com', 'password': 'nope'})

    assert response.status_code == 401
    assert response.json() == {'message': 'Invalid email or password.'}


def test_missing_login_body_is_bad_request(client: TestClient) -> None:
    response = client.post('/api/admin/login')

    assert response.status_code == 400
    assert 'message' in response.json()


@pytest.mark.parametrize('path', [
    '/api/admin/me',
    '/api/admin/users',
    '/api/admin/tutor-applications',
    '/api/admin/bookings',
    '/api/admin/dashboard',
])
def test_protected_routes_require_a_token(client: TestClient, path: str) -> None:
    response = client.get(path)

    assert response.status_code == 401
    assert response.json() == {'message': 'Missing or malformed Authorization header.'}


def test_malformed_authorization_header_is_unauthorized(client: TestClient) -> None:
    response = client.get('/api/admin/me', headers={'Authorization': 'Token abc'})

    assert response.status_code == 401


def test_non_admin_token_is_forbidden(client: TestClient) -> None:
    token = jwt_handler.create_admin_token(uid='student-1', email='s@x.com', role='student')

    response = client.get('/api/admin/users', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 403
    assert response.json() == {'message': 'Forbidden: not an admin.'}


def test_review_and_block_through_http(client: TestClient, fake_db) -> None:
    headers = {'Authorization': f'Bearer {_login(client)}'}

    bad = client.patch('/api/admin/tutor-applications/app-1/status', json={'status': 'maybe'}, headers=headers)
    approved = client.patch('/api/admin/tutor-applications/app-1/status', json={'status': 'approved'}, headers=headers)
    blocked = client.patch('/api/admin/users/student-1/block', json={'isBlocked': True}, headers=headers)

    assert bad.status_code == 400
    assert approved.status_code == 200
    assert blocked.status_code == 200
    account = fake_db.data(USERS_COLLECTION, 'student-1')
    assert account['role'] == 'tutor'
    assert account['isTutorVerified'] is True
    assert account['isBlocked'] is True


def test_logout_invalidates_token(client: TestClient) -> None:
    headers = {'Authorization': f'Bearer {_login(client)}'}

    assert client.post('/api/admin/logout', headers=headers).status_code == 200
    assert client.get('/api/admin/me', headers=headers).status_code == 401


def test_dashboard_over_http_uses_camel_case(client: TestClient) -> None:
    headers = {'Authorization': f'Bearer {_login(client)}'}

    response = client.get('/api/admin/dashboard', headers=headers)

    body = response.json()
    assert response.status_code == 200
    assert body['totalRevenue'] == 120
    assert body['accountsByRole']['admin'] == 1
    assert [entry['month'] for entry in body['monthlyRevenue']] == list(range(1, 13))


def test_dashboard_stream_requires_a_token(client: TestClient) -> None:
    response = client.get('/api/admin/dashboard/stream')

    assert response.status_code == 401
    assert response.json() == {'message': 'Missing or malformed Authorization header.'}


def test_over_long_password_is_rejected_as_invalid_credentials(client: TestClient) -> None:
    response = client.post('/api/admin/login', json={'email': 'a@x.com', 'password': 'x' * 100})

    assert response.status_code == 401
    assert response.json() == {'message': 'Invalid email or password.'}


def test_unexpected_failures_are_reported_as_message_bodies() -> None:
    def broken_db():
        raise ValueError('Could not load credentials')
        yield

    token = jwt_handler.create_admin_token(uid='admin-1', email='a@x.com', role='admin')
    app.dependency_overrides[get_db] = broken_db
    try:
        response = TestClient(app, raise_server_exceptions=False).get(
            '/api/admin/users',
            headers={'Authorization': f'Bearer {token}'},
        )
    finally:
        app.dependency_overrides.pop(get_db, None)

    assert response.status_code == 500
    assert response.json() == {'message': 'Server error.'}
