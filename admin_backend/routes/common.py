import logging

from fastapi import HTTPException, status
from google.cloud.firestore_v1.base_query import FieldFilter

from admin_backend.database import LIST_LIMIT, snapshot_to_dict

logger = logging.getLogger(__name__)

SERVER_ERROR_DETAIL = "Server error."


def server_error(exc: Exception, action: str) -> HTTPException:
    logger.error("%s failed: %s", action, exc, exc_info=exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR_DETAIL)


def list_documents(collection, field: str, value: str | None, id_field: str = "id") -> list[dict]:
    """Return up to ``LIST_LIMIT`` documents, optionally where ``field == value``."""
    query = collection
    if value:
        query = query.where(filter=FieldFilter(field, "==", value))
    return [snapshot_to_dict(snapshot, id_field) for snapshot in query.limit(LIST_LIMIT).stream()]
