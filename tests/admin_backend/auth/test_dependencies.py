import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from admin_backend.auth import jwt_handler
from admin_backend.auth.dependencies import get_current_admin


def test_get_current_admin_requires_credentials() -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_current_admin(credentials=None)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Missing or malformed Authorization header.'


def test_get_current_admin_returns_claims_for_admin_token() -> None:
    token = jwt_handler.create_admin_token(uid='admin-1', email='a@x.com', role='admin')

    claims = get_current_admin(HTTPAuthorizationCredentials(scheme='Bearer', credentials=token))

    assert claims.uid == 'admin-1'
    assert claims.role == 'admin'
