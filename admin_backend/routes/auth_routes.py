import logging

from fastapi import APIRouter, Depends, HTTPException, status
from google.api_core.exceptions import GoogleAPICallError
from google.cloud.firestore_v1.base_query import FieldFilter
from pydantic import BaseModel

from admin_backend.auth import jwt_handler, passwords
from admin_backend.auth.dependencies import AdminClaims, get_current_admin
from admin_backend.auth.revocation import revoked_tokens
from admin_backend.database import USERS_COLLECTION, get_db
from admin_backend.models.account import AccountRole, AdminProfile
from admin_backend.routes.common import server_error

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_DETAIL = 'Invalid email or password.'


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class LoginResponse(BaseModel):
    message: str
    token: str
    admin: AdminProfile


class MessageResponse(BaseModel):
    message: str


def find_admin_account(email: str, db):
    query = (
        db.collection(USERS_COLLECTION)
        .where(filter=FieldFilter('email', '==', email))
        .where(filter=FieldFilter('role', '==', AccountRole.ADMIN.value))
        .limit(1)
    )
    return next(iter(query.stream()), None)


@router.post('/login', response_model=LoginResponse)
def login(data: LoginRequest, db=Depends(get_db)):
    email = (data.email or '').strip()
    if not email or not data.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Email and password are required.',
        )

    try:
        snapshot = find_admin_account(email, db)
    except GoogleAPICallError as exc:
        raise server_error(exc, 'Admin login') from exc

    if snapshot is None:
        logger.warning('Admin login rejected for %s: no admin account', email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS_DETAIL)

    account = snapshot.to_dict() or {}
    hashed_password = account.get('hashedPassword')
    if not hashed_password:
        logger.error('Admin account %s has no hashedPassword', snapshot.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Admin account has no password configured.',
        )

    try:
        is_match = passwords.verify_password(data.password, hashed_password)
    except ValueError as exc:
        logger.error('Admin account %s has an unreadable password hash', snapshot.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Admin account has no password configured.',
        ) from exc

    if not is_match:
        logger.warning('Admin login rejected for %s: wrong password', email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS_DETAIL)

    token = jwt_handler.create_admin_token(
        uid=snapshot.id,
        email=account.get('email'),
        role=account.get('role') or AccountRole.ADMIN.value,
    )
    logger.info('Admin %s logged in', snapshot.id)

    return {
        'message': 'Admin login successful.',
        'token': token,
        'admin': AdminProfile.from_document(snapshot.id, account),
    }


@router.post('/logout', response_model=MessageResponse)
def logout(admin: AdminClaims = Depends(get_current_admin)):
    revoked_tokens.revoke(admin.jti, expires_at=admin.exp)
    logger.info('Admin %s logged out', admin.uid)
    return {'message': 'Logged out.'}


@router.get('/me', response_model=AdminProfile)
def me(admin: AdminClaims = Depends(get_current_admin), db=Depends(get_db)):
    try:
        snapshot = db.collection(USERS_COLLECTION).document(admin.uid).get()
    except GoogleAPICallError as exc:
        raise server_error(exc, 'Get admin profile') from exc

    if not snapshot.exists:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Admin not found.')

    return AdminProfile.from_document(snapshot.id, snapshot.to_dict() or {})
