import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from google.api_core.exceptions import GoogleAPICallError, NotFound
from pydantic import BaseModel

from admin_backend.auth.dependencies import AdminClaims, get_current_admin
from admin_backend.database import USERS_COLLECTION, get_db
from admin_backend.routes.common import list_documents, server_error

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)

# Never sent back to the dashboard.
PRIVATE_ACCOUNT_FIELDS = ('hashedPassword',)


class BlockAccountRequest(BaseModel):
    isBlocked: bool = False


def public_account(account: dict) -> dict:
    return {key: value for key, value in account.items() if key not in PRIVATE_ACCOUNT_FIELDS}


@router.get('/users')
def list_users(
    role: str | None = Query(default=None),
    _: AdminClaims = Depends(get_current_admin),
    db=Depends(get_db),
):
    try:
        users = list_documents(db.collection(USERS_COLLECTION), 'role', role, id_field='uid')
    except GoogleAPICallError as exc:
        raise server_error(exc, 'List users') from exc

    return {'users': [public_account(user) for user in users]}


@router.patch('/users/{uid}/block')
def set_account_blocked(
    uid: str,
    data: BlockAccountRequest,
    admin: AdminClaims = Depends(get_current_admin),
    db=Depends(get_db),
):
    try:
        db.collection(USERS_COLLECTION).document(uid).update({'isBlocked': data.isBlocked})
    except NotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Account not found.') from exc
    except GoogleAPICallError as exc:
        raise server_error(exc, 'Block account') from exc

    logger.info('Admin %s set isBlocked=%s on account %s', admin.uid, data.isBlocked, uid)
    action = 'blocked' if data.isBlocked else 'unblocked'
    return {'message': f'Account {uid} {action}.'}
