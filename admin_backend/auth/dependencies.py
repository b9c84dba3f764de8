import logging

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from admin_backend.auth import jwt_handler
from admin_backend.auth.revocation import revoked_tokens
from admin_backend.models.account import AccountRole

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class AdminClaims(BaseModel):
    uid: str
    email: str | None = None
    role: str
    exp: int
    jti: str


def verify_admin_token(token: str) -> AdminClaims:
    try:
        payload = jwt_handler.decode_admin_token(token)
    except jwt.ExpiredSignatureError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected admin token: %s", exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token.") from exc

    if revoked_tokens.is_revoked(payload["jti"]):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has been revoked.")

    if payload["role"] != AccountRole.ADMIN.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: not an admin.")

    return AdminClaims(
        uid=payload["uid"],
        email=payload.get("email"),
        role=payload["role"],
        exp=int(payload["exp"]),
        jti=payload["jti"],
    )


def get_current_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AdminClaims:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or malformed Authorization header.",
        )
    return verify_admin_token(credentials.credentials)
