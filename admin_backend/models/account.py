"""Account document definitions."""

from enum import Enum

from pydantic import BaseModel


class AccountRole(str, Enum):
    """Roles stored in ``users.role``."""
    STUDENT = "student"
    TUTOR = "tutor"
    ADMIN = "admin"


DEFAULT_ADMIN_DISPLAY_NAME = "Admin"


class AdminProfile(BaseModel):
    """Public view of an admin account."""
    uid: str
    email: str | None = None
    displayName: str = DEFAULT_ADMIN_DISPLAY_NAME
    role: str | None = None

    @classmethod
    def from_document(cls, uid: str, data: dict) -> "AdminProfile":
        return cls(
            uid=uid,
            email=data.get("email"),
            displayName=data.get("displayName") or DEFAULT_ADMIN_DISPLAY_NAME,
            role=data.get("role"),
        )
