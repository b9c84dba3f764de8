"""Tutor application document definitions."""

from enum import Enum


class ApplicationStatus(str, Enum):
    """Represents the review state of a tutor application."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


REVIEW_DECISIONS = {ApplicationStatus.APPROVED.value, ApplicationStatus.REJECTED.value}
