"""Booking document definitions."""

from enum import Enum


class BookingStatus(str, Enum):
    """Canonical booking status used by list views and reporting.

    Stored booking statuses vary by producer (``requested``, ``accepted``,
    ``canceled``, ``cancelled_by_tutor``...). They are folded into these
    three buckets by ``admin_backend.reporting.filters.normalize_status``.
    """
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
