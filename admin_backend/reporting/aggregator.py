"""Dashboard statistics derived from full account and booking snapshots."""

from collections import Counter
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from admin_backend.models.account import AccountRole
from admin_backend.models.booking import BookingStatus
from admin_backend.reporting.filters import normalize_status, to_datetime

MONTH_LABELS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MonthlyRevenue(_CamelModel):
    month: int
    label: str
    revenue: float


class DashboardSummary(_CamelModel):
    total_accounts: int
    accounts_by_role: dict[str, int]
    total_tutors: int
    total_students: int
    total_bookings: int
    completed_bookings: int
    cancelled_bookings: int
    active_bookings: int
    total_revenue: float
    monthly_revenue: list[MonthlyRevenue]
    year: int | None = None


def is_numeric_price(price) -> bool:
    return isinstance(price, (int, float)) and not isinstance(price, bool)


def monthly_revenue(bookings: Iterable[dict], year: int | None = None) -> list[MonthlyRevenue]:
    """Revenue of completed bookings per calendar month of ``endAt``.

    Always twelve entries, January first. Bookings without a numeric price
    or a readable ``endAt`` are skipped.
    """
    totals = [0.0] * 12
    for booking in bookings:
        if normalize_status(booking.get('status')) != BookingStatus.COMPLETED.value:
            continue
        price = booking.get('price')
        if not is_numeric_price(price):
            continue
        end_at = to_datetime(booking.get('endAt'))
        if end_at is None or (year is not None and end_at.year != year):
            continue
        totals[end_at.month - 1] += price

    return [
        MonthlyRevenue(month=index + 1, label=MONTH_LABELS[index], revenue=total)
        for index, total in enumerate(totals)
    ]


def build_dashboard_summary(accounts: Iterable[dict], bookings: Iterable[dict], year: int | None = None) -> DashboardSummary:
    accounts = list(accounts)
    bookings = list(bookings)

    roles = Counter(account['role'] for account in accounts if isinstance(account.get('role'), str) and account['role'])
    accounts_by_role = {role.value: roles.get(role.value, 0) for role in AccountRole}
    accounts_by_role.update(roles)

    statuses = Counter(normalize_status(booking.get('status')) for booking in bookings)
    completed = statuses[BookingStatus.COMPLETED.value]
    cancelled = statuses[BookingStatus.CANCELLED.value]

    total_revenue = sum(
        booking['price']
        for booking in bookings
        if normalize_status(booking.get('status')) == BookingStatus.COMPLETED.value
        and is_numeric_price(booking.get('price'))
    )

    return DashboardSummary(
        total_accounts=len(accounts),
        accounts_by_role=accounts_by_role,
        total_tutors=accounts_by_role[AccountRole.TUTOR.value],
        total_students=accounts_by_role[AccountRole.STUDENT.value],
        total_bookings=len(bookings),
        completed_bookings=completed,
        cancelled_bookings=cancelled,
        active_bookings=len(bookings) - completed - cancelled,
        total_revenue=total_revenue,
        monthly_revenue=monthly_revenue(bookings, year=year),
        year=year,
    )
