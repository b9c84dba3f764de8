import asyncio
import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from google.api_core.exceptions import GoogleAPICallError

from admin_backend.auth.dependencies import AdminClaims, get_current_admin
from admin_backend.database import BOOKINGS_COLLECTION, USERS_COLLECTION, get_db, snapshot_to_dict
from admin_backend.reporting.aggregator import DashboardSummary, build_dashboard_summary
from admin_backend.reporting.live import DashboardFeed
from admin_backend.routes.common import server_error

router = APIRouter(tags=['dashboard'])

logger = logging.getLogger(__name__)


def format_event(summary: DashboardSummary) -> str:
    return f'data: {summary.model_dump_json(by_alias=True)}\n\n'


@router.get('/dashboard', response_model=DashboardSummary)
def get_dashboard(
    year: int | None = Query(default=None),
    _: AdminClaims = Depends(get_current_admin),
    db=Depends(get_db),
):
    try:
        accounts = [snapshot_to_dict(snapshot, 'uid') for snapshot in db.collection(USERS_COLLECTION).stream()]
        bookings = [snapshot_to_dict(snapshot) for snapshot in db.collection(BOOKINGS_COLLECTION).stream()]
    except GoogleAPICallError as exc:
        raise server_error(exc, 'Build dashboard') from exc

    return build_dashboard_summary(accounts, bookings, year=year)


@router.get('/dashboard/stream')
async def stream_dashboard(
    request: Request,
    year: int | None = Query(default=None),
    admin: AdminClaims = Depends(get_current_admin),
    db=Depends(get_db),
):
    feed = DashboardFeed(db, loop=asyncio.get_running_loop(), year=year)
    feed.start()
    logger.info('Admin %s subscribed to dashboard updates', admin.uid)

    async def event_source():
        try:
            async for summary in feed:
                if await request.is_disconnected():
                    break
                yield format_event(summary)
        finally:
            feed.stop()

    return StreamingResponse(
        event_source(),
        media_type='text/event-stream',
        headers={'Cache-Control': 'no-cache'},
    )
