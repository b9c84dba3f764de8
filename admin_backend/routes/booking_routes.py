import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from google.api_core.exceptions import GoogleAPICallError

from admin_backend.auth.dependencies import AdminClaims, get_current_admin
from admin_backend.database import BOOKINGS_COLLECTION, get_db
from admin_backend.routes.common import list_documents, server_error

router = APIRouter(tags=['bookings'])

logger = logging.getLogger(__name__)


@router.get('/bookings')
def list_bookings(
    status_filter: str | None = Query(default=None, alias='status'),
    _: AdminClaims = Depends(get_current_admin),
    db=Depends(get_db),
):
    try:
        bookings = list_documents(db.collection(BOOKINGS_COLLECTION), 'status', status_filter)
    except GoogleAPICallError as exc:
        raise server_error(exc, 'List bookings') from exc

    return {'bookings': bookings}


@router.delete('/bookings/{booking_id}')
def delete_booking(
    booking_id: str,
    admin: AdminClaims = Depends(get_current_admin),
    db=Depends(get_db),
):
    booking_ref = db.collection(BOOKINGS_COLLECTION).document(booking_id)
    try:
        if not booking_ref.get().exists:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Booking not found.')
        booking_ref.delete()
    except GoogleAPICallError as exc:
        raise server_error(exc, 'Delete booking') from exc

    logger.info('Admin %s deleted booking %s', admin.uid, booking_id)
    return {'message': f'Booking {booking_id} deleted.'}
