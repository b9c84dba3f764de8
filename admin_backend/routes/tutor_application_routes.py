import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status
from google.api_core.exceptions import GoogleAPICallError, NotFound
from pydantic import BaseModel

from admin_backend.auth.dependencies import AdminClaims, get_current_admin
from admin_backend.database import TUTOR_APPLICATIONS_COLLECTION, USERS_COLLECTION, get_db
from admin_backend.models.account import AccountRole
from admin_backend.models.tutor_application import REVIEW_DECISIONS, ApplicationStatus
from admin_backend.routes.common import list_documents, server_error

router = APIRouter(tags=['tutor-applications'])

logger = logging.getLogger(__name__)


class ReviewApplicationRequest(BaseModel):
    status: str | None = None


@router.get('/tutor-applications')
def list_tutor_applications(
    status_filter: str | None = Query(default=None, alias='status'),
    _: AdminClaims = Depends(get_current_admin),
    db=Depends(get_db),
):
    try:
        applications = list_documents(db.collection(TUTOR_APPLICATIONS_COLLECTION), 'status', status_filter)
    except GoogleAPICallError as exc:
        raise server_error(exc, 'List tutor applications') from exc

    return {'applications': applications}


@router.patch('/tutor-applications/{application_id}/status')
def review_tutor_application(
    application_id: str,
    data: ReviewApplicationRequest,
    admin: AdminClaims = Depends(get_current_admin),
    db=Depends(get_db),
):
    if data.status not in REVIEW_DECISIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Status must be one of: approved, rejected.',
        )

    application_ref = db.collection(TUTOR_APPLICATIONS_COLLECTION).document(application_id)

    try:
        snapshot = application_ref.get()
        if not snapshot.exists:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Tutor application not found.')

        application = snapshot.to_dict() or {}

        # Application review and account promotion commit together or not at all.
        batch = db.batch()
        batch.update(application_ref, {
            'status': data.status,
            'reviewedAt': datetime.now(timezone.utc),
            'reviewedBy': admin.uid,
        })
        if data.status == ApplicationStatus.APPROVED.value and application.get('uid'):
            batch.update(db.collection(USERS_COLLECTION).document(application['uid']), {
                'role': AccountRole.TUTOR.value,
                'isTutorVerified': True,
            })
        batch.commit()
    except NotFound as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Tutor application or linked account not found.',
        ) from exc
    except GoogleAPICallError as exc:
        raise server_error(exc, 'Review tutor application') from exc

    logger.info('Admin %s set tutor application %s to %s', admin.uid, application_id, data.status)
    return {'message': f'Tutor application status updated: {data.status}'}
