import logging

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from admin_backend.core import config
from admin_backend.routes import (
    auth_routes,
    booking_routes,
    dashboard_routes,
    tutor_application_routes,
    user_routes,
)
from admin_backend.routes.common import SERVER_ERROR_DETAIL

logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

app = FastAPI(title='Tutor Marketplace Admin API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def check_configuration() -> None:
    config.validate_runtime_config()
    logger.info('Admin API starting (env=%s)', config.APP_ENV)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={'message': str(exc.detail)},
        headers=getattr(exc, 'headers', None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        location = '.'.join(str(part) for part in errors[0].get('loc', ()) if part != 'body')
        message = f"Invalid request: {location} {errors[0].get('msg', '')}".strip()
    else:
        message = 'Invalid request.'
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={'message': message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc: Exception):
    logger.error('Unhandled error on %s %s', request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'message': SERVER_ERROR_DETAIL},
    )


@app.get('/')
def root():
    return {'status': 'Admin API Running'}


app.include_router(auth_routes.router, prefix='/api/admin')
app.include_router(user_routes.router, prefix='/api/admin')
app.include_router(tutor_application_routes.router, prefix='/api/admin')
app.include_router(booking_routes.router, prefix='/api/admin')
app.include_router(dashboard_routes.router, prefix='/api/admin')
