class AdminApiError(Exception):
    """An error response from the admin API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class BadRequestError(AdminApiError):
    pass


class UnauthorizedError(AdminApiError):
    pass


class ForbiddenError(AdminApiError):
    pass


class NotFoundError(AdminApiError):
    pass


class ServerError(AdminApiError):
    pass


ERRORS_BY_STATUS = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
}


def error_for_status(status_code: int, message: str) -> AdminApiError:
    if status_code >= 500:
        return ServerError(status_code, message)
    return ERRORS_BY_STATUS.get(status_code, AdminApiError)(status_code, message)
