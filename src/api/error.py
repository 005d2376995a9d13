from fastapi import status
from libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


# Use case error code -> HTTP status. Unlisted codes are server errors.
STATUS_BY_CODE = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "LEAD_TIME_VIOLATION": status.HTTP_400_BAD_REQUEST,
    "SLOT_UNAVAILABLE": status.HTTP_400_BAD_REQUEST,
    "INVALID_MEETING_URL": status.HTTP_400_BAD_REQUEST,
    "INVALID_TOKEN": status.HTTP_401_UNAUTHORIZED,
    "PAYMENT_FAILED": status.HTTP_402_PAYMENT_REQUIRED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "MENTOR_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "STUDENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SESSION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SLOT_CONFLICT": status.HTTP_409_CONFLICT,
    "INVALID_STATUS_TRANSITION": status.HTTP_409_CONFLICT,
    "SESSION_NOT_COMPLETED": status.HTTP_409_CONFLICT,
    "ALREADY_RATED": status.HTTP_409_CONFLICT,
}


def raise_for_error(error: Error):
    """Raise the ClientError or ServerError matching a use case error"""
    status_code = STATUS_BY_CODE.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
