import pytest

from libs.result import Error
from src.api.error import ClientError, ServerError, raise_for_error


@pytest.mark.parametrize(
    "code,status_code",
    [
        ("LEAD_TIME_VIOLATION", 400),
        ("INVALID_MEETING_URL", 400),
        ("PAYMENT_FAILED", 402),
        ("FORBIDDEN", 403),
        ("SESSION_NOT_FOUND", 404),
        ("SLOT_CONFLICT", 409),
        ("ALREADY_RATED", 409),
    ],
)
def test_client_errors(code, status_code):
    with pytest.raises(ClientError) as exc_info:
        raise_for_error(Error(code, "boom"))

    assert exc_info.value.status_code == status_code
    assert exc_info.value.base_error.code == code


def test_unknown_code_is_server_error():
    with pytest.raises(ServerError):
        raise_for_error(Error("DATABASE_UNAVAILABLE", "boom"))
