"""Translation of pydantic validation failures into domain ValidationErrors."""

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from authority.core.enums import ErrorCode
from authority.core.errors import ValidationError
from authority.domain.types import Password

_FIELD_ERROR_CODES: dict[str, ErrorCode] = {
    "email": ErrorCode.INVALID_EMAIL,
    "username": ErrorCode.INVALID_USERNAME,
    "display_name": ErrorCode.INVALID_DISPLAY_NAME,
    "password": ErrorCode.PASSWORD_TOO_WEAK,
    "new_password": ErrorCode.PASSWORD_TOO_WEAK,
}

_password_adapter: TypeAdapter[str] = TypeAdapter(Password)


def first_validation_error(
    exc: PydanticValidationError, *, field: str | None = None
) -> ValidationError:
    """Translate the first pydantic error into a domain ValidationError.

    Args:
        exc: Error raised by pydantic.
        field: Field name to report when pydantic has no location (bare
            TypeAdapter validation).
    """
    error = exc.errors()[0]
    if error["loc"]:
        field = str(error["loc"][0])
    message = str(error["msg"]).removeprefix("Value error, ")
    return ValidationError(
        code=_FIELD_ERROR_CODES.get(field or "", ErrorCode.VALIDATION_FAILED),
        message=message,
        field=field,
    )


def check_new_password(password: str) -> ValidationError | None:
    """Return the strength violation of a new password, or None if it passes."""
    try:
        _password_adapter.validate_python(password)
    except PydanticValidationError as exc:
        return first_validation_error(exc, field="new_password")
    return None
