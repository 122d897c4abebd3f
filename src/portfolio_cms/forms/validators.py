# ABOUTME: Field-level checks shared by the admin and public form models.
# ABOUTME: Email and URL types backed by pydantic plus the pydantic-to-field-errors conversion.

from typing import Annotated, Any, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    EmailStr,
    FileUrl,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)

from portfolio_cms.forms.exceptions import FormValidationError

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

FormT = TypeVar("FormT", bound=BaseModel)

_EMAIL = TypeAdapter(EmailStr)
_HTTP_URL = TypeAdapter(HttpUrl)
_FILE_URL = TypeAdapter(FileUrl)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _accepts(adapter: TypeAdapter, value: str) -> bool:
    try:
        adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def check_optional_url(value: str | None) -> str | None:
    """Normalize an optional URL field: blank becomes None, anything else must be http(s).

    The stripped text is kept as entered; HttpUrl only decides whether it is acceptable.
    """
    value = _blank_to_none(value)
    if value is not None and not _accepts(_HTTP_URL, value):
        raise ValueError("must be a valid http(s) URL")
    return value


def check_optional_image_url(value: str | None) -> str | None:
    """Like check_optional_url, but also accepts file:// URLs from the local object store."""
    value = _blank_to_none(value)
    if value is not None and not (_accepts(_HTTP_URL, value) or _accepts(_FILE_URL, value)):
        raise ValueError("must be a valid http(s) or file URL")
    return value


def check_email(value: str) -> str:
    """Validate an email address with email-validator and return its normalized form."""
    try:
        return _EMAIL.validate_python(value.strip())
    except ValidationError:
        raise ValueError("must be a valid email address") from None


def validate_form(form_cls: type[FormT], payload: dict) -> FormT:
    """Validate a payload against a form model.

    Args:
        form_cls: The form model class.
        payload: Raw field values.

    Returns:
        The validated form.

    Raises:
        FormValidationError: With one message per invalid field.
    """
    try:
        return form_cls.model_validate(payload)
    except ValidationError as e:
        errors: dict[str, str] = {}
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "__form__"
            message = error["msg"]
            if message.startswith("Value error, "):
                message = message[len("Value error, ") :]
            errors.setdefault(field, message)
        raise FormValidationError(errors) from None


def split_tags(value: Any) -> Any:
    """Accept comma-separated text where a list of tags is expected."""
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    return value


EmailText = Annotated[str, AfterValidator(check_email)]
OptionalUrl = Annotated[str | None, AfterValidator(check_optional_url)]
OptionalImageUrl = Annotated[str | None, AfterValidator(check_optional_image_url)]
TagList = Annotated[list[str], BeforeValidator(split_tags)]
