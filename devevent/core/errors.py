"""
Error taxonomy for event and booking operations.

Every error carries the HTTP status it maps to, a stable code and a short
human-readable message. The exception handlers in ``devevent.main`` render
them as ``{"message": ..., "error": ...}``. Nothing here is retried.
"""
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Stable error codes exposed to API clients."""
    invalid_date = "INVALID_DATE"
    invalid_time = "INVALID_TIME"
    slug_empty = "SLUG_EMPTY"
    empty_agenda = "EMPTY_AGENDA"
    empty_tags = "EMPTY_TAGS"
    required_field_empty = "REQUIRED_FIELD_EMPTY"
    invalid_email = "INVALID_EMAIL"
    missing_image = "MISSING_IMAGE"
    invalid_payload = "INVALID_PAYLOAD"
    unsupported_media_type = "UNSUPPORTED_MEDIA_TYPE"
    event_not_found = "EVENT_NOT_FOUND"
    duplicate_slug = "DUPLICATE_SLUG"
    image_upload_failed = "IMAGE_UPLOAD_FAILED"
    database_unavailable = "DATABASE_UNAVAILABLE"


class DomainError(Exception):
    """Base error with status code, error code and user-safe message."""

    status_code: int = 500
    code: ErrorCode

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


# ---- Input validation (400) ----

class InputValidationError(DomainError):
    status_code = 400
    code = ErrorCode.invalid_payload


class InvalidPayloadError(InputValidationError):
    code = ErrorCode.invalid_payload


class InvalidDateError(InputValidationError):
    code = ErrorCode.invalid_date

    def __init__(self, value=None):
        super().__init__(
            "Invalid date; use a parseable date string",
            detail=f"could not parse {value!r}" if value not in (None, "") else None,
        )
        self.value = value


class InvalidTimeError(InputValidationError):
    code = ErrorCode.invalid_time

    def __init__(self, value=None):
        super().__init__(
            "Invalid time; expected HH:mm or h:mm AM/PM",
            detail=f"could not parse {value!r}" if value not in (None, "") else None,
        )
        self.value = value


class SlugEmptyError(InputValidationError):
    code = ErrorCode.slug_empty

    def __init__(self):
        super().__init__("title must contain at least one letter or digit")


class EmptyAgendaError(InputValidationError):
    code = ErrorCode.empty_agenda

    def __init__(self):
        super().__init__("agenda must contain at least one item")


class EmptyTagsError(InputValidationError):
    code = ErrorCode.empty_tags

    def __init__(self):
        super().__init__("tags must contain at least one item")


class RequiredFieldEmptyError(InputValidationError):
    code = ErrorCode.required_field_empty

    def __init__(self, field: str):
        super().__init__(f"{field} is required and cannot be empty")
        self.field = field


class InvalidEmailError(InputValidationError):
    code = ErrorCode.invalid_email

    def __init__(self):
        super().__init__("email must be a valid address")


class MissingImageError(InputValidationError):
    code = ErrorCode.missing_image

    def __init__(self):
        super().__init__("Image file is required")


class UnsupportedMediaTypeError(InputValidationError):
    status_code = 415
    code = ErrorCode.unsupported_media_type

    def __init__(self, content_type: Optional[str] = None):
        super().__init__("Unsupported Content-Type", detail=content_type or None)


# ---- Not found (404) ----

class NotFoundError(DomainError):
    status_code = 404


class EventNotFoundError(NotFoundError):
    code = ErrorCode.event_not_found

    def __init__(self, reference=None):
        super().__init__("Event not found")
        self.reference = reference


# ---- Conflict (409) ----

class ConflictError(DomainError):
    status_code = 409


class DuplicateSlugError(ConflictError):
    code = ErrorCode.duplicate_slug

    def __init__(self, slug: str):
        super().__init__("An event with this title already exists", detail=f"slug '{slug}' is taken")
        self.slug = slug


# ---- Dependencies (500) ----

class DependencyError(DomainError):
    status_code = 500


class ImageUploadError(DependencyError):
    code = ErrorCode.image_upload_failed

    def __init__(self, detail: Optional[str] = None):
        super().__init__("Failed to upload image", detail=detail)


class DatabaseUnavailableError(DependencyError):
    code = ErrorCode.database_unavailable

    def __init__(self, detail: Optional[str] = None):
        super().__init__("Database unavailable", detail=detail)
