from typing import Any, Mapping, Optional


class AppError(Exception):
    """Base class for failures a caller can recover from and show to a user.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, ids involved)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Application error"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(AppError):
    """Raised when input is out of range or a precondition for a calculation is not met
    (non-positive servings, zero-kcal recipe used as a scaling base, bad grams)."""

    http_status = 400
    default_message = "Invalid input"


class NotFoundError(AppError):
    """Raised when a plan, recipe, ingredient, client or meal does not exist."""

    http_status = 404
    default_message = "Not found"


class ConflictError(AppError):
    """Raised on duplicate names or when deleting something that is still referenced."""

    http_status = 409
    default_message = "Conflict"
