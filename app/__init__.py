"""
MacroPlan application core: settings and the exception hierarchy that the
API layer turns into error envelopes.
"""

from app.config import settings
from app.exceptions import AppError, ConflictError, NotFoundError, ServiceValidationError

__all__ = ["settings", "AppError", "ServiceValidationError", "NotFoundError", "ConflictError"]
