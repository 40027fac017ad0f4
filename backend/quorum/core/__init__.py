from .config import get_settings, settings
from .errors import (
    ConflictError,
    NotFoundError,
    PolicyViolationError,
    QuorumError,
    ValidationError,
)

__all__ = [
    "settings",
    "get_settings",
    "QuorumError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "PolicyViolationError",
]
