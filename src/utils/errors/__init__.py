"""Exceções utilitarias compartilhadas."""

from .exceptions import (
    AuthError,
    AuthErrorKind,
    FetchError,
    FetchErrorKind,
    InfrastructureError,
    PersistenceError,
    PersistenceErrorKind,
    ScheduleSyncError,
    ScheduleValidationError,
    TokenStoreError,
    ValidationErrorKind,
)

__all__ = [
    "AuthError",
    "AuthErrorKind",
    "FetchError",
    "FetchErrorKind",
    "InfrastructureError",
    "PersistenceError",
    "PersistenceErrorKind",
    "ScheduleSyncError",
    "ScheduleValidationError",
    "TokenStoreError",
    "ValidationErrorKind",
]
