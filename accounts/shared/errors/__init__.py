from .base import (
    AppError,
    ConfigurationError,
    ConflictError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    OperationFailedError,
    UnauthorizedError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "ConfigurationError",
    "ConflictError",
    "DomainError",
    "InfrastructureError",
    "NotFoundError",
    "OperationFailedError",
    "UnauthorizedError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
