# =============================================================================
# eco_core/errors/__init__.py
# Centralized Error Handling for EcoMetrics Tracker
# =============================================================================

from .exceptions import (
    EcoMetricsError,
    RecordValidationError,
    MalformedPayloadError,
    ConfirmationRequiredError,
    SeedUnavailableError,
    StorageError,
    StorageQuotaError,
    RemoteAPIError,
    AuthError,
    NetworkError,
    ConfigurationError,
)

from .handlers import (
    handle_error,
    safe_execute,
    ErrorContext,
)

__all__ = [
    # Exceptions
    "EcoMetricsError",
    "RecordValidationError",
    "MalformedPayloadError",
    "ConfirmationRequiredError",
    "SeedUnavailableError",
    "StorageError",
    "StorageQuotaError",
    "RemoteAPIError",
    "AuthError",
    "NetworkError",
    "ConfigurationError",
    # Handlers
    "handle_error",
    "safe_execute",
    "ErrorContext",
]
