# =============================================================================
# eco_core/errors/exceptions.py
# Custom Exception Hierarchy for EcoMetrics Tracker
# =============================================================================

from typing import Optional, Dict, Any


class EcoMetricsError(Exception):
    """
    Base exception for all EcoMetrics errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "DATA_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "ECO_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# DATA LAYER EXCEPTIONS
# =============================================================================

class RecordValidationError(EcoMetricsError):
    """Raised when a metric record fails schema validation"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)

        super().__init__(
            message=message,
            code="DATA_001",
            details=details,
            **kwargs,
        )


class MalformedPayloadError(EcoMetricsError):
    """Raised when a seed, import or API payload does not have the expected shape"""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        index: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if source:
            details["source"] = source
        if index is not None:
            details["index"] = index

        super().__init__(
            message=message,
            code="DATA_002",
            details=details,
            **kwargs,
        )


class ConfirmationRequiredError(EcoMetricsError):
    """Raised when a destructive operation is called without explicit confirmation"""

    def __init__(self, operation: str, **kwargs):
        details = kwargs.pop("details", {})
        details["operation"] = operation

        super().__init__(
            message=f"'{operation}' requires confirm=True",
            code="DATA_003",
            details=details,
            **kwargs,
        )


class SeedUnavailableError(EcoMetricsError):
    """Raised when the first-run seed dataset cannot be retrieved"""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        status: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if source:
            details["source"] = source
        if status is not None:
            details["status"] = status

        super().__init__(
            message=message,
            code="SEED_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# STORAGE EXCEPTIONS
# =============================================================================

class StorageError(EcoMetricsError):
    """Raised when the local key-value storage medium fails"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        code: str = "STORE_001",
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if key:
            details["key"] = key

        super().__init__(
            message=message,
            code=code,
            details=details,
            **kwargs,
        )


class StorageQuotaError(StorageError):
    """Raised when a write exceeds the storage capacity"""

    def __init__(self, message: str, key: Optional[str] = None, **kwargs):
        super().__init__(message=message, key=key, code="STORE_002", **kwargs)


# =============================================================================
# REMOTE API EXCEPTIONS
# =============================================================================

class RemoteAPIError(EcoMetricsError):
    """Raised when the backend answers with a non-success HTTP status"""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        endpoint: Optional[str] = None,
        code: str = "API_001",
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if status is not None:
            details["status"] = status
        if endpoint:
            details["endpoint"] = endpoint

        super().__init__(
            message=message,
            code=code,
            details=details,
            **kwargs,
        )
        self.status = status


class AuthError(RemoteAPIError):
    """Raised when the backend rejects the session credentials (401/403)"""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        endpoint: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(
            message=message,
            status=status,
            endpoint=endpoint,
            code="AUTH_001",
            **kwargs,
        )


class NetworkError(EcoMetricsError):
    """Raised when a request fails at the transport level (DNS, refused, timeout)"""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if url:
            details["url"] = url

        super().__init__(
            message=message,
            code="NET_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(EcoMetricsError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
