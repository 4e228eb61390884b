# =============================================================================
# mobile_core/errors/exceptions.py
# Exception Hierarchy for the Mobile Data-Access Core
# =============================================================================

from typing import Optional, Dict, Any

from mobile_core.constants import NetworkExceptionMessages


class MobileCoreError(Exception):
    """
    Base exception for all mobile core errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "NET_001")
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
        self.code = code or "MC_000"
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
# NETWORK EXCEPTIONS
# =============================================================================

class NetworkException(MobileCoreError):
    """
    Raised for any transport failure, non-success status or undecodable body.

    The message is always the general one handed in by the HTTP client. The
    original exception is kept on ``cause`` for diagnostics only; it never
    appears in the message or the details.
    """

    def __init__(
        self,
        message: str = NetworkExceptionMessages.GENERAL,
        cause: Optional[BaseException] = None,
        **kwargs,
    ):
        kwargs.setdefault("code", "NET_001")
        super().__init__(message=message, **kwargs)
        self.cause = cause


class ClientDisposedError(NetworkException):
    """Raised when a request is issued on (or interrupted by) a disposed client"""

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__(
            message=NetworkExceptionMessages.GENERAL,
            cause=cause,
            code="NET_002",
        )


# =============================================================================
# STORAGE EXCEPTIONS
# =============================================================================

class StorageOpenError(MobileCoreError):
    """Raised internally when a storage box cannot be opened"""

    def __init__(
        self,
        message: str,
        box: Optional[str] = None,
        path: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if box:
            details["box"] = box
        if path:
            details["path"] = path

        super().__init__(
            message=message,
            code="STORE_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(MobileCoreError):
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
