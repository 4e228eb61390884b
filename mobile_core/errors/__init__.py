# =============================================================================
# mobile_core/errors/__init__.py
# Centralized Error Handling for the Mobile Data-Access Core
# =============================================================================

from .exceptions import (
    MobileCoreError,
    NetworkException,
    ClientDisposedError,
    StorageOpenError,
    ConfigurationError,
)

from .handlers import (
    handle_error,
    error_boundary,
)

__all__ = [
    # Exceptions
    "MobileCoreError",
    "NetworkException",
    "ClientDisposedError",
    "StorageOpenError",
    "ConfigurationError",
    # Handlers
    "handle_error",
    "error_boundary",
]
