# =============================================================================
# mobile_core/logging/__init__.py
# Logging Setup and Helpers
# =============================================================================

from .config import LogContext, get_logger, log_file_path, setup_logging

__all__ = ["setup_logging", "get_logger", "log_file_path", "LogContext"]
