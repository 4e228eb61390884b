# =============================================================================
# mobile_core/__init__.py
# Offline-Tolerant Data-Access Core for the Mobile Client
# =============================================================================

__version__ = "0.1.0"
