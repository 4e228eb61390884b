# =============================================================================
# mobile_core/services/__init__.py
# Caller-Side Services Built on the Core
# =============================================================================

from .settings_actions import (
    AppSettingsOpener,
    DialogResponse,
    DialogService,
    NavigationService,
    SettingsActions,
)

__all__ = [
    "AppSettingsOpener",
    "DialogResponse",
    "DialogService",
    "NavigationService",
    "SettingsActions",
]
