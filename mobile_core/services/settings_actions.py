# =============================================================================
# mobile_core/services/settings_actions.py
# Settings Screen Actions (alerts, sign-out, app settings)
# =============================================================================
"""
Actions behind the settings screen, written against collaborator protocols.

The dialog, navigation and OS app-settings deep link are owned by the UI
layer; this module only decides what happens when the user confirms.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from mobile_core.constants import ViewRoutes
from mobile_core.logging import get_logger
from mobile_core.offline.key_storage import KeyStorage

logger = get_logger(__name__)


@dataclass(frozen=True)
class DialogResponse:
    confirmed: bool = False


class DialogService(Protocol):
    def show_dialog(
        self,
        title: str,
        description: str,
        button_title: str,
    ) -> DialogResponse:
        ...


class NavigationService(Protocol):
    def pop_all_and_push_named(self, route: str) -> None:
        ...


class AppSettingsOpener(Protocol):
    def open_app_settings(self) -> None:
        ...


def _no_op() -> None:
    """Default confirmation hook for plain alerts: nothing happens yet."""


class SettingsActions:
    """
    Usage:
        actions = SettingsActions(dialogs, key_storage, navigator, opener)
        actions.sign_out(title="Sign out", desc="Are you sure?", button_confirm_text="Yes")
    """

    def __init__(
        self,
        dialog_service: DialogService,
        key_storage: KeyStorage,
        navigation_service: NavigationService,
        app_settings_opener: Optional[AppSettingsOpener] = None,
        on_alert_confirmed: Callable[[], None] = _no_op,
    ):
        self._dialog_service = dialog_service
        self._key_storage = key_storage
        self._navigation_service = navigation_service
        self._app_settings_opener = app_settings_opener
        self._on_alert_confirmed = on_alert_confirmed

    def show_alert(
        self,
        title: str = "",
        desc: str = "",
        button_confirm_text: str = "OK",
    ) -> bool:
        """Show an alert. Returns whether the user confirmed."""
        response = self._dialog_service.show_dialog(
            title=title,
            description=desc,
            button_title=button_confirm_text,
        )

        if response.confirmed:
            self._on_alert_confirmed()

        return response.confirmed

    def open_app_settings(self) -> None:
        logger.debug("User has opened app settings")
        if self._app_settings_opener is None:
            logger.warning("No app settings opener configured")
            return
        self._app_settings_opener.open_app_settings()

    def sign_out(
        self,
        title: str = "",
        desc: str = "",
        button_confirm_text: str = "OK",
    ) -> bool:
        """
        Ask for confirmation, then clear the logged-in flag and return to the
        login screen.

        Returns:
            Whether the user confirmed
        """
        response = self._dialog_service.show_dialog(
            title=title,
            description=desc,
            button_title=button_confirm_text,
        )

        if response.confirmed:
            logger.debug("User has signed out")
            self._key_storage.has_logged_in = False
            self._navigation_service.pop_all_and_push_named(ViewRoutes.LOGIN)

        return response.confirmed
