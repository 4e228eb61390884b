# =============================================================================
# tests/unit/test_settings_actions.py
# Unit Tests for SettingsActions
# =============================================================================

from unittest.mock import MagicMock

import pytest

from mobile_core.constants import ViewRoutes
from mobile_core.offline.key_storage import KeyStorage
from mobile_core.services.settings_actions import DialogResponse, SettingsActions


@pytest.fixture
def key_storage(storage_dir):
    storage = KeyStorage(storage_dir)
    storage.has_logged_in = True
    yield storage
    storage.close()


@pytest.fixture
def dialogs():
    service = MagicMock()
    service.show_dialog.return_value = DialogResponse(confirmed=True)
    return service


@pytest.fixture
def navigator():
    return MagicMock()


@pytest.fixture
def opener():
    return MagicMock()


@pytest.fixture
def actions(dialogs, key_storage, navigator, opener):
    return SettingsActions(dialogs, key_storage, navigator, opener)


class TestSignOut:
    """Confirmed sign-out"""

    def test_confirmed_sign_out_clears_flag_and_navigates(self, actions, dialogs, key_storage, navigator):
        confirmed = actions.sign_out(title="Sign out", desc="Sure?", button_confirm_text="Yes")

        assert confirmed is True
        dialogs.show_dialog.assert_called_once_with(
            title="Sign out",
            description="Sure?",
            button_title="Yes",
        )
        assert key_storage.has_logged_in is False
        navigator.pop_all_and_push_named.assert_called_once_with(ViewRoutes.LOGIN)

    def test_declined_sign_out_changes_nothing(self, actions, dialogs, key_storage, navigator):
        dialogs.show_dialog.return_value = DialogResponse(confirmed=False)

        assert actions.sign_out() is False
        assert key_storage.has_logged_in is True
        navigator.pop_all_and_push_named.assert_not_called()


class TestAlerts:
    """Plain alerts and app settings"""

    def test_confirmed_alert_runs_hook(self, dialogs, key_storage, navigator):
        hook = MagicMock()
        actions = SettingsActions(dialogs, key_storage, navigator, on_alert_confirmed=hook)

        assert actions.show_alert("Title", "Body") is True
        hook.assert_called_once_with()
        navigator.pop_all_and_push_named.assert_not_called()

    def test_declined_alert_skips_hook(self, dialogs, key_storage, navigator):
        dialogs.show_dialog.return_value = DialogResponse(confirmed=False)
        hook = MagicMock()
        actions = SettingsActions(dialogs, key_storage, navigator, on_alert_confirmed=hook)

        assert actions.show_alert("Title", "Body") is False
        hook.assert_not_called()

    def test_alert_default_hook_is_harmless(self, actions, key_storage):
        assert actions.show_alert() is True
        assert key_storage.has_logged_in is True

    def test_open_app_settings(self, actions, opener):
        actions.open_app_settings()

        opener.open_app_settings.assert_called_once_with()

    def test_open_app_settings_without_opener(self, dialogs, key_storage, navigator):
        actions = SettingsActions(dialogs, key_storage, navigator)

        actions.open_app_settings()
