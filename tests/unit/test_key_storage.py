# =============================================================================
# tests/unit/test_key_storage.py
# Unit Tests for KeyStorage
# =============================================================================

import sqlite3

import pytest

from mobile_core.offline.key_storage import SETTINGS_FILENAME, KeyStorage, Setting


@pytest.fixture
def key_storage(storage_dir):
    storage = KeyStorage(storage_dir)
    yield storage
    storage.close()


class TestKeyStorage:
    """Typed persisted flags"""

    def test_defaults_when_never_written(self, key_storage):
        assert key_storage.has_logged_in is False
        assert key_storage.night_mode is False

    def test_write_then_read(self, key_storage):
        key_storage.has_logged_in = True
        key_storage.night_mode = True

        assert key_storage.has_logged_in is True
        assert key_storage.night_mode is True

    def test_flags_are_independent(self, key_storage):
        key_storage.night_mode = True

        assert key_storage.has_logged_in is False

    def test_values_persist_across_instances(self, storage_dir):
        """A new instance on the same directory sees earlier writes"""
        first = KeyStorage(storage_dir)
        first.has_logged_in = True
        first.close()

        second = KeyStorage(storage_dir)
        assert second.has_logged_in is True
        second.close()

    def test_stored_under_public_keys(self, key_storage, storage_dir):
        key_storage.has_logged_in = True

        conn = sqlite3.connect(str(storage_dir / SETTINGS_FILENAME))
        keys = [row[0] for row in conn.execute("SELECT key FROM app_settings")]
        conn.close()

        assert keys == ["hasLoggedIn"]

    def test_loose_stored_values_are_coerced(self, key_storage):
        """A value written as a string by another client reads as bool"""
        key_storage._save_to_disk("nightMode", "true")

        assert key_storage.night_mode is True

    def test_descriptor_on_class(self):
        assert isinstance(KeyStorage.has_logged_in, Setting)
        assert KeyStorage.has_logged_in.key == "hasLoggedIn"
