"""
Health Diary Client — Storage, Notifications & Settings Tests
==============================================================

What we test:
    ✅ local storage survives a restart when a file path is configured
    ✅ Unreadable storage files are ignored
    ✅ One-shot pop()
    ✅ Notifier keeps a bounded history
    ✅ ClientSettings validation
"""

import pytest
from pydantic import ValidationError

from healthdiary_client.config import ClientSettings
from healthdiary_client.core.notifications import ERROR, SUCCESS, Notifier
from healthdiary_client.core.storage import KeyValueStore, SessionStore


class TestStorage:

    def test_local_store_persists_to_file(self, tmp_path):
        path = str(tmp_path / "client" / "storage.json")
        SessionStore(path).local.set(SessionStore.TOKEN_KEY, "jwt")

        restored = SessionStore(path)

        assert restored.local.get(SessionStore.TOKEN_KEY) == "jwt"
        assert restored.session.get(SessionStore.TOKEN_KEY) is None

    def test_unreadable_file_is_ignored(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json")

        store = KeyValueStore(str(path))

        assert store.get("token") is None
        store.set("token", "fresh")
        assert KeyValueStore(str(path)).get("token") == "fresh"

    def test_pop_reads_once(self):
        store = KeyValueStore()
        store.set(SessionStore.REGISTRATION_SUCCESS_KEY, "done")

        assert store.pop(SessionStore.REGISTRATION_SUCCESS_KEY) == "done"
        assert store.pop(SessionStore.REGISTRATION_SUCCESS_KEY) is None
        assert SessionStore.REGISTRATION_SUCCESS_KEY not in store

    def test_remove_missing_key_is_harmless(self):
        store = KeyValueStore()
        store.remove("nothing")
        store.clear()
        assert "nothing" not in store


class TestNotifier:

    def test_latest_and_levels(self):
        notifier = Notifier()
        assert notifier.latest is None

        notifier.show_success("Entry deleted")
        notifier.show_error("Failed to delete entry")

        assert notifier.latest == ("Failed to delete entry", ERROR)
        assert [n.level for n in notifier.history] == [SUCCESS, ERROR]

    def test_history_is_bounded(self):
        notifier = Notifier(history_size=2)
        for i in range(5):
            notifier.show_success(f"message {i}")

        assert [n.message for n in notifier.history] == ["message 3", "message 4"]
        notifier.clear()
        assert notifier.history == []


class TestClientSettings:

    def test_trailing_slashes_are_stripped(self):
        settings = ClientSettings(api_url="http://localhost:3000/api/", origin="http://localhost:5000/")
        assert settings.api_url == "http://localhost:3000/api"
        assert settings.origin == "http://localhost:5000"

    def test_log_level_is_normalized(self):
        assert ClientSettings(log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize("overrides", [
        {"log_level": "VERBOSE"},
        {"request_timeout": 0},
        {"cache_lifetime": -1},
    ])
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(ValidationError):
            ClientSettings(**overrides)
