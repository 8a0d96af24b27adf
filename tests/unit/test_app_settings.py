"""Unit tests for the application settings facade."""

import pytest
from unittest.mock import patch

from core.exceptions import DecryptionError, InvalidSettingValue
from core.settings.app_settings import APP_SETTING_FIELDS, AppSettingsFacade, camel_to_snake


EXPECTED_DEFAULTS = {
    "newsApiKey": None,
    "openaiApiKey": None,
    "xApiKey": None,
    "xApiSecret": None,
    "xBearerToken": None,
    "autoCollectionEnabled": False,
    "collectionInterval": 24,
    "maxArticlesPerTheme": 20,
    "defaultTone": "casual",
    "maxCharacterCount": 280,
    "includeHashtagSuggestions": True,
    "enableNotifications": True,
    "reminderEnabled": True,
    "defaultReminderMinutes": 10,
    "theme": "auto",
    "sidebarCollapsed": False,
    "compactMode": False,
    "autoBackupEnabled": True,
    "backupInterval": 7,
    "maxBackups": 5,
    "sessionTimeout": 30,
    "requireConfirmation": True,
}


class TestCamelToSnake:

    @pytest.mark.parametrize("name, key", [
        ("newsApiKey", "news_api_key"),
        ("xBearerToken", "x_bearer_token"),
        ("theme", "theme"),
        ("maxCharacterCount", "max_character_count"),
    ])
    def test_conversion(self, name, key):
        assert camel_to_snake(name) == key

    def test_sensitive_fields_map_to_sensitive_keys(self, store):
        sensitive = {field.key for field in APP_SETTING_FIELDS if field.sensitive}
        assert sensitive == set(store.sensitive_keys)


class TestGetAppSettings:

    def test_defaults_on_empty_store(self, facade):
        assert facade.get_app_settings() == EXPECTED_DEFAULTS

    def test_defaults_helper(self, facade):
        assert facade.defaults() == EXPECTED_DEFAULTS

    def test_reads_stored_values(self, facade, store):
        store.set("theme", "dark")
        store.set("max_character_count", 500)

        settings = facade.get_app_settings()
        assert settings["theme"] == "dark"
        assert settings["maxCharacterCount"] == 500

    def test_one_failing_field_does_not_abort(self, facade, store):
        """A field whose read raises falls back to its default."""
        real_get = store.get

        def failing_get(key, default=None):
            if key == "theme":
                raise DecryptionError()
            return real_get(key, default)

        store.set("compact_mode", True)
        with patch.object(store, "get", side_effect=failing_get):
            settings = facade.get_app_settings()

        assert settings["theme"] == "auto"
        assert settings["compactMode"] is True

    def test_reset_restores_defaults(self, facade, store):
        facade.update_app_settings({"theme": "dark", "newsApiKey": "abc", "maxBackups": 9})
        store.reset()

        assert facade.get_app_settings() == EXPECTED_DEFAULTS


class TestUpdateAppSettings:

    def test_api_key_encrypted(self, facade, repository):
        facade.update_app_settings({"newsApiKey": "abc"})

        row = repository.get("news_api_key")
        assert row is not None
        assert row.is_encrypted is True
        assert facade.get_app_settings()["newsApiKey"] == "abc"

    def test_api_key_readable_after_cache_clear(self, facade, store):
        facade.update_app_settings({"xApiSecret": "s3cret"})
        store.clear_cache()
        assert facade.get_app_settings()["xApiSecret"] == "s3cret"

    def test_plain_fields_not_encrypted(self, facade, repository):
        written = facade.update_app_settings({"theme": "dark", "compactMode": True})

        assert written == ["theme", "compact_mode"]
        assert repository.get("theme").is_encrypted is False
        assert repository.get("compact_mode").is_encrypted is False

    def test_absent_fields_untouched(self, facade, store):
        store.set("theme", "dark")
        facade.update_app_settings({"compactMode": True})
        assert facade.get_app_settings()["theme"] == "dark"

    def test_invalid_choice_rejected_before_writing(self, facade, repository):
        with pytest.raises(InvalidSettingValue):
            facade.update_app_settings({"compactMode": True, "defaultTone": "angry"})

        assert repository.get("compact_mode") is None

    def test_unknown_field_stored_by_converted_name(self, facade, store):
        facade.update_app_settings({"draftFolderName": "Inbox"})
        assert store.get("draft_folder_name") == "Inbox"

    def test_payload_logged_redacted(self, facade, caplog):
        with caplog.at_level("INFO", logger="draftpad"):
            facade.update_app_settings({"newsApiKey": "super-secret", "theme": "dark"})

        assert "super-secret" not in caplog.text
        assert "[REDACTED]" in caplog.text


class TestCustomSchema:

    def test_custom_fields(self, store):
        from core.settings.app_settings import SettingField

        facade = AppSettingsFacade(store, fields=(SettingField("fontSize", 14),))
        assert facade.get_app_settings() == {"fontSize": 14}
