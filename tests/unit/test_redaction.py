"""Unit tests for log redaction."""

from core.security.redaction import REDACTED, is_sensitive_field, redact


class TestIsSensitiveField:

    def test_exact_names(self):
        for name in ("password", "apiKey", "api_key", "API-KEY", "token", "secret", "auth"):
            assert is_sensitive_field(name), name

    def test_application_credentials(self):
        for name in ("newsApiKey", "openai_api_key", "xBearerToken", "x_api_secret"):
            assert is_sensitive_field(name), name

    def test_no_substring_matching(self):
        """Names merely containing a sensitive word are not redacted."""
        for name in ("keyboard_layout", "author", "tokenizer", "monkey", "theme"):
            assert not is_sensitive_field(name), name

    def test_non_string_keys(self):
        assert not is_sensitive_field(42)


class TestRedact:

    def test_flat_mapping(self):
        data = {"newsApiKey": "abc", "theme": "dark"}
        assert redact(data) == {"newsApiKey": REDACTED, "theme": "dark"}

    def test_nested_mapping_and_lists(self):
        data = {
            "account": {"username": "writer", "password": "pw"},
            "providers": [{"name": "x", "token": "t"}, "plain"],
        }

        assert redact(data) == {
            "account": {"username": "writer", "password": REDACTED},
            "providers": [{"name": "x", "token": REDACTED}, "plain"],
        }

    def test_sensitive_container_replaced_whole(self):
        assert redact({"credentials": {"user": "a"}}) == {"credentials": REDACTED}

    def test_input_not_modified(self):
        data = {"secret": "s", "inner": {"token": "t"}}
        redact(data)
        assert data == {"secret": "s", "inner": {"token": "t"}}

    def test_scalars_pass_through(self):
        assert redact("text") == "text"
        assert redact(None) is None
        assert redact(280) == 280
