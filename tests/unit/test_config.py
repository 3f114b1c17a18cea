# =============================================================================
# tests/unit/test_config.py
# Unit Tests for settings loading
# =============================================================================

import pytest

from eco_core.config import Settings, load_settings
from eco_core.errors import ConfigurationError


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings(environ={}, secrets={})

        assert settings.mode == "local"
        assert settings.request_timeout == 30.0
        assert settings.log_to_file is True

    def test_secrets_then_env(self):
        settings = load_settings(
            environ={"ECOMETRICS_REQUEST_TIMEOUT": "12.5"},
            secrets={"mode": "remote", "api_base_url": "https://x/api", "request_timeout": 5},
        )

        assert settings.mode == "remote"
        assert settings.api_base_url == "https://x/api"
        assert settings.request_timeout == 12.5

    @pytest.mark.parametrize("raw,expected", [("yes", True), ("0", False), ("Off", False)])
    def test_bool_env(self, raw, expected):
        assert load_settings(environ={"ECOMETRICS_DEBUG": raw}, secrets={}).debug is expected

    def test_unknown_keys_ignored(self):
        assert load_settings(environ={"ECOMETRICS_COLOUR": "red"}, secrets={"colour": "red"}) == Settings()

    @pytest.mark.parametrize("environ", [
        {"ECOMETRICS_MODE": "cloud"},
        {"ECOMETRICS_REQUEST_TIMEOUT": "0"},
        {"ECOMETRICS_REQUEST_TIMEOUT": "soon"},
        {"ECOMETRICS_DEBUG": "maybe"},
        {"ECOMETRICS_MODE": "remote", "ECOMETRICS_API_BASE_URL": ""},
    ])
    def test_invalid_values(self, environ):
        with pytest.raises(ConfigurationError):
            load_settings(environ=environ, secrets={})
