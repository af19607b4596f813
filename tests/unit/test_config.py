"""
Unit Tests for Client Configuration
"""
import json
from pathlib import Path

import pytest

from coursedesk.config import ClientConfig, AUTH_PATHS
from coursedesk.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for var in ("VITE_API_URL", "COURSEDESK_API_URL", "COURSEDESK_TIMEOUT",
                "COURSEDESK_LOG_LEVEL", "COURSEDESK_VERBOSE",
                "COURSEDESK_PERSIST_CREDENTIALS", "COURSEDESK_LOG_FORMAT",
                "COURSEDESK_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("COURSEDESK_CONFIG_DIR", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestClientConfig:
    """Test ClientConfig defaults and loading"""

    def test_defaults(self, tmp_path):
        """Test default values"""
        config = ClientConfig(config_dir=str(tmp_path))

        assert config.api_base_url == "http://localhost:5000/api"
        assert config.auth_paths == AUTH_PATHS
        assert config.login_path == "/login"
        assert config.access_token_ttl_days == 1
        assert config.refresh_token_ttl_days == 7
        assert config.credentials_path == Path(tmp_path) / "credentials.json"

    def test_trailing_slash_stripped(self):
        """Test base URL normalisation"""
        assert ClientConfig(api_base_url="http://x.test/api/").api_base_url == "http://x.test/api"

    def test_is_secure(self):
        """Test HTTPS detection"""
        assert ClientConfig(api_base_url="https://x.test/api").is_secure is True
        assert ClientConfig(api_base_url="http://x.test/api").is_secure is False

    def test_vite_api_url_used(self, clean_env):
        """Test that VITE_API_URL configures the base URL"""
        clean_env.setenv("VITE_API_URL", "http://vite.test/api")

        assert ClientConfig.load_default().api_base_url == "http://vite.test/api"

    def test_coursedesk_api_url_wins(self, clean_env):
        """Test that COURSEDESK_API_URL overrides VITE_API_URL"""
        clean_env.setenv("VITE_API_URL", "http://vite.test/api")
        clean_env.setenv("COURSEDESK_API_URL", "https://prod.test/api")

        assert ClientConfig.load_default().api_base_url == "https://prod.test/api"

    def test_env_converters(self, clean_env):
        """Test typed environment values"""
        clean_env.setenv("COURSEDESK_TIMEOUT", "12.5")
        clean_env.setenv("COURSEDESK_VERBOSE", "true")
        clean_env.setenv("COURSEDESK_PERSIST_CREDENTIALS", "no")

        config = ClientConfig.load_default()

        assert config.timeout == 12.5
        assert config.verbose is True
        assert config.persist_credentials is False

    def test_invalid_timeout(self, clean_env):
        """Test that a bad number raises ConfigurationError"""
        clean_env.setenv("COURSEDESK_TIMEOUT", "soon")

        with pytest.raises(ConfigurationError) as exc_info:
            ClientConfig.load_default()

        assert exc_info.value.details["setting"] == "timeout"

    def test_config_file_then_env(self, clean_env, tmp_path):
        """Test that config.json is read and env still wins"""
        (tmp_path / "config.json").write_text(json.dumps({
            "api_base_url": "http://file.test/api",
            "log_level": "WARNING",
            "unknown_key": 1
        }))
        clean_env.setenv("COURSEDESK_LOG_LEVEL", "DEBUG")

        config = ClientConfig.load_default()

        assert config.api_base_url == "http://file.test/api"
        assert config.log_level == "DEBUG"
        assert not hasattr(config, "unknown_key")

    def test_save_and_load_file(self, tmp_path):
        """Test JSON round trip"""
        path = tmp_path / "saved.json"
        ClientConfig(api_base_url="http://saved.test/api", timeout=5).save_to_file(str(path))

        config = ClientConfig()
        config.load_from_file(str(path))

        assert config.api_base_url == "http://saved.test/api"
        assert config.timeout == 5
        assert config.auth_paths == AUTH_PATHS
