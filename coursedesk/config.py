"""
Client Configuration Management
"""

import os
import json
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional, Tuple, Dict, Any

from dotenv import load_dotenv

from coursedesk.exceptions import ConfigurationError


DEFAULT_API_URL = "http://localhost:5000/api"

AUTH_PATHS: Tuple[str, ...] = ("/login", "/register", "/forgot-password", "/reset-password")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """Configuration for the CourseDesk API client"""

    # API settings
    api_base_url: str = DEFAULT_API_URL
    timeout: float = 30.0

    # Credential lifetimes (days)
    access_token_ttl_days: int = 1
    refresh_token_ttl_days: int = 7

    # Where an expired session sends the user
    login_path: str = "/login"
    auth_paths: Tuple[str, ...] = AUTH_PATHS

    # Credential storage
    persist_credentials: bool = True
    credentials_file: str = "credentials.json"

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # text, json
    log_file: Optional[str] = None
    verbose: bool = False

    # Paths
    config_dir: str = field(default_factory=lambda: str(Path.home() / ".coursedesk"))

    def __post_init__(self):
        self.api_base_url = self.api_base_url.rstrip("/")
        self.auth_paths = tuple(self.auth_paths)

    @property
    def credentials_path(self) -> Path:
        """Full path of the persisted credential store"""
        if os.path.isabs(self.credentials_file):
            return Path(self.credentials_file)
        return Path(self.config_dir) / self.credentials_file

    @property
    def is_secure(self) -> bool:
        """True when talking to the backend over HTTPS"""
        return self.api_base_url.lower().startswith("https://")

    def load_from_file(self, config_path: str) -> None:
        """Load configuration from JSON file"""
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                data = json.load(f)
                for key, value in data.items():
                    if hasattr(self, key):
                        setattr(self, key, value)
            self.__post_init__()

    def save_to_file(self, config_path: Optional[str] = None) -> None:
        """Save configuration to JSON file"""
        path = Path(config_path or (Path(self.config_dir) / "config.json"))
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_default(cls) -> "ClientConfig":
        """Load .env, then the user config file, then environment variables"""
        load_dotenv()

        config_dir = os.environ.get("COURSEDESK_CONFIG_DIR")
        config = cls(config_dir=config_dir) if config_dir else cls()

        default_config_path = Path(config.config_dir) / "config.json"
        if default_config_path.exists():
            config.load_from_file(str(default_config_path))

        config._load_from_env()
        return config

    def _load_from_env(self) -> None:
        """Load configuration from environment variables"""
        env_mappings = {
            "VITE_API_URL": "api_base_url",
            "COURSEDESK_API_URL": "api_base_url",  # Wins over VITE_API_URL
            "COURSEDESK_TIMEOUT": ("timeout", float),
            "COURSEDESK_PERSIST_CREDENTIALS": ("persist_credentials", _parse_bool),
            "COURSEDESK_LOG_LEVEL": "log_level",
            "COURSEDESK_LOG_FORMAT": "log_format",
            "COURSEDESK_LOG_FILE": "log_file",
            "COURSEDESK_VERBOSE": ("verbose", _parse_bool),
        }

        for env_var, mapping in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                if isinstance(mapping, tuple):
                    attr, converter = mapping
                    try:
                        setattr(self, attr, converter(value))
                    except ValueError:
                        raise ConfigurationError(
                            f"Invalid value for {env_var}: {value!r}", setting=attr
                        )
                else:
                    setattr(self, mapping, value)

        self.__post_init__()

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        data = asdict(self)
        data["auth_paths"] = list(self.auth_paths)
        return data
