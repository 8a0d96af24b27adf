"""Structured configuration with validation.

This module provides a type-safe, validated configuration system
for the settings layer and the desktop shell around it.

Usage:
    from core.config import get_config

    config = get_config()
    print(config.paths.database_url)
    print(config.settings.cache_ttl_seconds)
"""

import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Lower bound for PBKDF2 work factors
MIN_KDF_ITERATIONS = 100_000


@dataclass(frozen=True)
class PathConfig:
    """Path configuration (immutable)."""

    base_dir: Path
    data_dir: Path
    logs_dir: Path
    backups_dir: Path
    database_path: Path

    @property
    def database_url(self) -> str:
        """SQLAlchemy database URL."""
        return f"sqlite:///{self.database_path}"

    def ensure(self) -> None:
        """Create the data, logs and backups directories."""
        for directory in (self.data_dir, self.logs_dir, self.backups_dir):
            directory.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class FlaskConfig:
    """Local UI server configuration."""

    host: str = "127.0.0.1"
    port: int = 5170
    debug: bool = False

    def __post_init__(self):
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")


@dataclass(frozen=True)
class WindowConfig:
    """Desktop window configuration."""

    title: str = "Draftpad"
    width: int = 1200
    height: int = 800
    min_width: int = 800
    min_height: int = 600


@dataclass(frozen=True)
class AppInfo:
    """Application identity, part of the encryption key material."""

    name: str = "Draftpad"
    version: str = "1.0.0"

    def __post_init__(self):
        if not self.name:
            raise ValueError("Application name is required")
        if not self.version:
            raise ValueError("Application version is required")


@dataclass(frozen=True)
class SecurityConfig:
    """Key derivation, hashing and cipher parameters."""

    key_iterations: int = MIN_KDF_ITERATIONS
    hash_iterations: int = MIN_KDF_ITERATIONS
    hash_length: int = 64
    iv_length: int = 16

    def __post_init__(self):
        """Validate configuration values."""
        if self.key_iterations < MIN_KDF_ITERATIONS:
            raise ValueError(
                f"key_iterations must be at least {MIN_KDF_ITERATIONS}, got {self.key_iterations}"
            )
        if self.hash_iterations < MIN_KDF_ITERATIONS:
            raise ValueError(
                f"hash_iterations must be at least {MIN_KDF_ITERATIONS}, got {self.hash_iterations}"
            )
        if self.hash_length < 64:
            raise ValueError(f"hash_length must be at least 64 bytes, got {self.hash_length}")
        if self.iv_length < 12:
            raise ValueError(f"iv_length must be at least 12 bytes, got {self.iv_length}")


@dataclass(frozen=True)
class SettingsConfig:
    """Settings store behavior."""

    cache_ttl_seconds: float = 300.0
    max_backups: int = 5

    def __post_init__(self):
        if self.cache_ttl_seconds <= 0:
            raise ValueError(
                f"cache_ttl_seconds must be positive, got {self.cache_ttl_seconds}"
            )
        if self.max_backups < 1:
            raise ValueError(f"max_backups must be at least 1, got {self.max_backups}")


@dataclass
class AppConfig:
    """
    Main application configuration.

    This is the top-level config object that contains all
    configuration sections.
    """

    paths: PathConfig
    flask: FlaskConfig
    window: WindowConfig
    app: AppInfo
    security: SecurityConfig
    settings: SettingsConfig

    @classmethod
    def from_environment(cls, base_dir: Optional[Path] = None) -> "AppConfig":
        """
        Create configuration from environment variables and defaults.

        Args:
            base_dir: Root for the default data directory (defaults to the
                project directory)

        Returns:
            A validated configuration with its directories created
        """
        base_dir = Path(base_dir) if base_dir else Path(__file__).parent.parent
        data_dir = Path(os.getenv("DRAFTPAD_DATA_DIR") or base_dir / "data")

        paths = PathConfig(
            base_dir=base_dir,
            data_dir=data_dir,
            logs_dir=data_dir / "logs",
            backups_dir=data_dir / "backups",
            database_path=data_dir / "draftpad.db",
        )
        paths.ensure()

        return cls(
            paths=paths,
            flask=FlaskConfig(
                host="127.0.0.1",
                port=int(os.getenv("DRAFTPAD_PORT", "5170")),
                debug=os.getenv("FLASK_DEBUG", "false").lower() == "true",
            ),
            window=WindowConfig(),
            app=AppInfo(
                name=os.getenv("DRAFTPAD_APP_NAME", "Draftpad"),
                version=os.getenv("DRAFTPAD_VERSION", "1.0.0"),
            ),
            security=SecurityConfig(
                key_iterations=int(os.getenv("DRAFTPAD_KEY_ITERATIONS", str(MIN_KDF_ITERATIONS))),
                hash_iterations=int(os.getenv("DRAFTPAD_HASH_ITERATIONS", str(MIN_KDF_ITERATIONS))),
                hash_length=int(os.getenv("DRAFTPAD_HASH_LENGTH", "64")),
            ),
            settings=SettingsConfig(
                cache_ttl_seconds=float(os.getenv("DRAFTPAD_CACHE_TTL_SECONDS", "300")),
                max_backups=int(os.getenv("DRAFTPAD_MAX_BACKUPS", "5")),
            ),
        )


# Thread-safe singleton
_config: Optional[AppConfig] = None
_config_lock = threading.Lock()


def get_config() -> AppConfig:
    """
    Get the singleton configuration instance.

    Thread-safe with double-checked locking pattern.
    Configuration is created once on first access.

    Returns:
        The application configuration
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = AppConfig.from_environment()
    return _config


def reset_config() -> None:
    """
    Reset the configuration singleton.

    Useful for testing with different configurations.
    """
    global _config
    with _config_lock:
        _config = None
