"""Explicit construction of the settings services.

Everything is built once at startup and handed to consumers (the Flask
app, entry points, tests) by reference. There is no process-wide
service registry.

Usage:
    from core.config import get_config
    from core.services import build_services

    services = build_services(get_config())
    services.store.get("theme", "auto")
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from core.config import AppConfig
from core.security.codec import EncryptionCodec
from core.security.hashing import Hasher
from core.security.key_derivation import HostIdentity, derive_key
from core.settings.app_settings import AppSettingsFacade
from core.settings.backups import BackupManager
from core.settings.cache import SettingsCache
from core.settings.store import SettingsStore
from database.connection import create_db_engine, create_session_factory, init_db
from database.repositories.settings_repository import SettingsRepository
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class SettingsServices:
    """The wired settings layer."""

    config: AppConfig
    engine: Engine
    session_factory: sessionmaker
    codec: EncryptionCodec
    hasher: Hasher
    cache: SettingsCache
    repository: SettingsRepository
    store: SettingsStore
    app_settings: AppSettingsFacade
    backups: BackupManager

    def close(self) -> None:
        """Release database connections."""
        self.engine.dispose()


def build_services(
    app_config: AppConfig,
    identity: Optional[HostIdentity] = None,
    database_url: Optional[str] = None,
    codec: Optional[EncryptionCodec] = None,
) -> SettingsServices:
    """
    Build the settings layer.

    Args:
        app_config: Application configuration
        identity: Key derivation inputs (defaults to the current host)
        database_url: Overrides the configured database URL
        codec: Pre-built codec; skips key derivation when given

    Returns:
        The wired services

    Raises:
        KeyDerivationError: If the encryption key cannot be derived
    """
    engine = create_db_engine(
        database_url or app_config.paths.database_url,
        echo=app_config.flask.debug,
    )
    init_db(engine)
    session_factory = create_session_factory(engine)

    if codec is None:
        identity = identity or HostIdentity.current(app_config.app.name, app_config.app.version)
        key = derive_key(identity, iterations=app_config.security.key_iterations)
        codec = EncryptionCodec(key, iv_size=app_config.security.iv_length)
        logger.info("Security service initialized")

    cache = SettingsCache(ttl_seconds=app_config.settings.cache_ttl_seconds)
    repository = SettingsRepository(session_factory)
    store = SettingsStore(repository, codec, cache)

    return SettingsServices(
        config=app_config,
        engine=engine,
        session_factory=session_factory,
        codec=codec,
        hasher=Hasher(
            iterations=app_config.security.hash_iterations,
            length=app_config.security.hash_length,
        ),
        cache=cache,
        repository=repository,
        store=store,
        app_settings=AppSettingsFacade(store),
        backups=BackupManager(
            store,
            app_config.paths.backups_dir,
            max_backups=app_config.settings.max_backups,
        ),
    )
