"""Pytest configuration and shared fixtures."""

import sys
import pytest
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.config import AppConfig
from core.security.codec import EncryptionCodec
from core.security.key_derivation import HostIdentity
from core.settings.app_settings import AppSettingsFacade
from core.settings.cache import SettingsCache
from core.settings.store import SettingsStore
from database.connection import create_db_engine, create_session_factory, init_db
from database.repositories.settings_repository import SettingsRepository


# ============================================================================
# Security Fixtures
# ============================================================================

@pytest.fixture
def key_bytes():
    """Fixed 32-byte key so tests skip key derivation."""
    return bytes(range(32))


@pytest.fixture
def codec(key_bytes):
    return EncryptionCodec(key_bytes)


@pytest.fixture
def identity():
    """Stable host identity."""
    return HostIdentity(
        platform="linux",
        arch="x86_64",
        hostname="studio-laptop",
        username="writer",
        app_name="Draftpad",
        app_version="1.0.0",
    )


# ============================================================================
# Clock
# ============================================================================

class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


# ============================================================================
# Persistence Fixtures
# ============================================================================

@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with tables created."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def repository(session_factory):
    return SettingsRepository(session_factory)


class CountingRepository:
    """Wraps a repository and counts row reads."""

    def __init__(self, inner):
        self.inner = inner
        self.get_calls = 0

    def get(self, key):
        self.get_calls += 1
        return self.inner.get(key)

    def __getattr__(self, name):
        return getattr(self.inner, name)


@pytest.fixture
def counting_repository(repository):
    return CountingRepository(repository)


# ============================================================================
# Settings Fixtures
# ============================================================================

@pytest.fixture
def cache(clock):
    return SettingsCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def store(counting_repository, codec, cache):
    return SettingsStore(counting_repository, codec, cache)


@pytest.fixture
def facade(store):
    return AppSettingsFacade(store)


# ============================================================================
# Application Fixtures
# ============================================================================

@pytest.fixture
def app_config(tmp_path, monkeypatch):
    """Configuration rooted in a temporary directory."""
    monkeypatch.delenv("DRAFTPAD_DATA_DIR", raising=False)
    return AppConfig.from_environment(base_dir=tmp_path)


@pytest.fixture
def services(app_config, codec):
    from core.services import build_services

    services = build_services(app_config, database_url="sqlite://", codec=codec)
    yield services
    services.close()


@pytest.fixture
def client(services):
    from api import create_app

    app = create_app(services)
    app.config["TESTING"] = True
    return app.test_client()
