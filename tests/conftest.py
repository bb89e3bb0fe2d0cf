from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the mailinglist package is importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mailinglist.core import config as core_config  # noqa: E402
from mailinglist.db import session as db_session  # noqa: E402
from mailinglist.db.session import build_engine  # noqa: E402
from mailinglist.repositories.subscriber_repository import SubscriberRepository  # noqa: E402
from mailinglist.services.subscriber_service import SubscriberService  # noqa: E402


@pytest.fixture()
def engine(tmp_path):
    """Engine on a temporary SQLite file, disposed on teardown."""
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    yield engine
    engine.dispose()


@pytest.fixture()
def repository(engine):
    repo = SubscriberRepository(engine)
    repo.initialize()
    return repo


@pytest.fixture()
def service(repository):
    return SubscriberService(repository, max_page_size=50)


@pytest.fixture()
def clean_settings():
    """Reset cached settings/engine so monkeypatched env vars are re-read."""
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    yield
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
