"""
Root pytest configuration for backend tests.

Provides:
- A seeded SQLite store file built through the declarative model
- Shared fixtures (store, engine, app, client)
"""

import sys
from pathlib import Path

# Add backend directory to Python path so imports like
# `from db.sql import ...` and `from utils.normalize import ...` work
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from seed_data import SEED_ROWS


def seed_store(path: Path, rows=SEED_ROWS) -> Path:
    """Write a fresh store file at `path` containing `rows`."""
    from models import Transaction, create_schema

    engine = create_engine(f"sqlite:///{path}")
    create_schema(engine)
    with Session(engine) as session:
        session.add_all(Transaction(**row) for row in rows)
        session.commit()
    engine.dispose()
    return path


@pytest.fixture(scope="session")
def store_path(tmp_path_factory):
    """Path to a seeded, read-only-opened store file (shared, never written after seeding)."""
    return str(seed_store(tmp_path_factory.mktemp("store") / "dld.db"))


@pytest.fixture
def store(store_path):
    from db.engine import TransactionStore

    store = TransactionStore(store_path, warmup_attempts=1, warmup_base_sleep=0)
    store.open()
    yield store
    store.close()


@pytest.fixture
def engine(store):
    """Transaction query engine over the seeded store."""
    from services.transaction_query import TransactionQueryEngine

    return TransactionQueryEngine(store)


@pytest.fixture
def missing_store(tmp_path):
    """A store pointing at a file that does not exist (never opens)."""
    from db.engine import TransactionStore

    return TransactionStore(str(tmp_path / "missing.db"), warmup_attempts=1, warmup_base_sleep=0)


@pytest.fixture
def app(store):
    """Create test Flask application."""
    from app import create_app

    app = create_app(store=store, config={'TESTING': True, 'HEALTH_CACHE_TTL_SECONDS': 0})
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def fallback_client(missing_store):
    """Client for an app whose store could not be opened."""
    from app import create_app

    app = create_app(store=missing_store, config={'TESTING': True, 'HEALTH_CACHE_TTL_SECONDS': 0})
    return app.test_client()
