import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


DEFAULT_DATABASE_PATH = 'data/dld.db'


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def get_database_path() -> str:
    """Path to the DLD SQLite store (DLD_DATABASE_PATH)."""
    return os.getenv('DLD_DATABASE_PATH', DEFAULT_DATABASE_PATH)


def get_database_url(path: str = None) -> str:
    """
    Build a read-only SQLite URL for the DLD store.

    The store is owned by the import process; the query layer never writes,
    so the file is always opened with mode=ro.
    """
    db_path = path or get_database_path()
    if db_path.startswith('sqlite:'):
        return db_path
    resolved = Path(db_path).expanduser().resolve()
    return f"sqlite:///file:{resolved.as_posix()}?mode=ro&uri=true"


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')
    DEBUG = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    DLD_DATABASE_PATH = get_database_path()

    # Dubai Pulse open API credentials (optional, remote variant only)
    DUBAI_PULSE_API_KEY = os.getenv('DUBAI_PULSE_API_KEY', '')
    DUBAI_PULSE_API_SECRET = os.getenv('DUBAI_PULSE_API_SECRET', '')
    DUBAI_PULSE_TIMEOUT_SECONDS = int(os.getenv('DUBAI_PULSE_TIMEOUT_SECONDS', '30'))

    DEFAULT_PAGE_SIZE = int(os.getenv('DEFAULT_PAGE_SIZE', '20'))
    MAX_PAGE_SIZE = int(os.getenv('MAX_PAGE_SIZE', '500'))

    # Serve deterministic synthetic data when the store is unreachable
    SAMPLE_FALLBACK_ENABLED = _get_bool('SAMPLE_FALLBACK_ENABLED', True)

    # Seconds a /api/health readiness result is reused
    HEALTH_CACHE_TTL_SECONDS = float(os.getenv('HEALTH_CACHE_TTL_SECONDS', '10'))

    # Access log: sampled, optionally restricted to path prefixes. Sample-data
    # responses and requests slower than REQUEST_LOG_SLOW_MS are always logged.
    REQUEST_LOG_ENABLED = _get_bool('REQUEST_LOG_ENABLED', True)
    REQUEST_LOG_SAMPLE_RATE = os.getenv('REQUEST_LOG_SAMPLE_RATE', '1.0')
    REQUEST_LOG_ENDPOINTS = os.getenv('REQUEST_LOG_ENDPOINTS', '')
    REQUEST_LOG_SLOW_MS = float(os.getenv('REQUEST_LOG_SLOW_MS', '1000'))

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv('CORS_ORIGINS', '*').split(',')
        if origin.strip()
    ]

    # SQLite engine options. check_same_thread is off because the Flask dev
    # server hands connections across worker threads.
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'connect_args': {
            'check_same_thread': False,
            'timeout': 30,
        }
    }
