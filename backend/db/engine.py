"""
Read-only handle to the DLD transaction store.

The store is a SQLite file written by the external DLD import. This module
never writes to it: the engine URL is opened with mode=ro.

Usage:
    from db.engine import TransactionStore

    store = TransactionStore("/var/data/dld.db")
    store.open()
    try:
        engine = TransactionQueryEngine(store)
        ...
    finally:
        store.close()

    # or
    with TransactionStore(path) as store:
        ...

Lifecycle:
    - open() creates the SQLAlchemy engine, warms it up with retry and
      verifies the transactions table exists
    - close() disposes the engine; a closed store raises
      StoreUnavailableError on use
    - The handle is shared by all services and safe for concurrent readers

Warmup with retry:
    - Covers a store file that is briefly locked while the import swaps it in
    - Exponential backoff (0.25s, 0.5s, 1s)
    - Fails with StoreUnavailableError after the last attempt
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, OperationalError

log = logging.getLogger(__name__)

TRANSACTIONS_TABLE = "transactions"


class StoreUnavailableError(RuntimeError):
    """
    The transaction store cannot serve queries.

    Distinct from an empty result: callers decide whether to fail the request
    or substitute sample data.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


def _base_options() -> Dict[str, Any]:
    """Engine options from Config.SQLALCHEMY_ENGINE_OPTIONS."""
    from config import Config

    opts = dict(getattr(Config, "SQLALCHEMY_ENGINE_OPTIONS", {}) or {})
    opts["connect_args"] = dict(opts.get("connect_args", {}) or {})
    return opts


def _warmup(engine: Engine, attempts: int = 3, base_sleep: float = 0.25) -> None:
    """
    Check the store answers and has a transactions table.

    Raises:
        OperationalError: If all attempts fail to connect
        StoreUnavailableError: If the table is missing
    """
    last_error: Optional[Exception] = None

    for i in range(attempts):
        try:
            with engine.connect() as conn:
                found = conn.execute(
                    text("SELECT name FROM sqlite_master WHERE type = 'table' AND name = :name"),
                    {"name": TRANSACTIONS_TABLE},
                ).fetchone()
            if found is None:
                raise StoreUnavailableError(
                    f"Store has no '{TRANSACTIONS_TABLE}' table"
                )
            log.info("store_warmup_success attempt=%d", i + 1)
            return
        except OperationalError as e:
            last_error = e
            sleep_s = base_sleep * (2 ** i)
            log.warning(
                "store_warmup_retry attempt=%d/%d sleep_s=%.2f err=%s",
                i + 1, attempts, sleep_s, str(e)[:100]
            )
            if i + 1 < attempts:
                time.sleep(sleep_s)

    log.error("store_warmup_failed after %d attempts", attempts)
    raise last_error  # type: ignore[misc]


class TransactionStore:
    """Explicitly opened, read-only connection source for the DLD store."""

    def __init__(
        self,
        path: Optional[str] = None,
        *,
        warmup_attempts: int = 3,
        warmup_base_sleep: float = 0.25,
    ):
        from config import get_database_path

        self.path = path or get_database_path()
        self.warmup_attempts = warmup_attempts
        self.warmup_base_sleep = warmup_base_sleep
        self._engine: Optional[Engine] = None

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<TransactionStore path={self.path!r} {state}>"

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def url(self) -> str:
        from config import get_database_url

        return get_database_url(self.path)

    def open(self) -> "TransactionStore":
        """
        Open the store. Idempotent.

        Raises:
            StoreUnavailableError: If the file is missing, unreadable or has
                no transactions table
        """
        if self._engine is not None:
            return self

        if not self.path.startswith("sqlite:") and not os.path.isfile(self.path):
            log.error("store_open_failed path=%s reason=missing_file", self.path)
            raise StoreUnavailableError(
                f"Store file not found: {self.path}", path=self.path
            )

        opts = _base_options()
        engine = create_engine(self.url, **opts)
        try:
            _warmup(engine, self.warmup_attempts, self.warmup_base_sleep)
        except (DBAPIError, StoreUnavailableError) as e:
            engine.dispose()
            log.error("store_open_failed path=%s err=%s", self.path, str(e)[:200])
            raise StoreUnavailableError(
                f"Store unavailable: {e}", path=self.path
            ) from e

        self._engine = engine
        log.info("store_opened path=%s", self.path)
        return self

    def close(self) -> None:
        """Dispose the engine. Safe to call more than once."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        log.info("store_closed path=%s", self.path)

    def __enter__(self) -> "TransactionStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def execute(self, clause, params: Optional[Dict[str, Any]] = None):
        """
        Run one statement on a fresh pooled connection and return a buffered
        result.

        Raises:
            StoreUnavailableError: If the store is closed or the read fails at
                the database level
        """
        if self._engine is None:
            raise StoreUnavailableError("Store is not open", path=self.path)
        try:
            with self._engine.connect() as conn:
                return conn.execute(clause, params or {}).freeze()()
        except OperationalError as e:
            log.error("store_query_failed path=%s err=%s", self.path, str(e)[:200])
            raise StoreUnavailableError(
                f"Store query failed: {e.orig}", path=self.path
            ) from e
