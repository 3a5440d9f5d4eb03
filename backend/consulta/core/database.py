"""
Conexión a base de datos PostgreSQL

One connection per request, acquired through store_session() and released
on every exit path. Queries inside a session run strictly one after another
and share a single deadline. Every query runs under a server-side
statement_timeout set to what is left of the budget, and the session
refuses to issue a new query once the budget is spent.

There is no retry logic: a failed connection or query surfaces immediately
as StoreUnavailableError.

Author: TM3
Updated: 2025-10-17
"""
import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

import psycopg2
from psycopg2.extras import RealDictCursor

from consulta.core.config import settings
from consulta.core.exceptions import (
    ConfigurationError,
    StoreTimeoutError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

CONNECTION_TIMEOUT = settings.DB_CONNECT_TIMEOUT


class Deadline:
    """Monotonic time budget for one request"""

    def __init__(self, seconds: float):
        self.seconds = seconds
        self._expires_at = time.monotonic() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0


class StoreSession:
    """
    Thin wrapper over a psycopg2 connection with RealDictCursor rows

    All queries must use %s placeholders with bound parameters.
    psycopg2 errors are converted to StoreUnavailableError here so that
    repositories and services never see driver exceptions.
    """

    def __init__(self, connection, deadline: Deadline):
        self.connection = connection
        self.deadline = deadline

    def _check_deadline(self):
        if self.deadline.expired:
            raise StoreTimeoutError(
                f"Consulta excedeu o limite de {self.deadline.seconds:g}s"
            )

    def _remaining_ms(self) -> int:
        return max(1, int(self.deadline.remaining() * 1000))

    def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Execute a query and return every row as a dict"""
        self._check_deadline()
        try:
            with self.connection.cursor() as cursor:
                # LOCAL: scoped to the open transaction, re-bounded per query
                cursor.execute(f"SET LOCAL statement_timeout = {self._remaining_ms()}")
                cursor.execute(query, params)
                return [dict(row) for row in cursor.fetchall()]
        except psycopg2.extensions.QueryCanceledError as e:
            raise StoreTimeoutError(str(e).strip()) from e
        except psycopg2.Error as e:
            raise StoreUnavailableError(str(e).strip()) from e

    def fetch_one(self, query: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        """Execute a query and return the first row (or None)"""
        rows = self.fetch_all(query, params)
        return rows[0] if rows else None


def get_db_connection_dict(timeout_seconds: Optional[float] = None):
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Args:
        timeout_seconds: server-side statement_timeout; omitted when None

    Raises:
        ConfigurationError if no database is configured
        StoreUnavailableError if the connection cannot be opened
    """
    database_url = settings.get_database_url()
    if not database_url:
        raise ConfigurationError("DATABASE_URL not configured")

    options = None
    if timeout_seconds is not None:
        options = f"-c statement_timeout={max(1, int(timeout_seconds * 1000))}"

    try:
        return psycopg2.connect(
            database_url,
            cursor_factory=RealDictCursor,
            connect_timeout=CONNECTION_TIMEOUT,
            options=options,
        )
    except psycopg2.Error as e:
        raise StoreUnavailableError(str(e).strip()) from e


@contextmanager
def store_session(timeout_seconds: Optional[float] = None) -> Iterator[StoreSession]:
    """
    Context manager: acquire one connection, yield a StoreSession, always close

    Usage:
        with store_session() as session:
            rows = session.fetch_all("SELECT ... WHERE id = %s", (1,))
    """
    deadline = Deadline(timeout_seconds or settings.REQUEST_TIMEOUT_SECONDS)
    conn = get_db_connection_dict(deadline.remaining())
    try:
        yield StoreSession(conn, deadline)
    except StoreUnavailableError as e:
        logger.error(f"Store access failed: {e.message}")
        if not conn.closed:
            conn.rollback()
        raise
    finally:
        conn.close()
