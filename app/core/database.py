"""PostgreSQL connection and session management."""

import logging
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


class Database:
    """
    Explicit storage handle: one engine (connection pool) plus a session factory.

    Built once at startup and closed with dispose() on shutdown. Extra keyword
    arguments go straight to create_engine (tests pass SQLite pool options).
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any) -> None:
        engine_kwargs.setdefault("pool_pre_ping", True)
        # Keep bound values (password hashes) out of error messages and logs.
        engine_kwargs.setdefault("hide_parameters", True)
        self.engine = create_engine(url, echo=echo, **engine_kwargs)
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def session(self) -> Session:
        """Open a new session; the caller is responsible for closing it."""
        return self._session_factory()

    def check_connected(self) -> bool:
        """Run a trivial query to verify the database is reachable."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Database connectivity check failed: %s", e)
            return False

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()
