"""Database connection management for report storage."""

import logging
import os
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base


logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///data/decompiled_reports.db"


def get_database_url(database_url: Optional[str] = None) -> str:
    """
    Resolve the storage database URL.

    Args:
        database_url: Explicit URL (default: from DECOMPILER_DATABASE_URL env
            or a SQLite file under ``data/``)

    Returns:
        SQLAlchemy connection URL string.
    """
    return database_url or os.environ.get("DECOMPILER_DATABASE_URL", DEFAULT_DATABASE_URL)


class DatabaseManager:
    """
    Owns the engine and session factory for the report store.

    SQLite (file or in-memory) is the default backend; any other
    SQLAlchemy URL, e.g. PostgreSQL, gets a pooled engine.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        """
        Initialize the database manager.

        Args:
            database_url: Connection URL. If None, resolved by get_database_url().
            pool_size: Pooled connections for server databases.
            max_overflow: Connections allowed beyond pool_size.
            echo: If True, log all SQL statements.
        """
        self._database_url = get_database_url(database_url)
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._echo = echo

    @property
    def database_url(self) -> str:
        return self._database_url

    @property
    def is_sqlite(self) -> bool:
        return make_url(self._database_url).get_backend_name() == "sqlite"

    @property
    def engine(self) -> Engine:
        """Engine for the configured URL, created on first use."""
        if self._engine is None:
            self._engine = create_engine(self._database_url, **self._engine_options())
            logger.info(
                "Opened report database "
                f"{self._engine.url.render_as_string(hide_password=True)}"
            )
        return self._engine

    def _engine_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"echo": self._echo}
        if not self.is_sqlite:
            options.update(
                pool_size=self._pool_size,
                max_overflow=self._max_overflow,
                pool_pre_ping=True,
            )
            return options

        options["connect_args"] = {"check_same_thread": False}
        database = make_url(self._database_url).database
        if not database or database == ":memory:":
            # A single shared connection, so every session sees the same tables
            options["poolclass"] = StaticPool
        else:
            directory = os.path.dirname(database)
            if directory:
                os.makedirs(directory, exist_ok=True)
        return options

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autoflush=False,
                expire_on_commit=False,
            )
        return self._session_factory

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Session that commits on success and rolls back on error.

        Example:
            with db_manager.get_session() as session:
                session.merge(report_model)
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self) -> None:
        """Create the report tables if they do not exist."""
        Base.metadata.create_all(self.engine)

    def close(self) -> None:
        """Dispose of the engine; the next use opens a new one."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None

    def health_check(self) -> bool:
        """
        Check the database answers a trivial query.

        Returns:
            True if the query succeeds, False otherwise.
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            return False
