"""
Database service for storing fetched quotations.
"""

from datetime import timedelta
from typing import Any, Optional

from sqlalchemy import create_engine, insert
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from quotation.deadline import Deadline, DeadlineExceeded
from quotation.models import Quotation, quotation_table
from quotation.server.errors import StoreError, StoreTimeoutError
from quotation.utils.durations import format_duration
from quotation.utils.logger import LoggerFactory

logger = LoggerFactory.get_logger(__name__)

# SQLite VM instructions between two deadline checks
PROGRESS_INTERVAL = 100


class QuotationStore:
    """Service for managing the database connection and quotation rows."""

    def __init__(self, database_url: str):
        """
        Initialize the store with a connection URL.

        Args:
            database_url: SQLAlchemy database URL, e.g. sqlite:///cotacao.db
        """
        self.database_url = database_url
        self.engine: Optional[Engine] = None

    def connect(self) -> bool:
        """
        Connect to the database and create the quotation table if needed.

        Returns:
            True if connection successful, False otherwise
        """
        connect_args = {}
        if self.database_url.startswith("sqlite"):
            # The pooled connections are shared by the server's handler threads
            connect_args["check_same_thread"] = False

        try:
            self.engine = create_engine(self.database_url, connect_args=connect_args)
            quotation_table.create(self.engine, checkfirst=True)
        except SQLAlchemyError as e:
            logger.error("Failed to create table %s: %s", quotation_table.name, e)
            return False

        logger.debug("Successfully connected to database")
        return True

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.engine

    def _sqlite_connection(self, conn: Connection) -> Optional[Any]:
        if conn.dialect.name != "sqlite":
            return None
        return conn.connection.driver_connection

    def save(self, quotation: Quotation, deadline: Deadline, timeout: timedelta) -> None:
        """
        Insert one quotation row before ``deadline`` expires.

        Args:
            quotation: Quotation to store
            deadline: Deadline bounding the whole insert
            timeout: Budget the deadline was derived from, used in messages

        Raises:
            StoreTimeoutError: If the deadline expires first; nothing is stored
            StoreError: If the statement fails for any other reason
        """
        engine = self._require_engine()
        timeout_message = (
            f"database operation exceeded the maximum time of {format_duration(timeout)}"
        )

        try:
            deadline.check()
            with engine.connect() as conn:
                sqlite_conn = self._sqlite_connection(conn)
                remaining = deadline.remaining()
                if sqlite_conn is not None and remaining is not None:
                    conn.exec_driver_sql(f"PRAGMA busy_timeout = {int(remaining * 1000)}")
                    sqlite_conn.set_progress_handler(
                        lambda: 1 if deadline.expired() else 0, PROGRESS_INTERVAL
                    )
                try:
                    conn.execute(insert(quotation_table).values(**quotation.to_row()))
                    # Uncommitted work is rolled back when the connection closes
                    deadline.check()
                    conn.commit()
                finally:
                    if sqlite_conn is not None:
                        sqlite_conn.set_progress_handler(None, 0)
        except DeadlineExceeded as e:
            raise StoreTimeoutError(timeout_message) from e
        except SQLAlchemyError as e:
            if deadline.expired():
                raise StoreTimeoutError(timeout_message) from e
            raise StoreError(f"query execution failed: {e}") from e

        logger.debug("Stored quotation %r", quotation)
