# backend/core/query_logger.py

import logging
import time
from sqlalchemy import event
from sqlalchemy.engine import Engine
from core.config import get_settings

logger = logging.getLogger("sqlalchemy.engine")
query_logger = logging.getLogger("query_performance")

settings = get_settings()


class QueryStats:
    """Accumulated query counters for the current process"""

    def __init__(self, slow_query_threshold: float):
        self.slow_query_threshold = slow_query_threshold
        self.reset()

    def reset(self):
        self.total_queries = 0
        self.slow_queries = 0
        self.total_time = 0.0

    def record(self, elapsed: float, statement: str):
        self.total_queries += 1
        self.total_time += elapsed
        if elapsed > self.slow_query_threshold:
            self.slow_queries += 1
            query_logger.warning(
                f"SLOW QUERY ({elapsed:.3f}s): {statement[:200]}..."
            )


query_stats = QueryStats(settings.slow_query_threshold_seconds)


def enable_sqlite_foreign_keys(engine: Engine):
    """SQLite ignores foreign keys (and so ON DELETE CASCADE) unless asked."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()


def setup_query_logging(engine: Engine):
    """
    Setup query logging for an SQLAlchemy engine

    Args:
        engine: SQLAlchemy engine instance
    """
    enable_sqlite_foreign_keys(engine)

    if not (settings.debug or settings.LOG_SQL_QUERIES):
        return

    if settings.LOG_SQL_QUERIES:
        logger.setLevel(logging.INFO)

    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.time())

    @event.listens_for(engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        elapsed = time.time() - conn.info["query_start_time"].pop(-1)
        query_stats.record(elapsed, statement)
