"""
Drop Detective Results Store
============================

Persists analyzed products keyed by (sheet_id, product name).

Stores:
    - PostgresResultsStore: psycopg2 connection pool, batch upserts
    - InMemoryResultsStore: process-local dict (used when no database is configured)

Record layout:
    {name, score, score_breakdown, google_drive_links, status}

Re-analyzing a sheet overwrites the previous record of each product.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import psycopg2
from psycopg2 import pool
from psycopg2.extras import execute_values, Json, RealDictCursor

from ..data.data_models import AnalyzedProduct

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Results store operation error."""
    pass


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS analyzed_products (
    sheet_id            TEXT        NOT NULL,
    name                TEXT        NOT NULL,
    score               INTEGER     NOT NULL CHECK (score BETWEEN 0 AND 100),
    score_breakdown     JSONB       NOT NULL DEFAULT '[]'::jsonb,
    google_drive_links  JSONB       NOT NULL DEFAULT '[]'::jsonb,
    status              TEXT        NOT NULL DEFAULT 'complete',
    updated_at          TIMESTAMP   NOT NULL DEFAULT NOW(),
    PRIMARY KEY (sheet_id, name)
);
"""


def _unique_by_name(sheet_id: str, products: Sequence[AnalyzedProduct]) -> List[Dict[str, Any]]:
    """One record per product name; the last row of a duplicated name wins."""
    records: Dict[str, Dict[str, Any]] = {}
    for product in products:
        records[product.product_name] = product.to_db_dict(sheet_id)
    return list(records.values())


class ResultsStore(ABC):
    """Persistence contract for analyzed products."""

    @abstractmethod
    def save_results(self, sheet_id: str, products: Sequence[AnalyzedProduct]) -> int:
        """Upsert products for a sheet. Returns the number of records written."""
        pass

    @abstractmethod
    def load_results(self, sheet_id: str) -> List[Dict[str, Any]]:
        """Stored records of a sheet, ordered by score (highest first)."""
        pass

    def close(self):
        """Release resources."""
        pass


class InMemoryResultsStore(ResultsStore):
    """Dict-backed store, safe to call from worker threads."""

    def __init__(self):
        self._records: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def save_results(self, sheet_id: str, products: Sequence[AnalyzedProduct]) -> int:
        if not sheet_id:
            raise PersistenceError("sheet_id is required")

        records = _unique_by_name(sheet_id, products)
        now = datetime.utcnow()
        with self._lock:
            sheet = self._records.setdefault(sheet_id, {})
            for record in records:
                sheet[record["name"]] = {**record, "updated_at": now}

        logger.debug(f"Stored {len(records)} products for sheet {sheet_id} in memory")
        return len(records)

    def load_results(self, sheet_id: str) -> List[Dict[str, Any]]:
        with self._lock:
            records = [dict(r) for r in self._records.get(sheet_id, {}).values()]
        return sorted(records, key=lambda r: r["score"], reverse=True)


class PostgresResultsStore(ResultsStore):
    """
    PostgreSQL-backed store.

    Upserts with ON CONFLICT (sheet_id, name) DO UPDATE so re-running a
    sheet replaces each product's previous record.
    """

    def __init__(
        self,
        db_pool: Optional[pool.ThreadedConnectionPool] = None,
        database_config=None,
    ):
        """
        Initialize the store.

        Args:
            db_pool: Existing connection pool (created lazily if None)
            database_config: DatabaseConfig (defaults to global settings)
        """
        self._db_pool = db_pool
        self._own_pool = db_pool is None
        self._database_config = database_config

    @property
    def db_pool(self) -> pool.ThreadedConnectionPool:
        """Lazy-initialize database connection pool."""
        if self._db_pool is None:
            db_config = self._database_config
            if db_config is None:
                from ..config import get_settings
                db_config = get_settings().database
            try:
                self._db_pool = pool.ThreadedConnectionPool(
                    minconn=db_config.pool_min_size,
                    maxconn=db_config.pool_max_size,
                    **db_config.connection_dict
                )
            except psycopg2.Error as e:
                raise PersistenceError(f"Could not connect to database: {e}") from e
            logger.info(f"Database connection pool created: {db_config.host}:{db_config.port}/{db_config.name}")
        return self._db_pool

    @contextmanager
    def get_db_connection(self):
        """
        Get a database connection from the pool.

        Commits on success, rolls back and raises PersistenceError on failure.
        """
        conn = None
        try:
            conn = self.db_pool.getconn()
            yield conn
            conn.commit()
        except PersistenceError:
            if conn:
                conn.rollback()
            raise
        except Exception as e:
            if conn:
                conn.rollback()
            raise PersistenceError(f"Database operation failed: {e}") from e
        finally:
            if conn:
                self.db_pool.putconn(conn)

    def ensure_schema(self):
        """Create the analyzed_products table if missing."""
        with self.get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
        logger.info("analyzed_products schema ensured")

    def save_results(self, sheet_id: str, products: Sequence[AnalyzedProduct]) -> int:
        if not sheet_id:
            raise PersistenceError("sheet_id is required")

        records = _unique_by_name(sheet_id, products)
        if not records:
            return 0

        rows = [
            (
                r["sheet_id"],
                r["name"],
                r["score"],
                Json(r["score_breakdown"]),
                Json(r["google_drive_links"]),
                r["status"],
                datetime.utcnow(),
            )
            for r in records
        ]

        with self.get_db_connection() as conn:
            with conn.cursor() as cur:
                execute_values(
                    cur,
                    """
                    INSERT INTO analyzed_products (
                        sheet_id, name, score, score_breakdown,
                        google_drive_links, status, updated_at
                    ) VALUES %s
                    ON CONFLICT (sheet_id, name) DO UPDATE SET
                        score = EXCLUDED.score,
                        score_breakdown = EXCLUDED.score_breakdown,
                        google_drive_links = EXCLUDED.google_drive_links,
                        status = EXCLUDED.status,
                        updated_at = EXCLUDED.updated_at
                    """,
                    rows,
                )

        logger.info(f"Upserted {len(rows)} products for sheet {sheet_id}", extra={"sheet_id": sheet_id})
        return len(rows)

    def load_results(self, sheet_id: str) -> List[Dict[str, Any]]:
        with self.get_db_connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(
                    """
                    SELECT sheet_id, name, score, score_breakdown,
                           google_drive_links, status, updated_at
                    FROM analyzed_products
                    WHERE sheet_id = %s
                    ORDER BY score DESC, name ASC
                    """,
                    (sheet_id,)
                )
                rows = cur.fetchall()

        records = []
        for row in rows:
            record = dict(row)
            # JSONB comes back decoded; plain text columns (older schemas) do not
            for key in ("score_breakdown", "google_drive_links"):
                if isinstance(record.get(key), str):
                    record[key] = json.loads(record[key])
            records.append(record)
        return records

    def close(self):
        """Clean up resources."""
        if self._own_pool and self._db_pool is not None:
            self._db_pool.closeall()
            self._db_pool = None
            logger.info("Database connection pool closed")


def build_results_store(database_config=None) -> ResultsStore:
    """PostgreSQL when credentials are configured, in-memory otherwise."""
    if database_config is None:
        from ..config import get_settings
        database_config = get_settings().database

    if database_config.enabled:
        return PostgresResultsStore(database_config=database_config)

    logger.warning("DATABASE_PASSWORD not set - results are kept in memory only")
    return InMemoryResultsStore()
