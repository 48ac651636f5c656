"""MySQL / Aurora-MySQL access through an aiomysql pool."""
from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Optional, Sequence

import aiomysql

from ..core.config import Settings
from ..models import FileRecord, HealthCheck

logger = logging.getLogger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS health_checks (
        check_id INT AUTO_INCREMENT PRIMARY KEY,
        `datetime` TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS files (
        id CHAR(36) PRIMARY KEY,
        file_name VARCHAR(255) NOT NULL,
        url VARCHAR(1024) NOT NULL,
        upload_date DATE NOT NULL
    )
    """,
)


class Database:
    """Owns the connection pool; every statement is bounded by ``timeout``."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._pool: Optional[aiomysql.Pool] = None
        self._schema_ready = False
        self._lock = asyncio.Lock()
        self.timeout = settings.io_timeout_seconds

    async def _create_pool(self) -> aiomysql.Pool:
        s = self._settings
        return await aiomysql.create_pool(
            host=s.db_host,
            port=s.db_port,
            user=s.db_user,
            password=s.db_password,
            db=(s.db_name or None),
            autocommit=True,
            minsize=1,
            maxsize=s.db_pool_maxsize,
            connect_timeout=self.timeout,
        )

    async def pool(self) -> aiomysql.Pool:
        """Return the pool, creating it and the tables on first use.

        Table creation is retried on every call until it succeeds, so a
        database that comes up after the service still gets its schema.
        """
        if self._pool is None or not self._schema_ready:
            async with self._lock:
                if self._pool is None:
                    self._pool = await asyncio.wait_for(self._create_pool(), self.timeout)
                    logger.info(f"Connected to MySQL at {self._settings.db_host}:{self._settings.db_port}")
                if not self._schema_ready:
                    self._schema_ready = await self._create_tables(self._pool)
        return self._pool

    async def _create_tables(self, pool: aiomysql.Pool) -> bool:
        try:
            async with pool.acquire() as conn:
                async with conn.cursor() as cur:
                    for statement in SCHEMA:
                        await cur.execute(statement)
        except Exception as e:
            logger.error(f"Error synchronizing database: {e}")
            return False
        logger.info("Database synchronized")
        return True

    async def _run(self, sql: str, params: Sequence[Any], fetch: bool):
        pool = await self.pool()
        async with pool.acquire() as conn:
            async with conn.cursor() as cur:
                await cur.execute(sql, params)
                if fetch:
                    return await cur.fetchone()
                return cur.lastrowid

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a statement and return the last inserted row id."""
        return await asyncio.wait_for(self._run(sql, params, fetch=False), self.timeout)

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[tuple]:
        return await asyncio.wait_for(self._run(sql, params, fetch=True), self.timeout)

    async def sync_schema(self) -> bool:
        """Connect and create the tables if missing. Failure is logged, not raised."""
        try:
            await asyncio.wait_for(self.pool(), self.timeout)
        except Exception as e:
            logger.error(f"Error synchronizing database: {e}")
            return False
        return self._schema_ready

    async def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            await self._pool.wait_closed()
            self._pool = None


# -------------------------------------------------------------------------
# Repositories
# -------------------------------------------------------------------------

class HealthCheckRepository:
    """Append-only log of successful liveness checks."""

    def __init__(self, db: Database):
        self._db = db

    async def create(self) -> HealthCheck:
        check_id = await self._db.execute("INSERT INTO health_checks () VALUES ()")
        return HealthCheck(check_id=check_id)


class FileRepository:
    def __init__(self, db: Database):
        self._db = db

    async def create(self, record: FileRecord) -> FileRecord:
        await self._db.execute(
            """INSERT INTO files (id, file_name, url, upload_date)
               VALUES (%s, %s, %s, %s)""",
            (record.id, record.file_name, record.url, record.upload_date),
        )
        return record

    async def find_by_id(self, file_id: str) -> Optional[FileRecord]:
        row = await self._db.fetch_one(
            "SELECT id, file_name, url, upload_date FROM files WHERE id = %s",
            (file_id,),
        )
        if not row:
            return None
        upload_date = row[3]
        if not isinstance(upload_date, date):
            upload_date = date.fromisoformat(str(upload_date))
        return FileRecord(id=row[0], file_name=row[1], url=row[2], upload_date=upload_date)

    async def delete(self, record: FileRecord) -> None:
        await self._db.execute("DELETE FROM files WHERE id = %s", (record.id,))
