# manages the sqlite file behind the document store, internal to docstore package
import asyncio
import os.path
import random
import string
from contextlib import asynccontextmanager
from sqlite3 import Row

import aiosqlite

from utils.logger import get_logger

_logger = get_logger(__name__)

DB_PATH = "data/storefront.sqlite"

DB_SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    collection  TEXT    NOT NULL,
    doc_id      TEXT    NOT NULL,
    seq         INTEGER NOT NULL,
    data        TEXT    NOT NULL,
    PRIMARY KEY (collection, doc_id)
);
CREATE INDEX IF NOT EXISTS idx_documents_seq ON documents (collection, seq);

CREATE TABLE IF NOT EXISTS identities (
    uid         TEXT    PRIMARY KEY,
    token       TEXT    UNIQUE,
    anonymous   INTEGER NOT NULL,
    created_at  TEXT    NOT NULL
);
"""

_initialized = False
_init_lock = asyncio.Lock()


def configure(db_path: str) -> None:
    """Point the store at another sqlite file; schema is created on next connect."""
    global DB_PATH, _initialized
    DB_PATH = db_path
    _initialized = False


async def _table_exists(conn: aiosqlite.Connection, table_name: str) -> bool:
    cur = await conn.execute(
        """
        SELECT name
        FROM sqlite_master
        WHERE type = 'table'
          AND name = ?;
        """,
        (table_name,),
    )
    row = await cur.fetchone()
    await cur.close()
    return row is not None


@asynccontextmanager
async def connect() -> aiosqlite.Connection:
    """Async context manager yielding an aiosqlite connection.

    Creates the schema on first use.
    """
    global _initialized
    directory = os.path.dirname(DB_PATH)
    if directory:
        os.makedirs(directory, exist_ok=True)

    conn = await aiosqlite.connect(DB_PATH)
    conn.row_factory = Row

    if not _initialized:
        async with _init_lock:
            if not _initialized:
                if not await _table_exists(conn, "documents"):
                    _logger.info(f"Initializing document store at {DB_PATH}...")
                    await conn.executescript(DB_SCHEMA)
                    await conn.commit()
                _initialized = True
    try:
        yield conn
    finally:
        await conn.close()


_ID_ALPHABET = string.ascii_letters + string.digits


def generate_id(length: int = 20) -> str:
    """Random alphanumeric key, the shape of the ids the store hands out."""
    return "".join(random.choices(_ID_ALPHABET, k=length))
