# manages connections to the db, schema bootstrap, and the unit-of-work helpers
import asyncio
import os.path
from contextlib import asynccontextmanager
from sqlite3 import Row

import aiosqlite

from utils import config
from utils.logger import get_logger

_logger = get_logger(__name__)

_HERE = os.path.dirname(os.path.abspath(__file__))

DB_PATH = config.DB_PATH
DB_INIT_SCRIPTS = [
    os.path.join(_HERE, "schema.sql"),
    os.path.join(_HERE, "seed.sql"),
]

_initialized = False
_init_lock = asyncio.Lock()


async def _init_db(conn: aiosqlite.Connection) -> None:
    for script in DB_INIT_SCRIPTS:
        if not os.path.exists(script) or os.path.getsize(script) == 0:
            continue
        _logger.info(f"Initializing database with script {os.path.basename(script)}...")
        with open(script, "r") as f:
            await conn.executescript(f.read())
    await conn.commit()


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
    """Async context manager yielding an aiosqlite connection with FK enabled.

    The connection runs in autocommit mode: statements outside `transaction()`
    commit immediately. Ensures the schema and seed data exist on first use.
    """
    global _initialized
    directory = os.path.dirname(DB_PATH)
    if directory:
        os.makedirs(directory, exist_ok=True)

    conn = await aiosqlite.connect(
        DB_PATH, timeout=config.DB_TIMEOUT, isolation_level=None
    )
    conn.row_factory = Row
    await conn.execute("PRAGMA foreign_keys = ON;")

    if not _initialized:
        async with _init_lock:
            if not _initialized:
                exists = await _table_exists(conn, "users")
                if not exists:
                    _logger.info(f"Initializing database at {DB_PATH}...")
                    await _init_db(conn)
                _initialized = True
    try:
        yield conn
    finally:
        await conn.close()


@asynccontextmanager
async def transaction(conn: aiosqlite.Connection):
    """Run the enclosed statements as one atomic unit.

    BEGIN IMMEDIATE takes the database write lock up front, so a
    read-check-write sequence inside the block cannot interleave with another
    writer. Commits on normal exit, rolls back on any exception and re-raises.
    """
    await conn.execute("BEGIN IMMEDIATE;")
    try:
        yield conn
    except BaseException:
        await conn.rollback()
        _logger.debug("Transaction rolled back.")
        raise
    else:
        await conn.commit()


@asynccontextmanager
async def unit_of_work():
    """Open a connection and a transaction on it; yields the connection."""
    async with connect() as conn:
        async with transaction(conn):
            yield conn
