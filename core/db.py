"""
core/db.py -- SQLAlchemy engine construction shared by every store.

auth/store.py and inventory/store.py each own their tables but build their
engines here, so SQLite gets the same connection settings everywhere.

Layer rule: core/ is the kernel. No imports from other project packages.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    WAL (Write-Ahead Logging) allows readers to proceed without blocking
    during writes. Set per-connection because SQLite PRAGMAs are not
    inherited by new connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def build_engine(db_url: str) -> Engine:
    """Create an Engine for db_url.

    SQLite connections are shared across the threads FastAPI runs sync
    handlers on, so check_same_thread is disabled and WAL is switched on.
    Other backends get SQLAlchemy's defaults.
    """
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine
