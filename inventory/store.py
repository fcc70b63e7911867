"""
inventory/store.py -- Owner-scoped persistence layer for teas.

Uses SQLAlchemy Core (not ORM) so the dataclass in inventory/models.py
remains the authoritative domain representation. Swapping SQLite for
PostgreSQL is a connection string change, not a rewrite.

Pattern: Repository + Data Mapper. TeaStore is the repository; _row_to_tea
is the mapper. MemoryTeaStore implements the same TeaRepository interface
without a database, for tests.

Ownership:
  Every read, update and delete takes both tea_id and owner_id, and both go
  into the same WHERE clause. A tea that exists but belongs to someone else
  is indistinguishable from a tea that does not exist -- both return None.
  There is no method that fetches a tea by id alone. Ids SQLite cannot
  store (above 2**63 - 1, or below 1) return None without a query.

Updates replace name and price together. Partial updates are not offered.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = TeaStore("sqlite:///teashop.db")
    tea = store.create(owner_id=1, name="Oolong", price=12.5)
    store.list_by_owner(1)
    store.update_for_owner(tea.id, 1, name="Oolong", price=14.0)
    store.delete_for_owner(tea.id, 1)
    store.close()
"""

import itertools
import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy import Column, Float, Index, Integer, MetaData, String, Table
from sqlalchemy.engine import Engine

from core.db import build_engine
from inventory.models import Tea

logger = logging.getLogger("teashop.inventory")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

# Largest value a SQLite INTEGER (signed 64-bit) can hold. Ids outside
# 1.._MAX_ID cannot name a stored row.
_MAX_ID = 2**63 - 1

metadata = MetaData()

_teas = Table(
    "teas",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(200), nullable=False),
    Column("price", Float, nullable=False),
    Column("owner_id", Integer, nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
    Index("ix_teas_owner_id", "owner_id"),
    sqlite_autoincrement=True,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _storable(tea_id: int) -> bool:
    return 1 <= tea_id <= _MAX_ID


def _owned(tea_id: int, owner_id: int):
    """WHERE clause matching one tea only if it belongs to owner_id."""
    return (_teas.c.id == tea_id) & (_teas.c.owner_id == owner_id)


# ---------------------------------------------------------------------------
# Repository interface
# ---------------------------------------------------------------------------


class TeaRepository(Protocol):
    def create(self, owner_id: int, name: str, price: float) -> Tea: ...

    def list_by_owner(self, owner_id: int) -> list[Tea]: ...

    def get_for_owner(self, tea_id: int, owner_id: int) -> Optional[Tea]: ...

    def update_for_owner(self, tea_id: int, owner_id: int, name: str, price: float) -> Optional[Tea]: ...

    def delete_for_owner(self, tea_id: int, owner_id: int) -> Optional[Tea]: ...

    def close(self) -> None: ...


# ---------------------------------------------------------------------------
# SQL repository
# ---------------------------------------------------------------------------


class TeaStore:
    """SQLAlchemy-backed TeaRepository."""

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = build_engine(db_url)
        metadata.create_all(self.engine)

    def create(self, owner_id: int, name: str, price: float) -> Tea:
        """Insert a tea owned by owner_id and return it with its assigned id."""
        now = _now_iso()
        with self.engine.begin() as conn:
            result = conn.execute(
                _teas.insert().values(
                    name=name,
                    price=price,
                    owner_id=owner_id,
                    created_at=now,
                    updated_at=now,
                )
            )
            tea_id = result.inserted_primary_key[0]
        logger.debug("Tea %s created for owner %s", tea_id, owner_id)
        return Tea(id=tea_id, name=name, price=price, owner_id=owner_id, created_at=now, updated_at=now)

    def list_by_owner(self, owner_id: int) -> list[Tea]:
        """Return every tea owned by owner_id, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(_teas.select().where(_teas.c.owner_id == owner_id).order_by(_teas.c.id)).fetchall()
        return [_row_to_tea(r) for r in rows]

    def get_for_owner(self, tea_id: int, owner_id: int) -> Optional[Tea]:
        """Return the tea if it exists AND belongs to owner_id, else None."""
        if not _storable(tea_id):
            return None
        with self.engine.connect() as conn:
            row = conn.execute(_teas.select().where(_owned(tea_id, owner_id))).fetchone()
        return _row_to_tea(row) if row is not None else None

    def update_for_owner(self, tea_id: int, owner_id: int, name: str, price: float) -> Optional[Tea]:
        """Replace name and price on an owned tea. Returns the updated tea or None.

        The UPDATE and the re-read share one transaction so the returned
        record is the one this call wrote.
        """
        if not _storable(tea_id):
            return None
        with self.engine.begin() as conn:
            result = conn.execute(
                _teas.update().where(_owned(tea_id, owner_id)).values(name=name, price=price, updated_at=_now_iso())
            )
            if result.rowcount == 0:
                return None
            row = conn.execute(_teas.select().where(_owned(tea_id, owner_id))).fetchone()
        return _row_to_tea(row)

    def delete_for_owner(self, tea_id: int, owner_id: int) -> Optional[Tea]:
        """Delete an owned tea and return the record as it was before deletion."""
        if not _storable(tea_id):
            return None
        with self.engine.begin() as conn:
            row = conn.execute(_teas.select().where(_owned(tea_id, owner_id))).fetchone()
            if row is None:
                return None
            conn.execute(_teas.delete().where(_owned(tea_id, owner_id)))
        logger.debug("Tea %s deleted by owner %s", tea_id, owner_id)
        return _row_to_tea(row)

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# In-memory repository
# ---------------------------------------------------------------------------


class MemoryTeaStore:
    """Thread-safe in-process TeaRepository with the same ownership rules."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._teas: dict[int, Tea] = {}

    def _owned(self, tea_id: int, owner_id: int) -> Optional[Tea]:
        tea = self._teas.get(tea_id)
        if tea is None or tea.owner_id != owner_id:
            return None
        return tea

    def create(self, owner_id: int, name: str, price: float) -> Tea:
        now = _now_iso()
        with self._lock:
            tea = Tea(id=next(self._ids), name=name, price=price, owner_id=owner_id, created_at=now, updated_at=now)
            self._teas[tea.id] = tea
            return replace(tea)

    def list_by_owner(self, owner_id: int) -> list[Tea]:
        with self._lock:
            return [replace(t) for _, t in sorted(self._teas.items()) if t.owner_id == owner_id]

    def get_for_owner(self, tea_id: int, owner_id: int) -> Optional[Tea]:
        with self._lock:
            tea = self._owned(tea_id, owner_id)
            return replace(tea) if tea else None

    def update_for_owner(self, tea_id: int, owner_id: int, name: str, price: float) -> Optional[Tea]:
        with self._lock:
            tea = self._owned(tea_id, owner_id)
            if tea is None:
                return None
            tea.name = name
            tea.price = price
            tea.updated_at = _now_iso()
            return replace(tea)

    def delete_for_owner(self, tea_id: int, owner_id: int) -> Optional[Tea]:
        with self._lock:
            if self._owned(tea_id, owner_id) is None:
                return None
            return self._teas.pop(tea_id)

    def close(self) -> None:
        pass


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_tea(row) -> Tea:
    return Tea(
        id=row.id,
        name=row.name,
        price=row.price,
        owner_id=row.owner_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
