"""
auth/store.py -- Persistence layer for accounts.

Pattern: Repository + Data Mapper (same as inventory/store.py).
AccountStore is the repository; _row_to_account is the mapper. The service
and route code never touch SQL directly.

Two implementations of AccountRepository:
  AccountStore        SQLAlchemy Core; SQLite by default, any SQL URL works.
  MemoryAccountStore  process-local dicts, for tests and throwaway runs.

Identity uniqueness:
  UNIQUE(identity_key) is declared on the table and create() is a single
  INSERT. When two signups for the same phone number race, the database
  accepts one row and rejects the other with IntegrityError, which create()
  turns into DuplicateIdentity. There is no read-then-write in the store, so
  there is no window for a second row to slip in.

  MemoryAccountStore gets the same guarantee by checking and inserting under
  one lock.

Security:
  All queries use bound parameters. No f-strings in SQL.

Layer rule: no imports from api/, inventory/, or services/.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import Column, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.models import Account
from core.db import build_engine
from core.errors import DuplicateIdentity

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_accounts = Table(
    "accounts",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("identity_key", String(32), nullable=False, unique=True),  # phone number
    Column("credential_hash", Text, nullable=False),
    Column("display_id", Integer, nullable=False),  # not unique, display only
    Column("created_at", String(32), nullable=False),
    # AUTOINCREMENT keeps SQLite from handing out a deleted row's id again.
    sqlite_autoincrement=True,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository interface
# ---------------------------------------------------------------------------


class AccountRepository(Protocol):
    def find_by_identity(self, identity_key: str) -> Account | None: ...

    def find_by_id(self, account_id: int) -> Account | None: ...

    def create(self, identity_key: str, credential_hash: str, display_id: int) -> Account:
        """Insert a new account or raise DuplicateIdentity."""
        ...

    def close(self) -> None: ...


# ---------------------------------------------------------------------------
# SQL repository
# ---------------------------------------------------------------------------


class AccountStore:
    """SQLAlchemy-backed AccountRepository.

    Usage:
        store = AccountStore("sqlite:///teashop.db")
        account = store.create("5550100", hash_password("pw"), 48213)
        same = store.find_by_identity("5550100")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = build_engine(db_url)
        _metadata.create_all(self.engine)

    def find_by_identity(self, identity_key: str) -> Account | None:
        """Look up an account by exact phone number. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_accounts.select().where(_accounts.c.identity_key == identity_key)).fetchone()
        return _row_to_account(row) if row is not None else None

    def find_by_id(self, account_id: int) -> Account | None:
        """Look up an account by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_accounts.select().where(_accounts.c.id == account_id)).fetchone()
        return _row_to_account(row) if row is not None else None

    def create(self, identity_key: str, credential_hash: str, display_id: int) -> Account:
        """Insert a new account and return it with its assigned id.

        Raises DuplicateIdentity if identity_key is already registered,
        including when a concurrent create for the same key won the race.
        """
        created_at = _now_iso()
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _accounts.insert().values(
                        identity_key=identity_key,
                        credential_hash=credential_hash,
                        display_id=display_id,
                        created_at=created_at,
                    )
                )
                conn.commit()
        except IntegrityError as exc:
            raise DuplicateIdentity() from exc
        return Account(
            id=result.inserted_primary_key[0],
            identity_key=identity_key,
            credential_hash=credential_hash,
            display_id=display_id,
            created_at=created_at,
        )

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# In-memory repository
# ---------------------------------------------------------------------------


class MemoryAccountStore:
    """Thread-safe in-process AccountRepository.

    Ids come from a monotonic counter and are never reused. Returned Account
    objects are copies, so callers cannot mutate stored state.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._by_id: dict[int, Account] = {}
        self._by_identity: dict[str, int] = {}

    def find_by_identity(self, identity_key: str) -> Account | None:
        with self._lock:
            account_id = self._by_identity.get(identity_key)
            account = self._by_id.get(account_id) if account_id is not None else None
            return replace(account) if account else None

    def find_by_id(self, account_id: int) -> Account | None:
        with self._lock:
            account = self._by_id.get(account_id)
            return replace(account) if account else None

    def create(self, identity_key: str, credential_hash: str, display_id: int) -> Account:
        with self._lock:
            if identity_key in self._by_identity:
                raise DuplicateIdentity()
            account = Account(
                id=next(self._ids),
                identity_key=identity_key,
                credential_hash=credential_hash,
                display_id=display_id,
                created_at=_now_iso(),
            )
            self._by_id[account.id] = account
            self._by_identity[identity_key] = account.id
            return replace(account)

    def close(self) -> None:
        pass


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_account(row) -> Account:
    return Account(
        id=row.id,
        identity_key=row.identity_key,
        credential_hash=row.credential_hash,
        display_id=row.display_id,
        created_at=row.created_at,
    )
