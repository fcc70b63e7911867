"""
inventory/models.py -- Domain dataclass for the tea inventory.

Pure data container with zero logic. Ownership rules live in
inventory/store.py (every query is filtered by owner_id) and in
services/teashop.py (owner_id always comes from the authenticated principal).
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Tea:
    """A tea in one account's inventory.

    owner_id references the Account that created the tea. It is a plain
    reference, not a cascading foreign key: accounts are never deleted, and
    teas are never moved between owners.

    price carries no currency unit.

    id is None before the record is written to the store.
    """

    name: str
    price: float
    owner_id: int
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, set by store on insert and update
