"""
services/teashop.py -- Account and tea inventory use cases.

TeashopService is the only place that combines the account store, the
password hasher, the token issuer, and the tea store. Route handlers call it
and translate its errors to HTTP; they never reach the stores directly.

Signup:
  find_by_identity() is a fast path that rejects obvious duplicates before
  paying for bcrypt. It is NOT what guarantees uniqueness -- two concurrent
  signups can both pass it. The store's unique constraint decides the race,
  and the loser's DuplicateIdentity is reported as the same AlreadyExists.

Login:
  Unknown phone number and wrong password raise the same InvalidCredentials,
  and both cost one bcrypt verification, so neither the error nor the timing
  reveals whether the phone number is registered.

Teas:
  Every tea operation takes the authenticated Principal, never an owner id
  supplied by the client. A tea that is missing and a tea owned by someone
  else both raise NotFoundOrForbidden.

Nothing here retries. Unexpected store errors propagate to the caller.

Layer rule: may import from auth/, inventory/, and core/. Never from api/.
"""

from __future__ import annotations

import logging
import secrets

from auth.models import Account, IssuedToken, Principal
from auth.passwords import equalize_timing, hash_password, verify_password
from auth.store import AccountRepository
from auth.tokens import create_access_token
from core.errors import AlreadyExists, DuplicateIdentity, InvalidCredentials, NotFoundOrForbidden
from inventory.models import Tea
from inventory.store import TeaRepository

logger = logging.getLogger("teashop.service")

_DISPLAY_ID_MIN = 10000
_DISPLAY_ID_SPAN = 90000  # 10000..99999


def generate_display_id() -> int:
    """Return a random 5-digit display id.

    Collisions between accounts are possible and allowed: display ids are
    cosmetic and never used to look anything up.
    """
    return _DISPLAY_ID_MIN + secrets.randbelow(_DISPLAY_ID_SPAN)


class TeashopService:
    """Signup, login, and owner-scoped tea operations.

    Usage:
        service = TeashopService(AccountStore(url), TeaStore(url))
        service.signup("5550100", "pw")
        issued = service.login("5550100", "pw")
        principal = decode_access_token(issued.token)
        service.create_tea(principal, "Oolong", 12.5)
    """

    def __init__(
        self,
        accounts: AccountRepository,
        teas: TeaRepository,
        token_expire_seconds: int = 0,
    ) -> None:
        self.accounts = accounts
        self.teas = teas
        # 0 defers to Settings.token_expire_seconds inside create_access_token().
        self.token_expire_seconds = token_expire_seconds

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def signup(self, identity_key: str, password: str) -> Account:
        """Register a new account. Raises AlreadyExists if the phone is taken."""
        if self.accounts.find_by_identity(identity_key) is not None:
            raise AlreadyExists()

        credential_hash = hash_password(password)
        try:
            account = self.accounts.create(identity_key, credential_hash, generate_display_id())
        except DuplicateIdentity as exc:
            logger.info("Concurrent signup for an existing identity rejected")
            raise AlreadyExists() from exc

        logger.info("Account %s registered", account.id)
        return account

    def login(self, identity_key: str, password: str) -> IssuedToken:
        """Check credentials and issue an access token."""
        account = self.accounts.find_by_identity(identity_key)
        if account is None:
            equalize_timing(password)
            raise InvalidCredentials()
        if not verify_password(password, account.credential_hash):
            raise InvalidCredentials()

        logger.info("Account %s logged in", account.id)
        return create_access_token(account.id, account.display_id, self.token_expire_seconds)

    def get_account(self, principal: Principal) -> Account:
        """Return the caller's own account record."""
        account = self.accounts.find_by_id(principal.account_id)
        if account is None:
            raise NotFoundOrForbidden()
        return account

    # ------------------------------------------------------------------
    # Teas
    # ------------------------------------------------------------------

    def create_tea(self, principal: Principal, name: str, price: float) -> Tea:
        return self.teas.create(principal.account_id, name, price)

    def list_teas(self, principal: Principal) -> list[Tea]:
        return self.teas.list_by_owner(principal.account_id)

    def get_tea(self, principal: Principal, tea_id: int) -> Tea:
        return _found(self.teas.get_for_owner(tea_id, principal.account_id))

    def update_tea(self, principal: Principal, tea_id: int, name: str, price: float) -> Tea:
        """Replace both name and price of one of the caller's teas."""
        return _found(self.teas.update_for_owner(tea_id, principal.account_id, name, price))

    def delete_tea(self, principal: Principal, tea_id: int) -> Tea:
        """Delete one of the caller's teas and return what was deleted."""
        return _found(self.teas.delete_for_owner(tea_id, principal.account_id))

    def close(self) -> None:
        self.accounts.close()
        self.teas.close()


def _found(tea: Tea | None) -> Tea:
    if tea is None:
        raise NotFoundOrForbidden()
    return tea
