"""
API request and response models for Teashop REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
inventory/models.py, which own the internal domain representation. Route
handlers map between the two.

Credential hashes never appear in any response model.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from auth.models import Account
from auth.passwords import MAX_PASSWORD_BYTES
from inventory.models import Tea

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Digits with an optional leading "+". No formatting characters: the phone
# number is the lookup key, so "555-0100" and "5550100" must not both exist.
PHONE_PATTERN = r"^\+?[0-9]{3,20}$"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    """Request body for POST /auth/signup.

    Accepts the field names used by existing clients (phone, password) and
    the generic names (identity_key / identityKey, credential). Nothing is
    stripped: surrounding whitespace in a password is part of the password.
    """

    phone: str = Field(
        pattern=PHONE_PATTERN,
        validation_alias=AliasChoices("phone", "identity_key", "identityKey"),
    )
    password: str = Field(
        min_length=1,
        validation_alias=AliasChoices("password", "credential"),
    )

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        """Reject passwords bcrypt cannot hash in full (over 72 UTF-8 bytes)."""
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    """Request body for POST /auth/login.

    Same field names as SignupRequest but no format rules: a phone number
    that could never have been registered is simply an unknown identity, and
    login answers it with the same 401 as a wrong password.
    """

    phone: str = Field(validation_alias=AliasChoices("phone", "identity_key", "identityKey"))
    password: str = Field(validation_alias=AliasChoices("password", "credential"))


class TeaWrite(BaseModel):
    """Request body for POST /teas and PUT /teas/{id}.

    Both fields are required on update as well: an update replaces the whole
    record.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=200)
    price: float = Field(allow_inf_nan=False)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Uniform error envelope returned by every exception handler."""

    error: ErrorDetail


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str


class SignupResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str = "User registered successfully"
    display_id: int


class LoginResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    token_type: str = "bearer"
    expires_in: int
    display_id: int
    message: str = "Login successful"


class MeResponse(BaseModel):
    """Identity of the caller. display_id is cosmetic and may collide."""

    model_config = ConfigDict(frozen=True)

    account_id: int
    display_id: int
    phone: str
    token_expires_in: int

    @classmethod
    def from_account(cls, account: Account, token_expires_in: int) -> "MeResponse":
        return cls(
            account_id=account.id,
            display_id=account.display_id,
            phone=account.identity_key,
            token_expires_in=token_expires_in,
        )


class TeaResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price: float
    owner_id: int
    created_at: str
    updated_at: str

    @classmethod
    def from_tea(cls, tea: Tea) -> "TeaResponse":
        """Factory Method: the domain-to-contract mapping lives with the model."""
        return cls(
            id=tea.id,
            name=tea.name,
            price=tea.price,
            owner_id=tea.owner_id,
            created_at=tea.created_at,
            updated_at=tea.updated_at,
        )


class TeaDeletedResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str = "Tea deleted successfully"
    deleted_tea: TeaResponse
