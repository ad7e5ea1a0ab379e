"""
Request, identity and query models for the Gateway.

Upstream payloads (events, markets, orderbooks, orders, comments) are
passed through as plain JSON and are not modelled here.
"""

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# A caller-signed CLOB order. The gateway forwards it byte-for-byte and never
# inspects its signature.
SignedOrder = Dict[str, Any]

ParentEntityType = Literal["Event", "Series", "market"]
BoolLiteral = Literal["true", "false"]


class Identity(BaseModel):
    """The authenticated caller, as reported by the auth provider."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
    created_at: Optional[str] = None
    last_sign_in_at: Optional[str] = None

    @classmethod
    def from_provider(cls, payload: Dict[str, Any]) -> "Identity":
        return cls(
            id=str(payload["id"]),
            email=payload.get("email"),
            created_at=payload.get("created_at"),
            last_sign_in_at=payload.get("last_sign_in_at"),
        )


class SignInRequest(BaseModel):
    email: EmailStr


class VerifyOtpRequest(BaseModel):
    email: EmailStr
    token: str

    @field_validator("token")
    @classmethod
    def _token_length(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Token must be at least 6 characters")
        return value


class SigningRequest(BaseModel):
    """A request for builder attribution headers."""

    method: str
    path: str
    body: Optional[str] = None


class SigningResponse(BaseModel):
    POLY_BUILDER_API_KEY: str
    POLY_BUILDER_SIGNATURE: str
    POLY_BUILDER_TIMESTAMP: int
    POLY_BUILDER_PASSPHRASE: str


class CancelOrderRequest(BaseModel):
    orderID: str = Field(min_length=1)


class CancelAllOrdersRequest(BaseModel):
    address: str = Field(min_length=1)
    market: Optional[str] = None
    asset_id: Optional[str] = None


@dataclass(frozen=True)
class EventQuery:
    limit: Optional[int] = None
    offset: Optional[int] = None
    active: Optional[bool] = None
    closed: Optional[bool] = None
    archived: Optional[bool] = None
    ascending: Optional[bool] = None
    tag_id: Optional[str] = None


@dataclass(frozen=True)
class MarketQuery:
    limit: Optional[int] = None
    offset: Optional[int] = None
    active: Optional[bool] = None
    closed: Optional[bool] = None
    archived: Optional[bool] = None
    tag: Optional[str] = None


@dataclass(frozen=True)
class CommentsQuery:
    limit: Optional[int] = None
    offset: Optional[int] = None
    order: Optional[str] = None
    ascending: Optional[bool] = None
    parent_entity_type: Optional[str] = None
    parent_entity_id: Optional[int] = None
    get_positions: Optional[bool] = None
    holders_only: Optional[bool] = None
