# foodflow/schemas.py
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

ListingStatus = Literal["available", "claimed"]
ClaimStatus = Literal["pending"]
Role = Literal["donor", "recipient"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(v: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


# --------------------------
# Shared Submodels
# --------------------------
class LatLng(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


# --------------------------
# Users
# --------------------------
class User(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    role: Role = "recipient"


# --------------------------
# Listings (exposed as "donations")
# --------------------------
class ListingIn(BaseModel):
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    quantity: int = Field(..., ge=1)
    unit: Optional[str] = None
    expiry_time: datetime
    pickup_address: Optional[str] = None
    pickup_location: Optional[LatLng] = None
    photo_url: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title is required")
        return v

    @field_validator("expiry_time")
    @classmethod
    def _expiry_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class Listing(BaseModel):
    id: str
    owner_id: str
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    quantity: int
    unit: Optional[str] = None
    expiry_time: datetime
    status: ListingStatus = "available"
    pickup_address: Optional[str] = None
    pickup_location: Optional[LatLng] = None
    photo_url: Optional[str] = None
    claimed_by: Optional[str] = None
    claimed_at: Optional[datetime] = None
    created_at: datetime

    @field_validator("expiry_time", "created_at", "claimed_at")
    @classmethod
    def _stored_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None


# --------------------------
# Claims
# --------------------------
class ClaimIn(BaseModel):
    requested_quantity: Optional[int] = None
    message: Optional[str] = Field(None, max_length=500)


class Claim(BaseModel):
    id: str
    listing_id: str
    claimant_id: str
    requested_quantity: int
    message: Optional[str] = None
    status: ClaimStatus = "pending"
    created_at: datetime


# --------------------------
# Stats
# --------------------------
class ListingStats(BaseModel):
    total: int
    available: int
    claimed: int
    expired: int
    claims: int
    quantity_claimed: int
