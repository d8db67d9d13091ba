# foodflow/services/listings.py
import logging
from datetime import datetime
from typing import List, Optional

from ..core.errors import NotFound, ValidationError
from ..repos.base import ListingRepo
from ..schemas import Claim, LatLng, Listing, ListingIn, utcnow
from .geo import haversine

log = logging.getLogger(__name__)


async def create_listing(repo: ListingRepo, owner_id: str, payload: ListingIn,
                         now: Optional[datetime] = None) -> Listing:
    now = now or utcnow()
    if payload.expiry_time <= now:
        raise ValidationError("expiry_time must be in the future")

    doc = payload.model_dump()
    doc.update({
        "owner_id": owner_id,
        "status": "available",
        "claimed_by": None,
        "claimed_at": None,
        "created_at": now,
    })
    listing = await repo.create_listing(doc)
    log.info("listing %s created by %s (qty=%d)", listing.id, owner_id, listing.quantity)
    return listing


async def get_listing(repo: ListingRepo, listing_id: str) -> Listing:
    listing = await repo.get_listing(listing_id)
    if listing is None:
        raise NotFound("Donation not found")
    return listing


async def list_available(repo: ListingRepo, now: Optional[datetime] = None,
                         near: Optional[LatLng] = None,
                         radius_km: Optional[float] = None) -> List[Listing]:
    """
    Available, unexpired listings, newest first. With ``near`` and
    ``radius_km`` only listings whose pickup point lies inside the radius
    are kept; listings without a pickup point are dropped.
    """
    items = await repo.find_available(now or utcnow())
    if near is None or radius_km is None:
        return items

    origin = near.model_dump()
    return [
        listing for listing in items
        if listing.pickup_location is not None
        and haversine(origin, listing.pickup_location.model_dump()) <= radius_km
    ]


async def list_owner_listings(repo: ListingRepo, owner_id: str) -> List[Listing]:
    return await repo.list_listings(owner_id=owner_id)


async def list_claims_for(repo: ListingRepo, claimant_id: str) -> List[Claim]:
    return await repo.list_claims(claimant_id=claimant_id)
