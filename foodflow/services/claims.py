# foodflow/services/claims.py
"""
Claim processor.

``attempt_claim`` runs the cheap checks first (listing exists, still
available and unexpired, claimant exists, no earlier claim by the same
claimant, sane quantity) and then asks the store to flip the listing from
``available`` to ``claimed`` in one conditional update.  That update is
the serialization point: the checks before it can all pass for several
concurrent callers, but only one of them gets ``True`` back from
``mark_claimed``.  Everyone else gets ``Conflict``.
"""
import logging
from datetime import datetime
from typing import Optional

from ..core.errors import Conflict, InvalidReference, NotFound, ValidationError
from ..repos.base import ListingRepo
from ..schemas import Claim, utcnow

log = logging.getLogger(__name__)


async def attempt_claim(
    repo: ListingRepo,
    listing_id: str,
    claimant_id: str,
    requested_quantity: Optional[int] = None,
    message: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Claim:
    now = now or utcnow()

    listing = await repo.get_listing(listing_id)
    if listing is None:
        raise NotFound("Donation not found")
    if listing.status != "available":
        log.info("claim on %s by %s rejected: status=%s", listing_id, claimant_id, listing.status)
        raise Conflict("Donation no longer available")
    if listing.expiry_time <= now:
        log.info("claim on %s by %s rejected: expired", listing_id, claimant_id)
        raise Conflict("Donation has expired")

    claimant = await repo.get_user(claimant_id)
    if claimant is None:
        raise InvalidReference("Claimer not found")

    if await repo.find_claim(listing.id, claimant_id) is not None:
        log.info("claim on %s by %s rejected: duplicate", listing_id, claimant_id)
        raise Conflict("Already claimed this donation")

    qty = listing.quantity if requested_quantity is None else requested_quantity
    if not 1 <= qty <= listing.quantity:
        raise ValidationError(f"requested_quantity must be between 1 and {listing.quantity}")

    if not await repo.mark_claimed(listing.id, claimant_id, now):
        log.info("claim on %s by %s lost the race", listing_id, claimant_id)
        raise Conflict("Donation no longer available")

    claim = await repo.insert_claim({
        "listing_id": listing.id,
        "claimant_id": claimant_id,
        "requested_quantity": qty,
        "message": message or None,
        "status": "pending",
        "created_at": now,
    })
    log.info("claim %s accepted: listing=%s claimant=%s qty=%d", claim.id, listing.id, claimant_id, qty)
    return claim
