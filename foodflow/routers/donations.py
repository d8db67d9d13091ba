# foodflow/routers/donations.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.errors import InvalidReference, ValidationError
from ..core.security import get_user_id
from ..deps import get_repo
from ..schemas import ClaimIn, LatLng, ListingIn
from ..services.claims import attempt_claim
from ..services.listings import create_listing, get_listing, list_available, list_owner_listings

router = APIRouter(prefix="/donations", tags=["donations"])


@router.get("")
async def get_donations(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius_km: Optional[float] = Query(None, gt=0),
    repo=Depends(get_repo),
):
    near = None
    given = [v is not None for v in (lat, lng, radius_km)]
    if any(given):
        if not all(given):
            raise ValidationError("lat, lng and radius_km must be given together")
        near = LatLng(lat=lat, lng=lng)

    items = await list_available(repo, near=near, radius_km=radius_km)
    return {"success": True, "data": items, "count": len(items)}


@router.post("", status_code=201)
async def post_donation(body: ListingIn, user_id: str = Depends(get_user_id), repo=Depends(get_repo)):
    if await repo.get_user(user_id) is None:
        raise InvalidReference("Donor not found")
    listing = await create_listing(repo, user_id, body)
    return {"success": True, "data": listing, "message": "Donation created successfully"}


@router.get("/mine")
async def my_donations(user_id: str = Depends(get_user_id), repo=Depends(get_repo)):
    items = await list_owner_listings(repo, user_id)
    return {"success": True, "data": items, "count": len(items)}


@router.get("/{listing_id}")
async def get_donation(listing_id: str, repo=Depends(get_repo)):
    return {"success": True, "data": await get_listing(repo, listing_id)}


@router.post("/{listing_id}/claim", status_code=201)
async def claim_donation(
    listing_id: str,
    body: Optional[ClaimIn] = None,
    user_id: str = Depends(get_user_id),
    repo=Depends(get_repo),
):
    body = body or ClaimIn()
    claim = await attempt_claim(
        repo, listing_id, user_id,
        requested_quantity=body.requested_quantity,
        message=body.message,
    )
    return {"success": True, "data": claim, "message": "Claim created successfully"}
