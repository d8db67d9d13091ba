# foodflow/services/demo.py
from datetime import datetime, timedelta
from typing import Dict, Optional

from ..repos.base import ListingRepo
from ..schemas import LatLng, ListingIn, utcnow
from .listings import create_listing

DEMO_LISTINGS = [
    {"title": "Day-old sourdough", "category": "Baked", "quantity": 12, "unit": "loaves",
     "hours": 10, "pickup_address": "14 Mill Lane", "pickup_location": {"lat": 14.600, "lng": 120.984}},
    {"title": "Vegetable curry trays", "category": "Veg", "quantity": 5, "unit": "trays",
     "hours": 4, "pickup_address": "3 Harbour Rd", "pickup_location": {"lat": 14.612, "lng": 121.003}},
    {"title": "Mixed fruit crates", "category": "Fruit", "quantity": 8, "unit": "crates",
     "hours": 30, "pickup_address": None, "pickup_location": None},
]


async def seed_demo(repo: ListingRepo, now: Optional[datetime] = None) -> Dict:
    """Create one donor, one recipient and a few listings owned by the donor."""
    now = now or utcnow()
    donor = await repo.create_user("Corner Bakery", "donor@foodflow.local", "donor")
    recipient = await repo.create_user("Eastside Shelter", "shelter@foodflow.local", "recipient")

    listings = []
    for i, item in enumerate(DEMO_LISTINGS):
        loc = item["pickup_location"]
        payload = ListingIn(
            title=item["title"],
            category=item["category"],
            quantity=item["quantity"],
            unit=item["unit"],
            expiry_time=now + timedelta(hours=item["hours"]),
            pickup_address=item["pickup_address"],
            pickup_location=LatLng(**loc) if loc else None,
        )
        # stagger creation so newest-first ordering is deterministic
        listings.append(await create_listing(repo, donor.id, payload, now=now + timedelta(seconds=i)))

    return {"donor": donor, "recipient": recipient, "listings": listings}
