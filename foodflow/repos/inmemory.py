# foodflow/repos/inmemory.py
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from ..core.errors import Conflict
from ..schemas import Claim, Listing, User
from .base import ListingRepo


def _id() -> str:
    return uuid.uuid4().hex


def _newest_first(docs) -> List[dict]:
    # reversed() first so equal timestamps keep newest-inserted on top
    return sorted(reversed(list(docs)), key=lambda d: d["created_at"], reverse=True)


class InMemoryRepo(ListingRepo):
    """Dict-backed store. Nothing here awaits, so each call runs to completion."""

    def __init__(self):
        self.users: Dict[str, dict] = {}
        self.listings: Dict[str, dict] = {}
        self.claims: Dict[str, dict] = {}

    # Users
    async def create_user(self, name: str, email: Optional[str], role: str,
                          user_id: Optional[str] = None) -> User:
        uid = user_id or _id()
        doc = {"id": uid, "name": name, "email": email, "role": role}
        self.users[uid] = doc
        return User(**doc)

    async def get_user(self, user_id: str) -> Optional[User]:
        doc = self.users.get(user_id)
        return User(**doc) if doc else None

    # Listings
    async def create_listing(self, doc: Dict) -> Listing:
        doc = {**doc, "id": _id()}
        self.listings[doc["id"]] = doc
        return Listing(**doc)

    async def get_listing(self, listing_id: str) -> Optional[Listing]:
        doc = self.listings.get(listing_id)
        return Listing(**doc) if doc else None

    async def list_listings(self, owner_id: Optional[str] = None) -> List[Listing]:
        docs = [d for d in self.listings.values() if owner_id is None or d["owner_id"] == owner_id]
        return [Listing(**d) for d in _newest_first(docs)]

    async def find_available(self, now: datetime) -> List[Listing]:
        docs = [d for d in self.listings.values()
                if d["status"] == "available" and d["expiry_time"] > now]
        return [Listing(**d) for d in _newest_first(docs)]

    async def mark_claimed(self, listing_id: str, claimant_id: str, at: datetime) -> bool:
        doc = self.listings.get(listing_id)
        if doc is None or doc["status"] != "available":
            return False
        doc.update(status="claimed", claimed_by=claimant_id, claimed_at=at)
        return True

    async def listing_counts(self, now: datetime) -> Dict[str, int]:
        vals = list(self.listings.values())
        claimed = [d for d in vals if d["status"] == "claimed"]
        open_ = [d for d in vals if d["status"] == "available"]
        return {
            "total": len(vals),
            "claimed": len(claimed),
            "available": sum(1 for d in open_ if d["expiry_time"] > now),
            "expired": sum(1 for d in open_ if d["expiry_time"] <= now),
            "quantity_claimed": sum(int(c["requested_quantity"]) for c in self.claims.values()),
        }

    # Claims
    async def find_claim(self, listing_id: str, claimant_id: str) -> Optional[Claim]:
        for c in self.claims.values():
            if c["listing_id"] == listing_id and c["claimant_id"] == claimant_id:
                return Claim(**c)
        return None

    async def insert_claim(self, doc: Dict) -> Claim:
        if await self.find_claim(doc["listing_id"], doc["claimant_id"]):
            raise Conflict("Already claimed this donation")
        doc = {**doc, "id": _id()}
        self.claims[doc["id"]] = doc
        return Claim(**doc)

    async def list_claims(self, claimant_id: Optional[str] = None) -> List[Claim]:
        docs = [c for c in self.claims.values() if claimant_id is None or c["claimant_id"] == claimant_id]
        return [Claim(**c) for c in _newest_first(docs)]

    async def count_claims(self) -> int:
        return len(self.claims)
