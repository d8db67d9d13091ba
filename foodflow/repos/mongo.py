# foodflow/repos/mongo.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from ..core.errors import Conflict
from ..schemas import Claim, Listing, User
from .base import ListingRepo


def _maybe_oid(x: Any) -> Optional[ObjectId]:
    if isinstance(x, ObjectId):
        return x
    if isinstance(x, str) and ObjectId.is_valid(x):
        return ObjectId(x)
    return None


def _id_filter(any_id: str) -> dict:
    """
    Match by ObjectId or by a plain string _id (seeded users use strings).
    """
    oid = _maybe_oid(any_id)
    if oid:
        return {"$or": [{"_id": oid}, {"_id": any_id}]}
    return {"_id": any_id}


def _out(doc: dict) -> dict:
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return doc


class MongoRepo(ListingRepo):
    def __init__(self, client: AsyncIOMotorClient, db_name: str):
        self.client = client
        self.db: AsyncIOMotorDatabase = client[db_name]

    @classmethod
    def from_uri(cls, uri: str, db_name: str) -> "MongoRepo":
        # tz_aware so expiry comparisons stay UTC-aware on the way back out
        return cls(AsyncIOMotorClient(uri, tz_aware=True), db_name)

    @property
    def users(self):
        return self.db["users"]

    @property
    def donations(self):
        return self.db["donations"]

    @property
    def claims(self):
        return self.db["claims"]

    # Users
    async def create_user(self, name: str, email: Optional[str], role: str,
                          user_id: Optional[str] = None) -> User:
        doc = {"name": name, "email": email, "role": role}
        if user_id:
            doc["_id"] = user_id
        res = await self.users.insert_one(doc)
        return User(id=str(res.inserted_id), name=name, email=email, role=role)

    async def get_user(self, user_id: str) -> Optional[User]:
        doc = await self.users.find_one(_id_filter(user_id))
        return User(**_out(doc)) if doc else None

    # Listings
    async def create_listing(self, doc: Dict) -> Listing:
        doc = dict(doc)
        res = await self.donations.insert_one(doc)
        doc["_id"] = res.inserted_id
        return Listing(**_out(doc))

    async def get_listing(self, listing_id: str) -> Optional[Listing]:
        oid = _maybe_oid(listing_id)
        if oid is None:
            return None
        doc = await self.donations.find_one({"_id": oid})
        return Listing(**_out(doc)) if doc else None

    async def list_listings(self, owner_id: Optional[str] = None) -> List[Listing]:
        q = {"owner_id": owner_id} if owner_id is not None else {}
        cur = self.donations.find(q).sort("created_at", DESCENDING)
        return [Listing(**_out(d)) async for d in cur]

    async def find_available(self, now: datetime) -> List[Listing]:
        cur = self.donations.find({
            "status": "available",
            "expiry_time": {"$gt": now},
        }).sort("created_at", DESCENDING)
        return [Listing(**_out(d)) async for d in cur]

    async def mark_claimed(self, listing_id: str, claimant_id: str, at: datetime) -> bool:
        oid = _maybe_oid(listing_id)
        if oid is None:
            return False
        res = await self.donations.update_one(
            {"_id": oid, "status": "available"},
            {"$set": {"status": "claimed", "claimed_by": claimant_id, "claimed_at": at}},
        )
        return res.modified_count == 1

    async def listing_counts(self, now: datetime) -> Dict[str, int]:
        c = self.donations
        qty = 0
        agg = self.claims.aggregate([
            {"$group": {"_id": None, "qty": {"$sum": "$requested_quantity"}}},
        ])
        async for row in agg:
            qty = int(row["qty"])
        return {
            "total": await c.count_documents({}),
            "claimed": await c.count_documents({"status": "claimed"}),
            "available": await c.count_documents({"status": "available", "expiry_time": {"$gt": now}}),
            "expired": await c.count_documents({"status": "available", "expiry_time": {"$lte": now}}),
            "quantity_claimed": qty,
        }

    # Claims
    async def find_claim(self, listing_id: str, claimant_id: str) -> Optional[Claim]:
        doc = await self.claims.find_one({"listing_id": listing_id, "claimant_id": claimant_id})
        return Claim(**_out(doc)) if doc else None

    async def insert_claim(self, doc: Dict) -> Claim:
        doc = dict(doc)
        try:
            res = await self.claims.insert_one(doc)
        except DuplicateKeyError:
            raise Conflict("Already claimed this donation")
        doc["_id"] = res.inserted_id
        return Claim(**_out(doc))

    async def list_claims(self, claimant_id: Optional[str] = None) -> List[Claim]:
        q = {"claimant_id": claimant_id} if claimant_id is not None else {}
        cur = self.claims.find(q).sort("created_at", DESCENDING)
        return [Claim(**_out(d)) async for d in cur]

    async def count_claims(self) -> int:
        return await self.claims.count_documents({})

    # Lifecycle
    async def ensure_indexes(self) -> None:
        async def ensure_index(col, keys, name: str, **kwargs):
            existing = [ix["name"] async for ix in col.list_indexes()]
            if name in existing:
                return
            await col.create_index(keys, name=name, **kwargs)

        await ensure_index(self.donations, [("status", ASCENDING)], "status_1")
        await ensure_index(self.donations, [("expiry_time", ASCENDING)], "expiry_time_1")
        await ensure_index(self.donations, [("created_at", DESCENDING)], "created_at_-1")
        await ensure_index(self.donations, [("owner_id", ASCENDING)], "owner_id_1")
        await ensure_index(self.claims, [("listing_id", ASCENDING), ("claimant_id", ASCENDING)],
                           "listing_id_1_claimant_id_1", unique=True)
        await ensure_index(self.claims, [("claimant_id", ASCENDING)], "claimant_id_1")

    async def close(self) -> None:
        self.client.close()
