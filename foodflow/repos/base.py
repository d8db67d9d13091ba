# foodflow/repos/base.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from ..schemas import Claim, Listing, User


class ListingRepo(ABC):
    """
    Storage adapter behind the claim processor and the query surface.

    Adapters return schema models, never raw documents. ``mark_claimed``
    is the only call that changes a listing's status and must be atomic:
    it flips ``available`` -> ``claimed`` and reports whether it did.
    """

    # Users
    @abstractmethod
    async def create_user(self, name: str, email: Optional[str], role: str,
                          user_id: Optional[str] = None) -> User: ...

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]: ...

    # Listings
    @abstractmethod
    async def create_listing(self, doc: Dict) -> Listing: ...

    @abstractmethod
    async def get_listing(self, listing_id: str) -> Optional[Listing]: ...

    @abstractmethod
    async def list_listings(self, owner_id: Optional[str] = None) -> List[Listing]:
        """All listings (optionally one owner's), newest first."""

    @abstractmethod
    async def find_available(self, now: datetime) -> List[Listing]:
        """Listings with status available and expiry after ``now``, newest first."""

    @abstractmethod
    async def mark_claimed(self, listing_id: str, claimant_id: str, at: datetime) -> bool: ...

    @abstractmethod
    async def listing_counts(self, now: datetime) -> Dict[str, int]:
        """Keys: total, available, claimed, expired, quantity_claimed (sum of claims' requested_quantity)."""

    # Claims
    @abstractmethod
    async def find_claim(self, listing_id: str, claimant_id: str) -> Optional[Claim]: ...

    @abstractmethod
    async def insert_claim(self, doc: Dict) -> Claim:
        """Raises Conflict if the claimant already holds a claim on the listing."""

    @abstractmethod
    async def list_claims(self, claimant_id: Optional[str] = None) -> List[Claim]: ...

    @abstractmethod
    async def count_claims(self) -> int: ...

    # Lifecycle
    async def ensure_indexes(self) -> None:
        return None

    async def close(self) -> None:
        return None
