import asyncio

import pytest

from conftest import NOW, listing_doc
from foodflow.core.errors import Conflict
from foodflow.repos.inmemory import InMemoryRepo
from foodflow.schemas import Claim
from foodflow.services.claims import attempt_claim

pytestmark = pytest.mark.anyio


class InterleavingRepo(InMemoryRepo):
    """Yields to the event loop after every read so concurrent claims interleave."""

    def __init__(self):
        super().__init__()
        self.user_lookups = 0

    async def get_listing(self, listing_id):
        listing = await super().get_listing(listing_id)
        await asyncio.sleep(0)
        return listing

    async def get_user(self, user_id):
        self.user_lookups += 1
        user = await super().get_user(user_id)
        await asyncio.sleep(0)
        return user

    async def find_claim(self, listing_id, claimant_id):
        claim = await super().find_claim(listing_id, claimant_id)
        await asyncio.sleep(0)
        return claim


async def test_concurrent_claims_accept_exactly_one():
    n = 10
    repo = InterleavingRepo()
    donor = await repo.create_user("Donor", None, "donor")
    claimants = [await repo.create_user(f"R{i}", None, "recipient") for i in range(n)]
    listing = await repo.create_listing(listing_doc(donor.id))

    results = await asyncio.gather(
        *(attempt_claim(repo, listing.id, c.id, now=NOW) for c in claimants),
        return_exceptions=True,
    )

    # every caller saw the listing as available; the status check alone would
    # have let all of them through
    assert repo.user_lookups == n

    won = [r for r in results if isinstance(r, Claim)]
    lost = [r for r in results if isinstance(r, Conflict)]
    assert len(won) == 1
    assert len(lost) == n - 1
    assert await repo.count_claims() == 1

    stored = await repo.get_listing(listing.id)
    assert stored.status == "claimed"
    assert stored.claimed_by == won[0].claimant_id
