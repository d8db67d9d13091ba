import asyncio
import os
import uuid

import pytest

from conftest import NOW, listing_doc
from foodflow.core.errors import Conflict
from foodflow.schemas import Claim
from foodflow.services.claims import attempt_claim
from foodflow.services.stats import listing_stats

MONGO_URI = os.getenv("FOODFLOW_TEST_MONGO_URI")

pytestmark = [
    pytest.mark.anyio,
    pytest.mark.skipif(not MONGO_URI, reason="FOODFLOW_TEST_MONGO_URI not set"),
]


@pytest.fixture
async def mongo_repo():
    from foodflow.repos.mongo import MongoRepo

    db_name = f"foodflow_test_{uuid.uuid4().hex[:8]}"
    repo = MongoRepo.from_uri(MONGO_URI, db_name)
    await repo.ensure_indexes()
    yield repo
    await repo.client.drop_database(db_name)
    await repo.close()


async def test_available_and_claim(mongo_repo):
    donor = await mongo_repo.create_user("Donor", None, "donor")
    recipient = await mongo_repo.create_user("Shelter", None, "recipient", user_id="R1")
    listing = await mongo_repo.create_listing(listing_doc(donor.id, quantity=5))

    assert [l.id for l in await mongo_repo.find_available(NOW)] == [listing.id]

    claim = await attempt_claim(mongo_repo, listing.id, recipient.id, now=NOW)

    assert claim.requested_quantity == 5
    assert await mongo_repo.find_available(NOW) == []
    assert (await mongo_repo.get_listing(listing.id)).claimed_by == "R1"
    assert await mongo_repo.get_listing("not-an-object-id") is None


async def test_unique_claim_index(mongo_repo):
    doc = {"listing_id": "L1", "claimant_id": "R1", "requested_quantity": 1,
           "message": None, "status": "pending", "created_at": NOW}
    await mongo_repo.insert_claim(doc)
    with pytest.raises(Conflict):
        await mongo_repo.insert_claim(doc)


async def test_concurrent_claims_accept_exactly_one(mongo_repo):
    donor = await mongo_repo.create_user("Donor", None, "donor")
    claimants = [await mongo_repo.create_user(f"R{i}", None, "recipient") for i in range(8)]
    listing = await mongo_repo.create_listing(listing_doc(donor.id))

    results = await asyncio.gather(
        *(attempt_claim(mongo_repo, listing.id, c.id, now=NOW) for c in claimants),
        return_exceptions=True,
    )

    assert sum(isinstance(r, Claim) for r in results) == 1
    assert sum(isinstance(r, Conflict) for r in results) == len(claimants) - 1

    stats = await listing_stats(mongo_repo, now=NOW)
    assert stats.claimed == 1
    assert stats.claims == 1
