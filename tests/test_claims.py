import pytest

from conftest import NOW, listing_doc
from foodflow.core.errors import Conflict, InvalidReference, NotFound, ValidationError
from foodflow.services.claims import attempt_claim

pytestmark = pytest.mark.anyio


async def test_missing_listing_is_not_found(repo, recipient):
    with pytest.raises(NotFound):
        await attempt_claim(repo, "does-not-exist", recipient.id, now=NOW)


async def test_quantity_defaults_to_listing_quantity(repo, donor, recipient):
    listing = await repo.create_listing(listing_doc(donor.id, quantity=5))

    claim = await attempt_claim(repo, listing.id, recipient.id, now=NOW)

    assert claim.requested_quantity == 5
    assert claim.status == "pending"
    assert claim.listing_id == listing.id
    assert claim.claimant_id == recipient.id


async def test_claim_flips_listing_to_claimed(repo, donor, recipient):
    listing = await repo.create_listing(listing_doc(donor.id))

    await attempt_claim(repo, listing.id, recipient.id, requested_quantity=2, message="pickup at 5", now=NOW)

    stored = await repo.get_listing(listing.id)
    assert stored.status == "claimed"
    assert stored.claimed_by == recipient.id
    assert stored.claimed_at == NOW


async def test_already_claimed_listing_conflicts(repo, donor, recipient):
    other = await repo.create_user("Food Bank", None, "recipient")
    listing = await repo.create_listing(listing_doc(donor.id))
    await attempt_claim(repo, listing.id, other.id, now=NOW)

    with pytest.raises(Conflict):
        await attempt_claim(repo, listing.id, recipient.id, now=NOW)


async def test_same_claimant_twice_conflicts(repo, donor, recipient):
    listing = await repo.create_listing(listing_doc(donor.id))
    await attempt_claim(repo, listing.id, recipient.id, now=NOW)

    with pytest.raises(Conflict):
        await attempt_claim(repo, listing.id, recipient.id, now=NOW)
    assert len(await repo.list_claims(recipient.id)) == 1


async def test_prior_claim_record_blocks_claimant(repo, donor, recipient):
    listing = await repo.create_listing(listing_doc(donor.id))
    await repo.insert_claim({
        "listing_id": listing.id, "claimant_id": recipient.id,
        "requested_quantity": 1, "message": None, "status": "pending", "created_at": NOW,
    })

    with pytest.raises(Conflict, match="Already claimed"):
        await attempt_claim(repo, listing.id, recipient.id, now=NOW)
    assert (await repo.get_listing(listing.id)).status == "available"


async def test_expired_listing_conflicts(repo, donor, recipient):
    listing = await repo.create_listing(listing_doc(donor.id, expiry_time=NOW))

    with pytest.raises(Conflict, match="expired"):
        await attempt_claim(repo, listing.id, recipient.id, now=NOW)


async def test_unknown_claimant_is_invalid_reference(repo, donor):
    listing = await repo.create_listing(listing_doc(donor.id))

    with pytest.raises(InvalidReference):
        await attempt_claim(repo, listing.id, "ghost", now=NOW)
    assert (await repo.get_listing(listing.id)).status == "available"


@pytest.mark.parametrize("qty", [0, -1, 6])
async def test_out_of_range_quantity_is_rejected(repo, donor, recipient, qty):
    listing = await repo.create_listing(listing_doc(donor.id, quantity=5))

    with pytest.raises(ValidationError):
        await attempt_claim(repo, listing.id, recipient.id, requested_quantity=qty, now=NOW)
    assert (await repo.get_listing(listing.id)).status == "available"
    assert await repo.count_claims() == 0


async def test_status_never_reverts(repo, donor, recipient):
    listing = await repo.create_listing(listing_doc(donor.id))

    assert await repo.mark_claimed(listing.id, recipient.id, NOW) is True
    assert await repo.mark_claimed(listing.id, donor.id, NOW) is False
    stored = await repo.get_listing(listing.id)
    assert stored.status == "claimed"
    assert stored.claimed_by == recipient.id
