"""
tests.test_creators

Creator registry: validation, partial updates, roster listing and cascade delete.
"""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import OperationalError

from agency_core.db.repositories.creators import CreatorRepo
from agency_core.errors import NotFound, StorageError, ValidationError
from agency_core.services.creators import CreatorRegistry
from agency_core.services.deals import DealLifecycleManager

SARAH = {
    "name": "Sarah Chen",
    "email": "sarah@creatorsmail.com",
    "niche": "Lifestyle",
    "social_handles": {"instagram": {"handle": "@sarahchen"}},
    "base_rate": 2500,
}


@pytest.mark.asyncio
async def test_create_and_get(session, make_user, make_agency) -> None:
    owner = await make_user("owner@acmetalent.com")
    agency = await make_agency(owner)
    registry = CreatorRegistry(session=session)

    creator = await registry.create(agency, SARAH)
    assert creator.agency_id == agency.id
    assert creator.social_handles == {"instagram": {"handle": "@sarahchen", "token": None}}

    fetched = await registry.get(owner, creator.id)
    assert fetched.name == "Sarah Chen"
    assert fetched.base_rate == 2500


@pytest.mark.parametrize(
    "patch",
    [
        {"name": "S"},
        {"niche": "x"},
        {"email": "not-an-email"},
        {"base_rate": 0},
        {"base_rate": -10},
        {"agency_id": str(uuid.uuid4())},
        {"social_handles": {" ": {"handle": "@x"}}},
    ],
)
@pytest.mark.asyncio
async def test_create_rejects_invalid_fields(session, make_user, make_agency, patch) -> None:
    agency = await make_agency(await make_user("owner@acmetalent.com"))
    with pytest.raises(ValidationError):
        await CreatorRegistry(session=session).create(agency, {**SARAH, **patch})


@pytest.mark.asyncio
async def test_partial_update(session, make_user, make_agency) -> None:
    owner = await make_user("owner@acmetalent.com")
    agency = await make_agency(owner)
    agency_id = agency.id
    registry = CreatorRegistry(session=session)
    creator_id = (await registry.create(agency, SARAH)).id

    updated = await registry.update(owner, creator_id, {"niche": "Fitness"})
    assert updated.niche == "Fitness"
    assert updated.name == "Sarah Chen"
    assert updated.email == "sarah@creatorsmail.com"

    for bad in ({"agency_id": str(uuid.uuid4())}, {"name": None}):
        with pytest.raises(ValidationError):
            await registry.update(owner, creator_id, bad)

    reread = await registry.get(owner, creator_id)
    assert reread.agency_id == agency_id
    assert reread.name == "Sarah Chen"


@pytest.mark.asyncio
async def test_list_is_newest_first_with_deal_counts(session, make_user, make_agency) -> None:
    owner = await make_user("owner@acmetalent.com")
    agency = await make_agency(owner)
    registry = CreatorRegistry(session=session)
    first = await registry.create(agency, {"name": "First Creator", "niche": "Tech"})
    second = await registry.create(agency, {"name": "Second Creator", "niche": "Food"})
    await DealLifecycleManager(session=session).create(agency, first.id, {"brand": "Nike"})

    rows = await registry.list_creators(owner)
    assert [(c.id, n) for c, n in rows] == [(second.id, 0), (first.id, 1)]


@pytest.mark.asyncio
async def test_delete_cascades_to_deals(session, make_user, make_agency) -> None:
    owner = await make_user("owner@acmetalent.com")
    agency = await make_agency(owner)
    registry = CreatorRegistry(session=session)
    deals = DealLifecycleManager(session=session)

    creator = await registry.create(agency, SARAH)
    other = await registry.create(agency, {"name": "Other Creator", "niche": "Gaming"})
    d1 = await deals.create(agency, creator.id, {"brand": "Nike", "amount": 5000})
    d2 = await deals.create(agency, creator.id, {"brand": "Adidas"})
    kept = await deals.create(agency, other.id, {"brand": "Puma"})
    await deals.transition(owner, d2.id, "CANCELLED")
    creator_id, gone, kept_id = creator.id, (d1.id, d2.id), kept.id

    removed = await registry.delete(owner, creator_id)
    assert removed == 2

    with pytest.raises(NotFound):
        await registry.get(owner, creator_id)
    for deal_id in gone:
        with pytest.raises(NotFound):
            await deals.get(owner, deal_id)
    assert [d.id for d in await deals.list_deals(owner)] == [kept_id]


@pytest.mark.asyncio
async def test_delete_is_atomic(session, make_user, make_agency, monkeypatch) -> None:
    owner = await make_user("owner@acmetalent.com")
    agency = await make_agency(owner)
    registry = CreatorRegistry(session=session)
    deals = DealLifecycleManager(session=session)
    creator_id = (await registry.create(agency, SARAH)).id
    await deals.create(agency, creator_id, {"brand": "Nike"})
    await deals.create(agency, creator_id, {"brand": "Adidas"})

    async def _fail(self, creator):
        raise OperationalError("DELETE FROM creators", {}, Exception("disk I/O error"))

    monkeypatch.setattr(CreatorRepo, "delete", _fail)
    with pytest.raises(StorageError):
        await registry.delete(owner, creator_id)
    monkeypatch.undo()

    assert (await registry.get(owner, creator_id)).id == creator_id
    assert await registry.deal_count(owner, creator_id) == 2
