"""
tests.test_deals

Deal lifecycle manager: creation rules, transitions, updates and the summary.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
import pytest_asyncio

from agency_core.domain.lifecycle import DealStatus
from agency_core.errors import Forbidden, InvalidTransition, ValidationError
from agency_core.services.creators import CreatorRegistry
from agency_core.services.deals import DealLifecycleManager


@pytest_asyncio.fixture
async def roster(session, make_user, make_agency):
    owner = await make_user("owner@acmetalent.com")
    agency = await make_agency(owner)
    creator = await CreatorRegistry(session=session).create(
        agency, {"name": "Sarah Chen", "niche": "Lifestyle"}
    )
    return owner, agency, creator


@pytest.mark.asyncio
async def test_create_starts_pending_with_defaults(session, roster) -> None:
    _, agency, creator = roster
    deal = await DealLifecycleManager(session=session).create(
        agency,
        creator.id,
        {
            "brand": "Nike",
            "amount": 5000,
            "currency": "eur",
            "contact_email": "brand@nike.com",
            "contract_url": "https://contracts.acmetalent.com/nike.pdf",
            "next_action_at": datetime(2026, 11, 1, 9, 0, tzinfo=UTC),
        },
    )
    assert deal.status is DealStatus.pending
    assert deal.currency == "EUR"
    assert deal.creator_id == creator.id
    assert deal.contract_url == "https://contracts.acmetalent.com/nike.pdf"
    assert deal.next_action_at == datetime(2026, 11, 1, 9, 0)


@pytest.mark.asyncio
async def test_create_defaults_currency_and_rejects_status(session, roster) -> None:
    _, agency, creator = roster
    manager = DealLifecycleManager(session=session)
    deal = await manager.create(agency, creator.id, {"brand": "Nike"})
    assert deal.currency == "USD"

    with pytest.raises(ValidationError):
        await manager.create(agency, creator.id, {"brand": "Nike", "status": "ACTIVE"})


@pytest.mark.parametrize(
    "fields",
    [
        {"brand": "N"},
        {"brand": "Nike", "amount": 0},
        {"brand": "Nike", "amount": -5},
        {"brand": "Nike", "currency": "DOLLARS"},
        {"brand": "Nike", "contact_email": "nope"},
        {"brand": "Nike", "contract_url": "ftp://contracts.acmetalent.com/x"},
        {"brand": "Nike", "creator_id": "00000000-0000-0000-0000-000000000000"},
    ],
)
@pytest.mark.asyncio
async def test_create_validation(session, roster, fields) -> None:
    _, agency, creator = roster
    with pytest.raises(ValidationError):
        await DealLifecycleManager(session=session).create(agency, creator.id, fields)


@pytest.mark.asyncio
async def test_create_under_foreign_creator_is_forbidden(session, roster, make_user, make_agency) -> None:
    _, _, creator = roster
    rival = await make_agency(await make_user("bob@rivaltalent.com"), "Rival Talent")
    with pytest.raises(Forbidden):
        await DealLifecycleManager(session=session).create(rival, creator.id, {"brand": "Nike"})


@pytest.mark.asyncio
async def test_happy_path_to_completed(session, roster) -> None:
    owner, agency, creator = roster
    manager = DealLifecycleManager(session=session)
    deal = await manager.create(agency, creator.id, {"brand": "Nike", "amount": 5000})
    deal_id = deal.id

    for target in ("NEGOTIATING", "ACTIVE", "COMPLETED"):
        deal = await manager.transition(owner, deal_id, target)
        assert deal.status == target

    with pytest.raises(InvalidTransition):
        await manager.transition(owner, deal_id, "ACTIVE")
    assert (await manager.get(owner, deal_id)).status is DealStatus.completed


@pytest.mark.parametrize(
    "path,bad_target",
    [
        ([], "COMPLETED"),
        ([], "PENDING"),
        (["NEGOTIATING"], "PENDING"),
        (["NEGOTIATING"], "COMPLETED"),
        (["ACTIVE"], "NEGOTIATING"),
        (["ACTIVE"], "ACTIVE"),
        (["CANCELLED"], "PENDING"),
        (["ACTIVE", "COMPLETED"], "CANCELLED"),
    ],
)
@pytest.mark.asyncio
async def test_invalid_transition_leaves_status_unchanged(session, roster, path, bad_target) -> None:
    owner, agency, creator = roster
    manager = DealLifecycleManager(session=session)
    deal = await manager.create(agency, creator.id, {"brand": "Nike"})
    for step in path:
        deal = await manager.transition(owner, deal.id, step)
    before, deal_id = deal.status, deal.id

    with pytest.raises(InvalidTransition) as exc:
        await manager.transition(owner, deal_id, bad_target)
    assert exc.value.current == before.value

    assert (await manager.get(owner, deal_id)).status is before


@pytest.mark.asyncio
async def test_unknown_status_is_validation_error(session, roster) -> None:
    owner, agency, creator = roster
    manager = DealLifecycleManager(session=session)
    deal = await manager.create(agency, creator.id, {"brand": "Nike"})
    with pytest.raises(ValidationError):
        await manager.transition(owner, deal.id, "SIGNED")
    with pytest.raises(ValidationError):
        await manager.list_deals(owner, status="SIGNED")


@pytest.mark.asyncio
async def test_update_fields_in_any_state_and_status_through_graph(session, roster) -> None:
    owner, agency, creator = roster
    manager = DealLifecycleManager(session=session)
    deal = await manager.create(agency, creator.id, {"brand": "Nike", "amount": 5000})
    await manager.transition(owner, deal.id, "CANCELLED")

    deal = await manager.update(owner, deal.id, {"notes": "Lost to a competitor"})
    assert deal.notes == "Lost to a competitor"
    assert deal.amount == 5000

    # Same status is not a change.
    deal = await manager.update(owner, deal.id, {"status": "CANCELLED", "notes": "Closed"})
    assert deal.status is DealStatus.cancelled

    deal_id, creator_id = deal.id, creator.id
    with pytest.raises(InvalidTransition):
        await manager.update(owner, deal_id, {"status": "ACTIVE", "notes": "Revived"})
    reread = await manager.get(owner, deal_id)
    assert reread.status is DealStatus.cancelled
    assert reread.notes == "Closed"

    with pytest.raises(ValidationError):
        await manager.update(owner, deal_id, {"creator_id": str(creator_id)})


@pytest.mark.asyncio
async def test_update_status_follows_graph(session, roster) -> None:
    owner, agency, creator = roster
    manager = DealLifecycleManager(session=session)
    deal = await manager.create(agency, creator.id, {"brand": "Nike"})
    deal = await manager.update(owner, deal.id, {"status": "NEGOTIATING", "amount": 7500})
    assert deal.status is DealStatus.negotiating
    assert deal.amount == 7500


@pytest.mark.asyncio
async def test_list_filters_and_summary(session, roster) -> None:
    owner, agency, creator = roster
    other = await CreatorRegistry(session=session).create(
        agency, {"name": "Mark Lee", "niche": "Tech"}
    )
    manager = DealLifecycleManager(session=session)
    nike = await manager.create(agency, creator.id, {"brand": "Nike", "amount": 5000})
    adidas = await manager.create(agency, creator.id, {"brand": "Adidas", "amount": 1500})
    puma = await manager.create(agency, other.id, {"brand": "Puma"})
    await manager.transition(owner, nike.id, "ACTIVE")

    assert [d.id for d in await manager.list_deals(owner)] == [puma.id, adidas.id, nike.id]
    assert {d.id for d in await manager.list_deals(owner, creator_id=creator.id)} == {
        nike.id,
        adidas.id,
    }
    assert [d.id for d in await manager.list_deals(owner, status="ACTIVE")] == [nike.id]

    summary = await manager.summary(owner)
    assert summary.total == 3
    assert summary.total_value == 6500
    assert summary.by_status[DealStatus.pending] == 2
    assert summary.by_status[DealStatus.active] == 1
    assert summary.by_status[DealStatus.completed] == 0


@pytest.mark.asyncio
async def test_delete_from_any_state(session, roster) -> None:
    owner, agency, creator = roster
    manager = DealLifecycleManager(session=session)
    deal = await manager.create(agency, creator.id, {"brand": "Nike"})
    await manager.transition(owner, deal.id, "ACTIVE")
    await manager.transition(owner, deal.id, "COMPLETED")
    await manager.delete(owner, deal.id)
    assert await manager.list_deals(owner) == []


@pytest.mark.asyncio
async def test_rejected_transition_leaves_caller_usable(session, roster) -> None:
    owner, agency, creator = roster
    creator_id = creator.id
    manager = DealLifecycleManager(session=session)
    deal_id = (await manager.create(agency, creator_id, {"brand": "Nike", "amount": 5000})).id
    await manager.transition(owner, deal_id, "NEGOTIATING")

    with pytest.raises(InvalidTransition):
        await manager.transition(owner, deal_id, "COMPLETED")

    # The same user and agency objects keep working after the rejection.
    assert (await manager.get(owner, deal_id)).status is DealStatus.negotiating
    assert (await manager.transition(owner, deal_id, "ACTIVE")).status is DealStatus.active
    other = await manager.create(agency, creator_id, {"brand": "Adidas"})
    assert other.creator_id == creator_id
    other_creator = await CreatorRegistry(session=session).create(
        agency, {"name": "Mark Lee", "niche": "Tech"}
    )
    assert (await CreatorRegistry(session=session).get(owner, other_creator.id)).name == "Mark Lee"
