"""
Tests for event catalog endpoints.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import update

from ticketing.models import Event
from ticketing.services import event_service


def new_event(**overrides):
    payload = {
        "title": "Python Live 2026",
        "description": "Annual Python gathering, streamed",
        "date": "2026-12-01",
        "time": "18:00",
        "price": 15.5,
        "totalTickets": 500,
        "creatorId": "creator-9",
        "category": "tech",
        "streamUrl": "https://stream.example.com/pylive",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_event(client: AsyncClient):
    response = await client.post("/api/v1/events", json=new_event())

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Python Live 2026"
    assert data["totalTickets"] == 500
    assert data["soldTickets"] == 0
    assert data["status"] == "upcoming"
    assert data["price"] == 15.5


@pytest.mark.asyncio
async def test_create_event_ignores_sold_count(client: AsyncClient):
    response = await client.post("/api/v1/events", json=new_event(soldTickets=400))

    assert response.status_code == 201
    assert response.json()["soldTickets"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"totalTickets": 0},
        {"price": -1},
        {"title": ""},
        {"status": "postponed"},
    ],
)
async def test_create_event_invalid(client: AsyncClient, overrides):
    response = await client.post("/api/v1/events", json=new_event(**overrides))

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_list_events(client: AsyncClient, test_event):
    response = await client.get("/api/v1/events")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["page"] == 1
    assert data["pageSize"] == 20
    assert data["cached"] is False
    assert data["events"][0]["id"] == test_event.id
    assert data["events"][0]["availableTickets"] == 100
    # Listings never leak the gated stream
    assert "streamUrl" not in data["events"][0]


@pytest.mark.asyncio
async def test_list_events_filters(client: AsyncClient, make_event):
    await make_event(title="Live Now", status="live", creator_id="a")
    await make_event(title="Later", status="upcoming", creator_id="b")

    by_status = (await client.get("/api/v1/events?status=live")).json()
    assert [e["title"] for e in by_status["events"]] == ["Live Now"]

    by_creator = (await client.get("/api/v1/events?creatorId=b")).json()
    assert [e["title"] for e in by_creator["events"]] == ["Later"]


@pytest.mark.asyncio
async def test_list_events_pagination(client: AsyncClient, test_event):
    response = await client.get("/api/v1/events?page=2&pageSize=5")

    assert response.status_code == 200
    data = response.json()
    assert data["pageSize"] == 5
    assert data["events"] == []
    assert data["total"] == 1


@pytest.mark.asyncio
async def test_get_event(client: AsyncClient, test_event):
    response = await client.get(f"/api/v1/events/{test_event.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == test_event.id
    assert data["title"] == "Midnight Set"
    assert data["soldTickets"] == 0
    assert data["availableTickets"] == 100


@pytest.mark.asyncio
async def test_get_event_hides_stream_url(client: AsyncClient, test_event):
    """Only the access check may hand out the stream, and only to ticket holders."""
    access = await client.get(f"/api/v1/events/{test_event.id}/access/nobody")
    assert access.json()["hasAccess"] is False

    response = await client.get(f"/api/v1/events/{test_event.id}")

    assert response.status_code == 200
    assert "streamUrl" not in response.json()
    assert "midnight-set" not in response.text


@pytest.mark.asyncio
async def test_get_event_not_found(client: AsyncClient):
    response = await client.get("/api/v1/events/does-not-exist")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_update_event(client: AsyncClient, test_event, store):
    response = await client.patch(
        f"/api/v1/events/{test_event.id}",
        json={"title": "Midnight Set (Extended)", "price": 30, "totalTickets": 150},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Midnight Set (Extended)"
    assert data["totalTickets"] == 150
    assert (await store.event(test_event.id)).price == 30.0


@pytest.mark.asyncio
async def test_update_does_not_touch_existing_tickets(client: AsyncClient, test_event, store):
    """Tickets keep the title and price they were bought at."""
    await client.post(
        f"/api/v1/events/{test_event.id}/tickets",
        json={"userId": "user-1", "price": 25.0},
    )
    await client.patch(f"/api/v1/events/{test_event.id}", json={"title": "Renamed", "price": 99})

    [ticket] = await store.tickets(test_event.id)
    assert ticket.event_title == "Midnight Set"
    assert ticket.price == 25.0


@pytest.mark.asyncio
async def test_update_cannot_shrink_below_sold(client: AsyncClient, make_event):
    event = await make_event(total_tickets=10, sold_tickets=6)

    response = await client.patch(f"/api/v1/events/{event.id}", json={"totalTickets": 5})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_update_shrink_checked_against_sold_at_write_time(
    client: AsyncClient, make_event, store, monkeypatch
):
    """A purchase commits after the update read the event. Refused, not a 500."""
    event = await make_event(total_tickets=10, sold_tickets=5)
    real_get_event = event_service.get_event

    async def purchase_lands_after_read(db, event_id):
        found = await real_get_event(db, event_id)
        await db.execute(
            update(Event)
            .where(Event.id == event_id)
            .values(sold_tickets=6)
            .execution_options(synchronize_session=False)
        )
        return found

    monkeypatch.setattr(event_service, "get_event", purchase_lands_after_read)

    response = await client.patch(f"/api/v1/events/{event.id}", json={"totalTickets": 5})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_INPUT"
    assert "(6)" in response.json()["error"]
    stored = await store.event(event.id)
    assert stored.total_tickets == 10
    assert stored.sold_tickets == 5


@pytest.mark.asyncio
async def test_update_cannot_write_sold_count(client: AsyncClient, make_event, store):
    event = await make_event(total_tickets=10, sold_tickets=6)

    response = await client.patch(f"/api/v1/events/{event.id}", json={"soldTickets": 0})

    assert response.status_code == 200
    assert (await store.event(event.id)).sold_tickets == 6


@pytest.mark.asyncio
async def test_delete_event(client: AsyncClient, test_event, store):
    response = await client.delete(f"/api/v1/events/{test_event.id}")

    assert response.status_code == 200
    assert response.json() == {"message": "Event deleted successfully", "id": test_event.id}
    assert await store.event(test_event.id) is None


@pytest.mark.asyncio
async def test_delete_event_with_tickets_refused(client: AsyncClient, test_event, store):
    await client.post(
        f"/api/v1/events/{test_event.id}/tickets",
        json={"userId": "user-1", "price": 25.0},
    )

    response = await client.delete(f"/api/v1/events/{test_event.id}")

    assert response.status_code == 400
    assert await store.event(test_event.id) is not None


@pytest.mark.asyncio
async def test_delete_event_not_found(client: AsyncClient):
    response = await client.delete("/api/v1/events/does-not-exist")
    assert response.status_code == 404
