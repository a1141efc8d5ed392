"""
Tests for health, root and metrics endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cache"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_metrics_count_purchases(client: AsyncClient, test_event):
    await client.post(
        f"/api/v1/events/{test_event.id}/tickets",
        json={"userId": "user-1", "price": 25.0},
    )

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert 'ticket_purchase_attempts_total{outcome="success"}' in response.text


@pytest.mark.asyncio
async def test_unknown_route(client: AsyncClient):
    response = await client.get("/api/v1/nothing-here")
    assert response.status_code == 404
