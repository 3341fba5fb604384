"""
Tests for the health endpoint.
"""

import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    """GET /health should return status ok."""
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_health_does_not_start_a_session(client):
    """GET /health should not issue a session cookie."""
    response = await client.get("/health")

    assert "set-cookie" not in response.headers
