"""
API tests for service endpoints following kkb_fastapi pattern.
"""

import pytest


@pytest.mark.asyncio
async def test_health_check(test_async_client):
    """Test the health check endpoint."""
    response = await test_async_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "ghg-accounting-engine"}


@pytest.mark.asyncio
async def test_root(test_async_client):
    """Test the root endpoint points to the docs."""
    response = await test_async_client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


@pytest.mark.asyncio
async def test_validation_error_shape(test_async_client):
    """Test request validation errors carry the field errors and a message."""
    response = await test_async_client.post("/api/v1/calculations", json={})
    assert response.status_code == 422

    data = response.json()
    assert data["message"] == "Validation error"
    assert data["detail"][0]["loc"] == ["body", "reporting_period_id"]
