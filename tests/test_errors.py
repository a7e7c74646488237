"""Error rendering — every failure is a ``{message}`` body with the right status."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_unknown_route_is_json_404(async_client: AsyncClient):
    resp = await async_client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not Found", "success": False}


@pytest.mark.asyncio
async def test_malformed_json_is_bad_request(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/auth", content="{not json", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_bad_path_param_is_bad_request(async_client: AsyncClient, diner: dict):
    resp = await async_client.put("/api/auth/abc", json={"name": "x"}, headers=diner["headers"])
    assert resp.status_code == 400
    assert "user_id" in resp.json()["message"]


@pytest.mark.asyncio
async def test_forbidden_message(async_client: AsyncClient, diner: dict):
    resp = await async_client.post("/api/franchise", json={"name": "x"}, headers=diner["headers"])
    assert resp.status_code == 403
    assert resp.json() == {"message": "unable to create franchise", "success": False}


@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["db"] is True
