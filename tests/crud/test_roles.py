"""
Role API tests
"""
import pytest
from httpx import AsyncClient
from tests.conftest import DataFactory


@pytest.mark.asyncio
async def test_role_crud_flow(client: AsyncClient, factory: DataFactory):
    role = await factory.create_role(title="Financial Controller")
    role_id = role["id"]

    response = await client.get(f"/api/v1/roles/{role_id}")
    assert response.status_code == 200
    detail = response.json()["data"]
    assert detail["role"]["title"] == "Financial Controller"
    assert detail["company"]["id"] == role["company_id"]
    assert detail["persona"] is None

    response = await client.patch(f"/api/v1/roles/{role_id}", json={"is_active": False})
    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is False

    response = await client.delete(f"/api/v1/roles/{role_id}")
    assert response.status_code == 200

    response = await client.get(f"/api/v1/roles/{role_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_role_needs_existing_company(client: AsyncClient):
    response = await client.post(
        "/api/v1/roles", json={"company_id": "nope", "title": "Orphan"}
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_role_listing_filters(client: AsyncClient, factory: DataFactory):
    company = await factory.create_company()
    other = await factory.create_company()
    await factory.create_role(company_id=company["id"], title="Sales Lead", tags=["Sales"])
    await factory.create_role(company_id=company["id"], title="BMS Engineer", tags=["Engineering"])
    await factory.create_role(company_id=other["id"], title="Accountant", tags=["Finance"])

    response = await client.get("/api/v1/roles", params={"company_id": company["id"]})
    assert response.json()["data"]["total"] == 2

    response = await client.get("/api/v1/roles", params={"tag": "sales"})
    items = response.json()["data"]["items"]
    assert [r["title"] for r in items] == ["Sales Lead"]
    assert items[0]["company"]["id"] == company["id"]

    response = await client.get("/api/v1/roles", params={"keyword": "engineer"})
    assert [r["title"] for r in response.json()["data"]["items"]] == ["BMS Engineer"]


@pytest.mark.asyncio
async def test_role_listing_pagination(client: AsyncClient, factory: DataFactory):
    company = await factory.create_company()
    for _ in range(3):
        await factory.create_role(company_id=company["id"])

    response = await client.get("/api/v1/roles", params={"page": 2, "page_size": 2})
    data = response.json()["data"]
    assert data["total"] == 3
    assert data["pages"] == 2
    assert len(data["items"]) == 1


@pytest.mark.asyncio
async def test_duplicate_title_within_company(client: AsyncClient, factory: DataFactory):
    company = await factory.create_company()
    await factory.create_role(company_id=company["id"], title="Analyst")
    response = await client.post(
        "/api/v1/roles", json={"company_id": company["id"], "title": "Analyst"}
    )
    assert response.status_code == 409
