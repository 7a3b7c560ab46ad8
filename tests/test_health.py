"""Smoke tests - verify the app starts and admin routes are guarded."""

import httpx


async def test_health_returns_ok(client: httpx.AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_admin_api_requires_authentication(client: httpx.AsyncClient):
    """No proxy header means 401."""
    response = await client.get("/api/admin/products")
    assert response.status_code == 401


async def test_unregistered_email_is_forbidden(client: httpx.AsyncClient):
    response = await client.get(
        "/api/admin/products", headers={"x-admin-email": "nobody@example.com"}
    )
    assert response.status_code == 403


async def test_non_admin_is_forbidden(client: httpx.AsyncClient, db_session):
    from app.models.user import User

    db_session.add(User(email="seller@example.com", name="Seller", role="seller"))
    await db_session.commit()

    response = await client.get(
        "/api/admin/products", headers={"x-admin-email": "seller@example.com"}
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"


async def test_dashboard_counts(client: httpx.AsyncClient, admin_headers, category):
    response = await client.get("/api/admin/dashboard", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total_categories"] == 1
    assert data["total_attributes"] == 0
    assert data["total_products"] == 0
