"""Attribute schema endpoints."""

import httpx


def _payload(key: str, type_: str = "text", **extra) -> dict:
    data = {"key": key, "type": type_, "label": {"uz": key.title(), "ru": "", "en": ""}}
    data.update(extra)
    return data


async def test_create_list_update_delete(client: httpx.AsyncClient, admin_headers, category):
    cid = category.id
    resp = await client.post(
        f"/api/admin/categories/{cid}/attributes",
        json=_payload(
            "mechanism",
            "dropdown",
            options=[
                {"value": "quartz", "label": {"uz": "Kvars"}},
                {"value": "automatic", "label": {"uz": "Avtomatik"}},
            ],
            is_required=True,
            sort_order=2,
        ),
        headers=admin_headers,
    )
    assert resp.status_code == 201
    attr = resp.json()["attribute"]
    assert attr["key"] == "mechanism"
    assert [o["value"] for o in attr["options"]] == ["quartz", "automatic"]

    resp = await client.post(
        f"/api/admin/categories/{cid}/attributes",
        json=_payload("brand", sort_order=1),
        headers=admin_headers,
    )
    assert resp.status_code == 201

    resp = await client.get(f"/api/categories/{cid}/attributes")
    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] == 2
    assert [a["key"] for a in data["attributes"]] == ["brand", "mechanism"]

    resp = await client.put(
        f"/api/admin/category-attributes/{attr['id']}",
        json={"sort_order": 0, "label": {"uz": "Mexanizm", "ru": "Механизм", "en": "Mechanism"}},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["attribute"]["label"]["ru"] == "Механизм"

    resp = await client.get(f"/api/categories/{cid}/attributes")
    assert [a["key"] for a in resp.json()["attributes"]] == ["mechanism", "brand"]

    resp = await client.delete(
        f"/api/admin/category-attributes/{attr['id']}", headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    resp = await client.delete(
        f"/api/admin/category-attributes/{attr['id']}", headers=admin_headers
    )
    assert resp.status_code == 404


async def test_invalid_draft_names_field(client: httpx.AsyncClient, admin_headers, category):
    resp = await client.post(
        f"/api/admin/categories/{category.id}/attributes",
        json=_payload("Mechanism"),
        headers=admin_headers,
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["field"] == "key"


async def test_dropdown_without_options_is_rejected(
    client: httpx.AsyncClient, admin_headers, category
):
    resp = await client.post(
        f"/api/admin/categories/{category.id}/attributes",
        json=_payload("size", "dropdown"),
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["field"] == "options"


async def test_unknown_category(client: httpx.AsyncClient, admin_headers):
    resp = await client.get("/api/categories/404/attributes")
    assert resp.status_code == 404

    resp = await client.post(
        "/api/admin/categories/404/attributes", json=_payload("brand"), headers=admin_headers
    )
    assert resp.status_code == 404


async def test_attribute_routes_require_admin(client: httpx.AsyncClient, category):
    resp = await client.post(
        f"/api/admin/categories/{category.id}/attributes", json=_payload("brand")
    )
    assert resp.status_code == 401


async def test_list_attribute_types(client: httpx.AsyncClient, admin_headers):
    resp = await client.get("/api/admin/attribute-types", headers=admin_headers)
    assert resp.status_code == 200
    assert [t["value"] for t in resp.json()["types"]] == ["text", "number", "dropdown", "switch"]


async def test_categories_listing(client: httpx.AsyncClient, category, other_category):
    resp = await client.get("/api/categories")
    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] == 2
    assert data["categories"][0]["name"]["en"] == "Watches"

    resp = await client.get(f"/api/categories/{other_category.id}")
    assert resp.json()["category"]["name"]["uz"] == "Kiyim"
