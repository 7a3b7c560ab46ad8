"""HttpAttributeSchemaStore against a mocked marketplace API."""

import json

import httpx
import pytest

from app.errors import NotFoundError, UpstreamError, ValidationError
from app.schemas.attributes import AttributeDraft, AttributePatch, InputType
from app.services.attribute_schema import HttpAttributeSchemaStore

BASE_URL = "https://market.example.com/api/v1"


def _remote_attr(key: str, sort_order: int = 0, **extra) -> dict:
    data = {
        "id": f"uuid-{key}",
        "category_id": "cat-1",
        "key": key,
        "type": "text",
        "label": {"uz": key.title(), "ru": "", "en": ""},
        "options": None,
        "is_required": False,
        "sort_order": sort_order,
    }
    data.update(extra)
    return data


class Recorder:
    """Mock transport handler that records requests and replays canned responses."""

    def __init__(self, responses: dict[tuple[str, str], httpx.Response]):
        self.responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.responses:
            return httpx.Response(404, json={"success": False, "message": "not found"})
        return self.responses[key]


def _store(recorder: Recorder, token: str = "secret") -> HttpAttributeSchemaStore:
    return HttpAttributeSchemaStore(
        BASE_URL, token=token, timeout=5, transport=httpx.MockTransport(recorder)
    )


async def test_list_sorts_stably_and_sends_token():
    recorder = Recorder({
        ("GET", "/api/v1/categories/cat-1/attributes"): httpx.Response(
            200,
            json={
                "success": True,
                "attributes": [
                    _remote_attr("c", 2),
                    _remote_attr("a", 1),
                    _remote_attr("b", 2),
                ],
                "count": 3,
            },
        ),
    })
    attrs = await _store(recorder).list_for_category("cat-1")

    assert [a.key for a in attrs] == ["a", "c", "b"]
    assert attrs[0].options == []
    assert recorder.requests[0].headers["authorization"] == "Bearer secret"


async def test_list_unknown_category_is_not_found():
    recorder = Recorder({})
    with pytest.raises(NotFoundError) as exc_info:
        await _store(recorder).list_for_category("missing")
    assert exc_info.value.resource == "category"


async def test_create_validates_before_calling_upstream():
    recorder = Recorder({})
    with pytest.raises(ValidationError) as exc_info:
        await _store(recorder).create(
            "cat-1", AttributeDraft.model_validate({"key": "Bad Key", "type": "text", "label": {"uz": "X"}})
        )
    assert exc_info.value.field == "key"
    assert recorder.requests == []


async def test_create_posts_normalized_payload():
    created = _remote_attr(
        "size",
        type="dropdown",
        options=[{"value": "m", "label": {"uz": "M", "ru": "", "en": ""}}],
    )
    recorder = Recorder({
        ("POST", "/api/v1/admin/categories/cat-1/attributes"): httpx.Response(
            201, json={"success": True, "attribute": created}
        ),
    })
    draft = AttributeDraft.model_validate({
        "key": "size",
        "type": "dropdown",
        "label": {"uz": "O'lcham"},
        "options": [{"value": "m", "label": {"uz": "M"}}],
        "is_required": True,
    })
    attr = await _store(recorder).create("cat-1", draft)

    assert attr.type is InputType.DROPDOWN
    sent = json.loads(recorder.requests[0].content)
    assert sent["key"] == "size"
    assert sent["type"] == "dropdown"
    assert sent["is_required"] is True
    assert sent["options"] == [{"value": "m", "label": {"uz": "M", "ru": "", "en": ""}}]


async def test_create_omits_options_for_text():
    recorder = Recorder({
        ("POST", "/api/v1/admin/categories/cat-1/attributes"): httpx.Response(
            201, json={"success": True, "attribute": _remote_attr("brand")}
        ),
    })
    await _store(recorder).create(
        "cat-1", AttributeDraft.model_validate({"key": "brand", "type": "text", "label": {"uz": "Brend"}})
    )
    assert "options" not in json.loads(recorder.requests[0].content)


async def test_update_merges_with_current_definition():
    current = _remote_attr("brand", sort_order=4, is_required=True)
    updated = dict(current, label={"uz": "Brend", "ru": "", "en": "Brand"})
    recorder = Recorder({
        ("GET", "/api/v1/admin/category-attributes/uuid-brand"): httpx.Response(
            200, json={"success": True, "attribute": current}
        ),
        ("PUT", "/api/v1/admin/category-attributes/uuid-brand"): httpx.Response(
            200, json={"success": True, "attribute": updated}
        ),
    })
    attr = await _store(recorder).update(
        "uuid-brand", AttributePatch(label={"uz": "Brend", "en": "Brand"})
    )

    assert attr.label.en == "Brand"
    sent = json.loads(recorder.requests[1].content)
    assert sent["sort_order"] == 4
    assert sent["is_required"] is True


async def test_upstream_validation_error_keeps_field():
    recorder = Recorder({
        ("POST", "/api/v1/admin/categories/cat-1/attributes"): httpx.Response(
            400, json={"success": False, "message": "key already exists", "field": "key"}
        ),
    })
    with pytest.raises(ValidationError) as exc_info:
        await _store(recorder).create(
            "cat-1", AttributeDraft.model_validate({"key": "brand", "type": "text", "label": {"uz": "B"}})
        )
    assert exc_info.value.field == "key"
    assert exc_info.value.message == "key already exists"


async def test_server_error_is_upstream_error():
    recorder = Recorder({
        ("DELETE", "/api/v1/admin/category-attributes/uuid-x"): httpx.Response(503, text="down"),
    })
    with pytest.raises(UpstreamError) as exc_info:
        await _store(recorder).delete("uuid-x")
    assert exc_info.value.status_code == 503


async def test_delete_missing_attribute_is_not_found():
    with pytest.raises(NotFoundError):
        await _store(Recorder({})).delete("uuid-gone")


async def test_transport_failure_is_upstream_error():
    def _fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = HttpAttributeSchemaStore(BASE_URL, transport=httpx.MockTransport(_fail))
    with pytest.raises(UpstreamError):
        await store.list_for_category("cat-1")


async def test_unsuccessful_body_is_upstream_error():
    recorder = Recorder({
        ("GET", "/api/v1/categories/cat-1/attributes"): httpx.Response(
            200, json={"success": False, "message": "maintenance"}
        ),
    })
    with pytest.raises(UpstreamError) as exc_info:
        await _store(recorder).list_for_category("cat-1")
    assert exc_info.value.message == "maintenance"


async def test_newline_suffixed_key_never_reaches_upstream():
    recorder = Recorder({})
    with pytest.raises(ValidationError) as exc_info:
        await _store(recorder).create(
            "cat-1", AttributeDraft.model_validate({"key": "color\n", "type": "text", "label": {"uz": "Rang"}})
        )
    assert exc_info.value.field == "key"
    assert recorder.requests == []


async def test_success_without_attribute_is_upstream_error():
    recorder = Recorder({
        ("POST", "/api/v1/admin/categories/cat-1/attributes"): httpx.Response(
            201, json={"success": True}
        ),
    })
    with pytest.raises(UpstreamError):
        await _store(recorder).create(
            "cat-1", AttributeDraft.model_validate({"key": "brand", "type": "text", "label": {"uz": "B"}})
        )


@pytest.mark.parametrize(
    "record",
    [
        {"key": "brand", "type": "text", "label": {"uz": "B"}},
        _remote_attr("brand", type="date"),
        _remote_attr("brand", label="not a label"),
    ],
)
async def test_malformed_attribute_record_is_upstream_error(record):
    recorder = Recorder({
        ("GET", "/api/v1/admin/category-attributes/uuid-brand"): httpx.Response(
            200, json={"success": True, "attribute": record}
        ),
    })
    with pytest.raises(UpstreamError):
        await _store(recorder).get("uuid-brand")
