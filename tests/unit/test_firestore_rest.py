"""Firestore REST encoding and client requests (httpx.MockTransport)."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from portal.domain.enums import Role
from portal.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    FirestoreRESTClient,
)
from portal.infrastructure.firebase._rest_encoding import decode_document, encode_document

PREFIX = "projects/demo/databases/(default)/documents"


class StaticCredentials:
    valid = True
    token = "access-token"


def test_encode_document_types() -> None:
    encoded = encode_document(
        {
            "role": Role.FACULTY,
            "count": 3,
            "ratio": 0.5,
            "active": True,
            "missing": None,
            "tags": ("a", "b"),
            "at": datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        }
    )["fields"]
    assert encoded["role"] == {"stringValue": "faculty"}
    assert encoded["count"] == {"integerValue": "3"}
    assert encoded["ratio"] == {"doubleValue": 0.5}
    assert encoded["active"] == {"booleanValue": True}
    assert encoded["missing"] == {"nullValue": None}
    assert encoded["tags"]["arrayValue"]["values"][1] == {"stringValue": "b"}
    assert encoded["at"] == {"timestampValue": "2025-01-02T03:04:05.000000Z"}


def test_decode_truncates_nanosecond_timestamps() -> None:
    decoded = decode_document(
        {
            "name": f"{PREFIX}/users/u1",
            "fields": {
                "at": {"timestampValue": "2025-01-02T03:04:05.123456789Z"},
                "plain": {"timestampValue": "2025-01-02T03:04:05Z"},
                "ids": {"arrayValue": {}},
                "nested": {"mapValue": {"fields": {"n": {"integerValue": "7"}}}},
            },
        }
    )
    assert decoded["at"] == datetime(2025, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc)
    assert decoded["plain"] == datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert decoded["ids"] == []
    assert decoded["nested"] == {"n": 7}


def test_decode_empty_document() -> None:
    assert decode_document(None) == {}


def test_unsupported_type_rejected() -> None:
    with pytest.raises(TypeError):
        encode_document({"x": object()})


def _client(handler) -> FirestoreRESTClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FirestoreRESTClient("demo", StaticCredentials(), http_client=http)


async def test_create_posts_document_id_and_maps_conflict() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if len(seen) == 1:
            return httpx.Response(200, json={"name": f"{PREFIX}/users_by_email/abc"})
        return httpx.Response(409, json={"error": {"status": "ALREADY_EXISTS"}})

    client = _client(handler)
    await client.collection("users_by_email").create("abc", {"owner_id": "r1"})
    with pytest.raises(DocumentExistsError):
        await client.collection("users_by_email").create("abc", {"owner_id": "r2"})

    first = seen[0]
    assert first.method == "POST"
    assert first.url.params["documentId"] == "abc"
    assert first.headers["Authorization"] == "Bearer access-token"
    assert json.loads(first.content)["fields"]["owner_id"] == {"stringValue": "r1"}


async def test_get_missing_document_returns_none() -> None:
    client = _client(lambda request: httpx.Response(404))
    assert await client.collection("users").document("nope").get() is None


async def test_where_query_builds_structured_query() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(
            200,
            json=[
                {
                    "document": {
                        "name": f"{PREFIX}/users/u1",
                        "fields": {"role": {"stringValue": "faculty"}},
                    }
                },
                {"readTime": "2025-01-01T00:00:00Z"},
            ],
        )

    client = _client(handler)
    query = client.collection("users").where("course_ids", "array_contains", "c1").limit(5)
    results = [(s.id, s.to_dict()) async for s in query.stream()]

    assert results == [("u1", {"role": "faculty"})]
    structured = bodies[0]["structuredQuery"]
    assert structured["from"] == [{"collectionId": "users"}]
    assert structured["where"]["fieldFilter"]["op"] == "ARRAY_CONTAINS"
    assert structured["limit"] == 5


def test_invalid_order_direction_rejected() -> None:
    client = _client(lambda request: httpx.Response(200, json=[]))
    with pytest.raises(ValueError):
        client.collection("users").order_by("created_at", "SIDEWAYS")
