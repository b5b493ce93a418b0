"""Generate Concepts Route — verifies HTTP status mapping end to end.

Tests:
    - 200 with branch envelope and newCount (usage counted in SQLite)
    - 400 for malformed email, missing discriminator, missing companions, bad JSON,
      undecodable assets (no model call made)
    - 429 once the identity has used its free generations
    - 500 for generation failures and unexpected exceptions (no internals leaked)
    - Every error body carries a human-readable "error" string
    - Readiness is 503 without a reachable usage database
"""

import pytest

from concept_studio.api.routes.generate_concepts import get_generation_service
from concept_studio.infrastructure import database
from concept_studio.main import app

from tests.services.fake_collaborators import (
    FakeImageGenerator, FakeTextClient, build_service, concepts_message, png,
)
from tests.services.payloads import event_body, exhibition_body, interior_body

URL = "/api/v1/generate-concepts"


async def test_exhibition_success(client):
    res = await client.post(URL, json=exhibition_body())
    assert res.status_code == 200
    body = res.json()
    assert body["branch"] == "exhibition"
    assert body["newCount"] == 1
    assert len(body["concepts"]) == 3


async def test_event_success(client):
    res = await client.post(URL, json=event_body())
    assert res.status_code == 200
    assert len(res.json()["imageUrls"]) == 2


async def test_third_generation_is_429(client):
    for expected in (1, 2):
        res = await client.post(URL, json=interior_body("dave@example.com"))
        assert res.json()["newCount"] == expected

    res = await client.post(URL, json=interior_body("dave@example.com"))
    assert res.status_code == 429
    assert "limit of 2 free generations" in res.json()["error"]


async def test_quota_is_per_identity(client):
    for _ in range(2):
        await client.post(URL, json=event_body("erin@example.com"))
    res = await client.post(URL, json=event_body("frank@example.com"))
    assert res.status_code == 200
    assert res.json()["newCount"] == 1


@pytest.mark.parametrize("body", [
    exhibition_body("not-an-email"),
    {"userEmail": "a@b.co"},
    {**event_body(), "logo": ""},
    {**exhibition_body(), "logo": "this is not base64!!"},
    {**interior_body(), "floorPlan": {"data": "%%%", "mimeType": "image/png"}},
    {**exhibition_body(), "interiorBrief": {"projectName": "x"}},
])
async def test_bad_requests_are_400(client, body, text_client, image_generator):
    res = await client.post(URL, json=body)
    assert res.status_code == 400
    assert res.json()["error"]
    assert text_client.calls == []
    assert image_generator.calls == []


async def test_non_json_body_is_400(client):
    res = await client.post(
        URL, content=b"{not json", headers={"content-type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["code"] == "VALIDATION_ERROR"


async def test_short_draft_is_500_and_not_counted(usage_store, image_generator, channel, client):
    service = build_service(
        usage_store, FakeTextClient(concepts_message(2)), image_generator, channel,
    )
    app.dependency_overrides[get_generation_service] = lambda: service

    res = await client.post(URL, json=exhibition_body("gina@example.com"))

    assert res.status_code == 500
    assert res.json()["code"] == "GENERATION_FAILED"
    assert await usage_store.get("gina@example.com") == 0


async def test_insufficient_event_images_is_500(usage_store, text_client, channel, client):
    images = FakeImageGenerator(behavior=lambda i, p: png("x") if i == 0 else None)
    app.dependency_overrides[get_generation_service] = lambda: build_service(
        usage_store, text_client, images, channel,
    )

    res = await client.post(URL, json=event_body("hank@example.com"))

    assert res.status_code == 500
    assert "only generated 1 out of 2" in res.json()["error"]
    assert await usage_store.get("hank@example.com") == 0


async def test_unexpected_error_is_500_without_internals(usage_store, text_client, channel, client):
    images = FakeImageGenerator(behavior=lambda i, p: 1 / 0)
    app.dependency_overrides[get_generation_service] = lambda: build_service(
        usage_store, text_client, images, channel,
    )

    res = await client.post(URL, json=event_body("ivy@example.com"))

    assert res.status_code == 500
    assert res.json() == {
        "error": "An unexpected error occurred",
        "code": "INTERNAL_ERROR",
        "category": "internal",
        "severity": "critical",
    }
    assert await usage_store.get("ivy@example.com") == 0


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_with_usage_database(client, test_db_manager, monkeypatch):
    monkeypatch.setattr(database, "db_manager", test_db_manager)
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_readiness_without_usage_database(client, monkeypatch):
    monkeypatch.setattr(database, "db_manager", None)
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"
