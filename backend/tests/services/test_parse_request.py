"""Request Parsing — verifies branch classification, identity extraction, and 400 mapping.

Tests:
    - Each discriminator selects its branch; none or several → InvalidPayloadError
    - Identity email is read from the branch-appropriate field
    - Missing companions (logo, floor plan, moodboards) → ValidationError
    - Asset data that is not strict base64 → ValidationError
    - Reference images and brief summaries per branch
"""

import pytest

from concept_studio.core.domain_types import Branch
from concept_studio.core.errors import InvalidPayloadError, ValidationError
from concept_studio.services.parse_request import (
    classify_payload, parse_generation_request,
)

from tests.services.payloads import (
    FLOOR_PLAN_B64, LOGO_B64, event_body, exhibition_body, interior_body,
)


@pytest.mark.parametrize("body, branch", [
    (exhibition_body(), Branch.EXHIBITION),
    (interior_body(), Branch.INTERIOR),
    (event_body(), Branch.EVENT),
])
def test_discriminator_selects_branch(body, branch):
    request = parse_generation_request(body)
    assert request.branch is branch


def test_no_discriminator_is_invalid_payload():
    with pytest.raises(InvalidPayloadError):
        classify_payload({"userEmail": "a@b.co"})


def test_two_discriminators_is_invalid_payload():
    body = exhibition_body()
    body["prompt"] = "also an event"
    with pytest.raises(InvalidPayloadError) as exc:
        parse_generation_request(body)
    assert exc.value.http_status == 400


def test_non_object_body_is_invalid_payload():
    with pytest.raises(InvalidPayloadError):
        parse_generation_request(["not", "an", "object"])


def test_exhibition_email_comes_from_brief():
    request = parse_generation_request(exhibition_body("x@y.io"))
    assert request.email == "x@y.io"


def test_event_email_is_top_level():
    body = event_body()
    body["userEmail"] = "top@level.com"
    assert parse_generation_request(body).email == "top@level.com"


def test_event_email_inside_nested_object_is_ignored():
    body = event_body()
    del body["userEmail"]
    body["brief"] = {"userEmail": "nested@example.com"}
    with pytest.raises(ValidationError) as exc:
        parse_generation_request(body)
    assert exc.value.field == "userEmail"


def test_malformed_email_rejected_before_payload_validation():
    body = interior_body("not-an-email")
    del body["floorPlan"]
    with pytest.raises(ValidationError) as exc:
        parse_generation_request(body)
    assert exc.value.field == "userEmail"


def test_missing_logo_is_validation_error():
    body = exhibition_body()
    del body["logo"]
    with pytest.raises(ValidationError) as exc:
        parse_generation_request(body)
    assert exc.value.field == "logo"


def test_interior_requires_a_moodboard():
    with pytest.raises(ValidationError) as exc:
        parse_generation_request(interior_body(moodboards=0))
    assert exc.value.field == "moodboards"


def test_interior_rejects_non_image_floor_plan():
    body = interior_body()
    body["floorPlan"]["mimeType"] = "application/pdf"
    with pytest.raises(ValidationError) as exc:
        parse_generation_request(body)
    assert exc.value.field.startswith("floorPlan")


@pytest.mark.parametrize("path", [("logo",), ("floorPlan", "data"), ("moodboards", 0, "data")])
def test_undecodable_asset_is_validation_error(path):
    body = exhibition_body() if path[0] == "logo" else interior_body()
    target = body
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = "this is not base64!!"
    with pytest.raises(ValidationError) as exc:
        parse_generation_request(body)
    assert exc.value.field == ".".join(str(p) for p in path)


def test_data_url_prefix_is_stripped():
    body = event_body()
    body["logo"] = f"data:image/png;base64,{LOGO_B64}"
    request = parse_generation_request(body)
    assert request.payload.logo == LOGO_B64


def test_interior_reference_images_floor_plan_first():
    request = parse_generation_request(interior_body(moodboards=3))
    refs = request.reference_images
    assert len(refs) == 4
    assert refs[0].data == FLOOR_PLAN_B64
    assert {r.mime_type for r in refs[1:]} == {"image/jpeg"}


def test_logo_branches_reference_the_logo():
    for body in (exhibition_body(), event_body()):
        refs = parse_generation_request(body).reference_images
        assert [r.data for r in refs] == [LOGO_B64]


def test_brief_summary_excludes_binaries():
    summary = parse_generation_request(event_body()).brief_summary()
    assert "logo" not in summary
    assert summary["prompt"].startswith("A gala dinner")

    interior = parse_generation_request(interior_body(moodboards=2)).brief_summary()
    assert interior["moodboards_attached"] == 2
    assert "floor_plan" not in interior
