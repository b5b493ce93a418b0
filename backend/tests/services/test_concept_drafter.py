"""Concept Drafter — verifies the forced tool call and strict output parsing.

Tests:
    - One create_message call forcing submit_concepts, brief text as the user turn
    - First concept_count concepts returned, in drafting order
    - Refusal, no tool call, malformed output, and < 3 concepts → GenerationFailedError
    - Collaborator errors propagate unchanged (no retry here)
"""

import pytest

from concept_studio.core.domain_types import Branch
from concept_studio.core.errors import ExternalServiceError, GenerationFailedError
from concept_studio.services.concept_drafter import ConceptDrafter
from concept_studio.services.parse_request import parse_generation_request

from tests.services.fake_collaborators import (
    FakeTextClient, concepts_message, refusal_message, text_only_message,
    tool_input_message,
)
from tests.services.payloads import exhibition_body, interior_body


@pytest.fixture
def exhibition_payload():
    return parse_generation_request(exhibition_body()).payload


async def test_draft_forces_concept_tool(exhibition_payload):
    client = FakeTextClient()
    drafter = ConceptDrafter(client, model="test-model", max_tokens=1234)

    await drafter.draft(Branch.EXHIBITION, exhibition_payload)

    assert len(client.calls) == 1
    call = client.calls[0]
    assert call["model"] == "test-model"
    assert call["max_tokens"] == 1234
    assert call["tool_choice"] == {"type": "tool", "name": "submit_concepts"}
    assert call["tools"][0]["name"] == "submit_concepts"
    assert "Acme Robotics" in call["messages"][0]["content"]


async def test_draft_returns_concepts_in_order(exhibition_payload):
    drafter = ConceptDrafter(FakeTextClient(concepts_message(3)), model="m")
    concepts = await drafter.draft(Branch.EXHIBITION, exhibition_payload)
    assert [c.title for c in concepts] == ["Concept 1", "Concept 2", "Concept 3"]


async def test_extra_concepts_are_truncated(exhibition_payload):
    drafter = ConceptDrafter(FakeTextClient(concepts_message(5)), model="m", concept_count=3)
    concepts = await drafter.draft(Branch.EXHIBITION, exhibition_payload)
    assert len(concepts) == 3
    assert concepts[-1].title == "Concept 3"


async def test_interior_brief_is_used():
    payload = parse_generation_request(interior_body()).payload
    client = FakeTextClient()
    await ConceptDrafter(client, model="m").draft(Branch.INTERIOR, payload)
    assert "Marina Office" in client.calls[0]["messages"][0]["content"]


@pytest.mark.parametrize("response", [
    refusal_message(),
    text_only_message(),
    concepts_message(3, tool_name="some_other_tool"),
    tool_input_message({"concepts": "not a list"}),
    tool_input_message({"concepts": [{"title": "Only title"}] * 3}),
    tool_input_message({}),
    concepts_message(2),
])
async def test_unusable_output_raises_generation_failed(exhibition_payload, response):
    drafter = ConceptDrafter(FakeTextClient(response), model="m")
    with pytest.raises(GenerationFailedError) as exc:
        await drafter.draft(Branch.EXHIBITION, exhibition_payload)
    assert exc.value.http_status == 500
    assert exc.value.context.branch == "exhibition"


async def test_blank_concepts_do_not_count(exhibition_payload):
    response = tool_input_message({"concepts": [
        {"title": "A", "description": "a"},
        {"title": "B", "description": "b"},
        {"title": "  ", "description": "blank title"},
    ]})
    drafter = ConceptDrafter(FakeTextClient(response), model="m")
    with pytest.raises(GenerationFailedError):
        await drafter.draft(Branch.EXHIBITION, exhibition_payload)


async def test_collaborator_error_propagates_without_retry(exhibition_payload):
    client = FakeTextClient(error=ExternalServiceError("overloaded", "Anthropic"))
    with pytest.raises(ExternalServiceError):
        await ConceptDrafter(client, model="m").draft(Branch.EXHIBITION, exhibition_payload)
    assert len(client.calls) == 1
