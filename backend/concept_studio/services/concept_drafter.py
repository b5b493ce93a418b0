"""Concept Drafter — turns a structured brief into N short text concepts.

Invariants:
    - Exactly ONE text-generation call per request; no retries at this layer
    - Output is parsed strictly: a missing tool call, a refusal, a schema mismatch,
      or fewer than MIN_CONCEPTS entries all raise GenerationFailedError
    - Only the first `concept_count` concepts are returned, in drafting order

Design Decisions:
    - Forced tool call (tool_choice) as the structured-output channel: the model's
      arguments are validated against CONCEPT_OUTPUT_SCHEMA by Pydantic on our side
    - Brief text is built by prompt_builder (pure), drafting only owns the call
"""

import logging

from pydantic import BaseModel, TypeAdapter, ValidationError as PydanticValidationError

from concept_studio.core.domain_types import MIN_CONCEPTS, Branch, Concept
from concept_studio.core.errors import ErrorContext, GenerationFailedError
from concept_studio.schemas.generation import ExhibitionRequest, InteriorRequest
from concept_studio.services.define_concept_tools import (
    SUBMIT_CONCEPTS_TOOL, TOOLS_CONCEPTS,
)
from concept_studio.services.prompt_builder import (
    exhibition_drafting_prompt, interior_drafting_prompt,
)

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = (
    "You are the concept lead of a design studio. Read the client brief and "
    f"submit your concepts by calling the {SUBMIT_CONCEPTS_TOOL} tool. "
    "Do not answer in plain text."
)


class _DraftedConcept(BaseModel):
    title: str
    description: str


_CONCEPTS_ADAPTER = TypeAdapter(list[_DraftedConcept])


def _tool_input(response) -> dict | None:
    for block in getattr(response, "content", None) or []:
        if getattr(block, "type", None) == "tool_use" and block.name == SUBMIT_CONCEPTS_TOOL:
            return block.input
    return None


def parse_concepts(response, branch: Branch) -> list[Concept]:
    """Validate the drafter response into Concept objects."""
    ctx = ErrorContext(branch=branch.value)
    if getattr(response, "stop_reason", None) == "refusal":
        raise GenerationFailedError("Concept drafting was refused by the model.", ctx)

    tool_input = _tool_input(response)
    if not isinstance(tool_input, dict):
        raise GenerationFailedError("Concept drafting returned no candidates.", ctx)

    try:
        drafted = _CONCEPTS_ADAPTER.validate_python(tool_input.get("concepts"))
    except PydanticValidationError as e:
        raise GenerationFailedError(
            f"Concept drafting returned malformed output: {e.error_count()} error(s).",
            ctx,
        )

    concepts = [
        Concept(title=d.title.strip(), description=d.description.strip())
        for d in drafted
        if d.title.strip() and d.description.strip()
    ]
    if len(concepts) < MIN_CONCEPTS:
        raise GenerationFailedError(
            f"Concept drafting returned {len(concepts)} concept(s), "
            f"at least {MIN_CONCEPTS} are required.",
            ctx,
        )
    return concepts


class ConceptDrafter:
    """Drafts concepts for the Exhibition and Interior branches."""

    def __init__(
        self,
        client,
        model: str,
        max_tokens: int = 4000,
        concept_count: int = MIN_CONCEPTS,
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.concept_count = concept_count

    def _brief_text(self, payload: ExhibitionRequest | InteriorRequest) -> str:
        if isinstance(payload, ExhibitionRequest):
            return exhibition_drafting_prompt(payload.exhibition_brief, self.concept_count)
        return interior_drafting_prompt(payload.interior_brief, self.concept_count)

    async def draft(
        self, branch: Branch, payload: ExhibitionRequest | InteriorRequest,
    ) -> list[Concept]:
        """One collaborator call → the first `concept_count` concepts."""
        response = await self.client.create_message(
            model=self.model,
            max_tokens=self.max_tokens,
            system=_SYSTEM_PROMPT,
            messages=[{"role": "user", "content": self._brief_text(payload)}],
            tools=TOOLS_CONCEPTS,
            tool_choice={"type": "tool", "name": SUBMIT_CONCEPTS_TOOL},
            context=ErrorContext(branch=branch.value),
        )
        concepts = parse_concepts(response, branch)
        logger.info(
            f"Drafted {len(concepts)} concept(s)",
            extra={"branch": branch.value, "concept_count": len(concepts)},
        )
        return concepts[: self.concept_count]
