"""Concept Tool Schema — Anthropic Tool Use format for the drafter's output contract.

Invariants:
    - The drafter forces this tool via tool_choice: the only structured output path
    - Output is an array of {title, description}; both strings, both required
    - minItems mirrors MIN_CONCEPTS so the model is told the floor up front

Design Decisions:
    - Array wrapped in an object ("concepts"): tool input_schema must be an object
"""

from concept_studio.core.domain_types import MIN_CONCEPTS

SUBMIT_CONCEPTS_TOOL = "submit_concepts"

CONCEPT_OUTPUT_SCHEMA = {
    "type": "array",
    "minItems": MIN_CONCEPTS,
    "items": {
        "type": "object",
        "properties": {
            "title": {
                "type": "string",
                "description": "Short, evocative concept name (2-6 words)",
            },
            "description": {
                "type": "string",
                "description": "2-4 sentences: look and feel, materials, lighting",
            },
        },
        "required": ["title", "description"],
    },
}

TOOLS_CONCEPTS = [
    {
        "name": SUBMIT_CONCEPTS_TOOL,
        "description": (
            "Submit the drafted design concepts. Call this exactly once with "
            f"at least {MIN_CONCEPTS} distinct concepts."
        ),
        "input_schema": {
            "type": "object",
            "properties": {"concepts": CONCEPT_OUTPUT_SCHEMA},
            "required": ["concepts"],
        },
    },
]
