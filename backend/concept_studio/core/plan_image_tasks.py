"""Image Task Planning — builds the flat, ordered fan-out batch for a request.

Invariants:
    - All functions are PURE: prompt text comes from an injected builder
    - Multi-concept: task at slot c*A+a carries (concept_index=c, angle_id=angles[a].id)
    - Event: exactly EVENT_IMAGE_COUNT identical-prompt tasks, no concept keys
    - Every task carries the full reference image tuple for its request

Design Decisions:
    - Tasks carry their (concept, angle) key explicitly: aggregation groups by key,
      the flat slot is kept only for ordering and observability
    - Prompt builder injected as a callable: planning is testable without prompt content
"""

from collections.abc import Callable, Sequence

from concept_studio.core.domain_types import (
    EVENT_IMAGE_COUNT, Concept, ImageTask, ReferenceImage, ViewAngle,
)

ConceptPromptBuilder = Callable[[Concept, ViewAngle], str]


def flat_slot(concept_index: int, angle_index: int, angle_count: int) -> int:
    """Flat batch position of (concept, angle)."""
    return concept_index * angle_count + angle_index


def plan_concept_tasks(
    concepts: Sequence[Concept],
    angles: Sequence[ViewAngle],
    build_prompt: ConceptPromptBuilder,
    reference_images: Sequence[ReferenceImage],
) -> list[ImageTask]:
    """One task per (concept, angle), concept-major order."""
    refs = tuple(reference_images)
    angle_count = len(angles)
    return [
        ImageTask(
            slot=flat_slot(c, a, angle_count),
            prompt=build_prompt(concept, angle),
            reference_images=refs,
            concept_index=c,
            angle_id=angle.id,
        )
        for c, concept in enumerate(concepts)
        for a, angle in enumerate(angles)
    ]


def plan_event_tasks(
    prompt: str,
    reference_images: Sequence[ReferenceImage],
    count: int = EVENT_IMAGE_COUNT,
) -> list[ImageTask]:
    """Identical-prompt tasks for the Event branch."""
    refs = tuple(reference_images)
    return [
        ImageTask(slot=i, prompt=prompt, reference_images=refs)
        for i in range(count)
    ]
