"""Result Aggregation — regroups a settled fan-out batch into the branch response shape.

Invariants:
    - All functions are PURE: no IO, no async
    - Multi-concept: exactly one ConceptResult per drafted concept, in drafting order;
      every angle id present in every images map (None when absent — never dropped)
    - Event: non-empty images only, in dispatch order; fewer than the minimum raises
    - Aggregation never fabricates concepts or angles that were not dispatched

Design Decisions:
    - Group by the (concept_index, angle_id) key carried on each task rather than
      re-deriving it from the flat slot
    - Acceptance policy is per branch: absent slots tolerated for multi-concept,
      hard minimum for Event
"""

from collections.abc import Sequence

from concept_studio.core.domain_types import (
    EVENT_MIN_IMAGES, Branch, Concept, ConceptResult, GeneratedImage,
    SettledTask, ViewAngle,
)
from concept_studio.core.errors import ErrorContext, InsufficientResultsError


def aggregate_concepts(
    concepts: Sequence[Concept],
    angles: Sequence[ViewAngle],
    settled: Sequence[SettledTask],
) -> list[ConceptResult]:
    """Build ConceptResult[] keyed by (concept, angle). Absent slots stay None."""
    angle_ids = [angle.id for angle in angles]
    grid: dict[tuple[int, str], GeneratedImage | None] = {
        (c, angle_id): None
        for c in range(len(concepts))
        for angle_id in angle_ids
    }
    for outcome in settled:
        key = (outcome.task.concept_index, outcome.task.angle_id)
        if key not in grid:
            raise ValueError(
                f"Task slot {outcome.task.slot} has unknown key {key}",
            )
        grid[key] = outcome.image

    return [
        ConceptResult(
            title=concept.title,
            description=concept.description,
            images={angle_id: grid[(c, angle_id)] for angle_id in angle_ids},
        )
        for c, concept in enumerate(concepts)
    ]


def collect_event_images(
    settled: Sequence[SettledTask],
    minimum: int = EVENT_MIN_IMAGES,
) -> list[GeneratedImage]:
    """Non-empty images in dispatch order, or InsufficientResultsError."""
    ordered = sorted(settled, key=lambda outcome: outcome.task.slot)
    images = [o.image for o in ordered if o.image is not None]
    if len(images) < minimum:
        raise InsufficientResultsError(
            len(images), len(settled),
            ErrorContext(branch=Branch.EVENT.value),
        )
    return images


def count_absent_slots(results: Sequence[ConceptResult]) -> int:
    """Number of (concept, angle) slots that produced no image."""
    return sum(
        1 for result in results
        for image in result.images.values()
        if image is None
    )
