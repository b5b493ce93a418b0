"""Domain Types — branch tags, view angles, and the value objects that flow through a generation.

Invariants:
    - Branch is decided once at ingress and never re-inferred from payload shape
    - Every multi-concept branch has exactly 3 named view angles, in a fixed order
    - GeneratedImage absence is explicit (None), never an empty string
    - All value objects are frozen — per-request data is never shared or mutated

Design Decisions:
    - NewType over dataclass wrappers for identity: zero runtime cost (ADR: simplicity)
    - str Enums: serialize to JSON without custom encoders
    - Frozen dataclasses (not Pydantic) in core: no IO, no validation cost in the hot path
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

IdentityEmail = NewType("IdentityEmail", str)


# ─── Limits ──────────────────────────────────────────────────────

MIN_CONCEPTS = 3
EVENT_IMAGE_COUNT = 2
EVENT_MIN_IMAGES = 2


# ─── Enums ───────────────────────────────────────────────────────

class Branch(str, Enum):
    """The three generation strategies."""
    EXHIBITION = "exhibition"
    INTERIOR = "interior"
    EVENT = "event"

    @property
    def has_concepts(self) -> bool:
        return self is not Branch.EVENT


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class ViewAngle:
    """A named framing directive — one image per concept per angle."""
    id: str
    instruction: str


@dataclass(frozen=True)
class ReferenceImage:
    """Base64-encoded image attached to every image task of a request."""
    data: str
    mime_type: str


@dataclass(frozen=True)
class Concept:
    """One drafted design proposal."""
    title: str
    description: str


@dataclass(frozen=True)
class GeneratedImage:
    """Image collaborator output (base64 payload + mime type)."""
    data: str
    mime_type: str

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class ImageTask:
    """One unit of fan-out work.

    concept_index/angle_id are None for Event tasks; slot is the flat
    position in the dispatched batch for every branch.
    """
    slot: int
    prompt: str
    reference_images: tuple[ReferenceImage, ...]
    concept_index: int | None = None
    angle_id: str | None = None


@dataclass(frozen=True)
class SettledTask:
    """An ImageTask paired with its outcome — image may be absent."""
    task: ImageTask
    image: GeneratedImage | None


@dataclass(frozen=True)
class ConceptResult:
    """A concept and its angle → image map (absent slots preserved as None)."""
    title: str
    description: str
    images: dict[str, GeneratedImage | None] = field(default_factory=dict)


# ─── View Angles ─────────────────────────────────────────────────

EXHIBITION_ANGLES: tuple[ViewAngle, ...] = (
    ViewAngle(
        "front",
        "Wide-angle eye-level view of the stand as a visitor approaches it "
        "from the main aisle. The full frontage and logo wall must be visible.",
    ),
    ViewAngle(
        "aerial",
        "Elevated three-quarter bird's-eye view showing the full footprint, "
        "open sides, and how the stand sits between the surrounding aisles.",
    ),
    ViewAngle(
        "interior",
        "Eye-level view from inside the stand looking toward the reception "
        "and meeting areas, showing materials, lighting, and branding details.",
    ),
)

INTERIOR_ANGLES: tuple[ViewAngle, ...] = (
    ViewAngle(
        "wide",
        "Wide establishing shot from the main entrance showing the whole "
        "space, following the attached floor plan layout exactly.",
    ),
    ViewAngle(
        "perspective",
        "Two-point perspective from a corner of the room at standing eye "
        "level, emphasizing furniture arrangement and circulation.",
    ),
    ViewAngle(
        "detail",
        "Close-up vignette of a signature area highlighting materials, "
        "textures, and lighting fixtures from the moodboards.",
    ),
)


def angles_for(branch: Branch) -> tuple[ViewAngle, ...]:
    """View angles for a multi-concept branch (empty for Event)."""
    if branch is Branch.EXHIBITION:
        return EXHIBITION_ANGLES
    if branch is Branch.INTERIOR:
        return INTERIOR_ANGLES
    return ()
