"""Prompt Builder — pure functions from (brief, concept, angle) to prompt text.

Invariants:
    - No IO, no randomness: identical inputs always yield identical prompts
    - Every concept image prompt embeds the drafted concept title and description,
      the full brief constraints, and exactly one view-angle instruction
    - Event prompts are identical across the batch (variation comes from the model)

Design Decisions:
    - Prompt content isolated from orchestration: templates change without touching
      the dispatcher, and are unit-tested as plain strings
"""

from concept_studio.core.domain_types import Concept, ViewAngle
from concept_studio.schemas.generation import (
    EventRequest, ExhibitionBrief, InteriorBrief,
)

_LAYOUT_DESCRIPTIONS = {
    "linear": (
        "An in-line booth, typically positioned in a row with other stands. It has "
        "solid walls on three sides (back, left, and right) and is only open to the "
        "aisle from the front."
    ),
    "corner": (
        "A corner booth, located at the end of a row. It has two solid walls (back "
        "and one side) and is open to aisles on two intersecting sides."
    ),
    "peninsula": (
        "A peninsula booth, which juts out into an aisle. It is open to aisles on "
        "three sides (front, left, and right) and has one solid back wall."
    ),
    "island": (
        "An island booth, a completely standalone structure open to aisles on all "
        "four sides, with no connecting walls to other stands."
    ),
}


def layout_description(layout: str) -> str:
    """Physical description of a stand layout, keyed on its leading word."""
    key = layout.strip().split(" ", 1)[0].lower() if layout.strip() else ""
    return _LAYOUT_DESCRIPTIONS.get(key, f"A standard {layout} layout.")


def _listing(items: list[str], fallback: str) -> str:
    cleaned = [i.strip() for i in items if i and i.strip()]
    return ", ".join(cleaned) if cleaned else fallback


def _dimension(value: float) -> str:
    return f"{value:g}"


# ─── Exhibition ──────────────────────────────────────────────────

def _exhibition_constraints(brief: ExhibitionBrief) -> list[str]:
    lines = [
        f"- Company: {brief.company_name}",
        f"- Event: {brief.event_name}",
        f"- Industry: {brief.industry or 'General'}",
        f"- Dimensions: {_dimension(brief.stand_width)}m wide x "
        f"{_dimension(brief.stand_length)}m long",
        f"- Max height: {brief.stand_height or 'Standard (4m)'}",
        f"- Layout: {brief.stand_layout}. {layout_description(brief.stand_layout)}",
    ]
    if brief.stand_type:
        lines.append(f"- Stand type: {brief.stand_type} build")
    if brief.style:
        style = brief.style
        if brief.style_description:
            style += f' (characteristics: "{brief.style_description}")'
        lines.append(f"- Style: {style}")
    lines.append(f"- Brand colors: {brief.brand_colors or 'Infer from the logo'}")
    lines.append(
        f"- Must include areas for: "
        f"{_listing(brief.functionality, 'Standard exhibition features')}",
    )
    if brief.double_decker:
        lines.append("- The stand MUST be a two-story, double-decker structure.")
    if brief.hanging_structure:
        lines.append("- Include a large, branded hanging structure suspended from the ceiling.")
    if brief.hostess:
        lines.append("- A professionally dressed hostess is visible at the reception desk.")
    if brief.brief:
        lines.append(f'- Client notes: "{brief.brief}"')
    return lines


def exhibition_drafting_prompt(brief: ExhibitionBrief, count: int) -> str:
    """Natural-language brief for the concept drafter."""
    return "\n".join([
        "You are a world-class exhibition stand designer.",
        "",
        "Client brief:",
        *_exhibition_constraints(brief),
        "",
        f"Create {count} distinct design concepts for this stand. Each concept "
        "needs a short, evocative title and a 2-3 sentence description covering "
        "the look and feel, key materials, lighting, and the standout feature. "
        "Make the concepts clearly different from each other and mention the "
        "brand colors where appropriate.",
    ])


def exhibition_image_prompt(
    brief: ExhibitionBrief, concept: Concept, angle: ViewAngle,
) -> str:
    """Image prompt for one (concept, angle) of an exhibition brief."""
    return "\n".join([
        "Photorealistic 3D concept render of a premium, award-winning exhibition stand.",
        f'Concept: "{concept.title}". {concept.description}',
        "",
        "Constraints:",
        *_exhibition_constraints(brief),
        "",
        "Logo integration: the attached company logo is CRITICAL. It must be clearly "
        "visible and integrated on a major architectural feature such as the main "
        "wall, reception desk, or hanging structure.",
        "The perspective MUST show the stand's configuration, including solid walls "
        "and open sides as described.",
        "",
        f"Camera: {angle.instruction}",
        "Lighting: cinematic exhibition-hall lighting, high resolution, realistic materials.",
    ])


# ─── Interior ────────────────────────────────────────────────────

def _interior_constraints(brief: InteriorBrief) -> list[str]:
    lines = [
        f'- Project: "{brief.project_name}" for "{brief.client_name}"',
        f"- Space area: approximately {_dimension(brief.space_area)} sqm",
        f"- Space type: {brief.space_type}",
        f"- Desired style: {brief.style}",
        f"- Key features required: {_listing(brief.features, 'None specified')}",
    ]
    if brief.brief:
        lines.append(f'- Client notes: "{brief.brief}"')
    return lines


def interior_drafting_prompt(brief: InteriorBrief, count: int) -> str:
    """Natural-language brief for the concept drafter."""
    return "\n".join([
        "You are a world-class interior designer for luxury commercial and "
        "residential spaces.",
        "",
        "Client brief:",
        *_interior_constraints(brief),
        "",
        f"Create {count} distinct interior design concepts. Each concept needs a "
        "catchy, professional title and a 3-4 sentence description of the "
        "aesthetic, material palette, lighting strategy, and furniture style. "
        "Concepts must respect the client's floor plan and moodboards.",
    ])


def interior_image_prompt(
    brief: InteriorBrief, concept: Concept, angle: ViewAngle,
) -> str:
    """Image prompt for one (concept, angle) of an interior brief."""
    return "\n".join([
        f'Photorealistic, award-winning 3D interior render of a "{brief.space_type}" '
        f'in a "{brief.style}" style.',
        f'Concept: "{concept.title}". {concept.description}',
        "",
        "Constraints:",
        *_interior_constraints(brief),
        "",
        "Reference images: the FIRST attached image is the floor plan; walls, "
        "openings, and room proportions must follow it exactly. The remaining "
        "attached images are moodboards; match their color palette, materials, "
        "and mood.",
        "",
        f"Camera: {angle.instruction}",
        "The atmosphere is professional, luxurious, and highly functional. "
        "High-quality, detailed rendering.",
    ])


# ─── Event ───────────────────────────────────────────────────────

def event_image_prompt(request: EventRequest) -> str:
    """Single prompt shared by every Event image task."""
    lines = [
        "Photorealistic, award-winning event photography.",
        f"Event vision: {request.prompt}",
    ]
    if request.event_type:
        lines.append(f"Event type: {request.event_type}.")
    if request.company_name:
        lines.append(f'Host: "{request.company_name}".')
    lines.extend([
        "Logo integration: the attached logo must appear prominently on the stage "
        "backdrop or main branding wall.",
        "Venue: high-end luxury venue. Resolution: 8k, cinematic, atmospheric depth.",
    ])
    return "\n".join(lines)
