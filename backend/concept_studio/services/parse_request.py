"""Request Parsing — classifies a raw body into exactly one generation branch.

Invariants:
    - Exactly one discriminator (exhibitionBrief / interiorBrief / prompt) must be present
    - Branch is decided HERE, once; downstream code switches on GenerationRequest.branch
    - Identity email is validated before the branch payload (fail fast, zero cost)
    - Pydantic errors are re-raised as ValidationError naming the first bad field

Design Decisions:
    - Raw dict in, typed GenerationRequest out: the route stays a thin shell and the
      400 semantics (validation vs. invalid payload) are owned here
"""

from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError

from concept_studio.core.domain_types import Branch, IdentityEmail, ReferenceImage
from concept_studio.core.enforce_quota import validate_identity_email
from concept_studio.core.errors import (
    ErrorContext, InvalidPayloadError, ValidationError,
)
from concept_studio.schemas.generation import (
    EventRequest, ExhibitionRequest, InteriorRequest,
)

_DISCRIMINATORS: dict[str, Branch] = {
    "exhibitionBrief": Branch.EXHIBITION,
    "interiorBrief": Branch.INTERIOR,
    "prompt": Branch.EVENT,
}

_PAYLOAD_MODELS = {
    Branch.EXHIBITION: ExhibitionRequest,
    Branch.INTERIOR: InteriorRequest,
    Branch.EVENT: EventRequest,
}

BranchPayload = ExhibitionRequest | InteriorRequest | EventRequest


@dataclass(frozen=True)
class GenerationRequest:
    """One validated submission — the tagged union used by the whole pipeline."""
    branch: Branch
    email: IdentityEmail
    payload: BranchPayload

    @property
    def reference_images(self) -> tuple[ReferenceImage, ...]:
        """Images attached to every image task of this request."""
        p = self.payload
        if isinstance(p, InteriorRequest):
            assets = [p.floor_plan, *p.moodboards]
            return tuple(ReferenceImage(a.data, a.mime_type) for a in assets)
        return (ReferenceImage(p.logo, p.logo_mime_type),)

    def brief_summary(self) -> dict:
        """Submitted brief without binary assets (for notifications)."""
        p = self.payload
        if isinstance(p, ExhibitionRequest):
            return p.exhibition_brief.model_dump()
        if isinstance(p, InteriorRequest):
            summary = p.interior_brief.model_dump()
            summary["moodboards_attached"] = len(p.moodboards)
            return summary
        return p.model_dump(exclude={"logo", "logo_mime_type"})


def classify_payload(body: dict) -> Branch:
    """Return the single branch whose discriminator is present."""
    present = [
        branch for key, branch in _DISCRIMINATORS.items()
        if body.get(key) is not None
    ]
    if not present:
        raise InvalidPayloadError(
            "Request must include one of: exhibitionBrief, interiorBrief, prompt.",
        )
    if len(present) > 1:
        raise InvalidPayloadError(
            "Request must include exactly one of: exhibitionBrief, interiorBrief, "
            f"prompt (got {', '.join(b.value for b in present)}).",
        )
    return present[0]


def extract_raw_email(branch: Branch, body: dict) -> object:
    """Identity email from the branch-appropriate field (unvalidated)."""
    if branch is Branch.EVENT:
        return body.get("userEmail")
    key = "exhibitionBrief" if branch is Branch.EXHIBITION else "interiorBrief"
    brief = body.get(key)
    if not isinstance(brief, dict):
        return None
    return brief.get("userEmail")


def _describe(error: PydanticValidationError) -> tuple[str, str]:
    first = error.errors()[0]
    field = ".".join(str(loc) for loc in first["loc"]) or "body"
    return f"Invalid field '{field}': {first['msg']}", field


def parse_generation_request(body: object) -> GenerationRequest:
    """Classify, validate identity, then validate the branch payload."""
    if not isinstance(body, dict):
        raise InvalidPayloadError("Request body must be a JSON object.")

    branch = classify_payload(body)
    email = validate_identity_email(extract_raw_email(branch, body), branch)

    try:
        payload = _PAYLOAD_MODELS[branch].model_validate(body)
    except PydanticValidationError as e:
        message, field = _describe(e)
        raise ValidationError(message, field, ErrorContext(branch=branch.value))

    return GenerationRequest(branch=branch, email=email, payload=payload)
