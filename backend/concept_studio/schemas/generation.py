"""Generation Schemas — Pydantic models for the three branch payloads and their responses.

Invariants:
    - JSON is camelCase on the wire, snake_case in Python (alias_generator)
    - Reference assets must be image/* with non-empty base64 data
    - Data-URL prefixes ("data:image/png;base64,") are stripped on ingress
    - Asset data must decode as strict base64, so a broken upload is a 400 before
      any quota reservation or model call
    - Identity email is NOT validated here — the quota gate owns that rule

Design Decisions:
    - One model per branch over a single optional-everything model: each branch's
      required companions are enforced by Pydantic natively
    - field_validator for side-effect-free transforms (strip) — keeps models pure
"""

import base64
import binascii

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _strip_data_url(v: str) -> str:
    """Drop an optional data-URL prefix and surrounding whitespace."""
    v = v.strip()
    if v.startswith("data:") and "," in v:
        v = v.split(",", 1)[1]
    if not v:
        raise ValueError("asset data cannot be empty")
    try:
        base64.b64decode(v, validate=True)
    except binascii.Error:
        raise ValueError("asset data is not valid base64") from None
    return v


class CamelModel(BaseModel):
    """Base model — camelCase aliases, accepts snake_case too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EncodedAsset(CamelModel):
    """A base64-encoded image uploaded with the brief."""
    data: str = Field(min_length=1)
    mime_type: str = Field(pattern=r"^image/[a-zA-Z0-9.+-]+$")

    @field_validator("data")
    @classmethod
    def strip_data_url(cls, v: str) -> str:
        return _strip_data_url(v)


# --- Exhibition ---------------------------------------------------------------

class ExhibitionBrief(CamelModel):
    """Exhibition stand brief."""
    company_name: str = Field(min_length=1, max_length=200)
    event_name: str = Field(min_length=1, max_length=200)
    industry: str | None = Field(None, max_length=200)
    stand_width: float = Field(gt=0, le=200)
    stand_length: float = Field(gt=0, le=200)
    stand_height: str | None = Field(None, max_length=20)
    stand_layout: str = Field(min_length=1, max_length=100)
    stand_type: str | None = Field(None, max_length=100)
    style: str | None = Field(None, max_length=200)
    style_description: str | None = Field(None, max_length=1000)
    functionality: list[str] = Field(default_factory=list, max_length=30)
    brand_colors: str | None = Field(None, max_length=300)
    double_decker: bool = False
    hanging_structure: bool = False
    hostess: bool = False
    brief: str | None = Field(None, max_length=5000)
    user_name: str | None = Field(None, max_length=200)
    user_email: str | None = None
    user_mobile: str | None = Field(None, max_length=50)

    @field_validator("company_name", "event_name", "stand_layout")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty or whitespace")
        return v


class ExhibitionRequest(CamelModel):
    """Exhibition branch payload — brief plus logo."""
    exhibition_brief: ExhibitionBrief
    logo: str = Field(min_length=1)
    logo_mime_type: str = Field(pattern=r"^image/[a-zA-Z0-9.+-]+$")

    @field_validator("logo")
    @classmethod
    def strip_logo(cls, v: str) -> str:
        return _strip_data_url(v)


# --- Interior -----------------------------------------------------------------

class InteriorBrief(CamelModel):
    """Interior design brief."""
    project_name: str = Field(min_length=1, max_length=200)
    client_name: str = Field(min_length=1, max_length=200)
    space_area: float = Field(gt=0, le=100_000)
    space_type: str = Field(min_length=1, max_length=200)
    style: str = Field(min_length=1, max_length=200)
    features: list[str] = Field(default_factory=list, max_length=30)
    brief: str | None = Field(None, max_length=5000)
    user_name: str | None = Field(None, max_length=200)
    user_email: str | None = None
    user_mobile: str | None = Field(None, max_length=50)


class InteriorRequest(CamelModel):
    """Interior branch payload — brief plus floor plan and moodboards."""
    interior_brief: InteriorBrief
    floor_plan: EncodedAsset
    moodboards: list[EncodedAsset] = Field(min_length=1, max_length=5)


# --- Event --------------------------------------------------------------------

class EventRequest(CamelModel):
    """Event branch payload — a plain prompt plus logo."""
    prompt: str = Field(min_length=1, max_length=5000)
    logo: str = Field(min_length=1)
    logo_mime_type: str = Field(pattern=r"^image/[a-zA-Z0-9.+-]+$")
    user_name: str | None = Field(None, max_length=200)
    user_email: str | None = None
    company_name: str | None = Field(None, max_length=200)
    event_type: str | None = Field(None, max_length=100)

    @field_validator("prompt")
    @classmethod
    def strip_prompt(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("prompt cannot be empty or whitespace")
        return v

    @field_validator("logo")
    @classmethod
    def strip_logo(cls, v: str) -> str:
        return _strip_data_url(v)


# --- Responses ----------------------------------------------------------------

class ImageOut(CamelModel):
    """One generated image, inline."""
    data: str
    mime_type: str
    url: str


class ConceptResultOut(CamelModel):
    """A concept with its angle → image map (null for absent slots)."""
    title: str
    description: str
    images: dict[str, ImageOut | None]


class ConceptsResponse(CamelModel):
    """Exhibition / Interior success body."""
    branch: str
    concepts: list[ConceptResultOut]
    new_count: int


class EventResponse(CamelModel):
    """Event success body."""
    branch: str
    image_urls: list[str]
    new_count: int
