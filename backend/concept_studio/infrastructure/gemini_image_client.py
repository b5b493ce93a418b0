"""Gemini Image Client — image-generation collaborator backed by google-genai.

Invariants:
    - One call per ImageTask: prompt text + every reference image as inline parts
    - A successful response without an inline image part returns None (absent slot)
    - SDK/transport failures raise ExternalServiceError — the dispatcher aborts the batch
    - No retry here: the transport timeout is the only per-call limit

Design Decisions:
    - Async SDK surface (client.aio): image calls run concurrently on the event loop
    - Reference images decoded once per call from base64; output re-encoded to base64
      so the response path never handles raw bytes
"""

import base64
import binascii
import logging
from collections.abc import Sequence

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from concept_studio.core.domain_types import GeneratedImage, ReferenceImage
from concept_studio.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

_SERVICE = "Gemini"


def _reference_part(ref: ReferenceImage) -> types.Part:
    try:
        raw = base64.b64decode(ref.data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ExternalServiceError(
            f"Reference image is not valid base64: {e}", _SERVICE,
        )
    return types.Part.from_bytes(data=raw, mime_type=ref.mime_type)


def extract_image(response) -> GeneratedImage | None:
    """First inline image part of the first candidate, or None."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is None or not inline.data:
                continue
            data = inline.data
            if isinstance(data, bytes):
                data = base64.b64encode(data).decode("ascii")
            return GeneratedImage(
                data=data, mime_type=inline.mime_type or "image/png",
            )
        break
    return None


class GeminiImageClient:
    """Generates one image per call with reference images attached."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-3-pro-image-preview",
        aspect_ratio: str = "16:9",
        timeout_seconds: int = 180,
    ):
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=timeout_seconds * 1000),
        )
        self.model = model
        self.aspect_ratio = aspect_ratio

    async def generate(
        self, prompt: str, reference_images: Sequence[ReferenceImage],
    ) -> GeneratedImage | None:
        parts = [_reference_part(ref) for ref in reference_images]
        parts.append(types.Part.from_text(text=prompt))
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[types.Content(role="user", parts=parts)],
                config=types.GenerateContentConfig(
                    response_modalities=["IMAGE"],
                    image_config=types.ImageConfig(
                        aspect_ratio=self.aspect_ratio,
                    ),
                ),
            )
        except genai_errors.APIError as e:
            raise ExternalServiceError(
                f"{e.code} {e.message}", _SERVICE,
            ) from e

        image = extract_image(response)
        if image is None:
            logger.warning("Gemini returned no image payload")
        return image
