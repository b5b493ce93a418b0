"""Gemini Image Client — verifies image extraction, request shape, and error mapping.

Tests:
    - First inline image part is returned base64-encoded; text-only → None
    - Reference images are sent as inline parts before the prompt
    - SDK APIError → ExternalServiceError; invalid base64 reference → ExternalServiceError
"""

import base64
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from google.genai import errors as genai_errors

from concept_studio.core.domain_types import ReferenceImage
from concept_studio.core.errors import ExternalServiceError
from concept_studio.infrastructure.gemini_image_client import (
    GeminiImageClient, extract_image,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def _response(*parts):
    return SimpleNamespace(candidates=[
        SimpleNamespace(content=SimpleNamespace(parts=list(parts))),
    ])


def _image_part(data=PNG_BYTES, mime_type="image/png"):
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)


def _text_part(text="I cannot draw that"):
    return SimpleNamespace(inline_data=None, text=text)


def test_extract_first_inline_image():
    image = extract_image(_response(_text_part(), _image_part()))
    assert image.mime_type == "image/png"
    assert base64.b64decode(image.data) == PNG_BYTES


def test_extract_text_only_response_is_none():
    assert extract_image(_response(_text_part())) is None


def test_extract_empty_response_is_none():
    assert extract_image(SimpleNamespace(candidates=None)) is None
    assert extract_image(SimpleNamespace(candidates=[SimpleNamespace(content=None)])) is None


def test_extract_defaults_mime_type():
    assert extract_image(_response(_image_part(mime_type=None))).mime_type == "image/png"


@pytest.fixture
def gemini():
    client = GeminiImageClient(api_key="gemini-test-fake-key", model="image-model")
    client.client = SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(
        generate_content=AsyncMock(return_value=_response(_image_part())),
    )))
    return client


async def test_generate_sends_references_then_prompt(gemini):
    ref = ReferenceImage(base64.b64encode(b"logo").decode(), "image/png")

    image = await gemini.generate("a stand", [ref])

    assert image is not None
    call = gemini.client.aio.models.generate_content.await_args
    assert call.kwargs["model"] == "image-model"
    parts = call.kwargs["contents"][0].parts
    assert parts[0].inline_data.data == b"logo"
    assert parts[-1].text == "a stand"
    assert call.kwargs["config"].response_modalities == ["IMAGE"]


async def test_generate_returns_none_without_image(gemini):
    gemini.client.aio.models.generate_content.return_value = _response(_text_part())
    assert await gemini.generate("a stand", []) is None


async def test_api_error_maps_to_external_service_error(gemini):
    gemini.client.aio.models.generate_content.side_effect = genai_errors.APIError(
        503, {"error": {"message": "overloaded", "status": "UNAVAILABLE"}},
    )
    with pytest.raises(ExternalServiceError) as exc:
        await gemini.generate("a stand", [])
    assert exc.value.service == "Gemini"


async def test_invalid_reference_base64_is_rejected(gemini):
    with pytest.raises(ExternalServiceError):
        await gemini.generate("a stand", [ReferenceImage("not base64!!", "image/png")])
    gemini.client.aio.models.generate_content.assert_not_awaited()
