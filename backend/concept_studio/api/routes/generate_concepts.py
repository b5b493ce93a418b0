"""Concept Generation Route — POST /api/v1/generate-concepts.

Invariants:
    - The body is accepted as a raw JSON object; branch classification and field
      validation belong to the service (400 semantics owned there)
    - Success → 200 with the branch envelope; every failure is a StudioError mapped
      by the global handlers

Design Decisions:
    - Service resolved through a dependency reading app.state: built once in the
      lifespan, replaced in tests via app.dependency_overrides
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from concept_studio.services.generation_orchestrator import ConceptGenerationService

router = APIRouter(prefix="/api/v1", tags=["generation"])


def get_generation_service(request: Request) -> ConceptGenerationService:
    return request.app.state.generation_service


@router.post("/generate-concepts")
async def generate_concepts(
    body: Any = Body(...),
    service: ConceptGenerationService = Depends(get_generation_service),
):
    """Generate concepts and images for one Exhibition, Interior, or Event brief."""
    return await service.generate(body)
