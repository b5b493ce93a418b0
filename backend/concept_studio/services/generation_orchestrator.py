"""Generation Orchestrator — one brief in, one branch-specific result envelope out.

Invariants:
    - Control flow: classify → validate identity → quota gate → (draft →) fan-out →
      aggregate → commit usage → notify → respond
    - No collaborator is called before the quota gate admits the request
    - Drafting completes before any image task is built
    - Any failure after admission releases the reservation and propagates unchanged;
      usage is committed only after the envelope is built
    - A cancelled caller releases its reservation; the in-flight batch is shielded and
      runs to completion or failure without being counted
    - Notification never changes the response

Design Decisions:
    - Collaborators injected via constructor (drafter, dispatcher, gate, ledger,
      notifier): the orchestrator is tested with fakes, no network, no database
    - Envelope serialized through the response schemas (by_alias) so the wire shape
      lives in one place
    - asyncio.shield around the branch pipeline: a disconnecting caller cannot abort
      collaborator calls already in flight
"""

import asyncio
import logging
from dataclasses import dataclass
from functools import partial

from concept_studio.core.aggregate_results import (
    aggregate_concepts, collect_event_images, count_absent_slots,
)
from concept_studio.core.domain_types import (
    Branch, ConceptResult, GeneratedImage, angles_for,
)
from concept_studio.core.plan_image_tasks import (
    plan_concept_tasks, plan_event_tasks,
)
from concept_studio.schemas.generation import (
    ConceptResultOut, ConceptsResponse, EventResponse, ExhibitionRequest, ImageOut,
)
from concept_studio.services.concept_drafter import ConceptDrafter
from concept_studio.services.image_dispatcher import ImageDispatcher
from concept_studio.services.notify_generation import GenerationNotifier
from concept_studio.services.parse_request import (
    GenerationRequest, parse_generation_request,
)
from concept_studio.services.prompt_builder import (
    event_image_prompt, exhibition_image_prompt, interior_image_prompt,
)
from concept_studio.services.quota_gate import QuotaGate
from concept_studio.services.usage_ledger import UsageLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationOutcome:
    """Aggregated output of one request, before usage is committed."""
    concepts: list[ConceptResult] | None = None
    event_images: list[GeneratedImage] | None = None


def _image_out(image: GeneratedImage | None) -> ImageOut | None:
    if image is None:
        return None
    return ImageOut(data=image.data, mime_type=image.mime_type, url=image.data_url)


def build_envelope(branch: Branch, outcome: GenerationOutcome, new_count: int = 0) -> dict:
    """Serialize an outcome into the camelCase response body."""
    if branch.has_concepts:
        response = ConceptsResponse(
            branch=branch.value,
            concepts=[
                ConceptResultOut(
                    title=result.title,
                    description=result.description,
                    images={k: _image_out(v) for k, v in result.images.items()},
                )
                for result in outcome.concepts
            ],
            new_count=new_count,
        )
    else:
        response = EventResponse(
            branch=branch.value,
            image_urls=[image.data_url for image in outcome.event_images],
            new_count=new_count,
        )
    return response.model_dump(by_alias=True)


def _log_detached_outcome(pipeline: asyncio.Future) -> None:
    """Retrieve the result of a batch whose caller went away."""
    if pipeline.cancelled():
        return
    error = pipeline.exception()
    if error is not None:
        logger.warning(f"Detached generation batch failed: {error}")
    else:
        logger.info("Detached generation batch finished, result discarded")


class ConceptGenerationService:
    """Runs the full generation pipeline for one request."""

    def __init__(
        self,
        gate: QuotaGate,
        drafter: ConceptDrafter,
        dispatcher: ImageDispatcher,
        ledger: UsageLedger,
        notifier: GenerationNotifier,
    ):
        self.gate = gate
        self.drafter = drafter
        self.dispatcher = dispatcher
        self.ledger = ledger
        self.notifier = notifier
        self._detached: set[asyncio.Future] = set()

    async def generate(self, body: object) -> dict:
        request = parse_generation_request(body)
        branch = request.branch
        logger.info("Generation requested", extra={"branch": branch.value})

        await self.gate.admit(request.email, branch)
        pipeline = asyncio.ensure_future(self._produce(request))
        try:
            outcome = await asyncio.shield(pipeline)
            envelope = build_envelope(branch, outcome)
            new_count = await self.ledger.commit(request.email)
        except asyncio.CancelledError:
            logger.warning(
                "Generation cancelled by caller, releasing reservation",
                extra={"branch": branch.value},
            )
            self._detached.add(pipeline)
            pipeline.add_done_callback(self._detached.discard)
            pipeline.add_done_callback(_log_detached_outcome)
            await self.ledger.release(request.email)
            raise
        except Exception as e:
            logger.warning(
                f"Generation failed, releasing reservation: {e}",
                extra={"branch": branch.value, "error_code": getattr(e, "code", None)},
            )
            await self.ledger.release(request.email)
            raise

        envelope["newCount"] = new_count
        self.notifier.notify(request, new_count)
        logger.info(
            "Generation completed",
            extra={"branch": branch.value, "new_count": new_count},
        )
        return envelope

    async def _produce(self, request: GenerationRequest) -> GenerationOutcome:
        if request.branch.has_concepts:
            return await self._produce_concepts(request)
        return await self._produce_event(request)

    async def _produce_concepts(self, request: GenerationRequest) -> GenerationOutcome:
        payload = request.payload
        concepts = await self.drafter.draft(request.branch, payload)
        angles = angles_for(request.branch)

        if isinstance(payload, ExhibitionRequest):
            build_prompt = partial(exhibition_image_prompt, payload.exhibition_brief)
        else:
            build_prompt = partial(interior_image_prompt, payload.interior_brief)

        tasks = plan_concept_tasks(concepts, angles, build_prompt, request.reference_images)
        settled = await self.dispatcher.dispatch(tasks)
        results = aggregate_concepts(concepts, angles, settled)
        absent = count_absent_slots(results)
        if absent:
            logger.warning(
                f"{absent} image slot(s) came back empty",
                extra={"branch": request.branch.value, "absent_slots": absent},
            )
        return GenerationOutcome(concepts=results)

    async def _produce_event(self, request: GenerationRequest) -> GenerationOutcome:
        tasks = plan_event_tasks(
            event_image_prompt(request.payload), request.reference_images,
        )
        settled = await self.dispatcher.dispatch(tasks)
        return GenerationOutcome(event_images=collect_event_images(settled))
