"""Image Fan-Out Dispatcher — runs a planned batch of image tasks concurrently.

Invariants:
    - Every task is started; the dispatcher returns only after every task settles
    - If any call raised, the FIRST exception in task order propagates (after settling)
    - A call that succeeds without an image settles as an absent slot (image=None)
    - Output order equals input order, regardless of completion order

Design Decisions:
    - asyncio.gather(return_exceptions=True): no sibling is cancelled mid-flight, so
      the failure surfaced is deterministic rather than whichever finished first
    - Optional semaphore caps in-flight calls without touching ordering
"""

import asyncio
import logging
from collections.abc import Sequence

from concept_studio.core.domain_types import ImageTask, SettledTask
from concept_studio.core.repository_protocols import ImageGenerator

logger = logging.getLogger(__name__)


class ImageDispatcher:
    """Executes ImageTasks against an ImageGenerator collaborator."""

    def __init__(self, generator: ImageGenerator, max_concurrency: int | None = None):
        self.generator = generator
        self._semaphore = (
            asyncio.Semaphore(max_concurrency)
            if max_concurrency and max_concurrency > 0
            else None
        )

    async def _run(self, task: ImageTask) -> SettledTask:
        if self._semaphore is None:
            image = await self.generator.generate(task.prompt, task.reference_images)
        else:
            async with self._semaphore:
                image = await self.generator.generate(task.prompt, task.reference_images)
        return SettledTask(task=task, image=image)

    async def dispatch(self, tasks: Sequence[ImageTask]) -> list[SettledTask]:
        """Run all tasks, wait for all, then fail on the first error if any."""
        outcomes = await asyncio.gather(
            *(self._run(task) for task in tasks), return_exceptions=True,
        )
        failures = [o for o in outcomes if isinstance(o, BaseException)]
        if failures:
            logger.warning(
                f"Image batch aborted: {len(failures)} of {len(tasks)} call(s) failed",
                extra={"task_count": len(tasks)},
            )
            raise failures[0]

        settled = list(outcomes)
        absent = sum(1 for s in settled if s.image is None)
        logger.info(
            f"Image batch settled ({absent} absent)",
            extra={"task_count": len(tasks), "absent_slots": absent},
        )
        return settled
