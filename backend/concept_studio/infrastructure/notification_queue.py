"""Notification Queue — best-effort, detached delivery of generation summaries.

Invariants:
    - publish() never raises and never awaits — the response path cannot block on it
    - A full queue drops the message (logged), it never applies backpressure
    - Worker failures are logged and swallowed; the worker keeps running
    - No sender configured → notifications silently disabled

Design Decisions:
    - asyncio.Queue + one worker task started in the FastAPI lifespan: message passing
      isolates SMTP failures from the HTTP response entirely
    - stop() drains with a timeout, then cancels: shutdown is bounded
"""

import asyncio
import contextlib
import logging

from concept_studio.core.format_notification import NotificationMessage
from concept_studio.core.repository_protocols import EmailSender

logger = logging.getLogger(__name__)


class NotificationQueue:
    """NotificationChannel backed by an in-process queue and a worker task."""

    def __init__(
        self,
        sender: EmailSender | None,
        from_addr: str,
        to_addr: str,
        maxsize: int = 100,
    ):
        self._sender = sender
        self._from_addr = from_addr
        self._to_addr = to_addr
        self._queue: asyncio.Queue[NotificationMessage] = asyncio.Queue(maxsize=maxsize)
        self._worker: asyncio.Task | None = None

    @property
    def enabled(self) -> bool:
        return self._sender is not None

    def publish(self, message: NotificationMessage) -> None:
        """Enqueue a message for background delivery."""
        if not self.enabled:
            logger.debug("Notifications disabled (no email credentials)")
            return
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning(f"Notification queue full, dropping: {message.subject}")

    async def start(self) -> None:
        if self.enabled and self._worker is None:
            self._worker = asyncio.create_task(self._run(), name="notification-worker")

    async def stop(self, drain_timeout: float = 5.0) -> None:
        if self._worker is None:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=drain_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Notification queue not drained, {self._queue.qsize()} message(s) lost",
            )
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None

    async def _run(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                await self._sender.send(
                    from_addr=self._from_addr,
                    to=self._to_addr,
                    subject=message.subject,
                    html=message.html,
                    reply_to=message.reply_to,
                )
            except Exception as e:
                logger.error(f"Notification delivery failed: {e}", exc_info=True)
            finally:
                self._queue.task_done()
