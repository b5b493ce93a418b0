"""Boundary Protocols — contracts between the generation core and its collaborators.

Invariants:
    - Core NEVER imports from infrastructure — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by main.py via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Counter store exposes reserve/commit/release instead of get-then-set: every
      write is a single atomic statement in the implementation
"""

from collections.abc import Sequence
from typing import Protocol

from concept_studio.core.domain_types import (
    GeneratedImage, IdentityEmail, ReferenceImage,
)
from concept_studio.core.format_notification import NotificationMessage


class ImageGenerator(Protocol):
    """Contract for one image-generation call.

    Returns None when the call succeeds but yields no image payload;
    raises when the call itself fails.
    """
    async def generate(
        self, prompt: str, reference_images: Sequence[ReferenceImage],
    ) -> GeneratedImage | None: ...


class UsageCounterStore(Protocol):
    """Contract for per-identity usage counting — implemented by infrastructure."""
    async def get(self, email: IdentityEmail) -> int: ...
    async def reserve(self, email: IdentityEmail, limit: int) -> bool: ...
    async def commit(self, email: IdentityEmail) -> int: ...
    async def release(self, email: IdentityEmail) -> None: ...


class EmailSender(Protocol):
    """Contract for outbound email — implemented by infrastructure."""
    async def send(
        self, *, from_addr: str, to: str, subject: str, html: str, reply_to: str,
    ) -> None: ...


class NotificationChannel(Protocol):
    """Best-effort outbound channel. publish() must never raise."""
    def publish(self, message: NotificationMessage) -> None: ...
