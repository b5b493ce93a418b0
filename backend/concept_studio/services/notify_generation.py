"""Generation Notifier — hands a finished generation to the notification channel.

Invariants:
    - notify() never raises: formatting or channel failures are logged only
    - Binary assets never reach the message (brief_summary excludes them)
    - Timestamp is UTC, taken at notification time
"""

import logging
from datetime import datetime, timezone

from concept_studio.core.format_notification import build_notification
from concept_studio.core.repository_protocols import NotificationChannel
from concept_studio.services.parse_request import GenerationRequest

logger = logging.getLogger(__name__)


class GenerationNotifier:
    """Builds the summary message and publishes it (best effort)."""

    def __init__(self, channel: NotificationChannel):
        self.channel = channel

    def notify(self, request: GenerationRequest, new_count: int) -> None:
        try:
            message = build_notification(
                request.email,
                request.branch,
                request.brief_summary(),
                datetime.now(timezone.utc),
                new_count,
            )
            self.channel.publish(message)
        except Exception as e:
            logger.error(
                f"Notification not published: {e}",
                extra={"branch": request.branch.value},
                exc_info=True,
            )
