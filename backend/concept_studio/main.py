"""Concept Studio API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map StudioError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Collaborators, database, and the notification worker are built in the lifespan
      and torn down in reverse order

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Composition root lives here: services receive every collaborator explicitly
"""

import logging
from contextlib import asynccontextmanager
from email.utils import formataddr

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from concept_studio.api.error_handlers import register_error_handlers
from concept_studio.api.routes import generate_concepts, health
from concept_studio.config import Settings, get_settings
from concept_studio.infrastructure.anthropic_client import ResilientAnthropicClient
from concept_studio.infrastructure.database import DatabaseSessionManager, init_db
from concept_studio.infrastructure.email_sender import SmtpEmailSender
from concept_studio.infrastructure.gemini_image_client import GeminiImageClient
from concept_studio.infrastructure.notification_queue import NotificationQueue
from concept_studio.infrastructure.observability import setup_logging
from concept_studio.infrastructure.usage_store import SqlUsageStore
from concept_studio.services.concept_drafter import ConceptDrafter
from concept_studio.services.generation_orchestrator import ConceptGenerationService
from concept_studio.services.image_dispatcher import ImageDispatcher
from concept_studio.services.notify_generation import GenerationNotifier
from concept_studio.services.quota_gate import QuotaGate
from concept_studio.services.usage_ledger import UsageLedger

logger = logging.getLogger(__name__)


def build_notification_queue(settings: Settings) -> NotificationQueue:
    """Queue with an SMTP sender, or a disabled queue when credentials are missing."""
    if not settings.notifications_enabled:
        logger.warning("SMTP credentials missing, generation notifications disabled")
        return NotificationQueue(None, "", settings.notify_to)
    sender = SmtpEmailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
    )
    return NotificationQueue(
        sender,
        formataddr((settings.notify_from_name, settings.smtp_user)),
        settings.notify_to,
        maxsize=settings.notification_queue_size,
    )


def build_generation_service(
    settings: Settings,
    db: DatabaseSessionManager,
    notifications: NotificationQueue,
) -> ConceptGenerationService:
    store = SqlUsageStore(db)
    text_client = ResilientAnthropicClient(
        api_key=settings.anthropic_api_key,
        max_retries=settings.anthropic_max_retries,
        base_delay_ms=settings.anthropic_base_delay_ms,
        max_delay_ms=settings.anthropic_max_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )
    image_client = GeminiImageClient(
        api_key=settings.gemini_api_key,
        model=settings.image_model,
        aspect_ratio=settings.image_aspect_ratio,
        timeout_seconds=settings.image_timeout_seconds,
    )
    return ConceptGenerationService(
        gate=QuotaGate(store, settings.free_generation_limit),
        drafter=ConceptDrafter(
            text_client,
            model=settings.draft_model,
            max_tokens=settings.draft_max_tokens,
            concept_count=settings.concept_count,
        ),
        dispatcher=ImageDispatcher(image_client, settings.image_max_concurrency),
        ledger=UsageLedger(store),
        notifier=GenerationNotifier(notifications),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    notifications = build_notification_queue(settings)
    await notifications.start()
    app.state.notifications = notifications
    app.state.generation_service = build_generation_service(
        settings, db, notifications,
    )
    logger.info("Concept Studio API started")
    yield
    logger.info("Concept Studio API shutting down")
    await notifications.stop()
    await db.dispose()


app = FastAPI(
    title="Concept Studio API", version="1.0.0", lifespan=lifespan,
)

# CORS: configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(generate_concepts.router)

register_error_handlers(app)
