import logging
from typing import Optional

from dayplan.config import ImageMode, PlannerConfig
from extraction.task_extractor import TaskExtractor
from imaging.image_client import ImageGenerationClient, ImageSource
from imaging.placeholder import PlaceholderImageSource
from integration.calendar_adapter import CalendarEventAdapter
from integration.identity import ClerkIdentityProvider
from llm.llm_client import LLMClient
from llm.providers import build_provider
from scheduling.orchestrator import SchedulingOrchestrator
from storage.google_auth import GoogleAuthStore
from storage.task_store import TaskRepository

logger = logging.getLogger(__name__)


def build_image_source(config: PlannerConfig) -> Optional[ImageSource]:
    if config.image_mode is ImageMode.GENERATE:
        return ImageGenerationClient(config.image_api_url, timeout_s=config.image_timeout_s)
    if config.image_mode is ImageMode.PLACEHOLDER:
        return PlaceholderImageSource()
    return None


def build_google_auth_store(config: PlannerConfig) -> GoogleAuthStore:
    return GoogleAuthStore(
        encryption_key=config.google_token_encryption_key or None,
        client_id=config.google_client_id or None,
        client_secret=config.google_client_secret or None,
    )


def build_orchestrator(
    config: PlannerConfig,
    store: TaskRepository,
    google_auth_store: GoogleAuthStore,
) -> SchedulingOrchestrator:
    """Central wiring of the planner: one orchestrator per process."""
    extractor = TaskExtractor(LLMClient(build_provider(config)))
    identity = ClerkIdentityProvider(
        config.clerk_secret_key,
        api_url=config.clerk_api_url,
        timeout_s=config.identity_timeout_s,
    )
    calendar = CalendarEventAdapter(
        identity,
        google_auth_store,
        timeout_s=config.calendar_timeout_s,
    )

    logger.info(
        f"Orchestrator ready (llm={config.llm_provider.value}, images={config.image_mode.value}, "
        f"tz={config.timezone})"
    )
    return SchedulingOrchestrator(
        extractor=extractor,
        calendar=calendar,
        store=store,
        image_source=build_image_source(config),
        timezone=config.timezone,
        pacing_delay_s=config.task_pacing_delay_s,
        compensate_on_persist_failure=config.compensate_on_persist_failure,
    )
