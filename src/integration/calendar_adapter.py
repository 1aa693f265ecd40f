import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from dayplan.errors import CalendarError
from integration.calendar_integration import CalendarIntegration, minutes_between
from integration.identity import ClerkIdentityProvider
from storage.google_auth import GoogleAuthStore

logger = logging.getLogger(__name__)


class CalendarEventAdapter:
    """Owner-aware calendar operations.

    Resolves the owner's profile and stored Google credentials, then runs the
    blocking Google client off the event loop.
    """

    def __init__(
        self,
        identity: ClerkIdentityProvider,
        auth_store: GoogleAuthStore,
        timeout_s: float = 30.0,
        integration_factory: Optional[Callable[..., CalendarIntegration]] = None,
    ):
        self.identity = identity
        self.auth_store = auth_store
        self.timeout_s = timeout_s
        self.integration_factory = integration_factory or CalendarIntegration

    async def _integration_for(self, owner_id: str) -> CalendarIntegration:
        credentials = await self.auth_store.get_credentials(owner_id)
        if credentials is None:
            raise CalendarError(f"No Google Calendar connected for user {owner_id}")
        return self.integration_factory(credentials=credentials, timeout_s=self.timeout_s)

    async def create_event(
        self,
        owner_id: str,
        start_time: datetime,
        end_time: datetime,
        title: str,
        notes: Optional[str] = None,
    ) -> str:
        profile = await asyncio.to_thread(self.identity.get_profile, owner_id)
        integration = await self._integration_for(owner_id)

        return await asyncio.to_thread(
            integration.create_event,
            start_time,
            minutes_between(start_time, end_time),
            title,
            profile.display_name,
            profile.primary_email,
            notes,
        )

    async def delete_event(self, owner_id: str, event_id: str) -> None:
        integration = await self._integration_for(owner_id)
        await asyncio.to_thread(integration.delete_event, event_id)
