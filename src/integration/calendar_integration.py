import logging
from datetime import datetime, timedelta
from typing import Any, Optional

import httplib2
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from dayplan.errors import CalendarError

logger = logging.getLogger(__name__)

CALENDAR_ID = "primary"


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``.

    Always derived from the two timestamps, never from a caller-supplied
    duration.
    """
    if end < start:
        raise ValueError("end must not be before start")
    return int((end - start).total_seconds() // 60)


class CalendarIntegration:
    """Thin wrapper over the Google Calendar v3 events API (blocking)."""

    def __init__(self, credentials=None, timeout_s: float = 30.0, service: Any = None):
        self.credentials = credentials
        self.timeout_s = timeout_s
        self._service = service

    def _get_service(self):
        if self._service is None:
            http = AuthorizedHttp(self.credentials, http=httplib2.Http(timeout=self.timeout_s))
            self._service = build("calendar", "v3", http=http, cache_discovery=False)
        return self._service

    def create_event(
        self,
        start_time: datetime,
        duration_min: int,
        title: str,
        guest_name: str,
        guest_email: str,
        notes: Optional[str] = None,
    ) -> str:
        end_time = start_time + timedelta(minutes=duration_min)
        body = {
            "summary": title,
            "description": notes or "",
            "start": {"dateTime": start_time.isoformat()},
            "end": {"dateTime": end_time.isoformat()},
            "attendees": [{"email": guest_email, "displayName": guest_name}],
        }

        try:
            created = (
                self._get_service()
                .events()
                .insert(calendarId=CALENDAR_ID, body=body)
                .execute()
            )
        except HttpError as e:
            raise CalendarError(f"Google Calendar rejected event '{title}': {e}") from e
        except (OSError, httplib2.HttpLib2Error) as e:
            raise CalendarError(f"Google Calendar unreachable: {e}") from e

        event_id = created.get("id")
        if not event_id:
            raise CalendarError(f"Google Calendar returned no event id for '{title}'")

        logger.info(f"Created calendar event {event_id} for '{title}'")
        return event_id

    def delete_event(self, event_id: str) -> None:
        try:
            self._get_service().events().delete(
                calendarId=CALENDAR_ID, eventId=event_id
            ).execute()
        except HttpError as e:
            if e.resp is not None and e.resp.status in (404, 410):
                logger.warning(f"Calendar event {event_id} already gone (HTTP {e.resp.status})")
                return
            raise CalendarError(f"Failed to delete calendar event {event_id}: {e}") from e
        except (OSError, httplib2.HttpLib2Error) as e:
            raise CalendarError(f"Google Calendar unreachable: {e}") from e

        logger.info(f"Deleted calendar event {event_id}")
