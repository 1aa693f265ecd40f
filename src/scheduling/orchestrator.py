"""
Scheduling pipeline: free text -> extracted tasks -> image -> calendar event -> row.

One submission is one independent run. Tasks are handled strictly in order and
each ends either ``persisted`` or ``failed``; a failed task never stops the
rest of the batch. Only the extraction step can fail the whole submission.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from dayplan.models import NewTask, TaskOutcome, TaskRecord, TaskState
from dayplan.errors import TaskNotFoundError
from extraction.task_extractor import TaskExtractor
from imaging.image_client import ImageSource
from imaging.image_prompt import build_image_prompt
from integration.calendar_adapter import CalendarEventAdapter
from llm.llm_client import task_label, validate_task
from storage.task_store import TaskRepository

logger = logging.getLogger(__name__)


class SchedulingOrchestrator:

    def __init__(
        self,
        extractor: TaskExtractor,
        calendar: CalendarEventAdapter,
        store: TaskRepository,
        image_source: Optional[ImageSource] = None,
        timezone: str = "Asia/Kolkata",
        pacing_delay_s: float = 0.3,
        compensate_on_persist_failure: bool = False,
    ):
        self.extractor = extractor
        self.calendar = calendar
        self.store = store
        self.image_source = image_source
        self.timezone = timezone
        self.pacing_delay_s = pacing_delay_s
        self.compensate_on_persist_failure = compensate_on_persist_failure

    def today(self) -> date:
        return datetime.now(ZoneInfo(self.timezone)).date()

    async def submit(self, owner_id: str, text: str, today: Optional[date] = None) -> List[TaskOutcome]:
        """Run the whole pipeline for one submission.

        Raises whatever the extraction step raises (``ExtractionError`` or
        ``ValueError`` for empty text); per-task failures are reported in the
        returned outcomes instead.
        """
        today = today or self.today()
        logger.info(f"Scheduling submission for owner {owner_id} on {today.isoformat()}")

        tasks = await asyncio.to_thread(self.extractor.extract, text, today, self.timezone)

        outcomes: List[TaskOutcome] = []
        for i, item in enumerate(tasks):
            outcome = await self._schedule_one(owner_id, item)
            outcomes.append(outcome)

            # pacing between successes, nothing after the last task
            if outcome.success and self.pacing_delay_s > 0 and i < len(tasks) - 1:
                await asyncio.sleep(self.pacing_delay_s)

        succeeded = sum(1 for o in outcomes if o.success)
        logger.info(f"Submission done for owner {owner_id}: {succeeded}/{len(outcomes)} scheduled")
        return outcomes

    async def _schedule_one(self, owner_id: str, item: Dict[str, Any]) -> TaskOutcome:
        state = TaskState.EXTRACTED
        event_id: Optional[str] = None
        title = task_label(item)

        try:
            task = validate_task(item)
            title = task.title

            image: Optional[str] = None
            if self.image_source is not None:
                state = TaskState.ENRICHING
                image = await asyncio.to_thread(self.image_source.generate, build_image_prompt(task))

            event_id = await self.calendar.create_event(
                owner_id,
                task.start_time,
                task.end_time,
                task.title,
                task.description or None,
            )
            state = TaskState.CALENDAR_CREATED

            record = await self.store.create(
                NewTask(
                    owner_id=owner_id,
                    title=task.title,
                    description=task.description or None,
                    start_time=task.start_time,
                    end_time=task.end_time,
                    timezone=task.timezone or self.timezone,
                    calendar_event_id=event_id,
                    base64_image=image,
                )
            )
        except Exception as e:
            logger.warning(f"Failed to schedule '{title}' (stage: {state.value}): {e}")
            if state is TaskState.CALENDAR_CREATED and self.compensate_on_persist_failure:
                await self._compensate(owner_id, event_id)
            return TaskOutcome(
                title=title,
                success=False,
                error=str(e),
                state=TaskState.FAILED,
                failed_at=state,
                calendar_event_id=event_id,
            )

        logger.info(f"Scheduled '{task.title}' as task {record.id} (event {event_id})")
        return TaskOutcome(
            title=task.title,
            success=True,
            state=TaskState.PERSISTED,
            task_id=record.id,
            calendar_event_id=event_id,
        )

    async def _compensate(self, owner_id: str, event_id: Optional[str]) -> None:
        if not event_id:
            return
        try:
            await self.calendar.delete_event(owner_id, event_id)
            logger.info(f"Rolled back calendar event {event_id} after persistence failure")
        except Exception as e:
            logger.error(f"Could not roll back calendar event {event_id}: {e}")

    async def delete_task(self, owner_id: str, event_id: str) -> bool:
        """Remove the calendar event, then the row.

        If the calendar call fails the error propagates and the row stays.
        """
        record = await self.store.get_by_event_id(owner_id, event_id)
        if record is None:
            raise TaskNotFoundError(f"No task with calendar event {event_id}")

        await self.calendar.delete_event(owner_id, event_id)
        return await self.store.delete_by_event_id(owner_id, event_id)

    async def toggle_completion(self, owner_id: str, task_id: UUID) -> TaskRecord:
        return await self.store.toggle_completion(owner_id, task_id)

    async def set_completion(self, owner_id: str, task_id: UUID, completed: bool) -> TaskRecord:
        return await self.store.set_completion(owner_id, task_id, completed)

    async def list_tasks(self, owner_id: str) -> List[TaskRecord]:
        return await self.store.list_for_owner(owner_id)
