import uuid
from datetime import datetime, timezone
from typing import List, Optional

import pytest

from dayplan.errors import CalendarError, PersistenceError, TaskNotFoundError
from dayplan.models import NewTask, TaskRecord
from llm.providers.base import LLMProvider
from storage.task_store import TaskRepository


class FakeProvider(LLMProvider):
    name = "fake"

    def __init__(self, response_text: str):
        self._response_text = response_text
        self.calls = []

    def complete(self, *, system: str, user: str) -> str:
        self.calls.append((system, user))
        return self._response_text


@pytest.fixture
def fake_provider_factory():
    def _make(response_text: str):
        return FakeProvider(response_text)
    return _make


class FakeCalendar:
    """Records calls; ``fail_on`` lists titles whose creation raises."""

    def __init__(self, fail_on=(), fail_delete=False, log=None):
        self.fail_on = set(fail_on)
        self.fail_delete = fail_delete
        self.created = []
        self.deleted = []
        self.log = log if log is not None else []

    async def create_event(self, owner_id, start_time, end_time, title, notes=None):
        if title in self.fail_on:
            raise CalendarError(f"calendar refused '{title}'")
        event_id = f"evt-{len(self.created) + 1}"
        self.created.append((owner_id, event_id, start_time, end_time, title))
        self.log.append(("calendar.create", event_id))
        return event_id

    async def delete_event(self, owner_id, event_id):
        self.log.append(("calendar.delete", event_id))
        if self.fail_delete:
            raise CalendarError("calendar unavailable")
        self.deleted.append(event_id)


class FakeTaskStore(TaskRepository):

    def __init__(self, fail_create=False, log=None):
        self.rows: List[TaskRecord] = []
        self.fail_create = fail_create
        self.log = log if log is not None else []

    async def create(self, task: NewTask) -> TaskRecord:
        if self.fail_create:
            raise PersistenceError("database down")
        now = datetime.now(timezone.utc)
        record = TaskRecord(**task.model_dump(), id=uuid.uuid4(), created_at=now, updated_at=now)
        self.rows.append(record)
        self.log.append(("store.create", record.calendar_event_id))
        return record

    async def list_for_owner(self, owner_id: str) -> List[TaskRecord]:
        return [r for r in self.rows if r.owner_id == owner_id]

    async def get_by_event_id(self, owner_id: str, event_id: str) -> Optional[TaskRecord]:
        return next(
            (r for r in self.rows if r.owner_id == owner_id and r.calendar_event_id == event_id),
            None,
        )

    def _find(self, owner_id, task_id) -> int:
        for i, r in enumerate(self.rows):
            if r.owner_id == owner_id and r.id == task_id:
                return i
        raise TaskNotFoundError(f"Task {task_id} not found")

    async def toggle_completion(self, owner_id, task_id) -> TaskRecord:
        i = self._find(owner_id, task_id)
        self.rows[i] = self.rows[i].model_copy(update={"completed": not self.rows[i].completed})
        return self.rows[i]

    async def set_completion(self, owner_id, task_id, completed) -> TaskRecord:
        i = self._find(owner_id, task_id)
        self.rows[i] = self.rows[i].model_copy(update={"completed": completed})
        return self.rows[i]

    async def delete_by_event_id(self, owner_id, event_id) -> bool:
        self.log.append(("store.delete", event_id))
        before = len(self.rows)
        self.rows = [
            r for r in self.rows
            if not (r.owner_id == owner_id and r.calendar_event_id == event_id)
        ]
        return len(self.rows) < before


class FakeImageSource:
    def __init__(self, image="aW1n"):
        self.image = image
        self.prompts = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.image


@pytest.fixture
def fake_calendar():
    return FakeCalendar()


@pytest.fixture
def fake_store():
    return FakeTaskStore()
