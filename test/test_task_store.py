import asyncio
import uuid
from datetime import datetime, timedelta, timezone

import asyncpg
import pytest

from dayplan.errors import PersistenceError, TaskNotFoundError
from dayplan.models import NewTask
from storage import task_store
from storage.task_store import PostgresTaskStore

NOW = datetime(2025, 6, 1, 4, 30, tzinfo=timezone.utc)


def _row(**overrides):
    row = {
        "id": uuid.uuid4(),
        "owner_id": "user_1",
        "title": "Write report",
        "description": None,
        "start_time": NOW,
        "end_time": NOW + timedelta(hours=1),
        "timezone": "Asia/Kolkata",
        "base64_image": None,
        "calendar_event_id": "evt-1",
        "completed": False,
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


class _FakeDb:
    def __init__(self, row=None, rows=(), status="DELETE 1", error=None):
        self.row = row
        self.rows = list(rows)
        self.status = status
        self.error = error
        self.queries = []

    async def fetchrow(self, query, *args):
        self.queries.append((query, args))
        if self.error:
            raise self.error
        return self.row

    async def fetch(self, query, *args):
        self.queries.append((query, args))
        if self.error:
            raise self.error
        return self.rows

    async def execute(self, query, *args):
        self.queries.append((query, args))
        if self.error:
            raise self.error
        return self.status


@pytest.fixture
def fake_db(monkeypatch):
    def _install(**kwargs):
        db = _FakeDb(**kwargs)
        monkeypatch.setattr(task_store.db, "fetchrow", db.fetchrow)
        monkeypatch.setattr(task_store.db, "fetch", db.fetch)
        monkeypatch.setattr(task_store.db, "execute", db.execute)
        return db
    return _install


def test_create_inserts_incomplete_row(fake_db):
    db = fake_db(row=_row())
    task = NewTask(
        owner_id="user_1",
        title="Write report",
        start_time=NOW,
        end_time=NOW + timedelta(hours=1),
        timezone="Asia/Kolkata",
        calendar_event_id="evt-1",
    )

    record = asyncio.run(PostgresTaskStore().create(task))

    assert record.completed is False
    assert record.calendar_event_id == "evt-1"
    query, args = db.queries[0]
    assert "INSERT INTO tasks" in query
    assert args[0] == "user_1"


def test_create_wraps_database_errors(fake_db):
    fake_db(error=asyncpg.PostgresError("boom"))
    task = NewTask(owner_id="u", title="T", start_time=NOW, end_time=NOW)
    with pytest.raises(PersistenceError):
        asyncio.run(PostgresTaskStore().create(task))


def test_toggle_flips_in_sql(fake_db):
    task_id = uuid.uuid4()
    db = fake_db(row=_row(id=task_id, completed=True))

    record = asyncio.run(PostgresTaskStore().toggle_completion("user_1", task_id))

    assert record.completed is True
    query, args = db.queries[0]
    assert "completed = NOT completed" in query
    assert args == (task_id, "user_1")


def test_set_completion_passes_value(fake_db):
    task_id = uuid.uuid4()
    db = fake_db(row=_row(id=task_id, completed=False))
    asyncio.run(PostgresTaskStore().set_completion("user_1", task_id, False))
    assert db.queries[0][1] == (task_id, "user_1", False)


def test_update_missing_row(fake_db):
    fake_db(row=None)
    with pytest.raises(TaskNotFoundError):
        asyncio.run(PostgresTaskStore().toggle_completion("user_1", uuid.uuid4()))


@pytest.mark.parametrize("status, expected", [("DELETE 1", True), ("DELETE 0", False)])
def test_delete_by_event_id(fake_db, status, expected):
    fake_db(status=status)
    assert asyncio.run(PostgresTaskStore().delete_by_event_id("user_1", "evt-1")) is expected


def test_list_for_owner(fake_db):
    fake_db(rows=[_row(title="A"), _row(title="B", calendar_event_id="evt-2")])
    records = asyncio.run(PostgresTaskStore().list_for_owner("user_1"))
    assert [r.title for r in records] == ["A", "B"]
