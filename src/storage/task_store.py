"""
Task persistence.

``TaskRepository`` is the interface the orchestrator depends on;
``PostgresTaskStore`` implements it on top of the shared asyncpg pool.
Every write touches exactly one row keyed by owner + id (or owner + event id).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

import asyncpg

from dayplan.errors import PersistenceError, TaskNotFoundError
from dayplan.models import NewTask, TaskRecord
from storage import db

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, owner_id, title, description, start_time, end_time, timezone,
    base64_image, calendar_event_id, completed, created_at, updated_at
"""


class TaskRepository(ABC):
    @abstractmethod
    async def create(self, task: NewTask) -> TaskRecord:
        raise NotImplementedError

    @abstractmethod
    async def list_for_owner(self, owner_id: str) -> List[TaskRecord]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_event_id(self, owner_id: str, event_id: str) -> Optional[TaskRecord]:
        raise NotImplementedError

    @abstractmethod
    async def toggle_completion(self, owner_id: str, task_id: UUID) -> TaskRecord:
        raise NotImplementedError

    @abstractmethod
    async def set_completion(self, owner_id: str, task_id: UUID, completed: bool) -> TaskRecord:
        raise NotImplementedError

    @abstractmethod
    async def delete_by_event_id(self, owner_id: str, event_id: str) -> bool:
        raise NotImplementedError


class PostgresTaskStore(TaskRepository):

    async def create(self, task: NewTask) -> TaskRecord:
        try:
            row = await db.fetchrow(
                f"""
                INSERT INTO tasks (
                    owner_id, title, description, start_time, end_time,
                    timezone, base64_image, calendar_event_id, completed
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, FALSE)
                RETURNING {_COLUMNS}
                """,
                task.owner_id,
                task.title,
                task.description,
                task.start_time,
                task.end_time,
                task.timezone,
                task.base64_image,
                task.calendar_event_id,
            )
        except (asyncpg.PostgresError, OSError) as e:
            raise PersistenceError(f"Failed to save task '{task.title}': {e}") from e

        record = TaskRecord.from_record(row)
        logger.info(f"Saved task {record.id} ('{record.title}') for owner {record.owner_id}")
        return record

    async def list_for_owner(self, owner_id: str) -> List[TaskRecord]:
        try:
            rows = await db.fetch(
                f"SELECT {_COLUMNS} FROM tasks WHERE owner_id = $1 ORDER BY start_time, created_at",
                owner_id,
            )
        except (asyncpg.PostgresError, OSError) as e:
            raise PersistenceError(f"Failed to load tasks: {e}") from e
        return [TaskRecord.from_record(r) for r in rows]

    async def get_by_event_id(self, owner_id: str, event_id: str) -> Optional[TaskRecord]:
        try:
            row = await db.fetchrow(
                f"SELECT {_COLUMNS} FROM tasks WHERE owner_id = $1 AND calendar_event_id = $2",
                owner_id,
                event_id,
            )
        except (asyncpg.PostgresError, OSError) as e:
            raise PersistenceError(f"Failed to load task for event {event_id}: {e}") from e
        return TaskRecord.from_record(row) if row else None

    async def toggle_completion(self, owner_id: str, task_id: UUID) -> TaskRecord:
        return await self._update_completion(
            "completed = NOT completed", owner_id, task_id
        )

    async def set_completion(self, owner_id: str, task_id: UUID, completed: bool) -> TaskRecord:
        return await self._update_completion(
            "completed = $3", owner_id, task_id, completed
        )

    async def _update_completion(self, assignment: str, owner_id: str, task_id: UUID, *args) -> TaskRecord:
        try:
            row = await db.fetchrow(
                f"""
                UPDATE tasks SET {assignment}, updated_at = NOW()
                WHERE id = $1 AND owner_id = $2
                RETURNING {_COLUMNS}
                """,
                task_id,
                owner_id,
                *args,
            )
        except (asyncpg.PostgresError, OSError) as e:
            raise PersistenceError(f"Failed to update task {task_id}: {e}") from e

        if row is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return TaskRecord.from_record(row)

    async def delete_by_event_id(self, owner_id: str, event_id: str) -> bool:
        try:
            status = await db.execute(
                "DELETE FROM tasks WHERE owner_id = $1 AND calendar_event_id = $2",
                owner_id,
                event_id,
            )
        except (asyncpg.PostgresError, OSError) as e:
            raise PersistenceError(f"Failed to delete task for event {event_id}: {e}") from e

        # asyncpg status looks like "DELETE 1"
        deleted = status.split()[-1] != "0"
        logger.info(f"Delete task for event {event_id}: {status}")
        return deleted
