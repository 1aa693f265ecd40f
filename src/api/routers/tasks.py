import logging
import time
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from api.dependencies import get_orchestrator, get_owner_id
from api.metrics import (
    EXTRACTION_FAILURES_TOTAL,
    REQUESTS_TOTAL,
    REQUEST_LATENCY_SECONDS,
    TASKS_EXTRACTED_TOTAL,
    TASK_OUTCOMES_TOTAL,
)
from dayplan.errors import CalendarError, ExtractionError, PersistenceError, TaskNotFoundError
from scheduling.orchestrator import SchedulingOrchestrator

router = APIRouter()
logger = logging.getLogger(__name__)


class PromptIn(BaseModel):
    prompt: str


class CompletionIn(BaseModel):
    completed: Optional[bool] = None


@router.post("/tasks/prompt")
async def submit_prompt(
    payload: PromptIn,
    owner_id: str = Depends(get_owner_id),
    orchestrator: SchedulingOrchestrator = Depends(get_orchestrator),
) -> dict:
    start = time.time()
    logger.info(f"Received prompt from owner {owner_id}: {payload.prompt[:50]}...")

    try:
        outcomes = await orchestrator.submit(owner_id, payload.prompt)
    except ValueError as e:
        REQUESTS_TOTAL.labels(endpoint="/tasks/prompt", status="rejected").inc()
        raise HTTPException(status_code=400, detail=str(e))
    except ExtractionError as e:
        EXTRACTION_FAILURES_TOTAL.inc()
        REQUESTS_TOTAL.labels(endpoint="/tasks/prompt", status="extraction_failed").inc()
        logger.error(f"Extraction failed for owner {owner_id}: {e}")
        raise HTTPException(status_code=502, detail=f"Task extraction failed: {e}")
    finally:
        REQUEST_LATENCY_SECONDS.labels(endpoint="/tasks/prompt").observe(time.time() - start)

    succeeded = sum(1 for o in outcomes if o.success)
    TASKS_EXTRACTED_TOTAL.inc(len(outcomes))
    TASK_OUTCOMES_TOTAL.labels(result="success").inc(succeeded)
    TASK_OUTCOMES_TOTAL.labels(result="failure").inc(len(outcomes) - succeeded)
    REQUESTS_TOTAL.labels(endpoint="/tasks/prompt", status="processed").inc()

    return {
        "results": [o.model_dump(mode="json") for o in outcomes],
        "succeeded": succeeded,
        "failed": len(outcomes) - succeeded,
    }


@router.get("/tasks")
async def list_tasks(
    owner_id: str = Depends(get_owner_id),
    orchestrator: SchedulingOrchestrator = Depends(get_orchestrator),
) -> dict:
    try:
        tasks = await orchestrator.list_tasks(owner_id)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {
        "tasks": [t.model_dump(mode="json") for t in tasks],
        "total": len(tasks),
    }


@router.patch("/tasks/{task_id}/completion")
async def update_completion(
    task_id: UUID,
    payload: Optional[CompletionIn] = None,
    owner_id: str = Depends(get_owner_id),
    orchestrator: SchedulingOrchestrator = Depends(get_orchestrator),
) -> dict:
    """Toggle completion, or set it when ``completed`` is given."""
    completed = payload.completed if payload is not None else None
    try:
        if completed is None:
            record = await orchestrator.toggle_completion(owner_id, task_id)
        else:
            record = await orchestrator.set_completion(owner_id, task_id, completed)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    REQUESTS_TOTAL.labels(endpoint="/tasks/completion", status="updated").inc()
    return record.model_dump(mode="json")


@router.delete("/tasks/by-event/{event_id}", status_code=204)
async def delete_task(
    event_id: str,
    owner_id: str = Depends(get_owner_id),
    orchestrator: SchedulingOrchestrator = Depends(get_orchestrator),
) -> Response:
    try:
        await orchestrator.delete_task(owner_id, event_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CalendarError as e:
        # row is kept, the caller may retry
        logger.error(f"Calendar delete failed for event {event_id}: {e}")
        raise HTTPException(status_code=502, detail=f"Calendar delete failed: {e}")
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    REQUESTS_TOTAL.labels(endpoint="/tasks/by-event", status="deleted").inc()
    return Response(status_code=204)
