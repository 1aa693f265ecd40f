from typing import Optional

from fastapi import Header, HTTPException

from api import state
from dayplan.config import PlannerConfig
from scheduling.orchestrator import SchedulingOrchestrator
from storage.google_auth import GoogleAuthStore


def get_owner_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Owner id as forwarded by the upstream auth layer."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def get_orchestrator() -> SchedulingOrchestrator:
    if state.orchestrator is None:
        raise HTTPException(status_code=503, detail="Planner not initialized")
    return state.orchestrator


def get_google_auth_store() -> Optional[GoogleAuthStore]:
    return state.google_auth_store


def get_config() -> PlannerConfig:
    if state.config is None:
        return PlannerConfig.from_env()
    return state.config
