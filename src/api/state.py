from typing import Optional

from dayplan.config import PlannerConfig
from scheduling.orchestrator import SchedulingOrchestrator
from storage.google_auth import GoogleAuthStore

# Global instances initialized at startup
config: Optional[PlannerConfig] = None
orchestrator: Optional[SchedulingOrchestrator] = None
google_auth_store: Optional[GoogleAuthStore] = None
db_ready: bool = False
