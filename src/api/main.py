import logging

from fastapi import FastAPI

from api import state
from api.backend import build_google_auth_store, build_orchestrator
from api.routers import auth, ops, tasks
from dayplan.config import PlannerConfig
from storage import db
from storage.task_store import PostgresTaskStore

# Logging configuration; the level is taken from PlannerConfig at startup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def configure_logging(config: PlannerConfig) -> None:
    logging.getLogger().setLevel(config.log_level)


app = FastAPI(title="dayplan")
app.include_router(tasks.router)
app.include_router(auth.router)
app.include_router(ops.router)


@app.on_event("startup")
async def startup() -> None:
    config = PlannerConfig.from_env()
    state.config = config
    configure_logging(config)

    await db.init_db_pool(
        config.database_url,
        command_timeout=config.db_command_timeout_s,
    )
    await db.init_schema()
    state.db_ready = True

    state.google_auth_store = build_google_auth_store(config)
    state.orchestrator = build_orchestrator(config, PostgresTaskStore(), state.google_auth_store)
    logger.info("Planner API started")


@app.on_event("shutdown")
async def shutdown() -> None:
    state.orchestrator = None
    state.db_ready = False
    await db.close_db_pool()
    logger.info("Planner API stopped")
