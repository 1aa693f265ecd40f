import logging
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from api.main import configure_logging
from dayplan.config import ImageMode, LLMBackend, PlannerConfig
from dayplan.errors import ConfigurationError
from dayplan.models import NewTask

NOW = datetime(2025, 6, 1, 4, 30, tzinfo=timezone.utc)


def test_new_task_strips_title():
    task = NewTask(owner_id="u", title="  Walk  ", start_time=NOW, end_time=NOW)
    assert task.title == "Walk"


def test_new_task_rejects_blank_title():
    with pytest.raises(ValidationError):
        NewTask(owner_id="u", title="   ", start_time=NOW, end_time=NOW)


def test_new_task_rejects_end_before_start():
    with pytest.raises(ValidationError):
        NewTask(owner_id="u", title="T", start_time=NOW, end_time=NOW - timedelta(minutes=1))


def test_config_defaults():
    config = PlannerConfig.from_env({})
    assert config.llm_provider is LLMBackend.GEMINI
    assert config.timezone == "Asia/Kolkata"
    assert config.image_mode is ImageMode.PLACEHOLDER
    assert config.image_timeout_s == 150.0
    assert config.task_pacing_delay_s == 0.3
    assert config.compensate_on_persist_failure is False


def test_config_from_env():
    config = PlannerConfig.from_env(
        {
            "LLM_PROVIDER": "Chat_GPT",
            "OPENAI_API_KEY": " sk-1 ",
            "PLANNER_TIMEZONE": "Europe/Berlin",
            "IMAGE_MODE": "generate",
            "IMAGE_TIMEOUT_S": "90",
            "COMPENSATE_ON_PERSIST_FAILURE": "yes",
            "FRONTEND_URL": "https://app.example.com/",
        }
    )
    assert config.llm_provider is LLMBackend.CHAT_GPT
    assert config.openai_api_key == "sk-1"
    assert config.timezone == "Europe/Berlin"
    assert config.image_mode is ImageMode.GENERATE
    assert config.image_timeout_s == 90.0
    assert config.compensate_on_persist_failure is True
    assert config.frontend_url == "https://app.example.com"


@pytest.mark.parametrize(
    "env",
    [
        {"LLM_PROVIDER": "claude"},
        {"IMAGE_MODE": "sometimes"},
        {"IMAGE_TIMEOUT_S": "soon"},
        {"LLM_TIMEOUT_S": "-1"},
        {"PLANNER_TIMEZONE": "Nowhere/Town"},
        {"LOG_LEVEL": "chatty"},
    ],
)
def test_invalid_config(env):
    with pytest.raises(ConfigurationError):
        PlannerConfig.from_env(env)


def test_log_level_from_config_is_applied():
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging(PlannerConfig.from_env({"LOG_LEVEL": "warning"}))
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)
