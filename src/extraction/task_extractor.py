import logging
from datetime import date
from typing import Any

from extraction.prompts import format_prompts
from llm.llm_client import LLMClient

logger = logging.getLogger(__name__)


class TaskExtractor:

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client

    def extract(self, text: str, today: date, timezone: str) -> list[dict[str, Any]]:
        prompts = format_prompts(text, today, timezone)
        tasks = self.llm_client.extract_tasks(prompts.system, prompts.user)
        logger.info(f"Extracted {len(tasks)} task(s) for {today.isoformat()} ({timezone})")
        return tasks
