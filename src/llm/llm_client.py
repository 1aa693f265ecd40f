import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from dayplan.errors import ExtractionError, ParseError
from llm.json_block import extract_json_block
from llm.providers.base import LLMProvider
from llm.schemas import ExtractedTask

logger = logging.getLogger(__name__)


class LLMClient:
    """Provider-agnostic front of the text-generation backends.

    The provider is chosen once at startup; this class only knows the
    ``complete`` capability and how to turn raw model text into tasks.
    """

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    def complete(self, system: str, user: str) -> str:
        try:
            return self.provider.complete(system=system, user=user)
        except httpx.HTTPStatusError as e:
            body = e.response.text[:200] if e.response is not None else ""
            raise ExtractionError(
                f"{self.provider.name} returned HTTP {e.response.status_code}: {body}"
            ) from e
        except httpx.HTTPError as e:
            raise ExtractionError(f"{self.provider.name} request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ExtractionError(f"{self.provider.name} returned an unexpected payload: {e}") from e

    def extract_tasks(self, system: str, user: str) -> list[dict[str, Any]]:
        raw_text = self.complete(system, user)
        logger.debug(f"Raw model output ({self.provider.name}): {raw_text[:200]}")
        return parse_tasks(raw_text)


def parse_tasks(raw_text: str) -> list[dict[str, Any]]:
    """Locate the JSON array of task objects in ``raw_text``.

    Only the overall shape is checked here. Each item is validated on its own
    with ``validate_task`` so one bad item cannot sink the others.
    """
    block = extract_json_block(raw_text)
    data: Any = json.loads(block)

    if not isinstance(data, list):
        raise ParseError(f"expected a JSON array of tasks, got {type(data).__name__}")

    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ParseError(f"task #{i} is not an object")
    return data


def validate_task(item: dict[str, Any]) -> ExtractedTask:
    try:
        return ExtractedTask.model_validate(item)
    except ValidationError as e:
        raise ParseError(f"not a valid task: {e.errors()[0]['msg']}") from e


def task_label(item: dict[str, Any]) -> str:
    title = item.get("title")
    return title.strip() if isinstance(title, str) and title.strip() else "(untitled)"
