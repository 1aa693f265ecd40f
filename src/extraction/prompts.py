from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@dataclass(frozen=True)
class PromptPair:
    system: str
    user: str


def utc_offset(today: date, timezone: str) -> str:
    """'+05:30' style offset of ``timezone`` on ``today`` (taken at noon)."""
    try:
        tz = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {timezone!r}")

    offset = datetime.combine(today, time(12, 0), tzinfo=tz).utcoffset()
    total_min = int(offset.total_seconds() // 60)
    sign = "+" if total_min >= 0 else "-"
    hours, minutes = divmod(abs(total_min), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def build_system_prompt(today: date, timezone: str) -> str:
    day = today.isoformat()
    off = utc_offset(today, timezone)
    return f"""
You are a helpful assistant. Based on the user's schedule for today ({day}), extract each time block and return them as an array of task objects with these fields:
- title: A short title
- description: A short description
- startTime: ISO string (e.g., "{day}T10:00:00{off}")
- endTime: ISO string
- timezone: "{timezone}"

Respond ONLY with a JSON array. No extra text or formatting.

Example:
[
  {{
    "title": "Work on my project",
    "description": "Focus on backend tasks",
    "startTime": "{day}T10:00:00{off}",
    "endTime": "{day}T13:00:00{off}",
    "timezone": "{timezone}"
  }}
]
""".strip()


def build_user_prompt(text: str, today: date) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValueError("prompt text must not be empty")
    if not cleaned.endswith("."):
        cleaned = f"{cleaned}."
    return f"{cleaned} Please assume all tasks are for today ({today.isoformat()})."


def format_prompts(text: str, today: date, timezone: str) -> PromptPair:
    return PromptPair(
        system=build_system_prompt(today, timezone),
        user=build_user_prompt(text, today),
    )
