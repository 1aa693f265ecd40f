from __future__ import annotations

from llm.schemas import ExtractedTask

STYLE_SUFFIX = (
    "soft natural lighting, clean composition, vibrant but calm colors, "
    "digital illustration, highly detailed"
)


def _lower_first(text: str) -> str:
    return text[:1].lower() + text[1:]


def build_image_prompt(task: ExtractedTask) -> str:
    """Turn a task into a short scene description for the image model."""
    # punctuation-only titles strip to nothing; keep them verbatim
    subject = task.title.strip().rstrip(".") or task.title.strip()
    detail = task.description.strip().rstrip(".")

    parts = [f"A person who is about to {_lower_first(subject)}"]
    if detail and detail.lower() != subject.lower():
        parts.append(_lower_first(detail))
    parts.append(STYLE_SUFFIX)
    return ", ".join(parts)
