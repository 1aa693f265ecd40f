from __future__ import annotations

import json
import re

from dayplan.errors import ParseError

_FENCE = re.compile(r"```[a-zA-Z0-9_-]*")
_decoder = json.JSONDecoder()


def extract_json_block(raw_text: str) -> str:
    """Return the first well-formed JSON array/object embedded in ``raw_text``.

    Models like to wrap their answer in prose or markdown code fences, so we
    drop the fence markers and try to decode from every ``[`` or ``{`` in turn.
    """
    if not raw_text or not raw_text.strip():
        raise ParseError("model returned an empty response")

    text = _FENCE.sub("", raw_text)

    for match in re.finditer(r"[\[{]", text):
        start = match.start()
        try:
            _, end = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            continue
        return text[start:end]

    raise ParseError(f"no JSON block found in model output: {raw_text[:80]!r}")
