"""
Text-to-image client for task illustrations.

Talks to an Automatic1111-compatible ``txt2img`` endpoint with a fixed request
body and a hard timeout.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Optional, Protocol

import httpx

from dayplan.errors import ImageGenerationError, ImageGenerationTimeout

logger = logging.getLogger(__name__)

NEGATIVE_PROMPT = (
    "blurry, low quality, lowres, distorted, deformed, disfigured, bad anatomy, "
    "extra limbs, missing limbs, watermark, signature, text, logo, cropped, "
    "out of frame, jpeg artifacts, ugly, duplicate"
)

IMAGE_WIDTH = 512
IMAGE_HEIGHT = 512
INFERENCE_STEPS = 20
GUIDANCE_SCALE = 7
SAMPLER = "Euler a"


class ImageSource(Protocol):
    def generate(self, prompt: str) -> str:
        ...


def build_payload(prompt: str, seed: int = -1) -> dict:
    """txt2img body; seed -1 lets the backend pick a random seed."""
    return {
        "prompt": prompt,
        "negative_prompt": NEGATIVE_PROMPT,
        "steps": INFERENCE_STEPS,
        "cfg_scale": GUIDANCE_SCALE,
        "width": IMAGE_WIDTH,
        "height": IMAGE_HEIGHT,
        "sampler_index": SAMPLER,
        "seed": seed,
        "enable_hr": False,
    }


class ImageGenerationClient:
    def __init__(
        self,
        api_url: str,
        timeout_s: float = 150.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_url = api_url.strip()
        self.timeout_s = timeout_s
        self.transport = transport

    def generate(self, prompt: str) -> str:
        """Return the first base64-encoded image for ``prompt``.

        ``timeout_s`` is an overall deadline for the request, not only a
        per-read limit: a backend that keeps trickling bytes is cut off too.

        Raises:
            ImageGenerationTimeout: the backend did not answer within ``timeout_s``.
            ImageGenerationError: non-2xx status or a payload without images.
        """
        payload = build_payload(prompt)
        logger.info(f"Requesting image (timeout={self.timeout_s}s)")

        deadline = time.monotonic() + self.timeout_s
        try:
            with httpx.Client(timeout=self.timeout_s, transport=self.transport) as client:
                with client.stream("POST", self.api_url, json=payload) as r:
                    chunks = []
                    for chunk in r.iter_bytes():
                        chunks.append(chunk)
                        if time.monotonic() > deadline:
                            raise ImageGenerationTimeout(
                                f"Image generation exceeded {self.timeout_s}s"
                            )
        except httpx.TimeoutException as e:
            raise ImageGenerationTimeout(
                f"Image generation timed out after {self.timeout_s}s"
            ) from e
        except httpx.HTTPError as e:
            raise ImageGenerationError(f"Image generation request failed: {e}") from e

        body = b"".join(chunks)
        text = body.decode("utf-8", errors="replace")

        if r.status_code < 200 or r.status_code >= 300:
            raise ImageGenerationError(
                f"Image generation failed with HTTP {r.status_code}", body=text
            )

        try:
            data = json.loads(body)
        except ValueError as e:
            raise ImageGenerationError("Image backend returned invalid JSON", body=text) from e

        images = data.get("images") if isinstance(data, dict) else None

        if not images or not isinstance(images[0], str):
            raise ImageGenerationError("Image backend returned no images", body=text)

        return images[0]
