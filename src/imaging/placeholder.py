from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# 1x1 transparent PNG
PLACEHOLDER_PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


class PlaceholderImageSource:
    """Stands in for the image backend in deployments that must not call it."""

    def __init__(self, image_base64: str = PLACEHOLDER_PNG_BASE64):
        self.image_base64 = image_base64

    def generate(self, prompt: str) -> str:
        logger.debug(f"Placeholder image used for prompt: {prompt[:50]}...")
        return self.image_base64
