from __future__ import annotations
from typing import Optional
import httpx
from .base import LLMProvider

class GeminiProvider(LLMProvider):
    """Gemini has no separate system role on this endpoint, so both prompts
    travel in one user turn."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_s: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key.strip()
        self.model = model.strip()
        self.base_url = base_url.strip().rstrip("/")
        self.timeout_s = timeout_s
        self.transport = transport

        if not self.api_key:
            raise RuntimeError("GEMINI_API_KEY is missing")

    def complete(self, *, system: str, user: str) -> str:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        payload = {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": f"{system}\n\n{user}"}],
                }
            ],
        }

        with httpx.Client(timeout=self.timeout_s, transport=self.transport) as client:
            r = client.post(url, headers=headers, json=payload)
            r.raise_for_status()
            data = r.json()

        parts = data["candidates"][0]["content"]["parts"]
        return "".join(p.get("text", "") for p in parts)
