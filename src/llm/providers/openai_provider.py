from __future__ import annotations
from typing import Optional
import httpx
from .base import LLMProvider

class OpenAIProvider(LLMProvider):
    name = "chat_gpt"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo-1106",
        base_url: str = "https://api.openai.com/v1",
        timeout_s: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key.strip()
        self.model = model.strip()
        self.base_url = base_url.strip().rstrip("/")
        self.timeout_s = timeout_s
        self.transport = transport

        if not self.api_key:
            raise RuntimeError("OPENAI_API_KEY is missing")

    def complete(self, *, system: str, user: str) -> str:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": 0.2,
        }

        with httpx.Client(timeout=self.timeout_s, transport=self.transport) as client:
            r = client.post(url, headers=headers, json=payload)
            r.raise_for_status()
            data = r.json()

        return data["choices"][0]["message"]["content"] or ""
