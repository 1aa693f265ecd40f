from __future__ import annotations

import logging
from typing import Optional

import httpx

from dayplan.config import LLMBackend, PlannerConfig
from dayplan.errors import ConfigurationError
from .base import LLMProvider
from .gemini_provider import GeminiProvider
from .ollama_provider import OllamaProvider
from .openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


def build_provider(
    config: PlannerConfig,
    transport: Optional[httpx.BaseTransport] = None,
) -> LLMProvider:
    """Instantiate the text-generation backend chosen in ``config``."""
    backend = config.llm_provider
    try:
        if backend is LLMBackend.CHAT_GPT:
            provider: LLMProvider = OpenAIProvider(
                api_key=config.openai_api_key,
                model=config.openai_model,
                base_url=config.openai_base_url,
                timeout_s=config.llm_timeout_s,
                transport=transport,
            )
        elif backend is LLMBackend.GEMINI:
            provider = GeminiProvider(
                api_key=config.gemini_api_key,
                model=config.gemini_model,
                base_url=config.gemini_base_url,
                timeout_s=config.llm_timeout_s,
                transport=transport,
            )
        elif backend is LLMBackend.OLLAMA:
            provider = OllamaProvider(
                model=config.ollama_model,
                base_url=config.ollama_base_url,
                timeout_s=config.llm_timeout_s,
                transport=transport,
            )
        else:
            raise ConfigurationError(f"Unsupported LLM provider: {backend}")
    except RuntimeError as e:
        raise ConfigurationError(str(e)) from e

    logger.info(f"LLM provider selected: {provider.name}")
    return provider


__all__ = [
    "LLMProvider",
    "GeminiProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "build_provider",
]
