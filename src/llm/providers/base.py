from __future__ import annotations
from abc import ABC, abstractmethod

class LLMProvider(ABC):
    name: str = "base"

    @abstractmethod
    def complete(self, *, system: str, user: str) -> str:
        """
        Must return the model output as TEXT (we'll locate/validate the JSON in LLMClient).
        """
        raise NotImplementedError
