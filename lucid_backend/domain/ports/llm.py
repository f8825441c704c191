"""Ports for text generation and text embedding providers."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List


class LLMService(ABC):
    @abstractmethod
    async def generate_response(self, messages: List[Dict[str, str]]) -> str:
        """Return the assistant's reply to a chat-style message list."""


class EmbeddingProvider(ABC):
    @property
    @abstractmethod
    def model(self) -> str: ...

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """Return the embedding vector for ``text``."""
