"""OpenAI adapters implementing the LLMService and EmbeddingProvider ports."""
from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional

from openai import AsyncOpenAI

from lucid_backend.domain.ports.llm import EmbeddingProvider, LLMService

logger = logging.getLogger(__name__)


class OpenAILLM(LLMService):
    """Chat completions against OpenAI or any OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 3000,
    ) -> None:
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate_response(self, messages: List[Dict[str, str]]) -> str:
        start = time.time()
        logger.debug(f"Calling chat completions with model: {self._model}")
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=messages,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ValueError("Empty response from LLM")
        logger.info(f"LLM response from {self._model}: {len(content)} chars in {time.time() - start:.2f}s")
        return content


class OpenAIEmbedder(EmbeddingProvider):
    """Text embeddings via the OpenAI embeddings endpoint."""

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None) -> None:
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def embed(self, text: str) -> List[float]:
        response = await self._client.embeddings.create(
            model=self._model,
            input=text,
            encoding_format="float",
        )
        vector = list(response.data[0].embedding)
        logger.debug(f"Embedded {len(text)} chars into {len(vector)} dimensions")
        return vector
