"""
Text Generation Service
=======================
Boundary to the large-language-model service that writes the analysis.

Anything with a `generate(prompt) -> str` method can stand in for the real
service (tests use a fake). The OpenAI implementation creates its client on
first use, so the application starts fine without an API key and only the
analysis request itself fails.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Optional, Protocol

from openai import OpenAI

from aeroanalysis.config import DEFAULT_ANALYSIS_MODEL, ENV_API_KEY
from aeroanalysis.errors import ServiceFailure

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an expert aerodynamicist writing clear, well-structured markdown reports."


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


class OpenAITextGenerator:
    """Chat-completions backed generator."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_ANALYSIS_MODEL,
        client: Optional[Any] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            api_key = self.api_key or os.getenv(ENV_API_KEY)
            if not api_key:
                raise ServiceFailure(
                    f"OpenAI API key is required. Set {ENV_API_KEY} environment variable or pass it directly."
                )
            self._client = OpenAI(api_key=api_key)
        return self._client

    def generate(self, prompt: str) -> str:
        client = self._get_client()
        logger.info(f"Requesting analysis from model '{self.model}'.")

        response = client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        )

        if not response.choices:
            raise ServiceFailure("The model returned no choices.")
        content = response.choices[0].message.content
        if not isinstance(content, str) or not content.strip():
            raise ServiceFailure("The model returned an empty answer.")
        return content.strip()
