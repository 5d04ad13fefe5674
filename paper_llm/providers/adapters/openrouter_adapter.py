"""
OpenRouter Adapter

OpenAI-compatible adapter with OpenRouter attribution headers and model discovery.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..types import ModelDefinition
from .openai_adapter import OpenAIAdapter

logger = logging.getLogger(__name__)

OPENROUTER_MODELS_URL = "https://openrouter.ai/api/v1/models"
DEFAULT_REFERER = "https://github.com/arxivlearner"
DEFAULT_TITLE = "ArxivLearner"


class OpenRouterAdapter(OpenAIAdapter):
    """
    Adapter for OpenRouter.

    Keeps the chat/completions behavior from OpenAIAdapter and adds the
    ``HTTP-Referer`` / ``X-Title`` attribution headers OpenRouter asks for,
    unless the provider config already sets them.
    """

    FALLBACK_MODELS: List[ModelDefinition] = [
        ModelDefinition(id="anthropic/claude-opus-4-6", name="Claude Opus 4.6"),
        ModelDefinition(id="anthropic/claude-sonnet-4-6", name="Claude Sonnet 4.6"),
        ModelDefinition(id="openai/gpt-4.1", name="GPT-4.1"),
        ModelDefinition(id="google/gemini-2.5-pro", name="Gemini 2.5 Pro"),
        ModelDefinition(id="deepseek/deepseek-chat-v3-0324", name="DeepSeek V3"),
    ]

    def __init__(
        self,
        *args: Any,
        referer: str = DEFAULT_REFERER,
        title: str = DEFAULT_TITLE,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.custom_headers = self.attribution_headers(self.custom_headers, referer, title)

    @staticmethod
    def attribution_headers(
        headers: Optional[Dict[str, str]],
        referer: str = DEFAULT_REFERER,
        title: str = DEFAULT_TITLE,
    ) -> Dict[str, str]:
        """Return ``headers`` with attribution defaults filled in where absent."""
        merged = dict(headers or {})
        merged.setdefault("HTTP-Referer", referer)
        merged.setdefault("X-Title", title)
        return merged

    @classmethod
    async def fetch_models(
        cls,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> List[ModelDefinition]:
        """
        Fetch the OpenRouter model catalogue.

        Only ``id`` and ``name`` are kept. Any failure (network error,
        non-2xx, undecodable body) returns the static fallback list.

        Returns:
            List of model definitions, never empty
        """
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                response = await client.get(OPENROUTER_MODELS_URL, headers={"Accept": "application/json"})
                response.raise_for_status()
                data = response.json()

            models: List[ModelDefinition] = []
            for item in data["data"]:
                model_id = item["id"]
                models.append(ModelDefinition(id=model_id, name=item.get("name") or model_id))
        except Exception as e:
            logger.warning(f"Failed to fetch OpenRouter models: {e}")
            return cls.fallback_models()

        if not models:
            return cls.fallback_models()
        return models

    @classmethod
    def fallback_models(cls) -> List[ModelDefinition]:
        return [model.model_copy() for model in cls.FALLBACK_MODELS]
