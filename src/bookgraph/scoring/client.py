"""Chat-completions client that asks a language model for sentiment scores."""

import logging
from typing import Any

import httpx

from ..core.config import Settings, get_settings
from ..core.errors import ExternalAPIError
from ..core.http import BaseApiClient
from ..core.models import Entity, SentimentVector
from .prompts import SYSTEM_PROMPT, build_prompt, parse_scores

logger = logging.getLogger(__name__)


class LLMScoringClient(BaseApiClient):
    """
    Scores books through an OpenAI-compatible /chat/completions endpoint.

    Rate limit and model come from Settings (BOOKGRAPH_LLM_* variables).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the scoring client.

        Args:
            settings: Application settings (defaults to cached settings)
            transport: Optional httpx transport, used by tests
        """
        self.settings = settings or get_settings()
        self.api_key = self.settings.llm_api_key or ""
        super().__init__(
            base_url=self.settings.llm_base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            requests_per_minute=self.settings.llm_requests_per_minute,
            timeout=self.settings.llm_timeout,
            transport=transport,
        )

    def is_configured(self) -> bool:
        """Check if an API key is configured."""
        return bool(self.api_key)

    def _payload(self, entity: Entity) -> dict[str, Any]:
        return {
            "model": self.settings.llm_model,
            "temperature": self.settings.llm_temperature,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(entity)},
            ],
        }

    async def score(self, entity: Entity) -> SentimentVector:
        """
        Ask the model for one book's sentiment vector.

        Raises:
            ExternalAPIError: If the client is unconfigured, the request
                fails, or the reply has no message content
            InvalidEntityError: If the reply holds invalid scores
        """
        if not self.is_configured():
            raise ExternalAPIError(
                "Scoring model not configured. Set BOOKGRAPH_LLM_API_KEY.",
                code="SERVICE_UNAVAILABLE",
                status_code=503,
            )

        response = await self._post("/chat/completions", json=self._payload(entity))

        try:
            content = response["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ExternalAPIError(f"Unexpected scoring response shape: {e}") from e

        vector = parse_scores(content)
        logger.debug("Scored %s: %s", entity.id, vector.to_dict())
        return vector
