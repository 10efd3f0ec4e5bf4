"""
Wit.ai intent classifier.
"""

import json
import logging

import httpx

from src.config import settings
from src.integrations.nlp.base import BaseIntentClassifier, IntentResult

logger = logging.getLogger(__name__)


class WitClassifier(BaseIntentClassifier):
    """Classifier backed by the Wit.ai ``/message`` endpoint."""

    def __init__(
        self,
        token: str | None = None,
        api_version: str | None = None,
        url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.token = token or settings.wit_api_token
        self.api_version = api_version or settings.wit_api_version
        self.url = url or settings.wit_api_url

        if not self.token:
            raise ValueError(
                "Wit.ai token not provided. "
                "Set WIT_API_TOKEN in .env file."
            )

        self._client = client or httpx.AsyncClient(timeout=settings.http_timeout)

    async def classify(self, text: str) -> IntentResult:
        """Classify text; returns an empty result on any failure."""
        try:
            response = await self._client.get(
                self.url,
                params={"q": text, "v": self.api_version},
                headers={"Authorization": f"Bearer {self.token}"},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, json.JSONDecodeError) as e:
            logger.error(f"Error calling Wit.ai: {e}")
            return IntentResult()

        logger.debug(f"Wit.ai response: {json.dumps(data, ensure_ascii=False)}")

        if not isinstance(data, dict):
            logger.warning(f"Unexpected Wit.ai payload type: {type(data).__name__}")
            return IntentResult()

        intents = data.get("intents") or []
        intent = intents[0].get("name") if intents and isinstance(intents[0], dict) else None
        entities = data.get("entities") or {}
        if not isinstance(entities, dict):
            entities = {}

        return IntentResult(intent=intent, entities=entities)

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def name(self) -> str:
        return "wit"
