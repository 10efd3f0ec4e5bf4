"""
Base interface for intent classifiers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class IntentResult:
    """Classifier output: top intent plus extracted entities.

    ``entities`` maps an entity key (e.g. ``"category:category"``) to the
    list of matches, each a dict with at least a ``value``.
    """

    intent: str | None = None
    entities: dict[str, list[dict[str, Any]]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.intent is None and not self.entities

    def first_value(self, key: str) -> str | None:
        """First value extracted for ``key``, if any."""
        for match in self.entities.get(key) or []:
            value = match.get("value") if isinstance(match, dict) else None
            if value:
                return str(value)
        return None


class BaseIntentClassifier(ABC):
    """Abstract base class for intent classifiers.

    ``classify`` must never raise: transport or parsing problems are
    reported as an empty ``IntentResult``.
    """

    @abstractmethod
    async def classify(self, text: str) -> IntentResult:
        """Classify free text."""
        pass

    async def close(self) -> None:
        """Release network resources."""
        return None

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        pass
