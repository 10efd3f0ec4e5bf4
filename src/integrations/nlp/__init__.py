"""
Intent classifier factory.
"""

from src.integrations.nlp.base import BaseIntentClassifier, IntentResult
from src.integrations.nlp.wit import WitClassifier


def get_intent_classifier(provider: str = "wit") -> BaseIntentClassifier:
    """
    Get intent classifier instance.

    Args:
        provider: Provider name (only 'wit' is supported)

    Returns:
        Classifier instance
    """
    if provider == "wit":
        return WitClassifier()
    raise ValueError(f"Unknown intent classifier: {provider}")


__all__ = [
    "BaseIntentClassifier",
    "IntentResult",
    "WitClassifier",
    "get_intent_classifier",
]
