"""
Concept2 webhook ingestion.
"""

from .schemas import (
    AddedResult,
    ResultAdded,
    ResultDeleted,
    WebhookEvent,
    WebhookValidationError,
    parse_event,
)
from .ingestor import WebhookIngestor, WebhookOutcome

__all__ = [
    "AddedResult",
    "ResultAdded",
    "ResultDeleted",
    "WebhookEvent",
    "WebhookValidationError",
    "parse_event",
    "WebhookIngestor",
    "WebhookOutcome",
]
