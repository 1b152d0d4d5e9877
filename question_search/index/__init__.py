"""Typesense access layer.

Wraps the Typesense HTTP API behind a retrying async client and provisions
the questions collection at startup.
"""

from .collection_manager import CollectionManager
from .errors import (
    TypesenseConflictError,
    TypesenseConnectionError,
    TypesenseError,
    TypesenseNotFoundError,
    TypesenseRetryableError,
    TypesenseStatusError,
)
from .retry import RetryPolicy
from .schemas import QUESTIONS_COLLECTION, questions_schema
from .typesense_client import TypesenseClient, get_typesense_client

__all__ = [
    "CollectionManager",
    "QUESTIONS_COLLECTION",
    "RetryPolicy",
    "TypesenseClient",
    "TypesenseConflictError",
    "TypesenseConnectionError",
    "TypesenseError",
    "TypesenseNotFoundError",
    "TypesenseRetryableError",
    "TypesenseStatusError",
    "get_typesense_client",
    "questions_schema",
]
