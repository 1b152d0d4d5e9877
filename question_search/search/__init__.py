"""Search application layer.

This package turns raw user queries into Typesense search requests and runs
them for the two scenarios used by the API:
- Similar titles: match the raw query against question titles
- Full search: match title and content, with an optional inline ``[tag]`` filter
"""

from .query import (
    ParsedQuery,
    SearchMode,
    SearchRequest,
    build_filter_expression,
    build_search_request,
    parse_query,
)
from .service import SearchOutcome, SearchService

__all__ = [
    "ParsedQuery",
    "SearchMode",
    "SearchOutcome",
    "SearchRequest",
    "SearchService",
    "build_filter_expression",
    "build_search_request",
    "parse_query",
]
