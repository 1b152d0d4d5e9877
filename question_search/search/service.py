from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from question_search.index import QUESTIONS_COLLECTION, TypesenseClient, TypesenseError

from .query import ParsedQuery, SearchMode, SearchRequest, build_search_request, parse_query


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchOutcome:
    """Either the matched documents or the reason the search failed."""

    documents: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, documents: List[Dict[str, Any]]) -> "SearchOutcome":
        return cls(documents=documents)

    @classmethod
    def failure(cls, error: str) -> "SearchOutcome":
        return cls(error=error)


class SearchService:
    """Application-layer search over the questions collection.

    Implements:
      1) Similar titles: the raw query matched against titles only
      2) Full search: ``[tag]`` extraction, title and content matching

    Documents are returned as stored in Typesense, in ranked order.
    """

    def __init__(
        self,
        client: TypesenseClient,
        *,
        collection_name: str = QUESTIONS_COLLECTION,
        timeout_s: Optional[float] = 30.0,
    ) -> None:
        self.client = client
        self.collection_name = collection_name
        self.timeout_s = timeout_s

    async def similar_titles(self, query: str) -> SearchOutcome:
        request = build_search_request(ParsedQuery(text=query), SearchMode.title_only)
        return await self._execute(request)

    async def search(self, query: str) -> SearchOutcome:
        parsed = parse_query(query)
        request = build_search_request(parsed, SearchMode.title_and_content)
        return await self._execute(request)

    async def _execute(self, request: SearchRequest) -> SearchOutcome:
        try:
            documents = await asyncio.wait_for(
                self.client.search(self.collection_name, request.to_params()),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError:
            logger.error(
                "Search for %r timed out after %ss", request.query_text, self.timeout_s
            )
            return SearchOutcome.failure(f"Search timed out after {self.timeout_s}s")
        except TypesenseError as exc:
            logger.error("Search for %r failed: %s", request.query_text, exc.message)
            return SearchOutcome.failure(exc.message)
        except Exception as exc:
            logger.exception("Unexpected error searching for %r", request.query_text)
            return SearchOutcome.failure(str(exc) or exc.__class__.__name__)

        return SearchOutcome.success(documents)
