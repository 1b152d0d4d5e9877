from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from question_search.search import SearchOutcome, SearchService


router = APIRouter(prefix="/search", tags=["search"])

SEARCH_FAILED_TITLE = "Typesense search failed"


class SearchQuestion(BaseModel):
    """Documented shape of a stored question.

    Only used for the OpenAPI schema: hits are forwarded exactly as Typesense
    returns them, never re-validated.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(default=None, description="Question id.")
    title: Optional[str] = Field(default=None, description="Question title.")
    content: Optional[str] = Field(default=None, description="Question body.")
    tags: Optional[List[str]] = Field(default=None, description="Question tags.")
    created_at: Optional[int] = Field(
        default=None, alias="createdAt", description="Creation time (unix seconds)."
    )
    has_accepted_answer: Optional[bool] = Field(default=None, alias="hasAcceptedAnswer")
    answer_count: Optional[int] = Field(default=None, alias="answerCount")


class ProblemDetails(BaseModel):
    type: str = Field("about:blank", description="Problem type URI.")
    title: str = Field(..., description="Short summary of the problem.")
    status: int = Field(..., description="HTTP status code.")
    detail: Optional[str] = Field(None, description="Backend failure message.")


def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


def _respond(outcome: SearchOutcome):
    if outcome.ok:
        return JSONResponse(outcome.documents)
    problem = ProblemDetails(title=SEARCH_FAILED_TITLE, status=500, detail=outcome.error)
    return JSONResponse(
        status_code=500,
        content=problem.model_dump(),
        media_type="application/problem+json",
    )


_RESPONSES = {
    200: {"model": List[SearchQuestion], "description": "Matching questions, ranked."},
    500: {"model": ProblemDetails, "description": SEARCH_FAILED_TITLE},
}

_QUERY = Query(
    "",
    description="Search text; /search also accepts one inline [tag] filter.",
)


@router.get(
    "/similar-titles",
    summary="Questions with a similar title",
    response_model=None,
    responses=_RESPONSES,
)
async def similar_titles(
    query: str = _QUERY,
    service: SearchService = Depends(get_search_service),
):
    """Match the raw query against question titles only (no tag extraction)."""
    return _respond(await service.similar_titles(query))


@router.get(
    "",
    summary="Full-text question search",
    response_model=None,
    responses=_RESPONSES,
)
async def search(
    query: str = _QUERY,
    service: SearchService = Depends(get_search_service),
):
    """Search titles and content.

    A ``[tag]`` token anywhere in the query restricts results to questions
    carrying that tag, e.g. ``how to parse [csharp] strings``.
    """
    return _respond(await service.search(query))
