from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


TAG_PATTERN = re.compile(r"\[(.*?)\]")


class SearchMode(str, Enum):
    title_only = "title_only"
    title_and_content = "title_and_content"

    @property
    def fields(self) -> Tuple[str, ...]:
        if self is SearchMode.title_only:
            return ("title",)
        return ("title", "content")


@dataclass(frozen=True)
class ParsedQuery:
    text: str
    tag: Optional[str] = None


@dataclass(frozen=True)
class SearchRequest:
    query_text: str
    search_fields: Tuple[str, ...]
    filter_expression: Optional[str] = None

    def to_params(self) -> Dict[str, str]:
        """Render as Typesense search query parameters."""
        params = {"q": self.query_text, "query_by": ",".join(self.search_fields)}
        if self.filter_expression is not None:
            params["filter_by"] = self.filter_expression
        return params


def parse_query(raw: str) -> ParsedQuery:
    """Split an inline ``[tag]`` token off a raw query string.

    Only the first bracket pair is treated as a tag; later ones stay in the
    text. Whitespace is trimmed only when a tag was removed; one whitespace
    character next to the token goes with it, so a single separator remains.
    """
    match = TAG_PATTERN.search(raw)
    if match is None:
        return ParsedQuery(text=raw)
    head, tail = raw[: match.start()], raw[match.end() :]
    if head[-1:].isspace() and tail[:1].isspace():
        tail = tail[1:]
    text = (head + tail).strip()
    return ParsedQuery(text=text, tag=match.group(1))


def build_filter_expression(tag: Optional[str]) -> Optional[str]:
    # The tag is substituted as-is: filter syntax in it is not escaped.
    if tag is None:
        return None
    return f"tags:=[{tag}]"


def build_search_request(parsed: ParsedQuery, mode: SearchMode) -> SearchRequest:
    return SearchRequest(
        query_text=parsed.text,
        search_fields=mode.fields,
        filter_expression=build_filter_expression(parsed.tag),
    )
