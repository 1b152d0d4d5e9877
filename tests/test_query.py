"""Tests for inline tag parsing and search request construction."""

import pytest

from question_search.search import (
    ParsedQuery,
    SearchMode,
    build_search_request,
    parse_query,
)


class TestParseQuery:
    @pytest.mark.parametrize(
        "raw",
        ["how to parse strings", "  padded  query ", "", "tags := nothing here"],
    )
    def test_without_brackets_text_is_untouched(self, raw: str) -> None:
        parsed = parse_query(raw)

        assert parsed.tag is None
        assert parsed.text == raw

    def test_extracts_tag_from_middle(self) -> None:
        parsed = parse_query("how to parse [csharp] strings")

        assert parsed == ParsedQuery(text="how to parse strings", tag="csharp")

    def test_extracts_leading_and_trailing_tag(self) -> None:
        assert parse_query("[python] async io") == ParsedQuery("async io", "python")
        assert parse_query("async io [python]") == ParsedQuery("async io", "python")

    def test_only_first_bracket_pair_is_a_tag(self) -> None:
        parsed = parse_query("[react] hooks [redux]")

        assert parsed.tag == "react"
        assert parsed.text == "hooks [redux]"

    def test_empty_brackets_give_empty_tag(self) -> None:
        parsed = parse_query("generics []")

        assert parsed.tag == ""
        assert parsed.text == "generics"

    def test_tag_only_query(self) -> None:
        assert parse_query("  [docker]  ") == ParsedQuery("", "docker")

    def test_only_one_separator_goes_with_the_tag(self) -> None:
        assert parse_query("a  [x]  b") == ParsedQuery("a   b", "x")
        assert parse_query("a\t[x] b") == ParsedQuery("a\tb", "x")

    def test_tag_glued_to_words_leaves_no_space(self) -> None:
        assert parse_query("abc[x]def") == ParsedQuery("abcdef", "x")

    def test_empty_input(self) -> None:
        assert parse_query("") == ParsedQuery("", None)


class TestBuildSearchRequest:
    def test_title_only_fields(self) -> None:
        request = build_search_request(ParsedQuery("foo"), SearchMode.title_only)

        assert request.search_fields == ("title",)
        assert request.filter_expression is None

    def test_title_and_content_with_tag(self) -> None:
        parsed = parse_query("how to parse [csharp] strings")
        request = build_search_request(parsed, SearchMode.title_and_content)

        assert request.query_text == "how to parse strings"
        assert request.search_fields == ("title", "content")
        assert request.filter_expression == "tags:=[csharp]"

    def test_tag_is_substituted_verbatim(self) -> None:
        request = build_search_request(
            ParsedQuery("x", tag="c++ && id:=1"), SearchMode.title_and_content
        )

        assert request.filter_expression == "tags:=[c++ && id:=1]"

    def test_empty_tag_still_filters(self) -> None:
        request = build_search_request(ParsedQuery("x", tag=""), SearchMode.title_only)

        assert request.filter_expression == "tags:=[]"

    def test_empty_query(self) -> None:
        request = build_search_request(parse_query(""), SearchMode.title_and_content)

        assert request.query_text == ""
        assert request.filter_expression is None
        assert list(request.search_fields) == ["title", "content"]

    def test_to_params(self) -> None:
        request = build_search_request(
            parse_query("parse [csharp]"), SearchMode.title_and_content
        )

        assert request.to_params() == {
            "q": "parse",
            "query_by": "title,content",
            "filter_by": "tags:=[csharp]",
        }

    def test_to_params_without_filter(self) -> None:
        request = build_search_request(ParsedQuery("parse"), SearchMode.title_only)

        assert request.to_params() == {"q": "parse", "query_by": "title"}
