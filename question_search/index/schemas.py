from __future__ import annotations

from typing import Any, Dict


QUESTIONS_COLLECTION = "questions"


def questions_schema(name: str = QUESTIONS_COLLECTION) -> Dict[str, Any]:
    """Typesense collection definition for question documents.

    ``title`` and ``content`` are the searchable text fields, ``tags`` is
    the facet used by ``tags:=[...]`` filters.
    """
    return {
        "name": name,
        "fields": [
            {"name": "id", "type": "string"},
            {"name": "title", "type": "string"},
            {"name": "content", "type": "string"},
            {"name": "tags", "type": "string[]", "facet": True},
            {"name": "createdAt", "type": "int64"},
            {"name": "hasAcceptedAnswer", "type": "bool"},
            {"name": "answerCount", "type": "int32"},
        ],
        "default_sorting_field": "createdAt",
    }
