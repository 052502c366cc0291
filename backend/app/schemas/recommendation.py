"""
Recommendation payloads from AI services and their normalization.

Upstream services answer in several shapes: a single string, a list of
strings, JSON text, or an already-parsed list/dict of objects.
normalize_recommendations turns any of them into list[Recommendation].
"""
from __future__ import annotations

import json
from typing import Any, Union

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from app.core.errors import UpstreamServiceError


class Recommendation(BaseModel):
    title: str = Field(..., max_length=200)
    description: str = Field(..., max_length=2000)
    type: str | None = None


SingleText = str
TextList = list[str]
ParsedStruct = Union[dict[str, Any], list[dict[str, Any]]]
RecommendationPayload = Union[SingleText, TextList, ParsedStruct, None]

DEFAULT_TEXT_TITLE = "Suggestion"


def strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        text = text.rsplit("```", 1)[0].strip()
    return text


def _from_text(text: str) -> Recommendation:
    text = text.strip()
    title = text if len(text) <= 60 else DEFAULT_TEXT_TITLE
    return Recommendation(title=title, description=text[:2000])


def _from_dict(item: dict[str, Any]) -> Recommendation:
    title = item.get("title") or item.get("name") or DEFAULT_TEXT_TITLE
    description = item.get("description") or item.get("text") or item.get("details")
    if not isinstance(description, str) or not description.strip():
        raise UpstreamServiceError("Recommendation without description")
    try:
        return Recommendation(
            title=str(title)[:200],
            description=description.strip()[:2000],
            type=item.get("type") if isinstance(item.get("type"), str) else None,
        )
    except PydanticValidationError as e:
        raise UpstreamServiceError(f"Malformed recommendation: {e}") from e


def normalize_recommendations(payload: RecommendationPayload, *, expect_json: bool = False) -> list[Recommendation]:
    """
    Normalize an upstream payload to a non-empty list of recommendations.

    With expect_json=True a string payload must parse as JSON; otherwise a
    non-JSON string is treated as one free-text suggestion.
    Raises UpstreamServiceError when nothing usable can be extracted.
    """
    if payload is None:
        raise UpstreamServiceError("Empty recommendation payload")

    if isinstance(payload, str):
        text = strip_code_fence(payload)
        if not text:
            raise UpstreamServiceError("Empty recommendation payload")
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            if expect_json:
                raise UpstreamServiceError("Recommendation payload is not valid JSON") from e
            return [_from_text(text)]
        if isinstance(parsed, str):
            return [_from_text(parsed)] if parsed.strip() else normalize_recommendations(None)
        return normalize_recommendations(parsed, expect_json=expect_json)

    if isinstance(payload, dict):
        nested = payload.get("recommendations")
        if isinstance(nested, list):
            return normalize_recommendations(nested, expect_json=expect_json)
        return [_from_dict(payload)]

    if isinstance(payload, list):
        out: list[Recommendation] = []
        for item in payload:
            if isinstance(item, str):
                if item.strip():
                    out.append(_from_text(item))
            elif isinstance(item, dict):
                out.append(_from_dict(item))
            elif isinstance(item, list):
                out.extend(normalize_recommendations(item, expect_json=expect_json))
            else:
                raise UpstreamServiceError(f"Unexpected recommendation item: {type(item).__name__}")
        if not out:
            raise UpstreamServiceError("No recommendations in payload")
        return out

    raise UpstreamServiceError(f"Unexpected recommendation payload: {type(payload).__name__}")
