"""JSON extraction from free-form model output.

Models wrap JSON in markdown fences, prepend conversational preambles and append
trailing commentary. The helpers here pick the most plausible JSON substring and
parse it, refusing anything above a size ceiling before parsing starts.
"""
from __future__ import annotations

import json
import re
from typing import Any, Iterator, Literal

from loguru import logger

from stackscout.config import settings
from stackscout.errors import JSONParseError

JsonShape = Literal["array", "object"]

FENCED_JSON_RE = re.compile(r"```json[^\S\n]*\n?([\s\S]*?)\n?[^\S\n]*```", re.IGNORECASE)

_DELIMITERS: dict[str, tuple[str, str]] = {
    "array": ("[", "]"),
    "object": ("{", "}"),
}


def _span(raw_text: str, shape: str) -> str | None:
    opener, closer = _DELIMITERS[shape]
    start = raw_text.find(opener)
    end = raw_text.rfind(closer)
    if start < 0 or end <= start:
        return None
    return raw_text[start : end + 1]


def _candidates(raw_text: str, shape: JsonShape | None) -> Iterator[str]:
    match = FENCED_JSON_RE.search(raw_text)
    if match and match.group(1).strip():
        yield match.group(1).strip()

    if shape is not None:
        shapes = [shape]
    else:
        # Whichever container opens first is the more plausible payload.
        shapes = sorted(
            (s for s, (opener, _) in _DELIMITERS.items() if opener in raw_text),
            key=lambda s: raw_text.find(_DELIMITERS[s][0]),
        )
    for candidate_shape in shapes:
        candidate = _span(raw_text, candidate_shape)
        if candidate:
            yield candidate


def extract_json_candidate(raw_text: str, shape: JsonShape | None = None) -> str | None:
    """Return the most plausible JSON substring of ``raw_text``, or None.

    A ```json fence wins. Otherwise the substring runs from the first opening
    delimiter of the expected shape to the last closing one, inclusive.
    """
    if not raw_text:
        return None
    return next(_candidates(raw_text, shape), None)


def _check_size(text: str, max_size: int) -> None:
    if len(text) > max_size:
        raise JSONParseError(
            f"JSON string too large: {len(text)} characters (max: {max_size})",
            text,
        )


def parse_json_strict(
    raw_text: str,
    *,
    shape: JsonShape | None = None,
    max_size: int | None = None,
    context: str = "JSON parsing",
) -> Any:
    """Extract and parse JSON from model output, raising ``JSONParseError`` on failure."""
    limit = max_size if max_size is not None else settings.max_json_response_size
    text = raw_text or ""
    try:
        _check_size(text, limit)
        candidate = extract_json_candidate(text, shape)
        if candidate is None:
            raise JSONParseError("Could not find valid JSON in text", text)
        try:
            return json.loads(candidate)
        except json.JSONDecodeError as exc:
            raise JSONParseError("Failed to parse AI response as JSON", candidate, exc) from exc
    except JSONParseError as exc:
        logger.warning(f"{context}: {exc}")
        raise


def safe_parse_json(
    raw_text: str,
    *,
    shape: JsonShape | None = None,
    max_size: int | None = None,
) -> Any | None:
    """Like ``parse_json_strict`` but returns None instead of raising.

    Every candidate substring is tried in turn; the first one that parses wins.
    """
    limit = max_size if max_size is not None else settings.max_json_response_size
    if not raw_text:
        return None
    if len(raw_text) > limit:
        logger.debug(f"Refusing to parse {len(raw_text)} characters (max: {limit})")
        return None
    for candidate in _candidates(raw_text, shape):
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue
    return None
