"""Lossy decoder from a search model answer to ``TechOption`` records.

The search model is asked for JSON but does not always comply, so decoding is
two-staged: structured JSON first, then a best-effort regex pass over numbered
markdown prose. Nothing outside this module depends on the regex structure and
no failure escapes it; the worst case is an empty list.
"""
from __future__ import annotations

import re
from typing import Any

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from stackscout.config import settings
from stackscout.models.research import TechOption
from stackscout.services.json_extract import safe_parse_json

_LIST_KEYS = ("options", "recommendations", "technologies", "results")
_LINK_KEYS = ("learnMore", "learn_more", "url", "link", "website")

# "1. **Name**", "### 1. **Name**" or "> 1. **Name**" starts a new option
SECTION_SPLIT_RE = re.compile(r"(?:^|\n)[^\S\n]*(?:[#>]+[^\S\n]*)?\d+\.\s+\*\*")
NAME_RE = re.compile(r"^([^*\n]+)\*\*")
# "Pros:", "**Cons:**", "- **Popularity**: High", "### Learn More"
HEADER_RE = re.compile(
    r"^[\s#>*-]*(pros|cons|popularity|learn more)[\s*]*(?::[\s*]*(.*)|$)",
    re.IGNORECASE,
)
URL_RE = re.compile(r"https?://[^\s)\]>]+")
BULLET_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")


def _clean_line(line: str) -> str:
    return BULLET_RE.sub("", line).strip().strip("*").strip()


def _text_list(value: Any) -> list[str]:
    if isinstance(value, str):
        items = value.splitlines()
    elif isinstance(value, list):
        items = [str(item) for item in value if item is not None]
    else:
        return []
    return [cleaned for cleaned in (_clean_line(item) for item in items) if cleaned]


def _optional_text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


# --- Structured decode ---


def _option_from_dict(item: Any) -> TechOption | None:
    if not isinstance(item, dict):
        return None
    name = item.get("name") or item.get("title")
    if not isinstance(name, str) or not name.strip():
        return None
    link = next((item[k] for k in _LINK_KEYS if item.get(k)), None)
    try:
        return TechOption(
            name=name,
            description=_optional_text(item.get("description")) or "",
            pros=_text_list(item.get("pros")),
            cons=_text_list(item.get("cons")),
            popularity=_optional_text(item.get("popularity")),
            learn_more=_optional_text(link),
        )
    except PydanticValidationError:
        return None


def _option_list(payload: Any) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in _LIST_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
        if "name" in payload:
            return [payload]
        nested = [value for value in payload.values() if isinstance(value, list)]
        if len(nested) == 1:
            return nested[0]
    return []


def parse_structured_options(raw_text: str) -> list[TechOption]:
    payload = safe_parse_json(raw_text)
    if payload is None:
        return []
    return [opt for opt in map(_option_from_dict, _option_list(payload)) if opt is not None]


# --- Prose decode ---


def _section_option(section: str) -> TechOption | None:
    lines = section.split("\n")
    name_match = NAME_RE.match(lines[0])
    if not name_match:
        return None

    description: list[str] = []
    first = lines[0][name_match.end() :].strip().lstrip("-:–").strip()
    if first:
        description.append(first)
    blocks: dict[str, list[str]] = {"pros": [], "cons": []}
    popularity: str | None = None
    learn_more: str | None = None
    current = "description"

    for line in lines[1:]:
        header = HEADER_RE.match(line)
        if header:
            current = header.group(1).lower()
            rest = (header.group(2) or "").strip().strip("*").strip()
            if current in blocks and rest:
                blocks[current].append(rest)
            elif current == "popularity" and rest:
                popularity = rest
            elif current == "learn more":
                url = URL_RE.search(rest)
                learn_more = url.group(0) if url else learn_more
            continue

        stripped = line.strip()
        if current == "description":
            if not stripped:
                if description:
                    current = "after_description"
                continue
            description.append(stripped)
        elif current in blocks:
            cleaned = _clean_line(line)
            if cleaned:
                blocks[current].append(cleaned)
        elif current == "popularity" and popularity is None and stripped:
            popularity = _clean_line(line) or None
        elif current == "learn more" and learn_more is None:
            url = URL_RE.search(line)
            learn_more = url.group(0) if url else None

    try:
        return TechOption(
            name=name_match.group(1).strip().rstrip(":").strip(),
            description=" ".join(description),
            pros=blocks["pros"],
            cons=blocks["cons"],
            popularity=popularity,
            learn_more=learn_more,
        )
    except PydanticValidationError:
        return None


def parse_prose_options(raw_text: str) -> list[TechOption]:
    """Best-effort parse of numbered markdown recommendations."""
    sections = SECTION_SPLIT_RE.split(raw_text)
    # sections[0] is whatever preceded the first "1. **" marker
    options: list[TechOption] = []
    for section in sections[1:]:
        option = _section_option(section)
        if option is not None:
            options.append(option)
    return options


def parse_options(raw_text: str, *, category: str = "") -> list[TechOption]:
    """Decode one category's raw answer; returns [] when nothing usable is found."""
    if not raw_text or not raw_text.strip():
        return []
    if len(raw_text) > settings.max_json_response_size:
        logger.warning(
            f"Refusing to decode {len(raw_text)} characters for category '{category}' "
            f"(max: {settings.max_json_response_size})"
        )
        return []
    try:
        options = parse_structured_options(raw_text)
        if options:
            return options
        options = parse_prose_options(raw_text)
        if not options:
            logger.debug(f"No options decoded for category '{category}'")
        return options
    except Exception as exc:
        logger.warning(f"Option decoding failed for category '{category}': {exc}")
        return []
