"""Prompt catalog: ``section.name`` keys in ``prompts/prompts.json`` rendered with ``string.Template``."""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from string import Template
from typing import Any

PROMPTS_PATH = Path(__file__).resolve().parents[1] / "prompts" / "prompts.json"


@lru_cache(maxsize=1)
def _catalog() -> dict[str, dict[str, str]]:
    return json.loads(PROMPTS_PATH.read_text(encoding="utf-8"))


def _template(key: str) -> Template:
    section, _, name = key.partition(".")
    try:
        return Template(_catalog()[section][name])
    except (KeyError, TypeError) as exc:
        raise KeyError(f"Prompt key not found: {key}") from exc


def format_value(value: Any, *, empty: str = "(none)") -> str:
    """Render lists as bullet lines and mappings as ``key: value`` lines."""
    if isinstance(value, dict):
        lines = [f"- {k}: {v}" for k, v in value.items() if str(v).strip()]
        return "\n".join(lines) if lines else empty
    if isinstance(value, (list, tuple)):
        lines = [f"- {item}" for item in value if str(item).strip()]
        return "\n".join(lines) if lines else empty
    text = str(value).strip()
    return text or empty


def render_prompt(key: str, **values: Any) -> str:
    template = _template(key)
    try:
        return template.substitute(**{k: format_value(v) for k, v in values.items()})
    except KeyError as exc:
        missing = str(exc.args[0])
        raise KeyError(f"Missing template value '{missing}' for prompt '{key}'") from exc
