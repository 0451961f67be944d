from __future__ import annotations

from typing import Any

from loguru import logger

from stackscout.config import settings
from stackscout.errors import PlanValidationError
from stackscout.models.research import ResearchQuery

REQUIRED_PLAN_FIELDS = ("category", "query", "reasoning")


def _missing_fields(entry: dict[str, Any]) -> list[str]:
    missing: list[str] = []
    for name in REQUIRED_PLAN_FIELDS:
        value = entry.get(name)
        if not isinstance(value, str) or not value.strip():
            missing.append(name)
    return missing


def validate_plan(raw: Any, *, max_queries: int | None = None) -> list[ResearchQuery]:
    """Turn parsed planner output into queries, or reject the whole plan.

    Every entry is checked before the list is capped, so one malformed entry
    anywhere invalidates the plan. Over-generation past the cap is trimmed.
    """
    cap = max_queries if max_queries is not None else settings.max_research_queries
    if not isinstance(raw, list):
        raise PlanValidationError(
            "Research plan must be a JSON array",
            f"Got {type(raw).__name__}",
        )

    queries: list[ResearchQuery] = []
    # results are keyed by category, so a repeated slug would overwrite an earlier one
    seen: dict[str, int] = {}
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise PlanValidationError(
                "Research plan is malformed",
                f"Entry {index} is not an object",
            )
        missing = _missing_fields(entry)
        if missing:
            raise PlanValidationError(
                "Research plan is malformed",
                f"Entry {index} is missing {', '.join(missing)}",
            )
        slug = entry["category"].strip().lower()
        if slug in seen:
            raise PlanValidationError(
                "Research plan is malformed",
                f"Entry {index} repeats category '{entry['category'].strip()}' from entry {seen[slug]}",
            )
        seen[slug] = index
        queries.append(
            ResearchQuery(
                category=entry["category"].strip(),
                query=entry["query"].strip(),
                reasoning=entry["reasoning"].strip(),
            )
        )

    if len(queries) > cap:
        logger.warning(f"Planner returned {len(queries)} queries; keeping the first {cap}")
        queries = queries[:cap]
    return queries
