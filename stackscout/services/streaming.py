from __future__ import annotations

from typing import Any

from stackscout.models.events import EventType, SSEEvent
from stackscout.models.research import (
    CategoryResult,
    ProductContext,
    ResearchAggregate,
    ResearchQuery,
    format_category_name,
)


def research_started(context: ProductContext) -> SSEEvent:
    return SSEEvent(
        event=EventType.RESEARCH_STARTED,
        data={"productName": context.product_name},
    )


def plan_created(queries: list[ResearchQuery]) -> SSEEvent:
    """Emit the planner's categories; query text stays server-side."""
    return SSEEvent(
        event=EventType.PLAN_CREATED,
        data={
            "categories": [
                {
                    "category": q.category,
                    "label": format_category_name(q.category),
                    "reasoning": q.reasoning,
                }
                for q in queries
            ],
        },
    )


def category_started(query: ResearchQuery) -> SSEEvent:
    return SSEEvent(
        event=EventType.CATEGORY_STARTED,
        data={"category": query.category, "label": format_category_name(query.category)},
    )


def category_completed(result: CategoryResult, **kwargs: Any) -> SSEEvent:
    data: dict[str, Any] = {
        "category": result.category,
        "success": bool(result.options),
        "options_count": len(result.options),
    }
    data.update(kwargs)
    return SSEEvent(event=EventType.CATEGORY_COMPLETED, data=data)


def research_complete(aggregate: ResearchAggregate, runtime_ms: int | None = None) -> SSEEvent:
    data: dict[str, Any] = aggregate.to_wire()
    if runtime_ms is not None:
        data["runtime_ms"] = runtime_ms
    return SSEEvent(event=EventType.RESEARCH_COMPLETE, data=data)


def error(message: str, **kwargs: Any) -> SSEEvent:
    data: dict[str, Any] = {"error": message}
    data.update({k: v for k, v in kwargs.items() if v is not None})
    return SSEEvent(event=EventType.ERROR, data=data)
