from __future__ import annotations

import asyncio
import time
from typing import Any

from loguru import logger

from stackscout.config import settings
from stackscout.errors import JSONParseError, PlannerError, PlannerTimeoutError, PlanValidationError
from stackscout.llm_client import extract_text, reasoning_client, usage_tokens
from stackscout.models.research import ProductContext, ResearchQuery
from stackscout.services import logger as log_service
from stackscout.services.json_extract import parse_json_strict
from stackscout.services.prompt_store import render_prompt
from stackscout.services.result_gate import validate_plan


class QueryPlanner:
    """Asks the reasoning model which technology categories are worth researching.

    The category set is data, not schema: the model may return zero, a few or
    many categories. Whatever it returns is validated as a whole; a malformed
    plan is rejected rather than partially trusted.
    """

    name = "planner"

    def __init__(
        self,
        model: str | None = None,
        *,
        timeout_seconds: float | None = None,
        max_queries: int | None = None,
    ):
        self.model = model or settings.planner_model
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.planner_timeout_seconds
        )
        self.max_queries = max_queries if max_queries is not None else settings.max_research_queries
        self.client = None

    def build_prompt(self, context: ProductContext) -> str:
        return render_prompt(
            "planner.user_prompt",
            product_name=context.product_name or "the product",
            description=context.description,
            target_audience=context.target_audience,
            core_features=context.core_features,
            answers=context.answers,
            max_queries=self.max_queries,
        )

    async def _complete(self, prompt: str) -> Any:
        active_client = self.client or reasoning_client()
        return await active_client.messages.create(
            model=self.model,
            max_tokens=settings.planner_max_tokens,
            system=render_prompt("planner.system_prompt"),
            messages=[{"role": "user", "content": prompt}],
        )

    async def plan(self, context: ProductContext) -> list[ResearchQuery]:
        """Return the research queries for ``context``; [] means nothing to research.

        Raises PlannerTimeoutError, PlannerError or PlanValidationError.
        """
        prompt = self.build_prompt(context)
        t0 = time.monotonic()
        try:
            response = await asyncio.wait_for(self._complete(prompt), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as exc:
            log_service.log_llm_call(
                model=self.model,
                caller=self.name,
                duration_ms=int((time.monotonic() - t0) * 1000),
                status="timeout",
                error=f"timed out after {self.timeout_seconds:g}s",
            )
            raise PlannerTimeoutError(self.timeout_seconds) from exc
        except Exception as exc:
            log_service.log_llm_call(
                model=self.model,
                caller=self.name,
                duration_ms=int((time.monotonic() - t0) * 1000),
                status="error",
                error=str(exc),
            )
            raise PlannerError("Failed to generate research queries", str(exc)) from exc

        input_tokens, output_tokens = usage_tokens(response)
        log_service.log_llm_call(
            model=self.model,
            caller=self.name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=int((time.monotonic() - t0) * 1000),
        )

        text = extract_text(response)
        try:
            raw_plan = parse_json_strict(text, shape="array", context="Research plan")
        except JSONParseError as exc:
            raise PlanValidationError("Planner returned an unreadable plan", str(exc)) from exc

        # Tolerate {"queries": [...]} wrappers around the array.
        if isinstance(raw_plan, dict) and isinstance(raw_plan.get("queries"), list):
            raw_plan = raw_plan["queries"]

        queries = validate_plan(raw_plan, max_queries=self.max_queries)
        logger.info(
            f"Planner selected {len(queries)} categories: "
            f"{', '.join(q.category for q in queries) or '(none)'}"
        )
        return queries
