from __future__ import annotations

import asyncio
import time
from typing import Any

from stackscout.config import settings
from stackscout.llm_client import extract_text, search_client, usage_tokens
from stackscout.models.research import CategoryResult, ResearchQuery
from stackscout.services import logger as log_service
from stackscout.services.option_parser import parse_options
from stackscout.services.prompt_store import render_prompt


class CategoryResearcher:
    """Runs one planner query against the search-augmented model.

    ``research`` never raises. Timeouts, provider errors and unparseable answers
    all resolve to the same empty-options result for the category.
    """

    name = "category_researcher"

    def __init__(self, model: str | None = None, *, timeout_seconds: float | None = None):
        self.model = model or settings.research_model
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.research_timeout_seconds
        )
        self.client = None

    async def _complete(self, query: ResearchQuery) -> Any:
        active_client = self.client or search_client()
        return await active_client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": render_prompt("research.system_prompt")},
                {"role": "user", "content": query.query},
            ],
            max_tokens=settings.research_max_tokens,
            temperature=settings.research_temperature,
        )

    async def research(self, query: ResearchQuery) -> CategoryResult:
        log_service.log_research_step(query.category, "research", "started")
        t0 = time.monotonic()
        try:
            response = await asyncio.wait_for(self._complete(query), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            elapsed_ms = int((time.monotonic() - t0) * 1000)
            log_service.log_research_step(
                query.category,
                "research",
                "failed",
                {"reason": "timeout", "timeout_seconds": self.timeout_seconds, "duration_ms": elapsed_ms},
            )
            return CategoryResult.empty(query)
        except Exception as exc:
            log_service.log_research_step(
                query.category,
                "research",
                "failed",
                {"reason": "provider_error", "error": str(exc)},
            )
            return CategoryResult.empty(query)

        elapsed_ms = int((time.monotonic() - t0) * 1000)
        input_tokens, output_tokens = usage_tokens(response)
        log_service.log_llm_call(
            model=self.model,
            caller=f"{self.name}:{query.category}",
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=elapsed_ms,
        )

        options = parse_options(extract_text(response), category=query.category)
        if not options:
            log_service.log_research_step(
                query.category, "parse", "failed", {"reason": "no_options_decoded"}
            )
            return CategoryResult.empty(query)

        log_service.log_research_step(
            query.category, "research", "completed", {"options_count": len(options)}
        )
        return CategoryResult(category=query.category, options=options, reasoning=query.reasoning)
