from __future__ import annotations

import asyncio
import time
from typing import AsyncGenerator

from loguru import logger

from stackscout.agents.category_researcher import CategoryResearcher
from stackscout.agents.planner import QueryPlanner
from stackscout.config import settings
from stackscout.models.events import SSEEvent
from stackscout.models.research import (
    CategoryResult,
    ProductContext,
    ResearchAggregate,
    ResearchQuery,
)
from stackscout.services import logger as log_service
from stackscout.services import streaming


class ResearchOrchestrator:
    """Plans, fans research out per category, and aggregates whatever settles.

    Planner errors propagate to the caller. Per-category errors never do: each
    one becomes an empty-options result and is only logged.
    """

    def __init__(
        self,
        planner: QueryPlanner | None = None,
        researcher: CategoryResearcher | None = None,
        *,
        max_concurrency: int | None = None,
    ):
        self.planner = planner or QueryPlanner()
        self.researcher = researcher or CategoryResearcher()
        limit = settings.research_max_concurrency if max_concurrency is None else max_concurrency
        self.max_concurrency = max(int(limit), 0)

    def _semaphore(self) -> asyncio.Semaphore | None:
        return asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

    async def _research_one(
        self, query: ResearchQuery, semaphore: asyncio.Semaphore | None
    ) -> CategoryResult:
        if semaphore is None:
            return await self.researcher.research(query)
        async with semaphore:
            return await self.researcher.research(query)

    @staticmethod
    def _settle(query: ResearchQuery, outcome: CategoryResult | BaseException) -> CategoryResult:
        if isinstance(outcome, CategoryResult):
            return outcome
        log_service.log_research_step(
            query.category, "research", "failed", {"reason": "unhandled", "error": str(outcome)}
        )
        return CategoryResult.empty(query)

    async def research_all(self, queries: list[ResearchQuery]) -> list[CategoryResult]:
        """Run every query concurrently; results come back in query order."""
        semaphore = self._semaphore()
        outcomes = await asyncio.gather(
            *(self._research_one(query, semaphore) for query in queries),
            return_exceptions=True,
        )
        return [self._settle(query, outcome) for query, outcome in zip(queries, outcomes)]

    @staticmethod
    def _log_completion(aggregate: ResearchAggregate, runtime_ms: int) -> None:
        log_service.log_event(
            event_type="research_complete",
            message="Tech stack research complete",
            categories_attempted=len(aggregate.queries_generated),
            categories_with_results=len(aggregate.research_results),
            runtime_ms=runtime_ms,
        )

    async def run(self, context: ProductContext) -> ResearchAggregate:
        """Run the whole pipeline and return the aggregate."""
        started_at = time.monotonic()
        queries = await self.planner.plan(context)
        logger.info(f"Research plan has {len(queries)} queries")
        if not queries:
            return ResearchAggregate()

        results = await self.research_all(queries)
        aggregate = ResearchAggregate.from_results(results)
        self._log_completion(aggregate, int((time.monotonic() - started_at) * 1000))
        return aggregate

    async def research(self, context: ProductContext) -> AsyncGenerator[SSEEvent, None]:
        """Streaming variant of ``run``: yields progress events as categories settle.

        Categories are reported in completion order. The final event is
        ``research_complete`` carrying the aggregate.
        """
        started_at = time.monotonic()
        yield streaming.research_started(context)

        queries = await self.planner.plan(context)
        logger.info(f"Research plan has {len(queries)} queries")
        yield streaming.plan_created(queries)
        if not queries:
            yield streaming.research_complete(ResearchAggregate(), runtime_ms=0)
            return

        semaphore = self._semaphore()

        async def settle(query: ResearchQuery) -> CategoryResult:
            try:
                outcome: CategoryResult | BaseException = await self._research_one(query, semaphore)
            except Exception as exc:
                outcome = exc
            return self._settle(query, outcome)

        for query in queries:
            yield streaming.category_started(query)

        tasks = [asyncio.create_task(settle(query)) for query in queries]
        results: list[CategoryResult] = []
        try:
            for next_done in asyncio.as_completed(tasks):
                result = await next_done
                results.append(result)
                yield streaming.category_completed(result)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        aggregate = ResearchAggregate.from_results(results)
        runtime_ms = int((time.monotonic() - started_at) * 1000)
        self._log_completion(aggregate, runtime_ms)
        yield streaming.research_complete(aggregate, runtime_ms=runtime_ms)
