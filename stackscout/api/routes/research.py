from __future__ import annotations

from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse

from stackscout.agents.orchestrator import ResearchOrchestrator
from stackscout.api.deps import (
    AuthenticatedUser,
    ai_rate_limit,
    get_orchestrator,
    get_research_store,
    require_user,
)
from stackscout.errors import StackScoutError, ValidationError
from stackscout.models.events import EventType
from stackscout.models.research import ProductContext, ResearchAggregate
from stackscout.models.schemas import (
    DefaultStackRequest,
    DefaultStackResponse,
    ErrorResponse,
    ResearchRequest,
)
from stackscout.services import default_stacks
from stackscout.services import logger as log_service
from stackscout.services import streaming
from stackscout.services.supabase import ResearchStore

router = APIRouter(prefix="/api/research", tags=["research"])

ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in (400, 401, 429, 500, 502, 504)
}


def _require_context(context: ProductContext | None) -> ProductContext:
    if context is None:
        raise ValidationError("Product context required")
    if context.is_blank():
        raise ValidationError(
            "Product context required",
            "productName or description must be provided",
        )
    return context


async def _persist(
    store: ResearchStore,
    conversation_id: str | None,
    aggregate: ResearchAggregate,
    user: AuthenticatedUser,
) -> None:
    if not conversation_id:
        return
    try:
        await store.save(conversation_id, aggregate, user_id=user.user_id)
    except Exception as e:
        # The caller still gets the results; it can save them itself.
        log_service.log_event(
            event_type="db_error",
            message="Failed to persist research results",
            error=str(e),
            conversation_id=conversation_id,
        )


@router.post(
    "/tech-stack",
    response_model=ResearchAggregate,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def research_tech_stack(
    request: ResearchRequest,
    user: AuthenticatedUser = Depends(ai_rate_limit),
    orchestrator: ResearchOrchestrator = Depends(get_orchestrator),
    store: ResearchStore = Depends(get_research_store),
):
    """Plan, research and aggregate technology options for a product."""
    context = _require_context(request.product_context)
    log_service.log_event(
        event_type="research_started",
        message="Tech stack research started",
        user_id=user.user_id,
        product_name=context.product_name[:100],
    )

    try:
        aggregate = await orchestrator.run(context)
    except StackScoutError:
        raise
    except Exception as e:
        raise StackScoutError("Failed to complete research", str(e)) from e

    await _persist(store, request.conversation_id, aggregate, user)
    return aggregate


@router.post("/tech-stack/stream", responses=ERROR_RESPONSES)
async def stream_tech_stack_research(
    request: ResearchRequest,
    user: AuthenticatedUser = Depends(ai_rate_limit),
    orchestrator: ResearchOrchestrator = Depends(get_orchestrator),
    store: ResearchStore = Depends(get_research_store),
):
    """SSE variant of the research endpoint; categories are reported as they settle."""
    context = _require_context(request.product_context)

    async def event_generator():
        log_service.log_event(
            event_type="research_started",
            message="Streaming tech stack research started",
            user_id=user.user_id,
            product_name=context.product_name[:100],
        )
        try:
            async for event in orchestrator.research(context):
                if event.event == EventType.RESEARCH_COMPLETE:
                    aggregate = ResearchAggregate.model_validate(
                        {k: v for k, v in event.data.items() if k != "runtime_ms"}
                    )
                    await _persist(store, request.conversation_id, aggregate, user)
                yield event.to_sse()
        except StackScoutError as e:
            error_event = streaming.error(e.message, details=e.details, code=e.code)
            yield error_event.to_sse()
        except Exception as e:
            log_service.log_event(
                event_type="stream_error",
                message="Unhandled error in research stream",
                error=str(e),
            )
            error_event = streaming.error("Failed to complete research", details=str(e))
            yield error_event.to_sse()

    return EventSourceResponse(event_generator())


@router.post(
    "/tech-stack/defaults",
    response_model=DefaultStackResponse,
    response_model_exclude_none=True,
)
async def default_tech_stack(
    request: DefaultStackRequest,
    user: AuthenticatedUser = Depends(require_user),
):
    """Fallback stack for when research failed or the user skipped it."""
    product_type, selection = default_stacks.default_stack(request.product_context)
    aggregate = default_stacks.default_research_results(selection)
    return DefaultStackResponse(
        product_type=product_type,
        selection=selection,
        research_results=aggregate.research_results,
        queries_generated=aggregate.queries_generated,
    )
