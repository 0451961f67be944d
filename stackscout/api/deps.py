from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Request

from stackscout.agents.orchestrator import ResearchOrchestrator
from stackscout.agents.stack_validator import StackValidator
from stackscout.config import settings
from stackscout.errors import NotAuthenticatedError, RateLimitError
from stackscout.services import supabase
from stackscout.services.rate_limiter import RATE_LIMITS, rate_limiter
from stackscout.services.supabase import ResearchStore

LOCAL_DEV_USER_ID = "local-dev"


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: str


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_user(request: Request) -> AuthenticatedUser:
    """Resolve the caller's verified identity or reject the request."""
    if settings.auth_disabled:
        return AuthenticatedUser(user_id=LOCAL_DEV_USER_ID)

    token = _bearer_token(request)
    if token is None:
        raise NotAuthenticatedError()
    try:
        user_id = await supabase.get_user_id(token)
    except Exception as exc:
        raise NotAuthenticatedError("Invalid or expired session") from exc
    if not user_id:
        raise NotAuthenticatedError("Invalid or expired session")
    return AuthenticatedUser(user_id=user_id)


async def ai_rate_limit(user: AuthenticatedUser = Depends(require_user)) -> AuthenticatedUser:
    """Apply the AI-route request budget per user."""
    if not settings.rate_limit_enabled:
        return user
    result = rate_limiter.check(f"user:{user.user_id}", RATE_LIMITS["api_ai"])
    if not result.allowed:
        raise RateLimitError("AI research", retry_after=result.retry_after(rate_limiter.now()))
    return user


def get_research_store() -> ResearchStore:
    return ResearchStore()


def get_orchestrator() -> ResearchOrchestrator:
    return ResearchOrchestrator()


def get_stack_validator() -> StackValidator:
    return StackValidator()
