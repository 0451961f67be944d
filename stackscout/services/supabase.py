from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any

from supabase import Client, create_client

from stackscout.config import settings
from stackscout.models.research import ResearchAggregate
from stackscout.services import logger as log_service

CONVERSATIONS_TABLE = "conversations"


def get_client() -> Client:
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError("SUPABASE_URL / SUPABASE_ANON_KEY are not configured")
    return create_client(settings.supabase_url, settings.supabase_anon_key)


_client: Client | None = None


def client() -> Client:
    global _client
    if _client is None:
        _client = get_client()
    return _client


# --- Auth ---


async def get_user_id(access_token: str) -> str | None:
    """Verify a Supabase access token and return the user id, or None."""
    response = await asyncio.to_thread(client().auth.get_user, access_token)
    user = getattr(response, "user", None)
    user_id = getattr(user, "id", None)
    return str(user_id) if user_id else None


# --- Conversations ---


class ResearchStore:
    """Key-value view of the conversations table: ``get`` and ``save`` by conversation id."""

    table = CONVERSATIONS_TABLE

    async def get(self, conversation_id: str) -> dict[str, Any] | None:
        query = client().table(self.table).select("*").eq("id", conversation_id)
        result = await asyncio.to_thread(query.execute)
        return result.data[0] if result.data else None

    async def save(
        self,
        conversation_id: str,
        aggregate: ResearchAggregate,
        *,
        user_id: str | None = None,
    ) -> None:
        wire = aggregate.to_wire()
        update = {
            "research_results": wire["researchResults"],
            "queries_generated": wire["queriesGenerated"],
            "research_metadata": {
                "status": "completed",
                "completedAt": datetime.now(timezone.utc).isoformat(),
                "categoriesCompleted": aggregate.categories_completed(),
            },
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        query = client().table(self.table).update(update).eq("id", conversation_id)
        if user_id:
            query = query.eq("user_id", user_id)
        try:
            await asyncio.to_thread(query.execute)
        except Exception as exc:
            log_service.log_db_operation(
                "update", self.table, "failed", details=conversation_id, error=str(exc)
            )
            raise
        log_service.log_db_operation("update", self.table, "success", details=conversation_id)
