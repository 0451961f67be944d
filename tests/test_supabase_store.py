"""Tests for the Supabase-backed research store and token verification."""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from stackscout.models.research import CategoryResult, ResearchAggregate, ResearchQuery, TechOption
from stackscout.services import supabase
from stackscout.services.supabase import ResearchStore


def _aggregate() -> ResearchAggregate:
    hit = CategoryResult(
        category="frontend",
        options=[TechOption(name="Next.js", learn_more="https://nextjs.org")],
        reasoning="Web UI",
    )
    miss = CategoryResult.empty(ResearchQuery(category="realtime", query="q", reasoning="Live cursors"))
    return ResearchAggregate.from_results([hit, miss])


@pytest.mark.asyncio
async def test_save_writes_results_and_metadata():
    mock_client = MagicMock()
    with patch.object(supabase, "client", return_value=mock_client):
        await ResearchStore().save("conv-1", _aggregate(), user_id="user-9")

    mock_client.table.assert_called_once_with("conversations")
    update = mock_client.table.return_value.update.call_args.args[0]
    assert update["research_results"]["frontend"]["options"][0]["learnMore"] == "https://nextjs.org"
    assert [q["category"] for q in update["queries_generated"]] == ["frontend", "realtime"]
    assert update["research_metadata"]["status"] == "completed"
    assert update["research_metadata"]["categoriesCompleted"] == ["frontend"]
    assert "completedAt" in update["research_metadata"]

    first_eq = mock_client.table.return_value.update.return_value.eq
    first_eq.assert_called_once_with("id", "conv-1")
    first_eq.return_value.eq.assert_called_once_with("user_id", "user-9")
    first_eq.return_value.eq.return_value.execute.assert_called_once()


@pytest.mark.asyncio
async def test_save_failure_propagates():
    mock_client = MagicMock()
    query = mock_client.table.return_value.update.return_value.eq.return_value
    query.execute.side_effect = RuntimeError("connection refused")

    with patch.object(supabase, "client", return_value=mock_client):
        with pytest.raises(RuntimeError):
            await ResearchStore().save("conv-1", _aggregate())


@pytest.mark.asyncio
async def test_get_returns_row_or_none():
    mock_client = MagicMock()
    query = mock_client.table.return_value.select.return_value.eq.return_value
    query.execute.return_value = SimpleNamespace(data=[{"id": "conv-1"}])

    with patch.object(supabase, "client", return_value=mock_client):
        assert await ResearchStore().get("conv-1") == {"id": "conv-1"}
        query.execute.return_value = SimpleNamespace(data=[])
        assert await ResearchStore().get("conv-2") is None


@pytest.mark.asyncio
async def test_get_user_id():
    mock_client = MagicMock()
    mock_client.auth.get_user.return_value = SimpleNamespace(user=SimpleNamespace(id="user-9"))

    with patch.object(supabase, "client", return_value=mock_client):
        assert await supabase.get_user_id("token-abc") == "user-9"
    mock_client.auth.get_user.assert_called_once_with("token-abc")


def test_unconfigured_client_raises():
    with patch.object(supabase.settings, "supabase_url", ""):
        with pytest.raises(RuntimeError):
            supabase.get_client()
