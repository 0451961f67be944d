"""LLM client factories for the reasoning model (Anthropic) and the search model (Perplexity)."""
from __future__ import annotations

from typing import Any

from stackscout.config import settings


def get_reasoning_client():
    """Create an AsyncAnthropic client for planning and validation."""
    import anthropic

    if not settings.anthropic_api_key:
        raise RuntimeError("ANTHROPIC_API_KEY is not configured")
    return anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)


def get_search_client():
    """Create an OpenAI-compatible client pointed at Perplexity."""
    from openai import AsyncOpenAI

    if not settings.perplexity_api_key:
        raise RuntimeError("PERPLEXITY_API_KEY is not configured")
    return AsyncOpenAI(
        api_key=settings.perplexity_api_key,
        base_url=settings.perplexity_base_url,
    )


# Singletons; both SDK clients pool connections and serve concurrent requests.
_reasoning_client = None
_search_client = None


def reasoning_client():
    global _reasoning_client
    if _reasoning_client is None:
        _reasoning_client = get_reasoning_client()
    return _reasoning_client


def search_client():
    global _search_client
    if _search_client is None:
        _search_client = get_search_client()
    return _search_client


def extract_text(response: Any) -> str:
    """Text of an Anthropic message or an OpenAI chat completion."""
    choices = getattr(response, "choices", None)
    if isinstance(choices, (list, tuple)) and choices:
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        return content.strip() if isinstance(content, str) else ""

    blocks = getattr(response, "content", None) or []
    text_parts: list[str] = []
    for block in blocks:
        btype = getattr(block, "type", None)
        btext = getattr(block, "text", None)
        is_text_like_type = btype in (None, "text") or not isinstance(btype, str)
        if is_text_like_type and isinstance(btext, str) and btext.strip():
            text_parts.append(btext)
    return "\n".join(text_parts).strip()


def usage_tokens(response: Any) -> tuple[int, int]:
    """(input_tokens, output_tokens) for either SDK's usage object."""
    usage = getattr(response, "usage", None)
    if usage is None:
        return 0, 0
    input_tokens = getattr(usage, "input_tokens", None)
    if not isinstance(input_tokens, int):
        input_tokens = getattr(usage, "prompt_tokens", 0)
    output_tokens = getattr(usage, "output_tokens", None)
    if not isinstance(output_tokens, int):
        output_tokens = getattr(usage, "completion_tokens", 0)
    return (
        input_tokens if isinstance(input_tokens, int) else 0,
        output_tokens if isinstance(output_tokens, int) else 0,
    )
