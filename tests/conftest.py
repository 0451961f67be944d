"""Shared fakes for provider responses."""
from types import SimpleNamespace

import pytest

from stackscout.models.research import ProductContext


def _anthropic_reply(text: str, input_tokens: int = 120, output_tokens: int = 80):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        usage=SimpleNamespace(input_tokens=input_tokens, output_tokens=output_tokens),
    )


def _chat_reply(text: str, prompt_tokens: int = 50, completion_tokens: int = 300):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )


@pytest.fixture
def anthropic_reply():
    return _anthropic_reply


@pytest.fixture
def chat_reply():
    return _chat_reply


@pytest.fixture
def taskflow_context() -> ProductContext:
    return ProductContext(
        product_name="TaskFlow",
        description="Realtime collaborative task board for small teams",
        target_audience="Startup teams of 3-20 people",
        core_features=["Shared boards", "Live cursors", "Slack notifications"],
        answers={"platform": "Web first, mobile later", "budget": "Bootstrapped"},
    )
