from __future__ import annotations

import pytest

from stackscout.services.prompt_store import format_value, render_prompt


def test_render_prompt_substitutes_template_values():
    prompt = render_prompt(
        "planner.user_prompt",
        product_name="TaskFlow",
        description="Task board",
        target_audience="Teams",
        core_features=["Boards", "Comments"],
        answers={},
        max_queries=20,
    )
    assert "Name: TaskFlow" in prompt
    assert "- Boards\n- Comments" in prompt
    assert "at most 20 categories" in prompt
    assert "(none)" in prompt


def test_render_prompt_raises_for_unknown_key():
    with pytest.raises(KeyError):
        render_prompt("missing.prompt.key")
    with pytest.raises(KeyError):
        render_prompt("planner.missing_prompt")
    with pytest.raises(KeyError):
        render_prompt("planner")


def test_render_prompt_names_missing_value():
    with pytest.raises(KeyError) as exc_info:
        render_prompt("validation.user_prompt")
    assert "selections" in str(exc_info.value)


def test_format_value():
    assert format_value(["a", " ", "b"]) == "- a\n- b"
    assert format_value({"budget": "low", "team": ""}) == "- budget: low"
    assert format_value("") == "(none)"
    assert format_value(20) == "20"
