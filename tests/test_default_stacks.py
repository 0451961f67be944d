"""Tests for fallback stack selection."""
import pytest

from stackscout.models.research import ProductContext
from stackscout.services.default_stacks import (
    DEFAULT_STACKS,
    default_research_results,
    default_stack,
    detect_product_type,
)


@pytest.mark.parametrize(
    "description,expected",
    [
        ("An iOS and Android habit tracker", "mobile_app"),
        ("Online shop with cart and checkout", "ecommerce"),
        ("An AI writing assistant built on an LLM", "ai_app"),
        ("Analytics dashboard for sales metrics", "dashboard"),
        ("Webhook relay microservice", "api_service"),
        ("Multi-tenant SaaS for dentists", "saas_platform"),
        ("A recipe sharing website", "web_app"),
    ],
)
def test_detect_product_type(description, expected):
    assert detect_product_type(ProductContext(description=description)) == expected


def test_mobile_wins_over_ecommerce():
    context = ProductContext(description="Mobile shop with in-app checkout")
    assert detect_product_type(context) == "mobile_app"


def test_short_keywords_do_not_match_inside_words():
    # "email" contains "ai", "html" contains "ml"
    context = ProductContext(description="Send email newsletters with html templates")
    assert detect_product_type(context) == "web_app"


def test_features_and_answers_are_considered():
    context = ProductContext(
        product_name="Tally",
        core_features=["Team boards"],
        answers={"monetization": "Monthly subscription"},
    )
    assert detect_product_type(context) == "saas_platform"


def test_no_context_is_general():
    assert detect_product_type(None) == "general"
    assert detect_product_type(ProductContext()) == "general"


def test_default_stack_returns_table_entry():
    product_type, selection = default_stack(ProductContext(description="Chatbot for support"))
    assert product_type == "ai_app"
    assert selection == DEFAULT_STACKS["ai_app"]
    assert selection.backend == "Python with FastAPI"


def test_default_research_results_recommend_selection():
    selection = DEFAULT_STACKS["mobile_app"]

    aggregate = default_research_results(selection)

    assert list(aggregate.research_results) == ["frontend", "backend", "database", "auth", "hosting"]
    frontend = aggregate.research_results["frontend"]
    assert [o.name for o in frontend.options] == ["React Native"]
    assert frontend.reasoning == "Default recommendation for this product type"
    assert len(aggregate.queries_generated) == 5
