"""Fallback tech stacks offered when research fails or is skipped."""
from __future__ import annotations

from stackscout.models.research import (
    CategoryResult,
    ProductContext,
    ResearchAggregate,
    TechOption,
)
from stackscout.models.schemas import TechStackSelection

DEFAULT_STACKS: dict[str, TechStackSelection] = {
    "web_app": TechStackSelection(
        frontend="Next.js",
        backend="Node.js with Express",
        database="PostgreSQL",
        auth="Clerk",
        hosting="Vercel",
    ),
    "mobile_app": TechStackSelection(
        frontend="React Native",
        backend="Firebase Functions",
        database="Firestore",
        auth="Firebase Auth",
        hosting="Expo + Firebase",
    ),
    "saas_platform": TechStackSelection(
        frontend="Next.js",
        backend="Node.js with tRPC",
        database="PostgreSQL",
        auth="Clerk",
        hosting="Vercel + Railway",
    ),
    "ecommerce": TechStackSelection(
        frontend="Next.js",
        backend="Stripe + Next.js API",
        database="PostgreSQL",
        auth="Clerk",
        hosting="Vercel",
    ),
    "dashboard": TechStackSelection(
        frontend="React with Vite",
        backend="Node.js with Express",
        database="PostgreSQL",
        auth="Auth0",
        hosting="Netlify + Railway",
    ),
    "api_service": TechStackSelection(
        frontend="N/A (API only)",
        backend="Node.js with Express",
        database="PostgreSQL",
        auth="JWT",
        hosting="Railway",
    ),
    "ai_app": TechStackSelection(
        frontend="Next.js",
        backend="Python with FastAPI",
        database="PostgreSQL with pgvector",
        auth="Clerk",
        hosting="Vercel + Modal",
    ),
    "general": TechStackSelection(
        frontend="Next.js",
        backend="Node.js with Express",
        database="PostgreSQL",
        auth="Clerk",
        hosting="Vercel",
    ),
}

# Checked in order; the first product type with a matching keyword wins.
PRODUCT_TYPE_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("mobile_app", ("mobile", "ios", "android", "app store", "react native")),
    ("ecommerce", ("shop", "store", "cart", "payment", "checkout", "product catalog")),
    ("ai_app", (" ai ", " ml ", "machine learning", "gpt", "llm", "chatbot", "recommendation")),
    ("dashboard", ("dashboard", "analytics", "visualization", "chart", "metrics")),
    ("api_service", ("api", "backend", "service", "microservice", "webhook")),
    ("saas_platform", ("saas", "subscription", "multi-tenant", "platform")),
]

_CATEGORY_BLURBS: dict[str, tuple[str, list[str], list[str]]] = {
    "frontend": ("is a modern, production-ready framework.", ["Fast development", "Great DX", "Large community"], ["Learning curve"]),
    "backend": ("provides a robust backend solution.", ["Scalable", "Well-documented", "Ecosystem"], ["Setup complexity"]),
    "database": ("is a reliable database choice.", ["ACID compliant", "Mature", "Performant"], ["Requires management"]),
    "auth": ("simplifies authentication.", ["Easy integration", "Secure", "Feature-rich"], ["Third-party dependency"]),
    "hosting": ("offers excellent deployment experience.", ["Zero-config", "Auto-scaling", "CDN"], ["Pricing at scale"]),
}


def detect_product_type(context: ProductContext | None) -> str:
    if context is None:
        return "general"

    all_text = " ".join(
        [
            context.description,
            context.product_name,
            " ".join(context.core_features),
            " ".join(context.answers.values()),
        ]
    ).lower()
    if not all_text.strip():
        return "general"

    # Pad so short keywords like " ai " also match at the edges.
    padded = f" {all_text} "
    for product_type, keywords in PRODUCT_TYPE_KEYWORDS:
        if any(keyword in padded for keyword in keywords):
            return product_type
    return "web_app"


def default_stack(context: ProductContext | None) -> tuple[str, TechStackSelection]:
    product_type = detect_product_type(context)
    return product_type, DEFAULT_STACKS[product_type]


def default_research_results(selection: TechStackSelection) -> ResearchAggregate:
    """Research-shaped results recommending exactly the default selection."""
    results: list[CategoryResult] = []
    for category, (blurb, pros, cons) in _CATEGORY_BLURBS.items():
        name = getattr(selection, category)
        results.append(
            CategoryResult(
                category=category,
                options=[
                    TechOption(
                        name=name,
                        description=f"{name} {blurb}",
                        pros=list(pros),
                        cons=list(cons),
                        popularity="High",
                    )
                ],
                reasoning="Default recommendation for this product type",
            )
        )
    return ResearchAggregate.from_results(results)
