"""StackScout - tech stack research

Simple CLI for running research against a product context file.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from stackscout.agents.orchestrator import ResearchOrchestrator
from stackscout.errors import StackScoutError
from stackscout.models.research import ProductContext


def load_context(path: str) -> ProductContext:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return ProductContext.model_validate(raw.get("productContext", raw))


async def run_research(context: ProductContext) -> None:
    """Run the pipeline and print the aggregate."""
    print(f"Product: {context.product_name or '(unnamed)'}")
    print("-" * 50)

    orchestrator = ResearchOrchestrator()
    aggregate = await orchestrator.run(context)

    print(f"\n[*] Categories attempted: {len(aggregate.queries_generated)}")
    print(f"[*] Categories with results: {len(aggregate.research_results)}")
    print(json.dumps(aggregate.to_wire(), indent=2))


async def stream_research(context: ProductContext) -> None:
    """Run the pipeline, printing progress as categories settle."""
    orchestrator = ResearchOrchestrator()

    async for event in orchestrator.research(context):
        event_type = event.event.value
        data = event.data

        if event_type == "research_started":
            print(f"Product: {data.get('productName') or '(unnamed)'}")
            print("-" * 50)

        elif event_type == "plan_created":
            categories = data.get("categories", [])
            print(f"\n[*] Research Plan ({len(categories)} categories):")
            for i, category in enumerate(categories, 1):
                print(f"  {i}. {category.get('label')}")
                print(f"     Why: {category.get('reasoning', 'N/A')}")

        elif event_type == "category_completed":
            marker = "+" if data.get("success") else "-"
            print(f"  [{marker}] {data.get('category')}: {data.get('options_count')} options")

        elif event_type == "research_complete":
            print(f"\n[*] Research Complete! ({data.get('runtime_ms')}ms)")
            aggregate = {k: v for k, v in data.items() if k != "runtime_ms"}
            print(json.dumps(aggregate, indent=2))


def main():
    parser = argparse.ArgumentParser(description="StackScout tech stack research")
    parser.add_argument("context", help="Path to a ProductContext JSON file")
    parser.add_argument(
        "--stream", "-s", action="store_true", help="Print progress as categories complete"
    )

    args = parser.parse_args()

    try:
        context = load_context(args.context)
    except (OSError, ValueError) as e:
        print(f"[!] Could not read product context: {e}", file=sys.stderr)
        sys.exit(2)
    if context.is_blank():
        print("[!] Product context needs a productName or description", file=sys.stderr)
        sys.exit(2)

    runner = stream_research if args.stream else run_research
    try:
        asyncio.run(runner(context))
    except StackScoutError as e:
        print(f"\n[!] Error: {e.message} ({e.details or 'no details'})", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
