from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for wire models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductContext(CamelModel):
    """Product description the research pipeline runs against."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    product_name: str = ""
    description: str = ""
    target_audience: str = ""
    core_features: list[str] = []
    answers: dict[str, str] = {}

    def is_blank(self) -> bool:
        return not (self.product_name.strip() or self.description.strip())


class ResearchQuery(CamelModel):
    """One planner-issued unit of work."""

    category: str  # open slug, e.g. "frontend", "external-apis"
    query: str  # literal text sent to the search model
    reasoning: str  # why this category matters for the product


class TechOption(CamelModel):
    name: str = Field(min_length=1)
    description: str = ""
    pros: list[str] = []
    cons: list[str] = []
    popularity: str | None = None
    learn_more: str | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped


class CategoryResult(CamelModel):
    """Outcome of researching one category. Empty ``options`` means nothing usable."""

    category: str
    options: list[TechOption] = []
    reasoning: str = ""

    @classmethod
    def empty(cls, query: ResearchQuery) -> "CategoryResult":
        return cls(category=query.category, options=[], reasoning=query.reasoning)


class CategoryResearch(CamelModel):
    options: list[TechOption]
    reasoning: str


class QueryRecord(CamelModel):
    category: str
    reasoning: str


class ResearchAggregate(CamelModel):
    research_results: dict[str, CategoryResearch] = {}
    queries_generated: list[QueryRecord] = []

    @classmethod
    def from_results(cls, results: list[CategoryResult]) -> "ResearchAggregate":
        """Build the aggregate: every attempt is recorded, only non-empty ones keep options."""
        research_results: dict[str, CategoryResearch] = {}
        queries_generated: list[QueryRecord] = []
        for result in results:
            queries_generated.append(
                QueryRecord(category=result.category, reasoning=result.reasoning)
            )
            if result.options:
                research_results[result.category] = CategoryResearch(
                    options=result.options,
                    reasoning=result.reasoning,
                )
        return cls(research_results=research_results, queries_generated=queries_generated)

    def categories_completed(self) -> list[str]:
        return list(self.research_results)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def format_category_name(category: str) -> str:
    """Human-readable label for an open category slug ("external-apis" -> "External Apis")."""
    words = category.replace("-", " ").replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)
