from __future__ import annotations

from typing import Literal

from stackscout.models.research import CamelModel, ProductContext, ResearchAggregate


# --- Requests ---


class ResearchRequest(CamelModel):
    product_context: ProductContext | None = None
    conversation_id: str | None = None


class DefaultStackRequest(CamelModel):
    product_context: ProductContext | None = None


class ValidateStackRequest(CamelModel):
    selections: dict[str, str] = {}


# --- Responses ---


class TechStackSelection(CamelModel):
    frontend: str
    backend: str
    database: str
    auth: str
    hosting: str


class DefaultStackResponse(ResearchAggregate):
    product_type: str
    selection: TechStackSelection


class ValidationWarning(CamelModel):
    level: Literal["warning", "error"]
    message: str
    affected_technologies: list[str] = []
    suggestion: str | None = None


class ValidateStackResponse(CamelModel):
    warnings: list[ValidationWarning]


class ErrorResponse(CamelModel):
    error: str
    details: str | None = None
    code: str | None = None
