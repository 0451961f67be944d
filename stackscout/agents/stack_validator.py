from __future__ import annotations

import time
from typing import Any

from loguru import logger

from stackscout.config import settings
from stackscout.llm_client import extract_text, reasoning_client, usage_tokens
from stackscout.models.schemas import ValidationWarning
from stackscout.services import logger as log_service
from stackscout.services.json_extract import safe_parse_json
from stackscout.services.prompt_store import render_prompt


def _warnings_from(entries: Any, level: str) -> list[ValidationWarning]:
    if not isinstance(entries, list):
        return []
    warnings: list[ValidationWarning] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        message = entry.get("message")
        if not isinstance(message, str) or not message.strip():
            continue
        affected = entry.get("affectedTechnologies") or entry.get("affected_technologies") or []
        suggestion = entry.get("suggestion")
        warnings.append(
            ValidationWarning(
                level=level,
                message=message.strip(),
                affected_technologies=[str(t) for t in affected] if isinstance(affected, list) else [],
                suggestion=suggestion.strip() if isinstance(suggestion, str) and suggestion.strip() else None,
            )
        )
    return warnings


class StackValidator:
    """Checks a selected stack for incompatible or suboptimal combinations."""

    name = "stack_validator"

    def __init__(self, model: str | None = None):
        self.model = model or settings.planner_model
        self.client = None

    async def validate(self, selections: dict[str, str]) -> list[ValidationWarning]:
        """Errors first, then warnings. An unreadable model reply means no findings."""
        if not selections:
            return []

        selections_text = "\n".join(f"{category}: {name}" for category, name in selections.items())
        prompt = render_prompt("validation.user_prompt", selections=selections_text)

        active_client = self.client or reasoning_client()
        t0 = time.monotonic()
        response = await active_client.messages.create(
            model=self.model,
            max_tokens=settings.validation_max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        input_tokens, output_tokens = usage_tokens(response)
        log_service.log_llm_call(
            model=self.model,
            caller=self.name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=int((time.monotonic() - t0) * 1000),
        )

        payload = safe_parse_json(extract_text(response), shape="object")
        if not isinstance(payload, dict):
            logger.warning("Stack validation reply was not a JSON object; reporting no issues")
            return []
        return _warnings_from(payload.get("errors"), "error") + _warnings_from(
            payload.get("warnings"), "warning"
        )
