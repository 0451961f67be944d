from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(str, Enum):
    RESEARCH_STARTED = "research_started"
    PLAN_CREATED = "plan_created"
    CATEGORY_STARTED = "category_started"
    CATEGORY_COMPLETED = "category_completed"
    RESEARCH_COMPLETE = "research_complete"
    ERROR = "error"


@dataclass
class SSEEvent:
    event: EventType
    data: dict[str, Any] = field(default_factory=dict)

    def to_sse(self) -> dict[str, str]:
        """Payload for ``EventSourceResponse``: event name plus JSON-encoded data."""
        return {"event": self.event.value, "data": json.dumps(self.data)}
