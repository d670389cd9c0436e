"""Underwriting event payload model."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from uwe.domain.events.event_types import UnderwritingEventType
from uwe.domain.models.underwriting_result import UnderwritingDecision


class UnderwritingEvent(BaseModel):
    """One step of an evaluation run.

    ``rule_name`` and ``passed`` are set for rule events, ``decision`` only on
    DECISION_MADE. ``message`` carries the failure or decision reason.
    """

    model_config = {"frozen": True}

    event_type: UnderwritingEventType
    evaluation_id: str
    timestamp: datetime
    rule_name: str | None = None
    passed: bool | None = None
    decision: UnderwritingDecision | None = None
    message: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
