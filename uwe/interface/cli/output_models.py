from typing import Any, Literal

from pydantic import BaseModel, Field

from uwe.domain.models.rule_result import RuleResult


class BaseOutput(BaseModel):
    schema_version: int = 1
    command: Literal["decide", "config"]
    exit_code: int
    error: str | None = None


class DecideOutput(BaseOutput):
    command: Literal["decide"] = "decide"
    # On load errors the decision is unknown; omit it from JSON via exclude_none.
    decision: str | None = None
    reason: str | None = None
    rule_results: list[RuleResult] = Field(default_factory=list)


class ConfigOutput(BaseOutput):
    command: Literal["config"] = "config"
    config: dict[str, Any] = Field(default_factory=dict)
