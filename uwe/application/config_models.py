"""Engine configuration model.

Config structure (``.uwe/config.yml``):
    engine:
      reason_separator: "; "
      max_workers: 1
      errors_are_critical: true
"""

from pydantic import BaseModel, ConfigDict, Field


class EngineConfig(BaseModel):
    """Tunable behaviour of the underwriting engine.

    max_workers above 1 evaluates runs of consecutive non-critical rules that
    declare themselves concurrent-safe on a thread pool; results are still
    collected in rule order. errors_are_critical makes a rule that raises
    decline the application regardless of its own criticality.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    reason_separator: str = "; "
    max_workers: int = Field(default=1, ge=1)
    errors_are_critical: bool = True
