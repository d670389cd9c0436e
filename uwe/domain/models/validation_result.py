"""Outcome of a single rule check.

Failure is data: a rule never raises to signal a failed check, it returns
``ValidationResult.failure(message)`` instead.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ValidationResult(BaseModel):
    """Immutable result of one rule evaluation.

    A message is present if and only if the check failed. The outcome flag
    is exchanged as ``success``; in Python it is the ``valid`` attribute
    because ``success()`` is the factory.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    valid: bool = Field(alias="success")
    message: str | None = None

    @model_validator(mode="after")
    def _validate_message_matches_outcome(self) -> "ValidationResult":
        if self.valid:
            if self.message is not None:
                raise ValueError("Successful result must not carry a message")
            return self
        if self.message is None:
            raise ValueError("Failure requires a message explaining why")
        if not self.message.strip():
            raise ValueError("Failure message cannot be empty or whitespace")
        return self

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def failure(cls, message: str) -> "ValidationResult":
        return cls(valid=False, message=message)

    @property
    def failed(self) -> bool:
        return not self.valid
