from datetime import date
from typing import Any

import pytest

from uwe.domain.models.validation_result import ValidationResult
from uwe.domain.validation.validation_context import ValidationContext
from uwe.domain.validation.validation_rule import ValidationRule


class StubRule(ValidationRule[Any]):
    """Rule double with a fixed outcome and a call-count side channel."""

    def __init__(
        self,
        name: str,
        *,
        order: int = 100,
        critical: bool = False,
        fail_with: str | None = None,
        raises: Exception | None = None,
        log: list[str] | None = None,
        concurrent_safe: bool = False,
    ) -> None:
        self._name = name
        self._order = order
        self._critical = critical
        self._fail_with = fail_with
        self._raises = raises
        self._log = log
        self._concurrent_safe = concurrent_safe
        self.calls = 0

    def evaluate(self, target: Any, context: ValidationContext) -> ValidationResult:
        self.calls += 1
        if self._log is not None:
            self._log.append(self._name)
        if self._raises is not None:
            raise self._raises
        if self._fail_with is not None:
            return ValidationResult.failure(self._fail_with)
        return ValidationResult.success()

    @property
    def name(self) -> str:
        return self._name

    @property
    def order(self) -> int:
        return self._order

    @property
    def critical(self) -> bool:
        return self._critical

    @property
    def concurrent_safe(self) -> bool:
        return self._concurrent_safe


@pytest.fixture
def context() -> ValidationContext:
    """Context pinned to a fixed date so tests never depend on today."""
    return ValidationContext(validation_date=date(2026, 3, 1))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's UWE_CONFIG out of config-loading tests."""
    monkeypatch.delenv("UWE_CONFIG", raising=False)


@pytest.fixture
def make_rule() -> type[StubRule]:
    """Factory for StubRule doubles."""
    return StubRule
