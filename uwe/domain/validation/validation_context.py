"""Shared, read-mostly data for one evaluation pass."""

import threading
from datetime import date
from typing import Any, TypeVar

V = TypeVar("V")


class ValidationContext:
    """Carries the validation date and attributes shared between rules.

    Rules may publish derived values (e.g. a computed age) for later rules
    to read. Attribute access is lock-protected so one context can be shared
    by rules evaluated concurrently.
    """

    def __init__(self, validation_date: date | None = None) -> None:
        self._validation_date = validation_date or date.today()
        self._attributes: dict[str, Any] = {}
        self._lock = threading.Lock()

    @property
    def validation_date(self) -> date:
        return self._validation_date

    def set_attribute(self, key: str, value: Any) -> None:
        with self._lock:
            self._attributes[key] = value

    def get_attribute(
        self,
        key: str,
        type_: type[V] | None = None,
        default: V | None = None,
    ) -> V | None:
        """Return the attribute, or ``default`` if absent or not a ``type_``."""
        with self._lock:
            value = self._attributes.get(key)
        if value is None:
            return default
        if type_ is not None and not isinstance(value, type_):
            return default
        return value

    def has_attribute(self, key: str) -> bool:
        with self._lock:
            return key in self._attributes

    def copy(self) -> "ValidationContext":
        clone = ValidationContext(self._validation_date)
        with self._lock:
            clone._attributes.update(self._attributes)
        return clone

    def __repr__(self) -> str:
        return (
            f"ValidationContext(validation_date={self._validation_date!r}, "
            f"attributes={sorted(self._attributes)!r})"
        )
