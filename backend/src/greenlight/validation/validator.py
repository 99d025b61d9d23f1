"""Field-violation collector used by the record validators."""

from __future__ import annotations

from collections.abc import Hashable, Sequence


class Validator:
    """Collects field -> message violations.

    Every check runs; only the first message recorded for a field is kept.
    """

    def __init__(self) -> None:
        self.errors: dict[str, str] = {}

    def valid(self) -> bool:
        return not self.errors

    def add_error(self, key: str, message: str) -> None:
        if key not in self.errors:
            self.errors[key] = message

    def check(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_error(key, message)


def unique(values: Sequence[Hashable]) -> bool:
    """True when no value appears twice."""
    return len(set(values)) == len(values)
