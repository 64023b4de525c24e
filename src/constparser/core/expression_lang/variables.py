"""Variable environment: the mutable name -> value store read by the evaluator."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

logger = logging.getLogger(__name__)


class VariableEnvironment:
    """
    Mapping from variable name to its last assigned value.

    Entries are only created by ``set``; ``get`` never creates one and
    returns None for a name that has not been assigned.
    """

    def __init__(self, initial: Mapping[str, float] | None = None) -> None:
        self._values: dict[str, float] = {}
        if initial:
            for name, value in initial.items():
                self.set(name, value)

    def set(self, name: str, value: float) -> None:
        logger.debug("set %s = %r", name, value)
        self._values[name] = float(value)

    def get(self, name: str) -> float | None:
        return self._values.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def items(self) -> list[tuple[str, float]]:
        return list(self._values.items())

    def snapshot(self) -> dict[str, float]:
        """Copy of the current contents."""
        return dict(self._values)

    def __repr__(self) -> str:
        return f"VariableEnvironment({self._values!r})"
