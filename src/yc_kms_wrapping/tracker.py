"""Process-visible record of the key id most recently used for encryption."""
from __future__ import annotations


class CurrentKeyId:
    """Single-value cell replaced wholesale on every store.

    Values are immutable ``str`` snapshots, so a load is one attribute read
    and a store is one attribute rebind; neither side takes a lock. Readers
    see the latest store eventually and should treat it as advisory.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str = "") -> None:
        self._value = value

    def load(self) -> str:
        return self._value

    def store(self, value: str) -> None:
        self._value = str(value)

    def __repr__(self) -> str:
        return f"CurrentKeyId({self._value!r})"


__all__ = ["CurrentKeyId"]
