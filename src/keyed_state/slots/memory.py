"""InMemorySlot: zero-config, dict-backed slot for development and testing."""

from __future__ import annotations

from collections.abc import Mapping

from keyed_state.slots.base import BackingSlot


class InMemorySlot(BackingSlot):
    """In-memory slot using a plain dict.  Data is lost on process exit."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def unset(self, key: str) -> None:
        self._data.pop(key, None)

    def has(self, key: str) -> bool:
        return self._data.get(key) is not None

    def clear(self) -> None:
        self._data.clear()

    def to_object(self) -> dict[str, str]:
        return dict(self._data)
