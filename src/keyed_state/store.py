"""KeyedStateStore: a sorted, save-on-write mapping bound to one slot key."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from keyed_state.codec import decode_namespace, encode_namespace, encode_value
from keyed_state.exceptions import EncodeError, KeyNotFoundError
from keyed_state.logger import Logger, LogLevel, LogVerbosity
from keyed_state.slots.base import BackingSlot


def read_namespace(slot: BackingSlot, storage_key: str) -> dict[str, Any]:
    """Decode the namespace persisted at *storage_key*, straight from the slot.

    Raises:
        KeyNotFoundError: if the slot holds nothing at *storage_key*.
        DecodeError:      if the blob is not a JSON object.
    """
    raw = slot.get(storage_key)
    if raw is None or raw == "":
        raise KeyNotFoundError(
            storage_key, f"Attempted to load a non-existent storage key: {storage_key}"
        )
    return decode_namespace(storage_key, raw)


@dataclass
class StateEntry:
    key: str
    value: Any


class KeyedStateStore:
    """Ordered mapping from string keys to JSON values, persisted as one blob.

    Entries are kept in strictly ascending ordinal key order after every
    mutation.  Every mutation is written back to the slot before the call
    returns, so a fresh store bound to the same ``storage_key`` always sees
    the committed content.

    Deleting an absent key is a no-op.

    Parameters:
        storage_key: Slot key holding the serialized namespace.
        slot:        The host's flat variable store.
        logger:      Sink for diagnostic messages.  A silent logger is used
                     when omitted.
    """

    def __init__(
        self,
        storage_key: str,
        slot: BackingSlot,
        logger: Logger | None = None,
    ) -> None:
        self._storage_key = storage_key
        self._slot = slot
        self._logger = logger or Logger(LogVerbosity.NONE)
        self._entries: list[StateEntry] = []
        self.load()

    @property
    def storage_key(self) -> str:
        return self._storage_key

    # ── lookup ───────────────────────────────────────────────

    def _index(self, key: str) -> int:
        """Insertion point for *key*; equals the entry index when present."""
        return bisect_left(self._entries, key, key=lambda entry: entry.key)

    def _find(self, key: str) -> int | None:
        if not isinstance(key, str):
            return None
        i = self._index(key)
        if i < len(self._entries) and self._entries[i].key == key:
            return i
        return None

    def get(self, key: str) -> Any:
        i = self._find(key)
        if i is None:
            raise KeyNotFoundError(
                key, f"The key {key} was never set within the state {self._storage_key}."
            )
        return self._entries[i].value

    def isset(self, key: str) -> bool:
        return self._find(key) is not None

    def get_all(self) -> dict[str, Any]:
        return {entry.key: entry.value for entry in self._entries}

    def keys(self) -> list[str]:
        return [entry.key for entry in self._entries]

    def entries(self) -> tuple[StateEntry, ...]:
        """Snapshot of the entries in storage order."""
        return tuple(StateEntry(entry.key, entry.value) for entry in self._entries)

    def __contains__(self, key: object) -> bool:
        return self._find(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._entries)

    # ── mutation ─────────────────────────────────────────────

    def set(self, key: str, value: Any) -> None:
        self._put(key, value)
        self.save()

    def set_all(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            self.set(key, value)

    def delete(self, key: str) -> None:
        i = self._find(key)
        if i is None:
            return
        del self._entries[i]
        self._logger.log(
            f"Deleted {key} from {self._storage_key}", LogLevel.DEFAULT, LogVerbosity.VERY_VERBOSE
        )
        self.save()

    def reset(self) -> None:
        self._logger.log(
            f"Clearing {self._storage_key}...", LogLevel.INFO, LogVerbosity.VERY_VERBOSE
        )
        self._entries = []
        self.save()

    def _put(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise EncodeError(self._storage_key, f"keys must be strings, got {type(key).__name__}")
        # Reject anything json cannot represent before it reaches the sequence.
        encode_value(self._storage_key, value)

        i = self._index(key)
        if i < len(self._entries) and self._entries[i].key == key:
            self._entries[i].value = value
        else:
            self._entries.insert(i, StateEntry(key, value))
        self._logger.log(
            f"Setting {key} to be {value!r} in {self._storage_key}",
            LogLevel.DEFAULT,
            LogVerbosity.VERY_VERBOSE,
        )

    # ── persistence ──────────────────────────────────────────

    def load(self) -> None:
        """Replace the in-memory entries with the persisted namespace.

        An absent (or empty) slot entry leaves the store empty.

        Raises:
            DecodeError: if the persisted blob is not a JSON object.
        """
        raw = self._slot.get(self._storage_key)
        if raw is None or raw == "":
            self._entries = []
            return
        values = decode_namespace(self._storage_key, raw)
        # Slot is written at most once, and only after every entry decoded.
        self._entries = [
            StateEntry(key, value) for key, value in sorted(values.items(), key=lambda kv: kv[0])
        ]
        self._logger.log(
            f"Loaded {len(self._entries)} entries from {self._storage_key}",
            LogLevel.DEFAULT,
            LogVerbosity.VERY_VERBOSE,
        )
        if encode_namespace(self._storage_key, self.get_all()) != raw:
            self.save()

    def save(self) -> None:
        serialized = encode_namespace(self._storage_key, self.get_all())
        self._slot.set(self._storage_key, serialized)
