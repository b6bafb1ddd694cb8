"""Slot protocol: the host's flat string-valued variable store."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BackingSlot(ABC):
    """Abstract base for every backing slot.

    A slot is a single flat mapping of ``str`` keys to ``str`` values owned by
    the host.  The slot is completely agnostic to what is stored; namespaces
    encode their JSON blobs before handing them over.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or ``None`` if not set."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Create or overwrite a value."""
        ...

    @abstractmethod
    def unset(self, key: str) -> None:
        """Remove a value.  No-op if the key does not exist."""
        ...

    @abstractmethod
    def has(self, key: str) -> bool:
        """Return ``True`` if the key holds a value."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove every key in the slot."""
        ...

    @abstractmethod
    def to_object(self) -> dict[str, str]:
        """Return a shallow copy of the whole slot."""
        ...
