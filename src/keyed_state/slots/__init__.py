"""Backing slots for namespace persistence."""

from keyed_state.slots.base import BackingSlot
from keyed_state.slots.memory import InMemorySlot

__all__ = ["BackingSlot", "InMemorySlot"]
