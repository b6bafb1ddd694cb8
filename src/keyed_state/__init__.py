"""keyed_state: layered, schema-checked namespaces over one flat variable store.

Every namespace is a sorted mapping serialized as a single JSON object into
one key of a host-owned backing slot.  Writes are persisted immediately.
"""

from keyed_state.config import VERSION, EnvironmentConfig, EnvironmentSnapshot
from keyed_state.environment import Environment, EnvironmentStatus
from keyed_state.exceptions import (
    DecodeError,
    EncodeError,
    EnvironmentNotReadyError,
    KeyNotFoundError,
    MissingRequiredValueError,
    RestrictedKeyError,
    SchemaError,
    StateError,
    TypeMismatchError,
    UnknownKeyError,
)
from keyed_state.logger import Logger, LogLevel, LogVerbosity
from keyed_state.preferences import PREFERENCES_SCHEMA, PreferenceKeys, Preferences
from keyed_state.schema import NamespaceSchema, SchemaField
from keyed_state.slots import BackingSlot, InMemorySlot
from keyed_state.store import KeyedStateStore, StateEntry

__all__ = [
    "PREFERENCES_SCHEMA",
    "VERSION",
    "BackingSlot",
    "DecodeError",
    "EncodeError",
    "Environment",
    "EnvironmentConfig",
    "EnvironmentNotReadyError",
    "EnvironmentSnapshot",
    "EnvironmentStatus",
    "InMemorySlot",
    "KeyNotFoundError",
    "KeyedStateStore",
    "LogLevel",
    "LogVerbosity",
    "Logger",
    "MissingRequiredValueError",
    "NamespaceSchema",
    "PreferenceKeys",
    "Preferences",
    "RestrictedKeyError",
    "SchemaError",
    "SchemaField",
    "StateEntry",
    "StateError",
    "TypeMismatchError",
    "UnknownKeyError",
]
