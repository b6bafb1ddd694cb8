"""Preferences: the schema-bound namespace.

Preferences are set once when the environment is reset, but individual
scripts may change them afterwards.  Unlike freeform state, every key is
declared up front in :data:`PREFERENCES_SCHEMA` and checked on write.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from keyed_state.logger import Logger, LogLevel, LogVerbosity
from keyed_state.schema import NamespaceSchema, SchemaField
from keyed_state.slots.base import BackingSlot
from keyed_state.store import KeyedStateStore, read_namespace

DEFAULT_PREFERENCES_KEY = "preferences"
DEFAULT_PASSWORD = "#Ch@ng3M3!#"
ENVIRONMENTS = ("development", "staging", "production")


class PreferenceKeys:
    ADMIN_PASSWORD = "adminPassword"
    # The base URL for all requests.
    BASE_URL = "baseUrl"
    DEFAULT_CONTENT_TYPE = "defaultContentType"
    DEFAULT_LANGUAGE = "defaultLanguage"
    DEFAULT_PASSWORD = "defaultPassword"
    ENVIRONMENT = "environment"
    FLAG_ENABLE_BLACKFIRE = "enableBlackfire"
    # Timestamp of the last full reset.  Written only by the environment.
    INITIALIZED = "initialized"
    SUPER_ADMIN_PASSWORD = "superAdminPassword"
    VERBOSITY = "verbosity"


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_environment(value: Any) -> bool:
    return isinstance(value, str) and value in ENVIRONMENTS


def _is_verbosity(value: Any) -> bool:
    # bool is an int subclass; True must not pass as verbosity 1.
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return LogVerbosity.NONE <= value <= LogVerbosity.VERY_VERBOSE


def _is_timestamp(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


PREFERENCES_SCHEMA = NamespaceSchema(
    "preferences",
    [
        SchemaField(PreferenceKeys.ADMIN_PASSWORD, DEFAULT_PASSWORD, _is_str),
        SchemaField(PreferenceKeys.BASE_URL, None, _is_str, required=True),
        SchemaField(PreferenceKeys.DEFAULT_CONTENT_TYPE, "application/ld+json", _is_str),
        SchemaField(PreferenceKeys.DEFAULT_LANGUAGE, "en", _is_str),
        SchemaField(PreferenceKeys.DEFAULT_PASSWORD, DEFAULT_PASSWORD, _is_str),
        SchemaField(
            PreferenceKeys.FLAG_ENABLE_BLACKFIRE,
            False,
            _is_bool,
            doc="Whether to enable blackfire for every request.",
        ),
        SchemaField(
            PreferenceKeys.ENVIRONMENT,
            None,
            _is_environment,
            required=True,
            doc="One of 'development', 'staging', or 'production'.",
        ),
        SchemaField(PreferenceKeys.INITIALIZED, None, _is_timestamp, restricted=True),
        SchemaField(PreferenceKeys.SUPER_ADMIN_PASSWORD, DEFAULT_PASSWORD, _is_str),
        SchemaField(
            PreferenceKeys.VERBOSITY,
            int(LogVerbosity.MINIMAL),
            _is_verbosity,
            doc="How verbose logging output should be, 0 (silent) to 3 (very verbose).",
        ),
    ],
)


class Preferences:
    """Typed handle over the preferences namespace.

    Writing ``verbosity`` reconfigures the shared :class:`Logger`, so logger
    configuration travels with the persisted preferences.

    Parameters:
        slot:        The host's flat variable store.
        logger:      Logger shared with the rest of the environment.
        storage_key: Slot key holding the serialized preferences.
        schema:      Schema to enforce.  Defaults to :data:`PREFERENCES_SCHEMA`.
    """

    def __init__(
        self,
        slot: BackingSlot,
        logger: Logger,
        storage_key: str = DEFAULT_PREFERENCES_KEY,
        schema: NamespaceSchema = PREFERENCES_SCHEMA,
    ) -> None:
        self._slot = slot
        self._logger = logger
        self.schema = schema
        self._store = KeyedStateStore(storage_key, slot, logger)
        self._sync_verbosity()

    @property
    def storage_key(self) -> str:
        return self._store.storage_key

    @property
    def store(self) -> KeyedStateStore:
        return self._store

    def get(self, key: str) -> Any:
        self.schema.field(key)
        return self._store.get(key)

    def get_all(self) -> dict[str, Any]:
        return self._store.get_all()

    def isset(self, key: str) -> bool:
        return self._store.isset(key)

    def set(self, key: str, value: Any) -> None:
        """Validate and persist a single preference."""
        candidate = {key: value}
        self.schema.assert_not_restricted(candidate)
        self.schema.validate(candidate)
        self._store.set(key, value)
        if key == PreferenceKeys.VERBOSITY:
            self._logger.set_verbosity(value)

    def apply(self, values: Mapping[str, Any]) -> None:
        """Replace the namespace with defaults overlaid by *values*."""
        self.schema.assert_not_restricted(values)
        self.schema.validate(values)
        self.reset(values)

    def reset(self, overrides: Mapping[str, Any] | None = None) -> None:
        """Seed the namespace with the schema defaults merged with *overrides*.

        Unlike :meth:`set`, values are not type-checked here; the seeded
        namespace may still hold ``None`` for required keys until
        :meth:`validate` is called.
        """
        overrides = dict(overrides or {})
        for key in overrides:
            self.schema.field(key)
        self._logger.log(
            f"Clearing {self.schema.name}...", LogLevel.INFO, LogVerbosity.VERBOSE
        )
        self._store.reset()
        self._store.set_all({**self.schema.defaults(), **overrides})
        self._sync_verbosity()

    def validate(self) -> None:
        """Validate the persisted preferences against the schema."""
        self.schema.validate(read_namespace(self._slot, self.storage_key))

    def load(self) -> None:
        self._store.load()
        self._sync_verbosity()

    def _sync_verbosity(self) -> None:
        if not self._store.isset(PreferenceKeys.VERBOSITY):
            return
        verbosity = self._store.get(PreferenceKeys.VERBOSITY)
        if _is_verbosity(verbosity) and verbosity != self._logger.verbosity:
            self._logger.set_verbosity(verbosity)
