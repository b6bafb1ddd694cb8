"""Environment: the orchestrator owning every namespace in one backing slot."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from keyed_state._internal.clock import Clock, SystemClock
from keyed_state.codec import decode_namespace, encode_namespace
from keyed_state.config import EnvironmentConfig, EnvironmentSnapshot
from keyed_state.exceptions import EnvironmentNotReadyError, KeyNotFoundError
from keyed_state.logger import Logger, LogLevel, LogVerbosity
from keyed_state.preferences import PreferenceKeys, Preferences
from keyed_state.slots.base import BackingSlot
from keyed_state.store import KeyedStateStore, read_namespace


class EnvironmentStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    # A reset raised part way through; only another full reset recovers.
    FAILED = "failed"


class Environment:
    """Owns the preferences namespace and the freeform state namespaces.

    Each namespace is serialized into its own slot key.  The slot is shared
    by reference and is assumed to be used by a single environment at a
    time; nothing here locks it.

    Lifecycle:
        * ``UNINITIALIZED`` while the constructor loads each namespace.
        * ``READY`` once every namespace is loaded, and after each
          successful :meth:`reset`.
        * ``FAILED`` after a :meth:`reset` that raised.  The slot is left
          cleared or partially seeded; call :meth:`reset` again.

    Parameters:
        slot:   The host's flat variable store.
        logger: Logger shared by every namespace.  Built from
                ``config.verbosity`` when omitted.
        config: Slot layout.  Defaults to :class:`EnvironmentConfig`.
        clock:  Time source for the reset timestamp.
    """

    def __init__(
        self,
        slot: BackingSlot,
        logger: Logger | None = None,
        config: EnvironmentConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._status = EnvironmentStatus.UNINITIALIZED
        self._slot = slot
        self.config = config or EnvironmentConfig()
        self._logger = logger or Logger(self.config.verbosity)
        self._clock = clock or SystemClock()

        self._preferences = Preferences(slot, self._logger, self.config.preferences_key)
        self._states: dict[str, KeyedStateStore] = {
            key: KeyedStateStore(key, slot, self._logger) for key in self.config.state_keys
        }
        self._status = EnvironmentStatus.READY

    # ── lifecycle ────────────────────────────────────────────

    @property
    def status(self) -> EnvironmentStatus:
        return self._status

    @property
    def logger(self) -> Logger:
        return self._logger

    def is_ready(self) -> bool:
        return self._status is EnvironmentStatus.READY

    def _require_ready(self, operation: str) -> None:
        if not self.is_ready():
            raise EnvironmentNotReadyError(operation, self._status.value)

    def reset(self, overrides: Mapping[str, Any] | None = None) -> None:
        """Wipe the slot and rebuild every namespace.

        Preferences are seeded with the schema defaults merged with
        *overrides* and then validated; freeform namespaces are emptied; the
        version marker is rewritten.

        Raises:
            RestrictedKeyError: *overrides* names an internal key.  Raised
                before the slot is touched.
            SchemaError: the seeded preferences do not validate.  The slot
                has already been cleared and the environment is ``FAILED``.
        """
        overrides = dict(overrides or {})
        schema = self._preferences.schema
        schema.assert_not_restricted(overrides)

        self._logger.log("Resetting environment", LogLevel.INFO, LogVerbosity.MINIMAL)
        self._status = EnvironmentStatus.UNINITIALIZED
        try:
            self._slot.clear()
            self._preferences.reset(
                {**overrides, PreferenceKeys.INITIALIZED: self._clock.now().isoformat()}
            )
            self._preferences.validate()
            for store in self._states.values():
                store.reset()
            self._slot.set(self.config.version_key, self.config.version)
            self._assert_slot_keys()
        except Exception:
            self._status = EnvironmentStatus.FAILED
            raise
        self._status = EnvironmentStatus.READY
        if self._logger.is_enabled_for(LogVerbosity.VERY_VERBOSE):
            self._logger.dump(
                self.filter().model_dump(), LogLevel.DEFAULT, LogVerbosity.VERY_VERBOSE
            )

    def _assert_slot_keys(self) -> None:
        for key in [self.config.preferences_key, *self._states, self.config.version_key]:
            if not self._slot.has(key):
                raise KeyNotFoundError(
                    key, f"The required key {key} is not present in the backing slot."
                )

    def validate(self) -> None:
        """Validate the persisted preferences; raises the first violation."""
        self._require_ready("validate")
        self._preferences.validate()

    def filter(self) -> EnvironmentSnapshot:
        """Return a sorted diagnostic snapshot without excluded keys."""
        self._require_ready("filter")
        excluded = set(self.config.excluded_keys)

        def visible(values: Mapping[str, Any]) -> dict[str, Any]:
            return {k: values[k] for k in sorted(values) if k not in excluded}

        return EnvironmentSnapshot(
            preferences=visible(self._preferences.get_all()),
            state={
                key: visible(store.get_all())
                for key, store in self._states.items()
                if key not in excluded
            },
            version=self.version,
        )

    # ── namespaces ───────────────────────────────────────────

    def get_preferences(self) -> Preferences:
        return self._preferences

    def get_state(self, name: str | None = None) -> KeyedStateStore:
        """Return a freeform namespace; the first configured one by default."""
        if name is None:
            if not self.config.state_keys:
                raise KeyNotFoundError("", "No state namespaces are configured.")
            name = self.config.state_keys[0]
        try:
            return self._states[name]
        except KeyError:
            raise KeyNotFoundError(name, f"{name} is not a known state namespace.") from None

    @property
    def version(self) -> str | None:
        return self._slot.get(self.config.version_key)

    # ── slot passthroughs ────────────────────────────────────
    #
    # Writes that land on a key owned by a bound namespace reload that
    # namespace, so its in-memory entries match the slot afterwards.

    def _reload(self, key: str) -> None:
        if key == self._preferences.storage_key:
            self._preferences.load()
        elif key in self._states:
            self._states[key].load()

    def _is_bound(self, key: str) -> bool:
        return key == self._preferences.storage_key or key in self._states

    def get_variable(self, key: str) -> str | None:
        """Fetch a raw slot value; empty strings read as ``None``."""
        value = self._slot.get(key)
        return None if value == "" else value

    def set_variable(self, key: str, value: str) -> None:
        """Write a raw slot value.

        Raises:
            ValueError:  *value* is empty.
            DecodeError: *key* belongs to a namespace and *value* is not a
                         serialized object.  Nothing is written.
        """
        if value is None or value == "":
            raise ValueError(f"Cannot set an empty value for {key}")
        if self._is_bound(key):
            decode_namespace(key, value)
        self._slot.set(key, value)
        self._reload(key)

    def unset_variable(self, key: str) -> None:
        self._slot.unset(key)
        self._reload(key)

    def clear_variables(self) -> None:
        self._slot.clear()
        self._preferences.load()
        for store in self._states.values():
            store.load()

    def has_state(self, storage_key: str) -> bool:
        return self._slot.has(storage_key)

    def load_state(self, storage_key: str) -> dict[str, Any]:
        """Decode the namespace stored at *storage_key* without binding a store."""
        return read_namespace(self._slot, storage_key)

    def save_state(self, storage_key: str, values: Mapping[str, Any]) -> None:
        self._slot.set(storage_key, encode_namespace(storage_key, values))
        self._reload(storage_key)
