"""Configuration for an :class:`~keyed_state.environment.Environment`.

These Pydantic models define which slot keys the environment owns and how
it reports.  Changing a slot key orphans whatever was persisted under the
old one.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field, model_validator

VERSION = "v2.0.0"

ENV_PREFERENCES_KEY = "KEYED_STATE_PREFERENCES_KEY"
ENV_STATE_KEYS = "KEYED_STATE_STATE_KEYS"
ENV_VERSION_KEY = "KEYED_STATE_VERSION_KEY"
ENV_VERBOSITY = "KEYED_STATE_VERBOSITY"


class EnvironmentConfig(BaseModel):
    """Slot layout and logging defaults.

    Attributes:
        preferences_key: Slot key for the schema-bound preferences namespace
        state_keys: Slot keys for the freeform state namespaces; the first
            one is the default returned by ``Environment.get_state()``
        version_key: Slot key holding the plain-string version marker
        version: Version marker written on every reset
        excluded_keys: Keys never shown by ``Environment.filter()``
        verbosity: Initial logger verbosity (0 silent to 3 very verbose)
    """

    preferences_key: str = Field(default="preferences", min_length=1)
    state_keys: list[str] = Field(default_factory=lambda: ["state"])
    version_key: str = Field(default="version", min_length=1)
    version: str = VERSION
    excluded_keys: list[str] = Field(default_factory=lambda: ["utils"])
    verbosity: int = Field(default=1, ge=0, le=3)

    @model_validator(mode="after")
    def _check_slot_keys(self) -> EnvironmentConfig:
        owned = [self.preferences_key, self.version_key, *self.state_keys]
        if any(not key for key in self.state_keys):
            raise ValueError("state_keys must not contain empty keys")
        duplicates = sorted({key for key in owned if owned.count(key) > 1})
        if duplicates:
            raise ValueError(f"Slot keys must be distinct, duplicated: {', '.join(duplicates)}")
        return self

    @classmethod
    def from_env(cls) -> EnvironmentConfig:
        """Build a config from ``KEYED_STATE_*`` environment variables.

        Unset variables fall back to the model defaults.
        """
        data: dict[str, object] = {}
        if os.environ.get(ENV_PREFERENCES_KEY):
            data["preferences_key"] = os.environ[ENV_PREFERENCES_KEY]
        if os.environ.get(ENV_STATE_KEYS):
            data["state_keys"] = [
                key.strip() for key in os.environ[ENV_STATE_KEYS].split(",") if key.strip()
            ]
        if os.environ.get(ENV_VERSION_KEY):
            data["version_key"] = os.environ[ENV_VERSION_KEY]
        if os.environ.get(ENV_VERBOSITY):
            data["verbosity"] = os.environ[ENV_VERBOSITY]
        return cls.model_validate(data)


class EnvironmentSnapshot(BaseModel):
    """Read-only diagnostic view returned by ``Environment.filter()``.

    Attributes:
        preferences: Preference values, sorted by key
        state: Freeform namespaces keyed by slot key, each sorted by key
        version: Version marker found in the slot, if any
    """

    preferences: dict[str, Any] = Field(default_factory=dict)
    state: dict[str, dict[str, Any]] = Field(default_factory=dict)
    version: str | None = None
