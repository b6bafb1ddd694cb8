"""NamespaceSchema: declarative key set and type predicates for a namespace."""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from keyed_state.exceptions import (
    MissingRequiredValueError,
    RestrictedKeyError,
    TypeMismatchError,
    UnknownKeyError,
)

Predicate = Callable[[Any], bool]


@dataclass(frozen=True)
class SchemaField:
    """One declared key of a schema-bound namespace.

    Attributes:
        key:        Name of the key as stored.
        default:    Value seeded on reset.  ``None`` marks a value the caller
                    must supply before the namespace validates.
        predicate:  Returns ``True`` when a value has the expected type.
        required:   Must be supplied by the caller on reset.
        restricted: Reserved for internal use; never accepted from a caller.
        doc:        Human-readable description.
    """

    key: str
    default: Any
    predicate: Predicate
    required: bool = False
    restricted: bool = False
    doc: str = ""


class NamespaceSchema:
    """Uniform validator over an ordered set of :class:`SchemaField` records.

    Required and restricted keys are disjoint; declaring a key as both
    raises ``ValueError``.  Everything else is optional.

    Parameters:
        name:   Namespace name, used in error messages.
        fields: The declared keys, in display order.
    """

    def __init__(self, name: str, fields: Iterable[SchemaField]) -> None:
        self.name = name
        self._fields: dict[str, SchemaField] = {}
        for f in fields:
            if f.key in self._fields:
                raise ValueError(f"Schema '{name}' declares '{f.key}' more than once")
            if f.required and f.restricted:
                raise ValueError(
                    f"Schema '{name}' declares '{f.key}' as both required and restricted"
                )
            self._fields[f.key] = f

    # ── introspection ────────────────────────────────────────

    @property
    def keys(self) -> list[str]:
        return list(self._fields)

    @property
    def required_keys(self) -> list[str]:
        return [k for k, f in self._fields.items() if f.required]

    @property
    def restricted_keys(self) -> list[str]:
        return [k for k, f in self._fields.items() if f.restricted]

    @property
    def optional_keys(self) -> list[str]:
        return [k for k, f in self._fields.items() if not (f.required or f.restricted)]

    def is_known(self, key: str) -> bool:
        return key in self._fields

    def field(self, key: str) -> SchemaField:
        try:
            return self._fields[key]
        except KeyError:
            raise UnknownKeyError(key, self.name) from None

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __iter__(self) -> Iterator[SchemaField]:
        return iter(self._fields.values())

    # ── validation ───────────────────────────────────────────

    def defaults(self) -> dict[str, Any]:
        """Return a fresh copy of every declared default."""
        return {k: copy.deepcopy(f.default) for k, f in self._fields.items()}

    def validate(self, candidate: Mapping[str, Any]) -> Mapping[str, Any]:
        """Check every key of *candidate* against the schema.

        Keys the schema declares but *candidate* omits are not an error.
        Returns *candidate* unchanged.

        Raises:
            UnknownKeyError:           key is not part of the schema.
            MissingRequiredValueError: value is ``None`` (declared, never set).
            TypeMismatchError:         the field predicate rejected the value.
        """
        for key, value in candidate.items():
            schema_field = self.field(key)
            if value is None:
                raise MissingRequiredValueError(
                    key, f"The {self.name} value {key} was never set."
                )
            if not schema_field.predicate(value):
                raise TypeMismatchError(key, value)
        return candidate

    def assert_not_restricted(self, candidate: Mapping[str, Any]) -> None:
        """Reject caller-supplied mappings that touch internal keys."""
        for key in candidate:
            if key in self._fields and self._fields[key].restricted:
                raise RestrictedKeyError(key)

    def assert_required_present(self, candidate: Mapping[str, Any]) -> None:
        """Reject caller-supplied mappings that omit a required key."""
        for key in self.required_keys:
            if key not in candidate:
                raise MissingRequiredValueError(key, f"{key} is required, but is not set.")
