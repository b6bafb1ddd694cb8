"""Custom exceptions for the keyed_state package."""

from __future__ import annotations


class StateError(Exception):
    """Base exception for all state-store errors."""


class KeyNotFoundError(StateError, KeyError):
    """Raised when a key is read but was never set."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return self.message


class DecodeError(StateError, ValueError):
    """Raised when a persisted namespace cannot be decoded into an object."""

    def __init__(self, storage_key: str, detail: str = "") -> None:
        self.storage_key = storage_key
        msg = f"Could not decode {storage_key} into an object"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class EncodeError(StateError, TypeError):
    """Raised when a value cannot be serialized to JSON."""

    def __init__(self, storage_key: str, detail: str = "") -> None:
        self.storage_key = storage_key
        msg = f"Could not encode {storage_key} as JSON"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class SchemaError(StateError):
    """Base class for schema violations on a schema-bound namespace."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(message)


class UnknownKeyError(SchemaError):
    """Raised when a key is not part of the namespace schema."""

    def __init__(self, key: str, namespace: str = "preferences") -> None:
        super().__init__(key, f"{key} is not a known {namespace} key.")


class MissingRequiredValueError(SchemaError):
    """Raised when a declared key holds the null sentinel or was never supplied."""

    def __init__(self, key: str, message: str = "") -> None:
        super().__init__(key, message or f"The value for {key} was never set.")


class TypeMismatchError(SchemaError):
    """Raised when a schema predicate rejects a value."""

    def __init__(self, key: str, value: object) -> None:
        self.value = value
        super().__init__(
            key,
            f"The value passed for the key {key} did not match the expected type "
            f"(got {type(value).__name__}).",
        )


class RestrictedKeyError(SchemaError):
    """Raised when an external caller supplies a key reserved for internal use."""

    def __init__(self, key: str) -> None:
        super().__init__(
            key, f"{key} is not allowed to be set externally.  This is an internal property."
        )


class EnvironmentNotReadyError(StateError):
    """Raised when an operation requires a ready environment."""

    def __init__(self, operation: str, status: str) -> None:
        self.operation = operation
        self.status = status
        super().__init__(
            f"{operation}() called, but the environment is {status}; run a full reset first."
        )
