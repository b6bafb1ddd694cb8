"""Tests for NamespaceSchema."""

import pytest

from keyed_state import (
    PREFERENCES_SCHEMA,
    MissingRequiredValueError,
    NamespaceSchema,
    RestrictedKeyError,
    SchemaField,
    TypeMismatchError,
    UnknownKeyError,
)


def _is_int(v):
    return isinstance(v, int) and not isinstance(v, bool)


@pytest.fixture
def schema():
    return NamespaceSchema(
        "settings",
        [
            SchemaField("name", None, lambda v: isinstance(v, str), required=True),
            SchemaField("count", 0, _is_int),
            SchemaField("tags", [], lambda v: isinstance(v, list)),
            SchemaField("secret", None, lambda v: isinstance(v, str), restricted=True),
        ],
    )


# ── construction ─────────────────────────────────────────────


def test_key_sets_are_partitioned(schema):
    assert schema.keys == ["name", "count", "tags", "secret"]
    assert schema.required_keys == ["name"]
    assert schema.restricted_keys == ["secret"]
    assert schema.optional_keys == ["count", "tags"]


def test_required_and_restricted_must_be_disjoint():
    with pytest.raises(ValueError, match="both required and restricted"):
        NamespaceSchema("bad", [SchemaField("k", None, bool, required=True, restricted=True)])


def test_duplicate_keys_rejected():
    with pytest.raises(ValueError, match="more than once"):
        NamespaceSchema("bad", [SchemaField("k", 1, bool), SchemaField("k", 2, bool)])


def test_lookup(schema):
    assert "count" in schema
    assert "nope" not in schema
    assert schema.is_known("tags")
    assert schema.field("count").default == 0
    with pytest.raises(UnknownKeyError):
        schema.field("nope")
    assert [f.key for f in schema] == schema.keys


# ── validate ─────────────────────────────────────────────────


def test_validate_returns_input(schema):
    candidate = {"name": "a", "count": 2}
    assert schema.validate(candidate) is candidate


def test_validate_allows_partial(schema):
    schema.validate({})
    schema.validate({"count": 1})


def test_validate_unknown_key(schema):
    with pytest.raises(UnknownKeyError, match="unknownKey is not a known settings key"):
        schema.validate({"unknownKey": 1})


def test_validate_null_sentinel(schema):
    with pytest.raises(MissingRequiredValueError, match="name was never set") as exc_info:
        schema.validate({"name": None})
    assert exc_info.value.key == "name"


def test_validate_type_mismatch(schema):
    with pytest.raises(TypeMismatchError) as exc_info:
        schema.validate({"count": "three"})
    assert exc_info.value.key == "count"
    assert exc_info.value.value == "three"


def test_validate_does_not_check_restriction(schema):
    schema.validate({"secret": "s"})


def test_defaults_are_fresh_copies(schema):
    first = schema.defaults()
    first["tags"].append("x")
    assert schema.defaults() == {"name": None, "count": 0, "tags": [], "secret": None}


# ── caller checks ────────────────────────────────────────────


def test_assert_not_restricted(schema):
    schema.assert_not_restricted({"name": "a", "unknown": 1})
    with pytest.raises(RestrictedKeyError, match="not allowed to be set externally"):
        schema.assert_not_restricted({"secret": "s"})


def test_assert_required_present(schema):
    schema.assert_required_present({"name": "a"})
    with pytest.raises(MissingRequiredValueError, match="name is required"):
        schema.assert_required_present({"count": 1})


# ── preferences schema ───────────────────────────────────────


def test_preferences_unknown_key():
    with pytest.raises(UnknownKeyError):
        PREFERENCES_SCHEMA.validate({"unknownKey": 1})


@pytest.mark.parametrize("value", ["nope", True, 4, -1, 1.5])
def test_preferences_verbosity_type(value):
    with pytest.raises(TypeMismatchError):
        PREFERENCES_SCHEMA.validate({"verbosity": value})


def test_preferences_environment_values():
    for value in ("development", "staging", "production"):
        PREFERENCES_SCHEMA.validate({"environment": value})
    with pytest.raises(TypeMismatchError):
        PREFERENCES_SCHEMA.validate({"environment": "qa"})


def test_preferences_initialized_is_timestamp():
    PREFERENCES_SCHEMA.validate({"initialized": "2024-05-01T12:30:00+00:00"})
    with pytest.raises(TypeMismatchError):
        PREFERENCES_SCHEMA.validate({"initialized": "yesterday"})


def test_preferences_key_sets():
    assert set(PREFERENCES_SCHEMA.required_keys) == {"baseUrl", "environment"}
    assert PREFERENCES_SCHEMA.restricted_keys == ["initialized"]
    assert not set(PREFERENCES_SCHEMA.required_keys) & set(PREFERENCES_SCHEMA.restricted_keys)


def test_preferences_defaults():
    defaults = PREFERENCES_SCHEMA.defaults()
    assert defaults["defaultContentType"] == "application/ld+json"
    assert defaults["defaultLanguage"] == "en"
    assert defaults["enableBlackfire"] is False
    assert defaults["verbosity"] == 1
    assert defaults["baseUrl"] is None
