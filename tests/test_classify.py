"""Tests for the classification queries."""

from __future__ import annotations

import pickle
from typing import Any

import pytest

import crossrealm
from crossrealm import BUILTIN, UNDEFINED, Realm, is_, type_of
from crossrealm.intrinsics import DEFAULT_KIND_TABLE

# ruff: noqa: D103 ANN401


def test_examples() -> None:
    realm = Realm()
    other_realm = Realm()
    assert type_of(realm.construct(realm["Array"])) == "Array"
    assert type_of(realm.new_object()) == "object"
    assert type_of(None) == "null"
    assert is_(realm["Date"], other_realm["Date"])
    assert not is_(realm["Date"], other_realm["Number"])


def test_default_kinds() -> None:
    realm = Realm(shared_memory=True)
    for entry in DEFAULT_KIND_TABLE:
        obj = realm[entry.intrinsic]
        assert is_(obj), entry
        assert realm.builtins[obj] == entry.kind
        if obj.callable:
            assert type_of(obj.construct()) == entry.kind


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, "boolean"),
        (False, "boolean"),
        (0, "number"),
        (1.5, "number"),
        ("", "string"),
        ("Date", "string"),
        (BUILTIN, "symbol"),
        (None, "null"),
        (UNDEFINED, "undefined"),
        (len, "function"),
        (lambda: None, "function"),
        (object(), "object"),
    ],
)
def test_primitives(value: Any, expected: str) -> None:
    realm = Realm()
    assert type_of(value) == expected
    assert not is_(value)
    assert not is_(value, realm["Date"])
    assert not is_(realm["Date"], value)


def test_intrinsics_without_own_kind() -> None:
    realm = Realm()
    assert type_of(realm["Date"]) == "function"
    assert type_of(realm["Reflect"]) == "object"
    assert type_of(realm.construct(realm["Date"])) == "Date"
    assert type_of(realm.new_object(None)) == "object"


def test_classes() -> None:
    realm = Realm()
    marked = realm.new_class("M", statics={BUILTIN: lambda this: "M"})
    assert type_of(marked.construct()) == "M"
    assert type_of(marked) == "function"
    assert is_(marked)

    unmarked = realm.new_class("N")
    assert type_of(unmarked.construct()) == "object"
    assert type_of(unmarked) == "function"
    assert not is_(unmarked)


@pytest.mark.parametrize("mask", [UNDEFINED, None, 0, False])
def test_masking(mask: Any) -> None:
    realm = Realm()
    date = realm["Date"]
    marker = date[BUILTIN]

    date[BUILTIN] = mask
    assert not is_(date)
    assert not is_(date, Realm()["Date"])
    assert type_of(date.construct()) == "object"

    date[BUILTIN] = marker  # Masking is reversible
    assert is_(date)
    assert is_(date, Realm()["Date"])
    assert type_of(date.construct()) == "Date"


def test_masking_by_deletion() -> None:
    realm = Realm()
    del realm["Map"][BUILTIN]
    assert not is_(realm["Map"])
    assert type_of(realm.construct(realm["Map"])) == "object"
    assert realm.builtins[realm["Map"]] == "Map"  # The registration itself is untouched


def test_masquerade() -> None:
    realm = Realm()
    foo = realm.new_class("Foo")
    foo[BUILTIN] = lambda this: "Foo"
    assert is_(foo)
    assert type_of(foo.construct()) == "Foo"

    fake_date = realm.new_class("FakeDate", statics={BUILTIN: "Date"})
    assert is_(fake_date, realm["Date"])
    assert is_(fake_date, Realm()["Date"])
    assert type_of(fake_date.construct()) == "Date"


def test_subclass_inherits_kind() -> None:
    realm = Realm()
    sub = realm.new_class("Sub", realm["Array"])
    sub_sub = realm.new_class("SubSub", sub)
    assert type_of(sub.construct()) == "Array"
    assert type_of(sub_sub.construct()) == "Array"
    assert not is_(sub)  # Inherited markers are not held directly

    sub[BUILTIN] = "Sub"
    assert is_(sub)
    assert type_of(sub.construct()) == "Sub"
    assert type_of(sub_sub.construct()) == "Sub"
    assert type_of(realm.construct(realm["Array"])) == "Array"


def test_own_markers_only() -> None:
    realm = Realm()
    child = realm.new_object(realm["Date"])
    assert child[BUILTIN] is realm["Date"][BUILTIN]
    assert not is_(child)
    assert not is_(child, realm["Date"])


def test_comparison_follows_marker_changes() -> None:
    first = Realm()
    second = Realm()
    assert is_(first["Map"], second["Map"])
    second["Map"][BUILTIN] = "Set"
    assert not is_(first["Map"], second["Map"])
    assert is_(first["Set"], second["Map"])
    second["Map"][BUILTIN] = "Map"
    assert is_(first["Map"], second["Map"])


def test_plain_objects_never_compare() -> None:
    first = Realm()
    second = Realm()
    assert not is_(first.new_object(), second.new_object())
    assert not is_(first.new_object())
    assert not is_(first.new_object(None))
    assert not is_(first["Object.prototype"], second["Object.prototype"])


def test_pickled_realm() -> None:
    realm = Realm()
    clone = pickle.loads(pickle.dumps(realm))
    assert clone is not realm
    assert clone["Date"] is not realm["Date"]
    assert is_(realm["Date"], clone["Date"])
    assert not is_(realm["Date"], clone["Map"])
    assert type_of(clone.construct(clone["Date"])) == "Date"

    clone["Date"][BUILTIN] = UNDEFINED
    assert not is_(clone["Date"])
    assert is_(realm["Date"])


def test_failing_marker_propagates() -> None:
    realm = Realm()

    def broken(this: object) -> str:
        msg = "broken marker"
        raise RuntimeError(msg)

    cls = realm.new_class("Broken", statics={BUILTIN: broken})
    with pytest.raises(RuntimeError, match="broken marker"):
        is_(cls)
    with pytest.raises(RuntimeError, match="broken marker"):
        type_of(cls.construct())


def test_uncoercible_marker_result_propagates() -> None:
    realm = Realm()

    class Unprintable:
        def __str__(self) -> str:
            msg = "no string"
            raise ValueError(msg)

    cls = realm.new_class("Odd", statics={BUILTIN: lambda this: Unprintable()})
    with pytest.raises(ValueError, match="no string"):
        type_of(cls.construct())


def test_coerced_marker_result() -> None:
    realm = Realm()
    cls = realm.new_class("Numbered", statics={BUILTIN: lambda this: 42})
    assert type_of(cls.construct()) == "42"
    assert is_(cls, realm.new_class("Named", statics={BUILTIN: "42"}))


def test_empty_kind_falls_back() -> None:
    realm = Realm()
    cls = realm.new_class("Empty", statics={BUILTIN: ""})
    assert type_of(cls.construct()) == "object"
    assert is_(cls)  # An empty name is still a declared kind


def test_typeof_deprecated() -> None:
    realm = Realm()
    with pytest.warns(FutureWarning):
        assert crossrealm.typeof(realm.construct(realm["Date"])) == "Date"
