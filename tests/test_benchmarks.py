"""Benchmarking tests."""

from __future__ import annotations

from typing import Any

import crossrealm

# ruff: noqa: D103 ANN401


def test_realm_create(benchmark: Any) -> None:
    benchmark(crossrealm.Realm)


def test_type_of_instance(benchmark: Any) -> None:
    realm = crossrealm.Realm()
    date = realm.construct(realm["Date"])
    benchmark(lambda: crossrealm.type_of(date))


def test_type_of_subclass_instance(benchmark: Any) -> None:
    realm = crossrealm.Realm()
    instance = realm.new_class("Sub", realm.new_class("Mid", realm["Array"])).construct()
    benchmark(lambda: crossrealm.type_of(instance))


def test_type_of_primitive(benchmark: Any) -> None:
    benchmark(lambda: crossrealm.type_of(1))


def test_is_cross_realm(benchmark: Any) -> None:
    first = crossrealm.Realm()
    second = crossrealm.Realm()
    benchmark(lambda: crossrealm.is_(first["Date"], second["Date"]))


def test_property_missing(benchmark: Any) -> None:
    obj = crossrealm.Realm().new_object()
    benchmark(lambda: obj["missing"])
