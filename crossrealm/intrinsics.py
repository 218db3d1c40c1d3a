"""Intrinsic objects of a realm and the default kind table."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final, Iterable, Mapping

import attrs

import crossrealm._converter
import crossrealm.marker
from crossrealm.obj import Obj

if TYPE_CHECKING:
    from crossrealm.realm import Realm

logger = logging.getLogger(__name__)


@attrs.frozen
class KindEntry:
    """A row of a kind table: the name of an intrinsic and the kind name it is registered as."""

    intrinsic: str = attrs.field(validator=attrs.validators.instance_of(str))
    kind: str = attrs.field(validator=attrs.validators.instance_of(str))


_CONSTRUCTORS: Final = (
    "Array",
    "ArrayBuffer",
    "Boolean",
    "DataView",
    "Date",
    "Error",
    "Float32Array",
    "Float64Array",
    "Int8Array",
    "Int16Array",
    "Int32Array",
    "Map",
    "Number",
    "Promise",
    "Proxy",
    "RegExp",
    "Set",
    "String",
    "Symbol",
    "Uint8Array",
    "Uint8ClampedArray",
    "Uint16Array",
    "Uint32Array",
    "WeakMap",
    "WeakSet",
)
"""Constructors deriving directly from ``Function.prototype``."""

_DERIVED_CONSTRUCTORS: Final = (
    ("AsyncFunction", "Function"),
    ("GeneratorFunction", "Function"),
    ("EvalError", "Error"),
    ("RangeError", "Error"),
    ("ReferenceError", "Error"),
    ("SyntaxError", "Error"),
    ("TypeError", "Error"),
    ("URIError", "Error"),
)
"""(constructor, base) pairs."""

_NAMESPACES: Final = ("JSON", "Math", "Reflect")
"""Plain intrinsic objects which are not constructors."""

DEFAULT_KIND_TABLE: Final = tuple(
    KindEntry(intrinsic, kind)
    for intrinsic, kind in (
        ("Array", "Array"),
        ("ArrayBuffer", "ArrayBuffer"),
        ("AsyncFunction", "AsyncFunction"),
        ("Boolean", "Boolean"),
        ("DataView", "DataView"),
        ("Date", "Date"),
        ("Error", "Error"),
        ("EvalError", "EvalError"),
        ("Float32Array", "Float32Array"),
        ("Float64Array", "Float64Array"),
        ("Function", "function"),
        ("GeneratorFunction", "GeneratorFunction"),
        ("Int8Array", "Int8Array"),
        ("Int16Array", "Int16Array"),
        ("Int32Array", "Int32Array"),
        ("JSON", "JSON"),
        ("Map", "Map"),
        ("Math", "Math"),
        ("Number", "Number"),
        ("Object", "object"),
        ("Promise", "Promise"),
        ("Proxy", "Proxy"),
        ("RangeError", "RangeError"),
        ("ReferenceError", "ReferenceError"),
        ("Reflect", "Reflect"),
        ("RegExp", "RegExp"),
        ("Set", "Set"),
        ("String", "String"),
        ("Symbol", "Symbol"),
        ("SyntaxError", "SyntaxError"),
        ("TypeError", "TypeError"),
        ("Uint8Array", "Uint8Array"),
        ("Uint8ClampedArray", "Uint8ClampedArray"),
        ("Uint16Array", "Uint16Array"),
        ("Uint32Array", "Uint32Array"),
        ("URIError", "URIError"),
        ("WeakMap", "WeakMap"),
        ("WeakSet", "WeakSet"),
        ("Atomics", "Atomics"),
        ("SharedArrayBuffer", "SharedArrayBuffer"),
    )
)
"""The kinds registered by every new :any:`Realm` unless told otherwise.

Entries naming an intrinsic the realm does not have, such as ``Atomics`` without shared memory, are skipped.
"""


def _add_constructor(realm: Realm, name: str, *, base: Obj | None = None, prototype: Obj | None = None) -> Obj:
    """Create an intrinsic constructor and its prototype under their well-known names."""
    if prototype is None:
        prototype = Obj(realm, f"{name}.prototype")
        prototype.parent = realm.intrinsics["Object.prototype"] if base is None else base["prototype"]
    constructor = realm.new_function(name, parent=object if base is None else base, prototype=prototype, uid=name)
    realm.intrinsics[name] = constructor
    realm.intrinsics[f"{name}.prototype"] = prototype
    return constructor


def _add_namespace(realm: Realm, name: str) -> Obj:
    """Create an intrinsic plain object under its well-known name."""
    namespace = Obj(realm, name)
    namespace.parent = realm.intrinsics["Object.prototype"]
    realm.intrinsics[name] = namespace
    return namespace


def create_intrinsics(realm: Realm) -> None:
    """Populate a new realm with its intrinsic objects."""
    object_prototype = Obj(realm, "Object.prototype")
    realm.intrinsics["Object.prototype"] = object_prototype

    function_prototype = Obj(realm, "Function.prototype")
    function_prototype.parent = object_prototype
    realm._callables.add(function_prototype)
    realm.intrinsics["Function.prototype"] = function_prototype

    _add_constructor(realm, "Object", prototype=object_prototype)
    _add_constructor(realm, "Function", prototype=function_prototype)
    for name in _CONSTRUCTORS:
        _add_constructor(realm, name)
    for name, base in _DERIVED_CONSTRUCTORS:
        _add_constructor(realm, name, base=realm.intrinsics[base])
    for name in _NAMESPACES:
        _add_namespace(realm, name)

    if realm.shared_memory:
        _add_constructor(realm, "SharedArrayBuffer")
        _add_namespace(realm, "Atomics")


def install_default_kinds(realm: Realm, table: Iterable[KindEntry]) -> None:
    """Register the intrinsics named by `table` as built-ins of `realm`."""
    pairs: list[tuple[Obj, str]] = []
    for entry in table:
        obj = realm.intrinsics.get(entry.intrinsic)
        if obj is None:
            logger.debug("Skipping kind %r, this realm has no %r intrinsic.", entry.kind, entry.intrinsic)
            continue
        pairs.append((obj, entry.kind))
    crossrealm.marker.install_default_markers(realm, pairs)


def load_kind_table(
    data: Iterable[KindEntry | Mapping[str, Any] | tuple[str, str] | list[str]],
) -> tuple[KindEntry, ...]:
    """Return a kind table from unstructured data, such as a parsed JSON document.

    Each row is either a mapping with ``intrinsic`` and ``kind`` keys, an ``(intrinsic, kind)`` pair or a :any:`KindEntry`.
    Rows which are not pairs raise ValueError, names which are not strings raise TypeError.

    Example::

        >>> load_kind_table([{"intrinsic": "Date", "kind": "Date"}, ["Object", "object"]])
        (KindEntry(intrinsic='Date', kind='Date'), KindEntry(intrinsic='Object', kind='object'))
    """
    converter = crossrealm._converter._get_converter()
    return tuple(converter.structure(row, KindEntry) for row in data)
