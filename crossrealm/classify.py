"""Classification queries: compare built-in kinds and resolve the kind of any value."""

from __future__ import annotations

import warnings
from typing import Final

from sentinel_value import SentinelValue, sentinel

from crossrealm.constants import UNDEFINED
from crossrealm.marker import get_marker_value, get_own_marker_value
from crossrealm.obj import Obj

_OMITTED: Final = sentinel("_OMITTED")


def primitive_kind(value: object) -> str:
    """Return the intrinsic kind tag of `value`, ignoring any marker.

    Callable objects and Python callables are both functions.

    Example::

        >>> [primitive_kind(v) for v in (None, UNDEFINED, True, 1.5, "", realm.new_object(), realm["Date"])]
        ['null', 'undefined', 'boolean', 'number', 'string', 'object', 'function']
    """
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, SentinelValue):
        return "symbol"
    if isinstance(value, Obj):
        return "function" if value.callable else "object"
    if callable(value):
        return "function"
    return "object"


def is_(value1: object, value2: object = _OMITTED) -> bool:
    """Return True if both values declare the same built-in kind.

    With one argument, return True if `value1` declares any built-in kind.
    Only markers held directly by the values count, inherited markers are ignored.
    Values which are not objects are never built-ins.

    Example::

        >>> other_realm = crossrealm.Realm()
        >>> is_(realm["Date"], other_realm["Date"])
        True
        >>> is_(realm["Date"], other_realm["Number"])
        False
        >>> is_(realm["Date"])
        True
        >>> is_(realm.construct(realm["Date"]))  # Instances are not tagged, their constructors are
        False
    """
    if not isinstance(value1, Obj):
        return False
    kind1 = get_own_marker_value(value1)
    if kind1 is None:
        return False
    if value2 is _OMITTED:
        return True
    if not isinstance(value2, Obj):
        return False
    return kind1 == get_own_marker_value(value2)


def type_of(value: object) -> str:
    """Return the kind name of `value`.

    Objects are classified by the marker of their ``constructor``, which may be inherited from a base class.
    Anything else, or an object whose constructor declares no kind, is classified by :any:`primitive_kind`.

    Example::

        >>> type_of(realm.construct(realm["Array"]))
        'Array'
        >>> type_of(realm.new_object())
        'object'
        >>> type_of(realm["Date"])
        'function'
        >>> type_of(None)
        'null'
    """
    if isinstance(value, Obj):
        constructor = value["constructor"]
        if isinstance(constructor, Obj):
            kind = get_marker_value(constructor)
            if kind:
                return kind
    return primitive_kind(value)


def typeof(value: object) -> str:
    """Return the kind name of `value`.

    .. deprecated:: 1.0
        This is the spelling used by early versions of the proposal, use :any:`type_of` instead.
    """
    warnings.warn("'typeof' has been renamed to 'type_of'.", FutureWarning, stacklevel=2)
    return type_of(value)
