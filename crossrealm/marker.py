"""The marker protocol: how objects declare the built-in kind of their instances.

An object takes part by holding a marker value under the :any:`BUILTIN` key.
Marker values are either a :any:`Literal` kind name or a :any:`Computed` function called with the queried object.
Plain strings and Python callables are accepted in place of these and converted by :any:`as_marker`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Final, SupportsIndex, TypeAlias, Union

import attrs

from crossrealm.constants import BUILTIN, KIND_SLOT, UNDEFINED
from crossrealm.obj import Obj
from crossrealm.typing import KindPairs, MarkerValue

if TYPE_CHECKING:
    from crossrealm.realm import Realm

logger = logging.getLogger(__name__)


@attrs.frozen
class Literal:
    """A marker naming its kind directly."""

    name: str


@attrs.frozen
class Computed:
    """A marker computing its kind from the queried object.

    `func` is called with the queried object and returns a kind name, or None or :any:`UNDEFINED` for no kind.
    Other results are converted with :any:`str`.
    """

    func: Callable[[Obj], object]
    name: str = "<computed>"

    def __reduce_ex__(self, protocol: SupportsIndex) -> str | tuple[Any, ...]:
        """Pickle :any:`DEFAULT_MARKER` by reference, other markers by value."""
        if self is DEFAULT_MARKER:
            return "DEFAULT_MARKER"
        return super().__reduce_ex__(protocol)


Marker: TypeAlias = Union[Literal, Computed]


def _read_kind_slot(receiver: Obj) -> object:
    """Return the kind held by the receivers private slot, or None if it has no slot."""
    if not isinstance(receiver, Obj):
        msg = "Method invoked on a value that is not an object"
        raise TypeError(msg)
    return receiver.properties.get(KIND_SLOT)


DEFAULT_MARKER: Final = Computed(_read_kind_slot, name="@@builtin")
"""The marker shared by every registered built-in, in every realm."""


def as_marker(value: MarkerValue) -> Marker | None:
    """Return the marker a raw property value stands for, or None if the value does not qualify as a marker.

    Example::

        >>> as_marker("Date")
        Literal(name='Date')
        >>> as_marker(DEFAULT_MARKER) is DEFAULT_MARKER
        True
        >>> as_marker(UNDEFINED) is None
        True
    """
    if isinstance(value, (Literal, Computed)):
        return value
    if isinstance(value, str):
        return Literal(value)
    if callable(value):
        return Computed(value)
    return None


def resolve_marker(marker: Marker, receiver: Obj) -> str | None:
    """Return the kind name `marker` declares for `receiver`, or None.

    Errors raised by a computed marker, or by converting its result to a string, are propagated.
    """
    if isinstance(marker, Literal):
        return marker.name
    result = marker.func(receiver)
    if result is None or result is UNDEFINED:
        return None
    return result if isinstance(result, str) else str(result)


def get_marker_value(obj: Obj) -> str | None:
    """Return the kind declared by the marker of `obj`, which may be inherited from a parent."""
    marker = as_marker(obj[BUILTIN])
    if marker is None:
        return None
    return resolve_marker(marker, obj)


def get_own_marker_value(obj: Obj) -> str | None:
    """Return the kind declared by a marker held directly by `obj`, inherited markers are ignored."""
    descriptor = obj.properties(inherit=False).descriptor(BUILTIN)
    if descriptor is None:
        return None
    marker = as_marker(descriptor.value)
    if marker is None:
        return None
    return resolve_marker(marker, obj)


def install_default_markers(realm: Realm, pairs: KindPairs) -> None:
    """Register each object of `pairs` as a built-in of the paired kind name.

    The kind name is stored in a private slot which can not be changed afterwards.
    The :any:`BUILTIN` marker is set to :any:`DEFAULT_MARKER` and remains writable, so built-ins can be masked.

    Example::

        >>> Point = realm.new_class("Point")
        >>> install_default_markers(realm, [(Point, "Point")])
        >>> realm.builtins[Point]
        'Point'
        >>> crossrealm.type_of(Point.construct())
        'Point'
        >>> install_default_markers(realm, [(Point, "Vector")])
        Traceback (most recent call last):
          ...
        TypeError: Cannot redefine property: [[Builtin]]
    """
    count = 0
    for obj, kind in pairs:
        obj.properties.define(KIND_SLOT, kind)
        obj.properties.define(BUILTIN, DEFAULT_MARKER, writable=True, configurable=True)
        realm.builtins[obj] = kind
        count += 1
    logger.debug("Installed %d default markers in realm %x.", count, id(realm))
