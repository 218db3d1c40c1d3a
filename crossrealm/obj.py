"""Host object handles and property access tools."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final, Iterator, MutableMapping
from weakref import WeakKeyDictionary, WeakValueDictionary

import attrs
from typing_extensions import Self

from crossrealm.constants import UNDEFINED
from crossrealm.typing import PropertyKey

if TYPE_CHECKING:
    from crossrealm.realm import Realm


_obj_table: WeakKeyDictionary[Realm, WeakValueDictionary[object, Obj]] = WeakKeyDictionary()
"""A weak table of realms and unique identifiers to object handles.

This table is used so that handles to the same object always share identities.

_obj_table[realm][uid] = obj
"""


@attrs.frozen
class Property:
    """A property descriptor: the value of a property and its attributes.

    Attributes default to those of a property created by plain assignment.
    """

    value: Any
    writable: bool = True
    enumerable: bool = True
    configurable: bool = True


class Obj:
    """A unique object living in a realm.

    Objects hold no data themselves, their properties and parent link are stored by their :any:`Realm`.

    Example::

        >>> import crossrealm
        >>> realm = crossrealm.Realm()  # Create a new realm
        >>> realm.new_object()  # Create a new object
        <Obj(uid=object at ...)>
        >>> realm["Date"]  # Intrinsic objects are accessed by name
        <Obj(uid='Date')>
    """

    __slots__ = ("realm", "uid", "__weakref__")

    realm: Final[Realm]  # type:ignore[misc]  # https://github.com/python/mypy/issues/5774
    """The :any:`Realm` this object belongs to."""
    uid: Final[object]  # type:ignore[misc]
    """This objects unique identifier within its realm."""

    def __new__(cls, realm: Realm, uid: object = object) -> Obj:  # noqa: PYI034
        """Return a unique object for the given `realm` and `uid`.

        If an object already exists with a matching `realm` and `uid` then that object is returned.

        The `uid` default of `object` will create an instance of :any:`object` as the `uid`.
        An object created this way will never match or collide with an existing object.

        Example::

            >>> Obj(realm, "foo") is Obj(realm, "foo")
            True
            >>> Obj(realm) is Obj(realm)
            False
        """
        if uid is object:
            uid = object()
        try:
            table = _obj_table[realm]
        except KeyError:
            table = WeakValueDictionary()
            _obj_table[realm] = table
        try:
            return table[uid]
        except KeyError:
            pass
        self = super().__new__(cls)
        self.realm = realm  # type:ignore[misc]  # https://github.com/python/mypy/issues/5774
        self.uid = uid  # type:ignore[misc]
        _obj_table[realm][uid] = self
        return self

    @property
    def parent(self) -> Obj | None:
        """The object this one inherits properties from, or None.

        The parent may belong to another realm.  Assigning a parent which would create a cycle raises TypeError.

        Example::

            >>> base = realm.new_object()
            >>> child = realm.new_object(parent=base)
            >>> child.parent is base
            True
            >>> base.parent = child
            Traceback (most recent call last):
              ...
            TypeError: Cyclic parent value
        """
        return self.realm._parent_by_obj.get(self)

    @parent.setter
    def parent(self, value: Obj | None) -> None:
        if value is None:
            self.realm._parent_by_obj.pop(self, None)
            return
        assert isinstance(value, Obj), value
        if self in _traverse_chain(value):
            msg = "Cyclic parent value"
            raise TypeError(msg)
        self.realm._parent_by_obj[self] = value

    @property
    def callable(self) -> bool:
        """True if this object is a function."""
        return self in self.realm._callables

    def construct(self) -> Obj:
        """Return a new instance of this constructor.  See :any:`Realm.construct`."""
        return self.realm.construct(self)

    @property
    def properties(self) -> ObjProperties:
        """Access an objects properties, including inherited properties.

        Example::

            >>> obj = realm.new_object()
            >>> obj.properties["x"] = 1
            >>> obj.properties |= {"y": 2}
            >>> dict(obj.properties)
            {'x': 1, 'y': 2}
            >>> child = realm.new_object(parent=obj)
            >>> child.properties["x"]  # Inherited from the parent
            1
            >>> "x" in child.properties(inherit=False)
            False
        """
        return ObjProperties(self, inherit=True)

    @properties.setter
    def properties(self, value: ObjProperties) -> None:
        assert value.obj is self

    def __getitem__(self, key: PropertyKey) -> Any:
        """Return a property value, or :any:`UNDEFINED` when the property is missing.

        Example::

            >>> obj = realm.new_object()
            >>> obj["missing"]
            undefined
        """
        return self.properties.get(key, UNDEFINED)

    def __setitem__(self, key: PropertyKey, value: object) -> None:
        """Assign a property directly to this object."""
        self.properties[key] = value

    def __delitem__(self, key: PropertyKey) -> None:
        """Delete a property directly held by this object."""
        del self.properties[key]

    def __repr__(self) -> str:
        """Return a representation of this object.

        Example::

            >>> realm.new_object()
            <Obj(uid=object at ...)>
            >>> realm["Object.prototype"]
            <Obj(uid='Object.prototype')>
        """
        uid_str = f"object at 0x{id(self.uid):X}" if self.uid.__class__ is object else repr(self.uid)
        return f"<{self.__class__.__name__}(uid={uid_str})>"

    def __reduce__(self) -> tuple[type[Obj], tuple[Realm, object]]:
        """Pickle this object.

        Note that any pickled object will include the realm it belongs to and all the objects of that realm.
        """
        return self.__class__, (self.realm, self.uid)


def _traverse_chain(start: Obj, *, inherit: bool = True) -> Iterator[Obj]:
    """Iterate over this object then every object it inherits from, nearest first."""
    yield start
    if not inherit:
        return
    visited = {start}
    obj = start.realm._parent_by_obj.get(start)
    while obj is not None and obj not in visited:
        visited.add(obj)
        yield obj
        obj = obj.realm._parent_by_obj.get(obj)


@attrs.define(eq=False, frozen=True, weakref_slot=False)
class ObjProperties(MutableMapping[PropertyKey, Any]):
    """A proxy attribute to access an objects properties like a dictionary.

    Reads follow the parent chain unless `inherit` is False.  Writes always target the object itself.

    See :any:`Obj.properties`.
    """

    obj: Obj
    inherit: bool

    def __call__(self, *, inherit: bool) -> Self:
        """Return this view with a different inheritance setting."""
        return self.__class__(self.obj, inherit)

    def descriptor(self, key: PropertyKey) -> Property | None:
        """Return the nearest descriptor for `key`, or None if no object in reach has it."""
        for obj in _traverse_chain(self.obj, inherit=self.inherit):
            own = obj.realm._props_by_obj.get(obj)
            if own is not None and key in own:
                return own[key]
        return None

    def define(
        self,
        key: PropertyKey,
        value: object,
        *,
        writable: bool = False,
        enumerable: bool = False,
        configurable: bool = False,
    ) -> None:
        """Define or redefine a property with explicit attributes.

        A non-configurable property can not be redefined with different attributes.

        Example::

            >>> obj = realm.new_object()
            >>> obj.properties.define("x", 1)
            >>> obj.properties.define("x", 2)
            Traceback (most recent call last):
              ...
            TypeError: Cannot redefine property: 'x'
        """
        new = Property(value, writable=writable, enumerable=enumerable, configurable=configurable)
        own = self.obj.realm._props_by_obj[self.obj]
        old = own.get(key)
        if old is not None and not old.configurable and old != new:
            msg = f"Cannot redefine property: {key!r}"
            raise TypeError(msg)
        own[key] = new

    def __getitem__(self, key: PropertyKey) -> Any:
        """Return a property value held by this object, or by a parent."""
        descriptor = self.descriptor(key)
        if descriptor is None:
            raise KeyError(key)
        return descriptor.value

    def __setitem__(self, key: PropertyKey, value: object) -> None:
        """Assign a property directly to this object, keeping the attributes of an existing own property."""
        own = self.obj.realm._props_by_obj[self.obj]
        old = own.get(key)
        if old is None:
            old = self.descriptor(key)
            if old is not None and not old.writable:
                msg = f"Cannot assign to read only property {key!r} of {self.obj!r}"
                raise TypeError(msg)
            own[key] = Property(value)
            return
        if not old.writable:
            msg = f"Cannot assign to read only property {key!r} of {self.obj!r}"
            raise TypeError(msg)
        own[key] = attrs.evolve(old, value=value)

    def __delitem__(self, key: PropertyKey) -> None:
        """Delete a property directly held by this object."""
        _props_by_obj = self.obj.realm._props_by_obj
        own = _props_by_obj.get(self.obj)
        if own is None or key not in own:
            raise KeyError(key)
        if not own[key].configurable:
            msg = f"Cannot delete property {key!r} of {self.obj!r}"
            raise TypeError(msg)
        del own[key]
        if not own:
            del _props_by_obj[self.obj]

    def __contains__(self, key: object) -> bool:
        """Return True if this object has the property, enumerable or not."""
        return self.descriptor(key) is not None

    def keys(self) -> list[PropertyKey]:  # type: ignore[override]
        """Return the enumerable property keys of this object, then those of its parents not yet seen."""
        seen: set[PropertyKey] = set()
        result: list[PropertyKey] = []
        for obj in _traverse_chain(self.obj, inherit=self.inherit):
            for key, descriptor in obj.realm._props_by_obj.get(obj, {}).items():
                if key in seen:
                    continue
                seen.add(key)
                if descriptor.enumerable:
                    result.append(key)
        return result

    def __iter__(self) -> Iterator[PropertyKey]:
        """Iterate over the enumerable property keys."""
        return iter(self.keys())

    def __len__(self) -> int:
        """Return the number of enumerable properties."""
        return len(self.keys())

    def __ior__(self, value: MutableMapping[PropertyKey, Any] | dict[PropertyKey, Any]) -> Self:
        """Assign properties in-place."""
        self.update(value)
        return self
