"""Realm management tools."""

from __future__ import annotations

import logging
import warnings
from collections import defaultdict
from typing import TYPE_CHECKING, Any, DefaultDict, Dict, Iterable, Mapping, NoReturn

import attrs

import crossrealm._converter
import crossrealm.intrinsics
import crossrealm.marker
from crossrealm.obj import Obj, Property

if TYPE_CHECKING:
    from crossrealm.intrinsics import KindEntry
    from crossrealm.typing import PropertyKey

logger = logging.getLogger(__name__)


@attrs.define(eq=False)
class Realm:
    """An independent universe of objects with its own set of intrinsics.

    Two realms each own a ``Date`` constructor, and those constructors are never the same object.

    Example::

        >>> first, second = Realm(), Realm()
        >>> first["Date"] is second["Date"]
        False
        >>> crossrealm.is_(first["Date"], second["Date"])
        True
    """

    kind_table: tuple[KindEntry, ...] = attrs.field(
        kw_only=True,
        default=crossrealm.intrinsics.DEFAULT_KIND_TABLE,
        converter=crossrealm.intrinsics.load_kind_table,
    )
    """The default kinds to register when this realm is created.

    Rows may be :any:`KindEntry` instances, ``(intrinsic, kind)`` pairs or mappings, see :any:`load_kind_table`.
    """

    shared_memory: bool = attrs.field(kw_only=True, default=False)
    """If True then this realm provides the ``SharedArrayBuffer`` and ``Atomics`` intrinsics."""

    _props_by_obj: defaultdict[Obj, dict[PropertyKey, Property]] = attrs.field(
        init=False, factory=lambda: defaultdict(dict)
    )
    """Random access object properties.

    dict[Obj][key] = property_descriptor
    """

    _parent_by_obj: dict[Obj, Obj] = attrs.field(init=False, factory=dict)
    """The parent of each object which has one.

    dict[Obj] = parent
    """

    _callables: set[Obj] = attrs.field(init=False, factory=set)
    """All function objects of this realm."""

    intrinsics: dict[str, Obj] = attrs.field(init=False, factory=dict)
    """The named intrinsic objects of this realm.

    dict[name] = intrinsic
    """

    builtins: dict[Obj, str] = attrs.field(init=False, factory=dict)
    """Objects registered as built-ins and the kind name they were registered with.

    dict[Obj] = kind_name
    """

    def __attrs_post_init__(self) -> None:
        """Create the intrinsics of this realm and register the default kinds."""
        crossrealm.intrinsics.create_intrinsics(self)
        crossrealm.intrinsics.install_default_kinds(self, self.kind_table)
        logger.debug("Created realm %x with %d intrinsics.", id(self), len(self.intrinsics))

    def __getitem__(self, name: str) -> Obj:
        """Return the intrinsic object with this name.

        Example::

            >>> realm["Array"]
            <Obj(uid='Array')>
            >>> realm["Array.prototype"]["constructor"] is realm["Array"]
            True
            >>> realm["NotAnIntrinsic"]
            Traceback (most recent call last):
              ...
            KeyError: 'NotAnIntrinsic'
        """
        return self.intrinsics[name]

    def __iter__(self) -> NoReturn:
        """Raises TypeError, :any:`Realm` is not iterable."""
        msg = "'Realm' object is not iterable."
        raise TypeError(msg)

    def __getstate__(self) -> dict[str, Any]:
        """Pickle this object."""
        converter = crossrealm._converter._get_converter()
        # Replace defaultdict types with plain dict when saving
        return {
            "kind_table": self.kind_table,
            "shared_memory": self.shared_memory,
            "_props_by_obj": converter.structure(self._props_by_obj, Dict[Any, Dict[Any, Any]]),
            "_parent_by_obj": self._parent_by_obj,
            "_callables": self._callables,
            "intrinsics": self.intrinsics,
            "builtins": self.builtins,
        }

    def __setstate__(self, state: dict[str, Any]) -> None:
        """Unpickle this object as a new independent realm."""
        converter = crossrealm._converter._get_converter()
        self.kind_table = state.pop("kind_table")
        self.shared_memory = state.pop("shared_memory")
        # Apply defaultdict types to unpickled dictionaries
        self._props_by_obj = converter.structure(state.pop("_props_by_obj"), DefaultDict[Any, Dict[Any, Any]])
        self._parent_by_obj = state.pop("_parent_by_obj")
        self._callables = state.pop("_callables")
        self.intrinsics = state.pop("intrinsics")
        self.builtins = state.pop("builtins")
        if state:
            warnings.warn(f"These attributes were not unpacked {state.keys()}", RuntimeWarning, stacklevel=1)

    def new_object(
        self,
        parent: Obj | None | object = object,
        *,
        properties: Mapping[PropertyKey, object] = {},  # noqa: B006
    ) -> Obj:
        """Create and return a new ordinary object.

        The `parent` default of `object` inherits from ``Object.prototype``, use None for an object with no parent.

        Example::

            >>> obj = realm.new_object(properties={"name": "my name"})
            >>> obj["name"]
            'my name'
            >>> obj.parent is realm["Object.prototype"]
            True
            >>> realm.new_object(None).parent is None
            True
        """
        obj = Obj(self)
        if parent is object:
            parent = self.intrinsics["Object.prototype"]
        obj.parent = parent  # type: ignore[assignment]
        obj.properties.update(properties)
        return obj

    def new_function(
        self,
        name: str,
        *,
        parent: Obj | None | object = object,
        prototype: Obj | None = None,
        uid: object = object,
    ) -> Obj:
        """Create and return a new constructor function.

        The `parent` default of `object` inherits from ``Function.prototype``.
        A new ``prototype`` object inheriting from ``Object.prototype`` is created unless one is given.
        """
        function = Obj(self, uid)
        self._callables.add(function)
        function.parent = self.intrinsics["Function.prototype"] if parent is object else parent  # type: ignore[assignment]
        function.properties.define("name", name, configurable=True)
        if prototype is None:
            prototype = self.new_object()
        prototype.properties.define("constructor", function, writable=True, configurable=True)
        function.properties.define("prototype", prototype, writable=True)
        return function

    def new_class(
        self,
        name: str,
        base: Obj | None = None,
        *,
        statics: Mapping[PropertyKey, object] = {},  # noqa: B006
    ) -> Obj:
        """Create and return a new class, optionally derived from `base`.

        A derived class inherits the static properties of `base`, and its instances inherit from instances of `base`.
        Static properties are assigned as plain properties of the class.

        Example::

            >>> Vector = realm.new_class("Vector", realm["Array"])
            >>> Vector.parent is realm["Array"]
            True
            >>> Vector["prototype"].parent is realm["Array.prototype"]
            True
            >>> crossrealm.type_of(Vector.construct())
            'Array'
        """
        if base is None:
            cls = self.new_function(name)
        else:
            if not base.callable:
                msg = f"Class extends value {base!r} is not a constructor"
                raise TypeError(msg)
            cls = self.new_function(name, parent=base)
            base_prototype = base["prototype"]
            cls["prototype"].parent = base_prototype if isinstance(base_prototype, Obj) else None
        cls.properties.update(statics)
        return cls

    def construct(self, constructor: Obj) -> Obj:
        """Return a new instance of `constructor`.

        The instance inherits from ``constructor["prototype"]``, or from ``Object.prototype`` if that is not an object.

        Example::

            >>> date = realm.construct(realm["Date"])
            >>> date.parent is realm["Date.prototype"]
            True
            >>> date["constructor"] is realm["Date"]
            True
        """
        if not constructor.callable:
            msg = f"{constructor!r} is not a constructor"
            raise TypeError(msg)
        prototype = constructor["prototype"]
        if not isinstance(prototype, Obj):
            prototype = constructor.realm.intrinsics["Object.prototype"]
        return self.new_object(prototype)

    def define_builtins(self, pairs: Iterable[tuple[Obj, str]]) -> None:
        """Register objects of this realm as built-ins of the given kind names.

        See :any:`crossrealm.marker.install_default_markers`.
        """
        crossrealm.marker.install_default_markers(self, pairs)
