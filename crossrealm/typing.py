"""Common type-hints for crossrealm."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterable, TypeAlias

if TYPE_CHECKING:
    from crossrealm.obj import Obj
else:
    Obj = Any


PropertyKey: TypeAlias = object
"""Property keys are any hashable object: strings, :any:`BUILTIN` or other sentinels."""

MarkerFunc: TypeAlias = Callable[[Obj], object]
"""A computed marker, called with the queried object as its receiver."""

MarkerValue: TypeAlias = "str | MarkerFunc | Any"
"""Raw value stored under :any:`BUILTIN`.

Strings and callables qualify as markers, any other value masks the object.
"""

KindPairs: TypeAlias = Iterable[tuple[Obj, str]]
"""(object, kind_name) pairs for :any:`install_default_markers`."""
