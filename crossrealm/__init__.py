"""Classify objects by their built-in kind, reliably across realms."""

from __future__ import annotations

import importlib.metadata

from crossrealm.classify import is_, type_of, typeof
from crossrealm.constants import BUILTIN, UNDEFINED
from crossrealm.marker import Computed, Literal
from crossrealm.obj import Obj
from crossrealm.realm import Realm

__all__ = (
    "BUILTIN",
    "UNDEFINED",
    "Computed",
    "Literal",
    "Obj",
    "Realm",
    "is_",
    "type_of",
    "typeof",
)

try:
    __version__ = importlib.metadata.version("crossrealm")
except importlib.metadata.PackageNotFoundError:
    __version__ = ""
