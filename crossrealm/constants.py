"""Special constants and sentinel values."""

from __future__ import annotations

from typing import Final

from sentinel_value import sentinel

BUILTIN: Final = sentinel("BUILTIN", repr="Symbol.builtin")
"""The well-known marker key used by objects to declare their built-in kind.

This object is unique per process, so every :any:`Realm` shares the same key.
"""

UNDEFINED: Final = sentinel("UNDEFINED", repr="undefined")
"""The value of a missing property.  Assign this to :any:`BUILTIN` to mask a built-in."""

KIND_SLOT: Final = sentinel("KIND_SLOT", repr="[[Builtin]]")
"""Private property key holding the kind name read by the default marker."""
