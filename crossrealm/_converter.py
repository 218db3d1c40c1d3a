from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping
from typing import Any, get_args, get_origin

import cattrs

import crossrealm.intrinsics


def _is_defaultdict_type(type_hint: object) -> bool:
    """Return True if `type_hint` is a defaultdict type-hint."""
    return get_origin(type_hint) is defaultdict


def _get_converter() -> cattrs.Converter:
    """Return a cattrs converter configured for crossrealm.

    This converter is only for structuring: realm tables restored from pickles and externally supplied kind tables.
    """
    converter = cattrs.Converter()

    def _structure_defaultdict(obj: Mapping[Any, Any], type_hint: type[Any]) -> defaultdict[Any, Any]:
        """Structure a mapping into a defaultdict whose factory is the value type."""
        key_type, value_type = get_args(type_hint)
        return defaultdict(
            get_origin(value_type) or value_type,
            ((converter.structure(key, key_type), converter.structure(value, value_type)) for key, value in obj.items()),
        )

    def _structure_kind_entry(obj: Any, type_hint: type[Any]) -> Any:
        """Structure a kind table row from an existing row, a mapping or an (intrinsic, kind) pair.

        Values are passed to the row as-is so that its validators reject anything which is not a string.
        """
        if isinstance(obj, type_hint):
            return obj
        if isinstance(obj, Mapping):
            return type_hint(**obj)
        intrinsic, kind = obj
        return type_hint(intrinsic, kind)

    converter.register_structure_hook_func(_is_defaultdict_type, _structure_defaultdict)
    converter.register_structure_hook(crossrealm.intrinsics.KindEntry, _structure_kind_entry)

    return converter
