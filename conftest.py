# ruff: noqa: D100 D103 ANN401
from __future__ import annotations

from typing import Any

import pytest

import crossrealm


@pytest.fixture(autouse=True)
def _add_realm(doctest_namespace: dict[str, Any]) -> None:
    """Add a fresh realm to all doctests."""
    doctest_namespace.update(
        {
            "crossrealm": crossrealm,
            "realm": crossrealm.Realm(),
        }
    )
