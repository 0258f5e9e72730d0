"""Environment lookup functions injected into flags."""

from __future__ import annotations

import os
from typing import Callable, Mapping, Optional

LookupEnvFunc = Callable[[str], Optional[str]]


def lookup_env(name: str) -> Optional[str]:
    """Return the process environment value for *name*, or ``None`` when unset."""

    return os.environ.get(name)


def mapping_lookup(mapping: Optional[Mapping[str, str]]) -> LookupEnvFunc:
    """Build a lookup function over a private copy of *mapping*."""

    snapshot = dict(mapping or {})

    def _lookup(name: str) -> Optional[str]:
        return snapshot.get(name)

    return _lookup


def chain_lookups(*lookups: LookupEnvFunc) -> LookupEnvFunc:
    """Consult *lookups* in order and return the first non-empty value."""

    def _lookup(name: str) -> Optional[str]:
        for lookup in lookups:
            value = lookup(name)
            if value:
                return value
        return None

    return _lookup


__all__ = ["LookupEnvFunc", "chain_lookups", "lookup_env", "mapping_lookup"]
