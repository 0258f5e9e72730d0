"""Boolean switch sharing the generic flag's resolution rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.flagbind.adapters import BOOL_ADAPTER, Adapter, GenericType
from src.flagbind.generic_flag import GenericFlag
from src.flagbind.value import BoolValue, Destination, GenericValue


@dataclass
class BoolFlag(GenericFlag[bool]):
    """
    A flag that is ``true`` when present without an argument.

    ``--name=false`` and environment literals such as ``0``/``FALSE`` turn it off.
    """

    def _resolve_kind(self) -> Optional[GenericType]:
        return None

    def adapter(self) -> Adapter:
        return BOOL_ADAPTER

    def _new_value(self, destination: Destination[bool], adapter: Adapter) -> GenericValue[bool]:
        return BoolValue(destination, adapter)

    def is_bool_flag(self) -> bool:
        return True

    def takes_value(self) -> bool:
        return False


__all__ = ["BoolFlag"]
