"""Configuration dataclasses for flag declaration files."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List


class DeclaredKind(str, Enum):
    """Value kinds accepted in the ``type`` key of a ``[[flag]]`` entry."""

    STRING = "string"
    INT = "int"
    INT64 = "int64"
    UINT = "uint"
    UINT64 = "uint64"
    FLOAT64 = "float64"
    BOOL = "bool"


@dataclass
class FlagDeclaration:
    """One ``[[flag]]`` table: identity, environment fallback and default."""

    name: str = ""
    type: DeclaredKind = DeclaredKind.STRING
    env_vars: List[str] = field(default_factory=list)
    default: Any = None
    usage: str = ""
    aliases: List[str] = field(default_factory=list)
    hidden: bool = False
    default_text: str = ""


@dataclass
class FlagsConfig:
    """Top-level configuration: the program name and its declared flags."""

    program: str = "flagbind"
    flags: List[FlagDeclaration] = field(default_factory=list)
