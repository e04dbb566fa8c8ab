"""
Data models for record mocking.

FieldDescriptors describe the schema side of a field; StrategyTokens are the
parsed form of one configuration command typed for that field.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

import numpy as np


class FieldKind(Enum):
    """Semantic type of a schema field, named after the Avro type."""
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    ENUM = "enum"
    UNION = "union"

    # Described by the schema loader but never generated
    NULL = "null"
    BOOLEAN = "boolean"
    BYTES = "bytes"
    RECORD = "record"
    ARRAY = "array"
    MAP = "map"
    FIXED = "fixed"

    @property
    def is_integer(self) -> bool:
        return self in (FieldKind.INT, FieldKind.LONG)

    @property
    def is_decimal(self) -> bool:
        return self in (FieldKind.FLOAT, FieldKind.DOUBLE)


class Strategy(Enum):
    """Named generation policy for a field."""
    RAND = "rand"
    INCR = "incr"
    DATE = "date"
    GAUSS = "gauss"


# Limits of the fixed-width kinds
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1
LONG_MIN = -(2 ** 63)
LONG_MAX = 2 ** 63 - 1
FLOAT_MAX = float(np.finfo(np.float32).max)
DOUBLE_MAX = float(np.finfo(np.float64).max)

DEFAULT_STRING_UPPER = 32
DEFAULT_PRECISION = 2
DEFAULT_SCALE = 1


@dataclass(frozen=True)
class FieldDescriptor:
    """
    One field of the record schema.

    `symbols` is only set for ENUM fields and `members`/`nullable` only for
    UNION fields. Descriptors are built once by the schema loader and shared
    read-only for the whole run.
    """
    name: str
    kind: FieldKind
    symbols: Tuple[str, ...] = ()
    members: Tuple["FieldDescriptor", ...] = ()
    nullable: bool = False

    @property
    def type_name(self) -> str:
        """Type name shown in prompts (e.g. "int", "enum")."""
        return self.kind.value

    @property
    def non_null_members(self) -> List["FieldDescriptor"]:
        """Union members that can actually be generated."""
        return [m for m in self.members if m.kind != FieldKind.NULL]


@dataclass
class StrategyToken:
    """
    Validated form of one strategy command.

    When `explicit_set` is given the bounds are ignored by every generator.
    Otherwise `upper_bound > lower_bound` holds.
    """
    mode: Strategy = Strategy.RAND
    lower_bound: Optional[Union[int, float]] = None
    upper_bound: Optional[Union[int, float]] = None
    scale: int = DEFAULT_SCALE
    precision: int = DEFAULT_PRECISION
    explicit_set: Optional[List[Union[int, str]]] = field(default=None)

    @property
    def has_explicit_set(self) -> bool:
        return self.explicit_set is not None
