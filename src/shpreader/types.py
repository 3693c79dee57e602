from __future__ import annotations

from datetime import date
from os import PathLike
from typing import (
    IO,
    Any,
    Final,
    Literal,
    Optional,
    Protocol,
    TypeVar,
    Union,
)

## Custom type variables

T = TypeVar("T")
Point2D = tuple[float, float]
Point3D = tuple[float, float, float]

Part = tuple[Point3D, ...]
Parts = tuple[Part, ...]

BBox = tuple[float, float, float, float]
MBox = tuple[Optional[float], Optional[float]]
ZBox = tuple[float, float]


class ReadableBinStream(Protocol):
    def read(self, size: int = -1) -> bytes: ...


# File name, file object or anything with a read() method that returns bytes.
BinaryFileT = Union[str, PathLike[Any], IO[bytes], ReadableBinStream]

FieldTypeT = Literal["C", "D", "F", "L", "M", "N"]


# https://en.wikipedia.org/wiki/.dbf#Database_records
class FieldType:
    """A bare bones 'enum', as the enum library noticeably slows performance."""

    C: Final = "C"  # "Character"  # (str)
    D: Final = "D"  # "Date"
    F: Final = "F"  # "Floating point"
    L: Final = "L"  # "Logical"  # (bool)
    M: Final = "M"  # "Memo"  # Legacy. (10 digit str, starting block in an .dbt file)
    N: Final = "N"  # "Numeric"  # (int)
    __members__: set[FieldTypeT] = {
        "C",
        "D",
        "F",
        "L",
        "M",
        "N",
    }


FIELD_TYPE_ALIASES: dict[str | bytes, FieldTypeT] = {}
for c in FieldType.__members__:
    FIELD_TYPE_ALIASES[c.upper()] = c
    FIELD_TYPE_ALIASES[c.lower()] = c
    FIELD_TYPE_ALIASES[c.encode("ascii").lower()] = c
    FIELD_TYPE_ALIASES[c.encode("ascii").upper()] = c


RecordValueNotDate = Union[bool, int, float, str]

# A typed value parsed from a dbf field, i.e. L, N, M, F, C, or D types
RecordValue = Union[RecordValueNotDate, date]
