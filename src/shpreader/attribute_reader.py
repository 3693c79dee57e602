from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from datetime import date
from struct import Struct, unpack
from typing import Any, NamedTuple, Optional, SupportsIndex, overload

from . import constants
from .constants import (
    DBF_DELETED_FLAG,
    DBF_FIELD_DESCRIPTOR_LENGTH,
    DBF_FIELD_TERMINATOR,
    DBF_HEADER_LENGTH,
)
from .exceptions import (
    EncodingError,
    FormatError,
    IndexOutOfRange,
    TruncatedRecordError,
)
from .helpers import read_all_bytes, source_name
from .types import FIELD_TYPE_ALIASES, BinaryFileT, FieldType, FieldTypeT, RecordValue

logger = logging.getLogger(__name__)


class FieldDescriptor(NamedTuple):
    name: str
    field_type: FieldTypeT
    size: int
    decimal: int

    def parse(self, value: str) -> Optional[RecordValue]:
        """
        Converts a string value of this field, as returned by the
        AttributeTableReader, to a Python value: int or float for
        numeric fields, date for date fields, bool for logical fields
        and str otherwise. Missing values give None.
        """
        if self.field_type in (FieldType.N, FieldType.F):
            value = value.replace("*", "")  # QGIS NULL is all '*' chars
            if value == "":
                return None
            if self.decimal or self.field_type == FieldType.F:
                try:
                    return float(value)
                except ValueError:
                    # not parseable as float, set to None
                    return None
            try:
                # first try to force directly to int.
                # forcing a large int to float and back to int
                # will lose information and result in wrong nr.
                return int(value)
            except ValueError:
                # forcing directly to int failed, so was probably a float.
                try:
                    return int(float(value))
                except ValueError:
                    return None
        if self.field_type == FieldType.D:
            # dbf date field has no official null value
            # but can check for all spaces, or all 0s (QGIS null)
            if not value.replace("0", ""):
                return None
            try:
                return date(int(value[:4]), int(value[4:6]), int(value[6:8]))
            except ValueError:
                # if invalid date, just return the string
                return value
        if self.field_type == FieldType.L:
            # space means missing or not yet set
            if value in ("", "?"):
                return None
            if value in ("Y", "y", "T", "t", "1"):
                return True
            if value in ("N", "n", "F", "f", "0"):
                return False
            return None
        return value

    def __repr__(self) -> str:
        return f'FieldDescriptor(name="{self.name}", field_type=FieldType.{self.field_type}, size={self.size}, decimal={self.decimal})'


class AttributeRecord(tuple[str, ...]):
    """
    One row of a dbf table. The values are strings in field order. In
    addition to the tuple interface, values can be retrieved using the
    field's name. For example if the dbf contains a field ID at
    position 0, the ID can be retrieved with r[0] or r['ID'].

    Records marked as deleted in the dbf file are kept, with deleted set
    to True.
    """

    _field_positions: dict[str, int]
    _oid: int
    _deleted: bool

    def __new__(
        cls,
        field_positions: dict[str, int],
        values: Iterable[str],
        oid: int = -1,
        deleted: bool = False,
    ) -> AttributeRecord:
        self = super().__new__(cls, values)
        self._field_positions = field_positions
        self._oid = oid
        self._deleted = deleted
        return self

    @overload
    def __getitem__(self, i: SupportsIndex) -> str: ...
    @overload
    def __getitem__(self, s: slice) -> tuple[str, ...]: ...
    @overload
    def __getitem__(self, s: str) -> str: ...
    def __getitem__(self, item: SupportsIndex | slice | str) -> str | tuple[str, ...]:
        if isinstance(item, str):
            try:
                index = self._field_positions[item]
            except KeyError:
                raise KeyError(f'"{item}" is not a field name')
            return tuple.__getitem__(self, index)
        return tuple.__getitem__(self, item)

    @property
    def oid(self) -> int:
        """The index position of the record in the original dbf file"""
        return self._oid

    @property
    def deleted(self) -> bool:
        return self._deleted

    def as_dict(
        self, fields: Sequence[FieldDescriptor] | None = None
    ) -> dict[str, Any]:
        """
        Returns this record as a dictionary using the field names as keys.
        If the field descriptors are given the values are converted with
        FieldDescriptor.parse, otherwise they stay strings.
        """
        if fields is None:
            return {f: self[i] for f, i in self._field_positions.items()}
        return {field.name: field.parse(value) for field, value in zip(fields, self)}

    def __repr__(self) -> str:
        flag = " (deleted)" if self._deleted else ""
        return f"AttributeRecord #{self._oid}{flag}: {list(self)}"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, AttributeRecord):
            if self._deleted != other._deleted:
                return False
        return tuple.__eq__(self, other)

    def __hash__(self) -> int:
        return tuple.__hash__(self)


class AttributeTableReader:
    """Reads the field descriptors and records of a .dbf file.

    The "dbf" argument is the path of the .dbf file, or a binary
    file-like object. The whole table is read when the reader is created.
    Values are kept as strings, decoded with the given encoding;
    FieldDescriptor.parse converts them to Python values on request.

    Xbase-related code borrows heavily from ActiveState Python Cookbook
    Recipe 362715 by Raymond Hettinger
    """

    def __init__(
        self,
        dbf: BinaryFileT,
        /,
        *,
        encoding: str = "utf-8",
        encodingErrors: str = "strict",
    ):
        self.source = source_name(dbf)
        self.encoding = encoding
        self.encodingErrors = encodingErrors
        data = read_all_bytes(dbf)
        self.__dbfHeader(data)
        self.records: tuple[AttributeRecord, ...] = tuple(self.__records(data))
        logger.debug(
            "Read %d records with %d fields from %s",
            len(self.records),
            len(self.fields),
            self.source,
        )

    @classmethod
    def load(
        cls,
        dbf: BinaryFileT,
        *,
        encoding: str = "utf-8",
        encodingErrors: str = "strict",
    ) -> tuple[tuple[FieldDescriptor, ...], tuple[AttributeRecord, ...]]:
        """Reads and returns the field descriptors and records of a .dbf file."""
        reader = cls(dbf, encoding=encoding, encodingErrors=encodingErrors)
        return reader.fields, reader.records

    def __str__(self) -> str:
        return f"{len(self)} records ({len(self.fields)} fields) in {self.source}"

    def __len__(self) -> int:
        """Returns the number of records."""
        return len(self.records)

    def __iter__(self) -> Iterator[AttributeRecord]:
        return iter(self.records)

    def __dbfHeader(self, data: bytes) -> None:
        """Reads a dbf header and its field descriptors."""
        if len(data) < DBF_HEADER_LENGTH:
            raise FormatError(
                f"{self.source}: file is {len(data)} bytes long, shorter than "
                f"the {DBF_HEADER_LENGTH} byte dbf header"
            )
        # read relevant header parts
        self.numRecords, self.__dbfHdrLength, self.__recordLength = unpack(
            "<xxxxLHH20x", data[:DBF_HEADER_LENGTH]
        )

        # read fields until the terminator, which must be within the header
        header_end = min(self.__dbfHdrLength, len(data))
        fields: list[FieldDescriptor] = []
        pos = DBF_HEADER_LENGTH
        terminated = False
        while pos < header_end:
            if data[pos] == DBF_FIELD_TERMINATOR:
                terminated = True
                break
            if pos + DBF_FIELD_DESCRIPTOR_LENGTH > header_end:
                break
            fields.append(
                self.__fieldDescriptor(data[pos : pos + DBF_FIELD_DESCRIPTOR_LENGTH])
            )
            pos += DBF_FIELD_DESCRIPTOR_LENGTH
        if not terminated:
            raise FormatError(
                f"{self.source}: dbf header lacks the field descriptor terminator "
                f"within its declared length of {self.__dbfHdrLength} bytes"
            )
        self.fields: tuple[FieldDescriptor, ...] = tuple(fields)

        # the deletion flag takes the first byte of every record
        fieldsLength = 1 + sum(field.size for field in self.fields)
        if fieldsLength != self.__recordLength:
            raise EncodingError(
                f"{self.source}: field widths add up to a record length of "
                f"{fieldsLength} bytes, but the header declares {self.__recordLength}"
            )

        # store all field positions for easy lookups, keeping the first
        # of any repeated names
        self.__fieldLookup: dict[str, int] = {}
        for i, field in enumerate(self.fields):
            self.__fieldLookup.setdefault(field.name, i)

        fmt = "<c" + "".join(f"{field.size}s" for field in self.fields)
        self.__recStruct = Struct(fmt)

    def __fieldDescriptor(self, entry: bytes) -> FieldDescriptor:
        encoded_field_tuple: tuple[bytes, bytes, int, int] = unpack(
            "<11sc4xBB14x", entry
        )
        encoded_name, encoded_type_char, size, decimal = encoded_field_tuple

        if b"\x00" in encoded_name:
            idx = encoded_name.index(b"\x00")
        else:
            idx = len(encoded_name)
        try:
            name = encoded_name[:idx].decode(self.encoding, self.encodingErrors)
        except UnicodeDecodeError as e:
            raise EncodingError(
                f"{self.source}: field name {encoded_name[:idx]!r} is not valid "
                f"{self.encoding} text"
            ) from e
        name = name.lstrip()

        try:
            field_type = FIELD_TYPE_ALIASES[encoded_type_char]
        except KeyError:
            raise EncodingError(
                f"{self.source}: field {name!r} has unsupported type {encoded_type_char!r}"
            )
        if size <= 0:
            raise EncodingError(
                f"{self.source}: field {name!r} declares a width of {size} bytes"
            )
        return FieldDescriptor(name, field_type, size, decimal)

    def __records(self, data: bytes) -> Iterator[AttributeRecord]:
        recSize = self.__recordLength
        available = len(data) - self.__dbfHdrLength
        if available < self.numRecords * recSize:
            raise TruncatedRecordError(
                f"{self.source}: header declares {self.numRecords} records of "
                f"{recSize} bytes, but only {max(available, 0)} bytes of record "
                "data are available"
            )
        trailing = available - self.numRecords * recSize
        # a single 0x1A end of file marker is expected after the records
        if trailing > 1 and constants.VERBOSE:
            logger.warning(
                "%s: ignoring %d bytes after the last record", self.source, trailing
            )

        pos = self.__dbfHdrLength
        for oid in range(self.numRecords):
            recordContents = self.__recStruct.unpack(data[pos : pos + recSize])
            deleted = recordContents[0] == DBF_DELETED_FLAG
            values = [
                self.__fieldValue(oid, field, value)
                for field, value in zip(self.fields, recordContents[1:])
            ]
            yield AttributeRecord(self.__fieldLookup, values, oid, deleted)
            pos += recSize

    def __fieldValue(self, oid: int, field: FieldDescriptor, value: bytes) -> str:
        """Decodes the bytes of one field to a string."""
        try:
            text = value.decode(self.encoding, self.encodingErrors)
        except UnicodeDecodeError as e:
            raise EncodingError(
                f"{self.source}: record {oid} field {field.name!r} is not valid "
                f"{self.encoding} text"
            ) from e
        if field.field_type is FieldType.C or field.field_type is FieldType.M:
            # remove space and null-padding at end of strings
            return text.rstrip(" \x00")
        # numbers are right justified and padded with blanks,
        # dates and logicals are fixed width
        return text.strip(" \x00")

    def __restrictRecordIndex(self, i: int) -> int:
        if not 0 <= i < len(self.records):
            raise IndexOutOfRange(
                f"Record index: {i} out of range. The table has {len(self.records)} records."
            )
        return i

    def __restrictFieldIndex(self, i: int) -> int:
        if not 0 <= i < len(self.fields):
            raise IndexOutOfRange(
                f"Field index: {i} out of range. The table has {len(self.fields)} fields."
            )
        return i

    def fieldNames(self) -> list[str]:
        return [field.name for field in self.fields]

    def indexOfFieldName(self, name: str) -> int:
        """Returns the position of the first field called name, matched
        case-sensitively, or -1 if there is no such field."""
        return self.__fieldLookup.get(name, -1)

    def record(self, i: int) -> AttributeRecord:
        return self.records[self.__restrictRecordIndex(i)]

    def fieldsAtRecord(self, i: int) -> list[str]:
        """Returns the values of every field of record i."""
        return list(self.record(i))

    def recordsAtFieldIndex(self, i: int) -> list[str]:
        """Returns the values of field i across all records."""
        i = self.__restrictFieldIndex(i)
        return [record[i] for record in self.records]

    def fieldValue(self, recordIndex: int, fieldIndex: int) -> str:
        return self.record(recordIndex)[self.__restrictFieldIndex(fieldIndex)]
