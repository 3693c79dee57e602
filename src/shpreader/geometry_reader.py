from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from struct import unpack
from typing import cast

from . import constants
from .constants import (
    NODATA,
    SHAPETYPE_LOOKUP,
    SHP_FILE_CODE,
    SHP_HEADER_LENGTH,
    SHP_RECORD_HEADER_LENGTH,
    SHP_VERSION,
)
from .exceptions import FormatError, IndexOutOfRange, TruncatedRecordError
from .helpers import read_all_bytes, source_name, unpack_2_int32_be
from .shapes import ShapeRecord, shape_from_byte_stream
from .types import BBox, BinaryFileT, MBox, ZBox

logger = logging.getLogger(__name__)


class ShapeGeometryReader:
    """Reads the geometry records of a .shp file.

    The "shp" argument is the path of the .shp file, or a binary
    file-like object positioned anywhere (it is rewound if seekable).
    The whole file is read and decoded when the reader is created, and
    any file opened by the reader is closed again before the constructor
    returns. After that the reader only holds immutable decoded records.

    Structural problems are raised while loading: FormatError for a bad
    header, TruncatedRecordError when a record runs past the end of the
    data and CorruptIndexError for invalid part indices.
    """

    def __init__(self, shp: BinaryFileT, /):
        self.source = source_name(shp)
        data = read_all_bytes(shp)
        self.__shpHeader(data)
        self.records: tuple[ShapeRecord, ...] = tuple(self.__shapes(data))
        logger.debug(
            "Read %d %s records from %s",
            len(self.records),
            self.shapeTypeName,
            self.source,
        )

    @classmethod
    def load(cls, shp: BinaryFileT) -> tuple[ShapeRecord, ...]:
        """Reads and returns every geometry record of a .shp file."""
        return cls(shp).records

    def __str__(self) -> str:
        return f"{len(self)} shapes (type '{self.shapeTypeName}') in {self.source}"

    def __len__(self) -> int:
        """Returns the number of geometry records."""
        return len(self.records)

    def __iter__(self) -> Iterator[ShapeRecord]:
        return iter(self.records)

    def __getitem__(self, i: int) -> ShapeRecord:
        return self.get(i)

    @property
    def shapeTypeName(self) -> str:
        return SHAPETYPE_LOOKUP[self.shapeType]

    def get(self, i: int) -> ShapeRecord:
        """Returns the geometry record at index i."""
        if not 0 <= i < len(self.records):
            raise IndexOutOfRange(
                f"Shape index: {i} out of range. The shapefile has {len(self.records)} shapes."
            )
        return self.records[i]

    def __shpHeader(self, data: bytes) -> None:
        """Reads the header information from a .shp file."""
        if len(data) < SHP_HEADER_LENGTH:
            raise FormatError(
                f"{self.source}: file is {len(data)} bytes long, shorter than "
                f"the {SHP_HEADER_LENGTH} byte shapefile header"
            )
        fileCode = unpack(">i", data[0:4])[0]
        if fileCode != SHP_FILE_CODE:
            raise FormatError(
                f"{self.source}: file code {fileCode} does not match the "
                f"shapefile magic number {SHP_FILE_CODE}"
            )
        # File length (16-bit word * 2 = bytes)
        self.fileLength: int = unpack(">i", data[24:28])[0] * 2
        self.version, self.shapeType = unpack("<2i", data[28:36])
        if self.version != SHP_VERSION:
            raise FormatError(
                f"{self.source}: unsupported shapefile version {self.version}, "
                f"expected {SHP_VERSION}"
            )
        if self.shapeType not in SHAPETYPE_LOOKUP:
            raise FormatError(
                f"{self.source}: unknown shape type {self.shapeType} in file header"
            )
        # The shapefile's bounding box (lower left, upper right)
        self.bbox = cast(BBox, unpack("<4d", data[36:68]))
        # Elevation
        self.zbox = cast(ZBox, unpack("<2d", data[68:84]))
        # Measure
        self.mbox = cast(
            MBox,
            tuple(
                float(m_bound) if m_bound >= NODATA else None
                for m_bound in unpack("<2d", data[84:100])
            ),
        )

    def __shapes(self, data: bytes) -> Iterator[ShapeRecord]:
        """Iterates the records from the end of the header to the file
        length declared in the header."""
        end = self.fileLength
        # records must end within both the declared length and the data
        if end < len(data) and constants.VERBOSE:
            logger.warning(
                "%s: ignoring %d bytes after the declared file length of %d bytes",
                self.source,
                len(data) - end,
                end,
            )

        oid = 0
        pos = SHP_HEADER_LENGTH
        while pos < end:
            where = f"{self.source} record {oid}"
            if pos + SHP_RECORD_HEADER_LENGTH > min(end, len(data)):
                raise TruncatedRecordError(
                    f"{where}: record header at byte {pos} extends past the end "
                    f"of the file ({min(end, len(data))} bytes)"
                )
            (recNum, recLength) = unpack_2_int32_be(
                data[pos : pos + SHP_RECORD_HEADER_LENGTH]
            )
            if constants.VERBOSE and recNum != oid + 1:
                logger.warning("%s: record number %d out of sequence", where, recNum)

            # Convert from num of 16 bit words, to 8 bit bytes
            recLength_bytes = 2 * recLength
            start = pos + SHP_RECORD_HEADER_LENGTH
            next_shape = start + recLength_bytes
            if recLength < 0 or next_shape > min(end, len(data)):
                raise TruncatedRecordError(
                    f"{where}: declared content length of {recLength_bytes} bytes at "
                    f"byte {start} extends past the end of the file "
                    f"({min(end, len(data))} bytes)"
                )

            # Decoders only see the content of this record
            b_io = io.BytesIO(data[start:next_shape])
            shape = shape_from_byte_stream(b_io, oid, where)

            # The shapefile spec doesn't require the actual content to fill
            # the length given in the record header.
            unread = recLength_bytes - b_io.tell()
            if unread and constants.VERBOSE:
                logger.debug("%s: skipping %d bytes of padding", where, unread)

            yield shape
            pos = next_shape
            oid += 1
