from __future__ import annotations

from collections.abc import Sequence
from struct import unpack
from typing import NamedTuple, Optional, cast

from .constants import (
    MULTIPATCH,
    MultiPatch_shapeTypes,
    MultiPoint_shapeTypes,
    NULL,
    POINTZ,
    Point_shapeTypes,
    Polygon_shapeTypes,
    Polyline_shapeTypes,
    SHAPETYPE_LOOKUP,
    _HasZ_shapeTypes,
)
from .exceptions import CorruptIndexError, FormatError
from .helpers import read_exact
from .types import BBox, Part, Parts, Point2D, Point3D, ReadableBinStream, ZBox


class ShapeRecord(NamedTuple):
    """The geometry of one record of a .shp file.

    Every shape type except the "Null" type contains points. Points are
    grouped into parts: a polygon ring or a polyline strand per part,
    a single part for point and multipoint records, and no parts for
    Null records. Points are (x, y, z) tuples, z being 0.0 for shape
    types without elevation. Ring closure is kept as stored in the file.
    """

    oid: int
    shapeType: int
    bbox: Optional[BBox]
    parts: Parts
    zbox: Optional[ZBox] = None

    @property
    def shapeTypeName(self) -> str:
        return SHAPETYPE_LOOKUP[self.shapeType]

    @property
    def points(self) -> tuple[Point3D, ...]:
        """All points of the record as one flat sequence."""
        return tuple(point for part in self.parts for point in part)

    @property
    def numPoints(self) -> int:
        return sum(len(part) for part in self.parts)

    @property
    def partIndices(self) -> tuple[int, ...]:
        """The index of the first point of each part within `points`."""
        indices = []
        start = 0
        for part in self.parts:
            indices.append(start)
            start += len(part)
        return tuple(indices)

    def __repr__(self) -> str:
        return f"ShapeRecord #{self.oid}: {self.shapeTypeName} ({len(self.parts)} parts)"


# Need unused arguments to keep the same call signature for
# different implementations of from_byte_stream


class NullShape:
    @staticmethod
    def from_byte_stream(
        shapeType: int,
        b_io: ReadableBinStream,
        oid: int,
        where: str,
    ) -> ShapeRecord:
        return ShapeRecord(oid=oid, shapeType=NULL, bbox=None, parts=())


class Point:
    """Point, PointM and PointZ records. M values are not read."""

    @staticmethod
    def _x_y_from_byte_stream(b_io: ReadableBinStream, where: str) -> Point2D:
        x, y = unpack("<2d", read_exact(b_io, 16, "point", where))
        return x, y

    @staticmethod
    def _read_single_point_z_from_byte_stream(
        b_io: ReadableBinStream, where: str
    ) -> float:
        (z,) = unpack("<d", read_exact(b_io, 8, "elevation value", where))
        return cast(float, z)

    @classmethod
    def from_byte_stream(
        cls,
        shapeType: int,
        b_io: ReadableBinStream,
        oid: int,
        where: str,
    ) -> ShapeRecord:
        x, y = cls._x_y_from_byte_stream(b_io, where)
        z = 0.0
        zbox = None
        if shapeType == POINTZ:
            z = cls._read_single_point_z_from_byte_stream(b_io, where)
            zbox = (z, z)
        # create bounding box for Point by duplicating coordinates
        return ShapeRecord(
            oid=oid,
            shapeType=shapeType,
            bbox=(x, y, x, y),
            parts=(((x, y, z),),),
            zbox=zbox,
        )


class MultiPoint:
    """MultiPoint records, and the base for every shape type that
    stores its own bounding box and a point count."""

    @staticmethod
    def _read_bbox_from_byte_stream(b_io: ReadableBinStream, where: str) -> BBox:
        return cast(BBox, unpack("<4d", read_exact(b_io, 32, "bounding box", where)))

    @staticmethod
    def _read_npoints_from_byte_stream(b_io: ReadableBinStream, where: str) -> int:
        (nPoints,) = unpack("<i", read_exact(b_io, 4, "point count", where))
        if nPoints < 0:
            raise CorruptIndexError(f"{where}: negative point count {nPoints}")
        return cast(int, nPoints)

    @staticmethod
    def _read_points_from_byte_stream(
        b_io: ReadableBinStream, nPoints: int, where: str
    ) -> list[Point2D]:
        flat = unpack(f"<{2 * nPoints}d", read_exact(b_io, 16 * nPoints, "points", where))
        return list(zip(*(iter(flat),) * 2))

    @staticmethod
    def _read_zs_from_byte_stream(
        b_io: ReadableBinStream, nPoints: int, where: str
    ) -> tuple[ZBox, tuple[float, ...]]:
        zbox = cast(ZBox, unpack("<2d", read_exact(b_io, 16, "elevation range", where)))
        zs = unpack(f"<{nPoints}d", read_exact(b_io, 8 * nPoints, "elevation values", where))
        return zbox, zs

    @classmethod
    def _read_points_with_z(
        cls,
        shapeType: int,
        b_io: ReadableBinStream,
        nPoints: int,
        where: str,
    ) -> tuple[list[Point3D], ZBox | None]:
        """Reads the flat x, y array and, for the Z shape types, merges
        the trailing z array into it positionally. M values that may
        follow are left unread."""
        xys = cls._read_points_from_byte_stream(b_io, nPoints, where)
        if shapeType not in _HasZ_shapeTypes:
            return [(x, y, 0.0) for x, y in xys], None
        zbox, zs = cls._read_zs_from_byte_stream(b_io, nPoints, where)
        return [(x, y, z) for (x, y), z in zip(xys, zs)], zbox

    @classmethod
    def from_byte_stream(
        cls,
        shapeType: int,
        b_io: ReadableBinStream,
        oid: int,
        where: str,
    ) -> ShapeRecord:
        bbox = cls._read_bbox_from_byte_stream(b_io, where)
        nPoints = cls._read_npoints_from_byte_stream(b_io, where)
        points, zbox = cls._read_points_with_z(shapeType, b_io, nPoints, where)
        parts: Parts = (tuple(points),) if points else ()
        return ShapeRecord(
            oid=oid, shapeType=shapeType, bbox=bbox, parts=parts, zbox=zbox
        )


def split_parts(
    points: Sequence[Point3D], part_indices: Sequence[int], where: str
) -> Parts:
    """Splits a flat point array into parts at the given start indices.

    The first part must start at index 0, start indices must be
    strictly increasing and within the point array, so every part
    holds at least one point.
    """
    nPoints = len(points)
    if not part_indices:
        if nPoints:
            raise CorruptIndexError(f"{where}: {nPoints} points but no parts")
        return ()
    if part_indices[0] != 0:
        raise CorruptIndexError(
            f"{where}: first part starts at point {part_indices[0]}, expected 0"
        )
    previous = -1
    for k, start in enumerate(part_indices):
        if start <= previous:
            raise CorruptIndexError(
                f"{where}: part {k} starts at point {start}, "
                f"not after the previous part start {previous}"
            )
        if start >= nPoints:
            raise CorruptIndexError(
                f"{where}: part {k} starts at point {start}, "
                f"but the record only has {nPoints} points"
            )
        previous = start

    ends = list(part_indices[1:]) + [nPoints]
    parts: list[Part] = [
        tuple(points[start:end]) for start, end in zip(part_indices, ends)
    ]
    return tuple(parts)


class Polyline(MultiPoint):
    """PolyLine, Polygon and MultiPatch records, with or without Z or M."""

    @staticmethod
    def _read_nparts_from_byte_stream(b_io: ReadableBinStream, where: str) -> int:
        (nParts,) = unpack("<i", read_exact(b_io, 4, "part count", where))
        if nParts < 0:
            raise CorruptIndexError(f"{where}: negative part count {nParts}")
        return cast(int, nParts)

    @staticmethod
    def _read_parts_from_byte_stream(
        b_io: ReadableBinStream, nParts: int, where: str
    ) -> tuple[int, ...]:
        return unpack(f"<{nParts}i", read_exact(b_io, 4 * nParts, "part indices", where))

    @staticmethod
    def _skip_part_types_in_byte_stream(
        b_io: ReadableBinStream, nParts: int, where: str
    ) -> None:
        read_exact(b_io, 4 * nParts, "part types", where)

    @classmethod
    def from_byte_stream(
        cls,
        shapeType: int,
        b_io: ReadableBinStream,
        oid: int,
        where: str,
    ) -> ShapeRecord:
        bbox = cls._read_bbox_from_byte_stream(b_io, where)
        nParts = cls._read_nparts_from_byte_stream(b_io, where)
        nPoints = cls._read_npoints_from_byte_stream(b_io, where)
        part_indices = cls._read_parts_from_byte_stream(b_io, nParts, where)
        if shapeType in MultiPatch_shapeTypes:
            cls._skip_part_types_in_byte_stream(b_io, nParts, where)
        points, zbox = cls._read_points_with_z(shapeType, b_io, nPoints, where)
        return ShapeRecord(
            oid=oid,
            shapeType=shapeType,
            bbox=bbox,
            parts=split_parts(points, part_indices, where),
            zbox=zbox,
        )


SHAPE_CLASS_FROM_SHAPETYPE: dict[int, type[NullShape | Point | MultiPoint]] = {
    NULL: NullShape,
    MULTIPATCH: Polyline,
}
for _shapeType in Point_shapeTypes:
    SHAPE_CLASS_FROM_SHAPETYPE[_shapeType] = Point
for _shapeType in MultiPoint_shapeTypes:
    SHAPE_CLASS_FROM_SHAPETYPE[_shapeType] = MultiPoint
for _shapeType in Polyline_shapeTypes | Polygon_shapeTypes:
    SHAPE_CLASS_FROM_SHAPETYPE[_shapeType] = Polyline


def shape_from_byte_stream(
    b_io: ReadableBinStream, oid: int, where: str
) -> ShapeRecord:
    """Decodes the content of one .shp record. The shape type stored in
    the record decides the layout, it may differ from the file's shape
    type for Null records."""
    (shapeType,) = unpack("<i", read_exact(b_io, 4, "shape type", where))
    try:
        ShapeClass = SHAPE_CLASS_FROM_SHAPETYPE[shapeType]
    except KeyError:
        raise FormatError(f"{where}: unknown shape type {shapeType}")
    return ShapeClass.from_byte_stream(shapeType, b_io, oid, where)
