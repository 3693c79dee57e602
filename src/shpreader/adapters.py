"""
Helpers for applications that build their own geometry objects
(curves, polygons) from the raw point data of a ShapeFile.
"""

from __future__ import annotations

from collections.abc import Sequence

from .constants import Polygon_shapeTypes
from .geometric_calculations import is_cw
from .shapefile import ShapeFile
from .shapes import ShapeRecord
from .types import Part, Point3D

# Default distance under which two consecutive points are considered equal
TOLERANCE = 1e-6


def almost_equal(p1: Point3D, p2: Point3D, tolerance: float = TOLERANCE) -> bool:
    return all(abs(a - b) <= tolerance for a, b in zip(p1, p2))


def dedupe_consecutive(
    points: Sequence[Point3D], tolerance: float = TOLERANCE
) -> list[Point3D]:
    """Drops every point that is almost equal to the point before it
    in the input. Curve constructors usually reject zero length segments."""
    return [
        point
        for i, point in enumerate(points)
        if i == 0 or not almost_equal(point, points[i - 1], tolerance)
    ]


def curve_point_lists(
    shape_file: ShapeFile, index: int, tolerance: float = TOLERANCE
) -> list[list[Point3D]]:
    """Returns the parts of a shape with consecutive duplicates removed,
    ready to be turned into one curve per part."""
    return [dedupe_consecutive(part, tolerance) for part in shape_file.pointsAt(index)]


def classify_rings(shape: ShapeRecord) -> tuple[list[Part], list[Part]]:
    """
    Splits the rings of a polygon shape into exterior rings and holes.
    Shapefiles store exterior rings clockwise and holes counter-clockwise.
    Rings with less than three points have no orientation and are
    returned as exteriors.
    """
    if shape.shapeType not in Polygon_shapeTypes:
        raise ValueError(
            f"Rings can only be classified for polygon shapes, got {shape.shapeTypeName}"
        )
    exteriors: list[Part] = []
    holes: list[Part] = []
    for ring in shape.parts:
        if len(ring) < 3 or is_cw(ring):
            exteriors.append(ring)
        else:
            holes.append(ring)
    return exteriors, holes
