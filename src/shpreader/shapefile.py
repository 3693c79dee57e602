from __future__ import annotations

import logging
from collections.abc import Iterator
from os import PathLike
from typing import Any

from .attribute_reader import AttributeRecord, AttributeTableReader, FieldDescriptor
from .constants import SHAPETYPE_LOOKUP
from .exceptions import RecordCountMismatchError
from .geometric_calculations import bbox_overlap
from .geometry_reader import ShapeGeometryReader
from .helpers import constituent_path, dbf_path_for
from .shapes import ShapeRecord
from .types import BBox, Parts

logger = logging.getLogger(__name__)


class ShapeFile:
    """The geometry and attributes of a shapefile, joined by record index.

    Use ShapeFile.open() with the path of the .shp file (or the path
    without extension). Both the .shp and the .dbf file are read
    completely before open() returns, and a shapefile that can not be
    read completely raises instead of returning. The object is read-only
    and can be shared freely.
    """

    def __init__(
        self, geometry: ShapeGeometryReader, attributes: AttributeTableReader
    ):
        if len(geometry) != len(attributes):
            raise RecordCountMismatchError(
                f"{geometry.source} holds {len(geometry)} shapes but "
                f"{attributes.source} holds {len(attributes)} records"
            )
        self.__geometry = geometry
        self.__attributes = attributes

    @classmethod
    def open(
        cls,
        path: str | PathLike[Any],
        *,
        encoding: str = "utf-8",
        encodingErrors: str = "strict",
    ) -> ShapeFile:
        """Reads the .shp file at path and the .dbf file next to it.
        The extension of path is optional and may be in any case."""
        shp_path = constituent_path(path, "shp")
        dbf_path = dbf_path_for(shp_path)
        logger.debug("Opening shapefile %s with attributes %s", shp_path, dbf_path)
        geometry = ShapeGeometryReader(shp_path)
        attributes = AttributeTableReader(
            dbf_path, encoding=encoding, encodingErrors=encodingErrors
        )
        return cls(geometry, attributes)

    def __str__(self) -> str:
        """
        Use some general info on the shapefile as __str__
        """
        info = [f"ShapeFile {self.__geometry.source}"]
        info.append(f"    {len(self)} shapes (type '{self.shapeTypeName}')")
        info.append(f"    {len(self)} records ({len(self.fields)} fields)")
        return "\n".join(info)

    def __len__(self) -> int:
        """Returns the number of shapes/records in the shapefile."""
        return len(self.__geometry)

    def __iter__(self) -> Iterator[tuple[ShapeRecord, AttributeRecord]]:
        """Iterates through the shapes and records of the shapefile together."""
        return zip(self.__geometry, self.__attributes)

    @property
    def shapeType(self) -> int:
        return self.__geometry.shapeType

    @property
    def shapeTypeName(self) -> str:
        return SHAPETYPE_LOOKUP[self.shapeType]

    @property
    def bbox(self) -> BBox:
        """The bounding box declared in the .shp file header."""
        return self.__geometry.bbox

    @property
    def fields(self) -> tuple[FieldDescriptor, ...]:
        return self.__attributes.fields

    def recordCount(self) -> int:
        return len(self)

    # Geometry

    def shapeAt(self, index: int) -> ShapeRecord:
        return self.__geometry.get(index)

    def shapes(self) -> list[ShapeRecord]:
        """Returns the geometry records of all shapes."""
        return list(self.__geometry)

    def pointsAt(self, index: int) -> Parts:
        """Returns the parts of a shape, each a tuple of (x, y, z) points."""
        return self.shapeAt(index).parts

    def indicesInBBox(self, bbox: BBox) -> list[int]:
        """
        Returns the indices of the shapes whose bounding box overlaps
        bbox, given as (xmin, ymin, xmax, ymax). Null shapes never match.
        """
        return [
            shape.oid
            for shape in self.__geometry
            if shape.bbox is not None and bbox_overlap(bbox, shape.bbox)
        ]

    # Attributes

    def fieldNames(self) -> list[str]:
        return self.__attributes.fieldNames()

    def indexOfField(self, fieldName: str) -> int:
        """Returns the index of a field name, -1 if it can not be found."""
        return self.__attributes.indexOfFieldName(fieldName)

    def recordAt(self, index: int) -> AttributeRecord:
        return self.__attributes.record(index)

    def fieldsAt(self, index: int) -> list[str]:
        """Returns the field values of the record at index."""
        return self.__attributes.fieldsAtRecord(index)

    def allFields(self) -> list[str]:
        """Returns the field values of all records, one record after the other."""
        fields: list[str] = []
        for record in self.__attributes:
            fields.extend(record)
        return fields

    def fieldValue(self, recordIndex: int, fieldIndex: int) -> str:
        return self.__attributes.fieldValue(recordIndex, fieldIndex)

    def recordsAtField(self, fieldIndex: int) -> list[str]:
        """Returns the values of one field across all records."""
        return self.__attributes.recordsAtFieldIndex(fieldIndex)

    def recordsByFieldName(self, fieldName: str) -> list[str] | None:
        """Returns the values of the named field across all records, or
        None if there is no field with that name."""
        index = self.__attributes.indexOfFieldName(fieldName)
        if index > -1:
            return self.__attributes.recordsAtFieldIndex(index)
        return None
