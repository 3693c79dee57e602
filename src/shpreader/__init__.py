"""
shpreader
Reads the geometry (.shp) and attributes (.dbf) of ESRI Shapefiles.
Compatible with Python versions >=3.9
"""

from __future__ import annotations

import logging

from .__version__ import __version__
from .attribute_reader import AttributeRecord, AttributeTableReader, FieldDescriptor
from .constants import (
    MULTIPATCH,
    MULTIPOINT,
    MULTIPOINTM,
    MULTIPOINTZ,
    NULL,
    POINT,
    POINTM,
    POINTZ,
    POLYGON,
    POLYGONM,
    POLYGONZ,
    POLYLINE,
    POLYLINEM,
    POLYLINEZ,
    SHAPETYPE_LOOKUP,
)
from .exceptions import (
    CorruptIndexError,
    EncodingError,
    FormatError,
    IndexOutOfRange,
    RecordCountMismatchError,
    ShapefileException,
    TruncatedRecordError,
)
from .geometry_reader import ShapeGeometryReader
from .helpers import dbf_path_for, fsdecode_if_pathlike
from .shapefile import ShapeFile
from .shapes import ShapeRecord
from .types import (
    FIELD_TYPE_ALIASES,
    BBox,
    BinaryFileT,
    FieldType,
    FieldTypeT,
    MBox,
    Part,
    Parts,
    Point2D,
    Point3D,
    RecordValue,
    ZBox,
)

__all__ = [
    "__version__",
    "NULL",
    "POINT",
    "POLYLINE",
    "POLYGON",
    "MULTIPOINT",
    "POINTZ",
    "POLYLINEZ",
    "POLYGONZ",
    "MULTIPOINTZ",
    "POINTM",
    "POLYLINEM",
    "POLYGONM",
    "MULTIPOINTM",
    "MULTIPATCH",
    "SHAPETYPE_LOOKUP",
    "ShapeFile",
    "ShapeGeometryReader",
    "ShapeRecord",
    "AttributeTableReader",
    "AttributeRecord",
    "FieldDescriptor",
    "dbf_path_for",
    "fsdecode_if_pathlike",
    "Point2D",
    "Point3D",
    "Part",
    "Parts",
    "BBox",
    "MBox",
    "ZBox",
    "BinaryFileT",
    "FieldTypeT",
    "FieldType",
    "FIELD_TYPE_ALIASES",
    "RecordValue",
    "ShapefileException",
    "FormatError",
    "TruncatedRecordError",
    "CorruptIndexError",
    "EncodingError",
    "RecordCountMismatchError",
    "IndexOutOfRange",
]

logger = logging.getLogger(__name__)
