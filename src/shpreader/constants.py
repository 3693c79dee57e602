from __future__ import annotations

# Module settings
VERBOSE = True

# .shp file header
SHP_FILE_CODE = 9994
SHP_VERSION = 1000
SHP_HEADER_LENGTH = 100
SHP_RECORD_HEADER_LENGTH = 8

# .dbf file header
DBF_HEADER_LENGTH = 32
DBF_FIELD_DESCRIPTOR_LENGTH = 32
DBF_FIELD_TERMINATOR = 0x0D
DBF_DELETED_FLAG = b"*"

# Constants for shape types
NULL = 0
POINT = 1
POLYLINE = 3
POLYGON = 5
MULTIPOINT = 8
POINTZ = 11
POLYLINEZ = 13
POLYGONZ = 15
MULTIPOINTZ = 18
POINTM = 21
POLYLINEM = 23
POLYGONM = 25
MULTIPOINTM = 28
MULTIPATCH = 31

SHAPETYPE_LOOKUP = {
    NULL: "NULL",
    POINT: "POINT",
    POLYLINE: "POLYLINE",
    POLYGON: "POLYGON",
    MULTIPOINT: "MULTIPOINT",
    POINTZ: "POINTZ",
    POLYLINEZ: "POLYLINEZ",
    POLYGONZ: "POLYGONZ",
    MULTIPOINTZ: "MULTIPOINTZ",
    POINTM: "POINTM",
    POLYLINEM: "POLYLINEM",
    POLYGONM: "POLYGONM",
    MULTIPOINTM: "MULTIPOINTM",
    MULTIPATCH: "MULTIPATCH",
}


Point_shapeTypes = frozenset([POINT, POINTM, POINTZ])
MultiPoint_shapeTypes = frozenset([MULTIPOINT, MULTIPOINTM, MULTIPOINTZ])
Polyline_shapeTypes = frozenset([POLYLINE, POLYLINEM, POLYLINEZ])
Polygon_shapeTypes = frozenset([POLYGON, POLYGONM, POLYGONZ])
MultiPatch_shapeTypes = frozenset([MULTIPATCH])

# Not a PointZ
_HasZ_shapeTypes = frozenset([POLYLINEZ, POLYGONZ, MULTIPOINTZ, MULTIPATCH])

NODATA = -10e38  # as per the ESRI shapefile spec, only used for m-values.
