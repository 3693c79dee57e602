class ShapefileException(Exception):
    """An exception to handle shapefile specific problems."""


class FormatError(ShapefileException):
    """A file does not have the layout of a .shp or .dbf file
    (bad magic number, version, shape type or missing terminator)."""


class TruncatedRecordError(ShapefileException):
    """A record extends past the end of the available data."""


class CorruptIndexError(ShapefileException):
    """The part/point index structure of a geometry record is invalid."""


class EncodingError(ShapefileException):
    """The field layout of a .dbf file is inconsistent."""


class RecordCountMismatchError(ShapefileException):
    """The .shp and .dbf files of a shapefile hold a different number of records."""


class IndexOutOfRange(ShapefileException, IndexError):
    pass
