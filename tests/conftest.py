"""
Builders for small .shp and .dbf files, written byte by byte with struct
so each test states exactly what is on disk.
"""

from struct import pack

import pytest

import shpreader


def _bbox(points):
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return min(xs), min(ys), max(xs), max(ys)


def null_content():
    return pack("<i", shpreader.NULL)


def point_content(x, y, z=None, m=None, shape_type=shpreader.POINT):
    content = pack("<i2d", shape_type, x, y)
    if z is not None:
        content += pack("<d", z)
    if m is not None:
        content += pack("<d", m)
    return content


def multipoint_content(points, shape_type=shpreader.MULTIPOINT, m=False):
    content = pack("<i", shape_type)
    content += pack("<4d", *_bbox(points))
    content += pack("<i", len(points))
    for p in points:
        content += pack("<2d", p[0], p[1])
    if len(points[0]) > 2:
        zs = [p[2] for p in points]
        content += pack("<2d", min(zs), max(zs))
        content += pack(f"<{len(zs)}d", *zs)
    if m:
        content += pack("<2d", 0, 0) + pack(f"<{len(points)}d", *([0.0] * len(points)))
    return content


def poly_content(parts, shape_type=shpreader.POLYGON, part_indices=None, m=False):
    """Content of a PolyLine, Polygon or MultiPatch record. Points with a
    third coordinate are written with a z range and z array."""
    points = [p for part in parts for p in part]
    if part_indices is None:
        part_indices = []
        start = 0
        for part in parts:
            part_indices.append(start)
            start += len(part)
    content = pack("<i", shape_type)
    content += pack("<4d", *_bbox(points))
    content += pack("<2i", len(part_indices), len(points))
    content += pack(f"<{len(part_indices)}i", *part_indices)
    if shape_type == shpreader.MULTIPATCH:
        content += pack(f"<{len(part_indices)}i", *([5] * len(part_indices)))
    for p in points:
        content += pack("<2d", p[0], p[1])
    if len(points[0]) > 2:
        zs = [p[2] for p in points]
        content += pack("<2d", min(zs), max(zs))
        content += pack(f"<{len(zs)}d", *zs)
    if m:
        content += pack("<2d", 0, 0) + pack(f"<{len(points)}d", *([0.0] * len(points)))
    return content


def shp_bytes(
    shape_type,
    contents,
    bbox=(0.0, 0.0, 1.0, 1.0),
    file_code=9994,
    version=1000,
    declared_length=None,
):
    """A complete .shp file with one record per record content."""
    body = b""
    for i, content in enumerate(contents):
        body += pack(">2i", i + 1, len(content) // 2) + content
    length = 100 + len(body) if declared_length is None else declared_length
    header = pack(">7i", file_code, 0, 0, 0, 0, 0, length // 2)
    header += pack("<2i", version, shape_type)
    header += pack("<4d", *bbox)
    header += pack("<4d", 0.0, 0.0, 0.0, 0.0)
    return header + body


def dbf_bytes(
    fields,
    records,
    deleted=(),
    num_records=None,
    record_length=None,
    terminator=True,
    header_length=None,
):
    """A complete .dbf file. fields are (name, type, size, decimal) tuples,
    records are lists of str values, padded as dBASE does."""
    num_records = len(records) if num_records is None else num_records
    if header_length is None:
        header_length = 32 + 32 * len(fields) + 1
    if record_length is None:
        record_length = 1 + sum(f[2] for f in fields)
    data = pack("<BBBBLHH20x", 3, 126, 10, 19, num_records, header_length, record_length)
    for name, field_type, size, decimal in fields:
        data += pack(
            "<11sc4xBB14x",
            name.encode("ascii"),
            field_type.encode("ascii"),
            size,
            decimal,
        )
    if terminator:
        data += b"\r"
    for i, values in enumerate(records):
        data += b"*" if i in deleted else b" "
        for (name, field_type, size, decimal), value in zip(fields, values):
            if field_type in "NF":
                data += value.rjust(size).encode("utf-8")
            else:
                data += value.ljust(size).encode("utf-8")
    data += b"\x1a"
    return data


TRIANGLES = [
    [(0.0, 0.0), (0.0, 1.0), (1.0, 0.0), (0.0, 0.0)],
    [(2.0, 2.0), (2.0, 3.0), (3.0, 2.0), (2.0, 2.0)],
    [(5.0, 5.0), (5.0, 6.0), (6.0, 5.0), (5.0, 5.0)],
]

PARCEL_FIELDS = [("NAME", "C", 10, 0), ("AREA", "N", 8, 2)]
PARCEL_RECORDS = [["first", "123.45"], ["second", "6.5"], ["third", "0.25"]]


def write_files(directory, name, shp=None, dbf=None):
    """Writes name.shp and name.dbf into directory and returns the .shp path."""
    shp_path = directory / f"{name}.shp"
    if shp is not None:
        shp_path.write_bytes(shp)
    if dbf is not None:
        (directory / f"{name}.dbf").write_bytes(dbf)
    return shp_path


@pytest.fixture
def parcels_shp():
    return shp_bytes(
        shpreader.POLYGON,
        [poly_content([ring]) for ring in TRIANGLES],
        bbox=(0.0, 0.0, 6.0, 6.0),
    )


@pytest.fixture
def parcels_dbf():
    return dbf_bytes(PARCEL_FIELDS, PARCEL_RECORDS)


@pytest.fixture
def parcels(tmp_path, parcels_shp, parcels_dbf):
    """Path of a 3 record polygon shapefile, one triangle per record."""
    return write_files(tmp_path, "parcels", parcels_shp, parcels_dbf)
