"""
This module tests the helpers that prepare point data for host applications.
"""

import io

import pytest

import shpreader
from shpreader import adapters
from conftest import (
    PARCEL_FIELDS,
    PARCEL_RECORDS,
    dbf_bytes,
    poly_content,
    shp_bytes,
    write_files,
)


def test_dedupe_consecutive():
    points = [
        (0.0, 0.0, 0.0),
        (0.0, 0.0, 0.0),
        (1.0, 0.0, 0.0),
        (1.0 + 1e-9, 0.0, 0.0),
        (0.0, 0.0, 0.0),
    ]
    assert adapters.dedupe_consecutive(points) == [
        (0.0, 0.0, 0.0),
        (1.0, 0.0, 0.0),
        (0.0, 0.0, 0.0),
    ]


def test_dedupe_consecutive_tolerance():
    points = [(0.0, 0.0, 0.0), (0.01, 0.0, 0.0)]
    assert len(adapters.dedupe_consecutive(points)) == 2
    assert len(adapters.dedupe_consecutive(points, tolerance=0.1)) == 1


def test_dedupe_empty():
    assert adapters.dedupe_consecutive([]) == []


def test_curve_point_lists(tmp_path):
    ring = [(0.0, 0.0), (0.0, 1.0), (0.0, 1.0), (1.0, 0.0), (0.0, 0.0)]
    shp = shp_bytes(shpreader.POLYGON, [poly_content([ring])] * 3)
    dbf = dbf_bytes(PARCEL_FIELDS, PARCEL_RECORDS)
    sf = shpreader.ShapeFile.open(write_files(tmp_path, "dupes", shp, dbf))
    assert adapters.curve_point_lists(sf, 0) == [
        [(0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0)]
    ]
    # the decoded shape itself is untouched
    assert len(sf.shapeAt(0).parts[0]) == 5


def test_classify_rings():
    exterior = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0), (0.0, 0.0)]
    hole = [(0.2, 0.2), (0.4, 0.2), (0.2, 0.4), (0.2, 0.2)]
    data = shp_bytes(shpreader.POLYGON, [poly_content([exterior, hole])])
    shape = shpreader.ShapeGeometryReader.load(io.BytesIO(data))[0]
    exteriors, holes = adapters.classify_rings(shape)
    assert exteriors == [shape.parts[0]]
    assert holes == [shape.parts[1]]


def test_classify_rings_rejects_lines():
    shape = shpreader.ShapeRecord(
        oid=0,
        shapeType=shpreader.POLYLINE,
        bbox=(0.0, 0.0, 1.0, 1.0),
        parts=(((0.0, 0.0, 0.0), (1.0, 1.0, 0.0)),),
    )
    with pytest.raises(ValueError):
        adapters.classify_rings(shape)
