from __future__ import annotations

import io
import os
from os import PathLike
from struct import Struct
from typing import Any, overload

from .exceptions import TruncatedRecordError
from .types import BinaryFileT, ReadableBinStream, T

# Helpers


unpack_2_int32_be = Struct(">2i").unpack

CONSTITUENT_FILE_EXTS = ["shp", "shx", "dbf"]


@overload
def fsdecode_if_pathlike(path: PathLike[Any]) -> str: ...
@overload
def fsdecode_if_pathlike(path: T) -> T: ...
def fsdecode_if_pathlike(path: Any) -> Any:
    if isinstance(path, PathLike):
        return os.fsdecode(path)  # str

    return path


def shapefile_base_name(path: str | PathLike[Any]) -> str:
    """Strips a .shp, .shx or .dbf extension (in any case) from a path.
    Any other extension is considered part of the base name."""
    path = fsdecode_if_pathlike(path)
    base, ext = os.path.splitext(path)
    if ext[1:].lower() in CONSTITUENT_FILE_EXTS:
        return base
    return path


def constituent_path(path: str | PathLike[Any], ext: str) -> str:
    """
    Returns the path of the .shp, .shx or .dbf file belonging to the
    shapefile at path. The extension is tried as both lower and upper
    case, preferring the case of the extension given in path. If neither
    exists the lower case path is returned, so opening it raises an error
    naming the expected file.
    """
    assert ext in CONSTITUENT_FILE_EXTS
    path = fsdecode_if_pathlike(path)
    base = shapefile_base_name(path)
    candidates = [f"{base}.{ext}", f"{base}.{ext.upper()}"]
    if os.path.splitext(path)[1][1:].isupper():
        candidates.reverse()
    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    return f"{base}.{ext}"


def dbf_path_for(shp_path: str | PathLike[Any]) -> str:
    """Derives the attribute file path from a geometry file path."""
    return constituent_path(shp_path, "dbf")


def source_name(file_: BinaryFileT) -> str:
    """A name for a file or stream, for use in error messages."""
    file_ = fsdecode_if_pathlike(file_)
    if isinstance(file_, str):
        return file_
    name = getattr(file_, "name", None)
    if isinstance(name, str):
        return name
    return "<stream>"


def read_all_bytes(file_: BinaryFileT) -> bytes:
    """Reads the complete content of a file name or a binary file-like
    object. Files opened here are closed before returning, file-like
    objects are left open for the caller to close."""
    file_ = fsdecode_if_pathlike(file_)
    if isinstance(file_, str):
        with open(file_, "rb") as f:
            return f.read()

    if hasattr(file_, "read"):
        # Read from the start if the stream allows it
        try:
            file_.seek(0)  # type: ignore[union-attr]
        except (AttributeError, io.UnsupportedOperation):
            pass
        return bytes(file_.read())

    raise TypeError(f"Expected a file name or a binary file-like object. Got: {file_!r}")


def read_exact(b_io: ReadableBinStream, size: int, what: str, source: str) -> bytes:
    """Reads exactly size bytes, or raises TruncatedRecordError."""
    data = b_io.read(size)
    if len(data) != size:
        raise TruncatedRecordError(
            f"{source}: expected {size} bytes for {what}, only {len(data)} available"
        )
    return data
