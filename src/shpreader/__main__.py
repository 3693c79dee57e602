from __future__ import annotations

import argparse
import logging
import sys

from .exceptions import ShapefileException
from .shapefile import ShapeFile

logger = logging.getLogger("shpreader")


def main(argv: list[str] | None = None) -> int:
    """
    Prints a summary of a shapefile: shape type, record count and fields.
    """
    parser = argparse.ArgumentParser(
        prog="python -m shpreader",
        description="Summarise an ESRI shapefile and its attribute table.",
    )
    parser.add_argument("shapefile", help="path of the .shp file")
    parser.add_argument(
        "--fields", action="store_true", help="also list the field descriptors"
    )
    parser.add_argument("--encoding", default="utf-8", help="dbf text encoding")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        sf = ShapeFile.open(args.shapefile, encoding=args.encoding)
    except (ShapefileException, OSError) as e:
        logger.error("Unable to read %s: %s", args.shapefile, e)
        return 1

    print(sf)
    if args.fields:
        for field in sf.fields:
            print(f"    {field.name}: {field.field_type}({field.size},{field.decimal})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
