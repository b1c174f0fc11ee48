"""Command-line entry point: ``ndvi-region``.

This module is purely the wiring layer between the command line and
``analyze_region``: it reads the key and polygon files, runs the
analysis, and prints the result (or a structured error) as JSON.

Example::

    ndvi-region --key service-account.json --polygon field.json \\
        --width 256 --start 2020-01-01 --end 2020-03-01
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from ndvi_region.core.config import AnalysisConfig
from ndvi_region.core.exceptions import RegionAnalysisError
from ndvi_region.core.palettes import list_palettes
from ndvi_region.orchestrators.authentication import analyze_region

if TYPE_CHECKING:
    from collections.abc import Sequence


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ndvi-region",
        description="Fetch the least-cloudy NDVI thumbnail for a polygon and date range.",
    )
    parser.add_argument("--key", required=True, type=Path, help="service-account key JSON file")
    parser.add_argument(
        "--polygon",
        required=True,
        type=Path,
        help="JSON file with a list of {lng, lat} objects or [lng, lat] pairs",
    )
    parser.add_argument("--width", required=True, type=float, help="output width in pixels")
    parser.add_argument("--start", required=True, help="start date (ISO-8601 or epoch ms)")
    parser.add_argument("--end", required=True, help="end date (ISO-8601 or epoch ms)")
    parser.add_argument("--palette", choices=list_palettes(), help="override NDVI_PALETTE")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = AnalysisConfig.from_env(palette=args.palette)

        key = json.loads(args.key.read_text(encoding="utf-8"))
        polygon = json.loads(args.polygon.read_text(encoding="utf-8"))
        result = asyncio.run(
            analyze_region(
                key,
                polygon,
                args.width,
                _parse_date_arg(args.start),
                _parse_date_arg(args.end),
                config=config,
            )
        )
    except RegionAnalysisError as exc:
        print(json.dumps(exc.to_error_dict()), file=sys.stderr)
        return 1
    except (OSError, ValueError) as exc:
        print(json.dumps({"category": "validation", "message": str(exc)}), file=sys.stderr)
        return 1

    print(json.dumps(result.to_dict(), indent=2))
    return 0


def _parse_date_arg(value: str) -> str | int:
    """Treat an all-digit argument as epoch milliseconds."""
    return int(value) if value.isdigit() else value


if __name__ == "__main__":
    sys.exit(main())
