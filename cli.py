"""Command-line interface for TLC spot detection."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from config import UNSET, load_detection_config
from output import spots_to_json, write_csv, write_json
from processing import detect_contour_tlc, detect_spots, write_annotated


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Detect spots on a TLC plate photo and report their Rf values."
    )
    parser.add_argument(
        "image",
        type=Path,
        nargs="?",
        help="Plate image to analyse. The annotated frame overwrites it unless --output is given.",
    )
    parser.add_argument(
        "--baseline",
        type=int,
        default=UNSET,
        help="Baseline Y in original image pixels (-1 = not supplied).",
    )
    parser.add_argument(
        "--topline",
        type=int,
        default=UNSET,
        help="Topline Y in original image pixels (-1 = not supplied).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Optional JSON file with detection settings overriding the defaults.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the annotated image here instead of overwriting the input.",
    )
    parser.add_argument(
        "--no-write",
        action="store_true",
        help="Do not write the annotated image at all.",
    )
    parser.add_argument(
        "--json-out",
        type=Path,
        help="Also write the spot JSON array to this file.",
    )
    parser.add_argument(
        "--csv-out",
        type=Path,
        help="Also write a per-spot CSV table to this file.",
    )
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only annotate the image in place and print true/false.",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP API used by the mobile app instead of processing an image.",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Host for --serve.")
    parser.add_argument("--port", type=int, default=5000, help="Port for --serve.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    if not args.serve and args.image is None:
        parser.error("an image path is required unless --serve is used")
    if (args.baseline == UNSET) != (args.topline == UNSET):
        print("Warning: only one of --baseline/--topline given; band restriction disabled", file=sys.stderr)
    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_detection_config(args.config)
    except ValueError as exc:
        print(f"Failed to load config: {exc}", file=sys.stderr)
        return 1

    if args.serve:
        # Imported lazily: the server module sets up its own log file.
        from server import run

        run(host=args.host, port=args.port, config=config)
        return 0

    if args.check_only:
        ok = detect_contour_tlc(args.image, config=config)
        print("true" if ok else "false")
        return 0 if ok else 1

    result = detect_spots(args.image, args.baseline, args.topline, config)
    if not result.success:
        print("[]")
        return 1

    if not args.no_write and not write_annotated(result, args.output or args.image):
        print("[]")
        return 1

    print(spots_to_json(result.spots))
    if args.json_out:
        write_json(args.json_out, result.spots)
    if args.csv_out:
        write_csv(args.csv_out, result.spots)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
