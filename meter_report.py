"""
Meter Report command line launcher.

Usage:
    python meter_report.py edit SOURCE OUTPUT [--brightness 120] [--zoom 1.5] [--aspect 4:3] [--text "INDEX 0042"]
    python meter_report.py build BASE_DIR READING_ID OUTPUT_DIR [--locale en]
    python meter_report.py categories ELECTRICITY
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from MR_Libs.errors import AssetError, BuildError
from MR_Libs.ImageEditingLib import (
    CompositorConfig,
    EditState,
    FilterSettings,
    Transform,
    decode_image,
    parse_aspect,
    render_output,
)
from MR_Libs.ReadingStoreLib import get_photo_records
from MR_Libs.ReportLib import ReportBuilder, ReportConfig, ReportKind, save_report, summarize_layout

logger = logging.getLogger("meter_report")


def run_edit(args: argparse.Namespace) -> int:
    try:
        source = decode_image(Path(args.source).read_bytes())
    except (OSError, AssetError) as e:
        logger.error(f"Cannot read {args.source}: {e}")
        return 1

    state = EditState(
        transform=Transform(zoom=args.zoom, offset_x=args.offset_x, offset_y=args.offset_y),
        filters=FilterSettings(
            brightness=args.brightness,
            contrast=args.contrast,
            grayscale=100.0 if args.grayscale else 0.0,
        ),
        crop_aspect=parse_aspect(args.aspect),
        annotation_text=args.text,
    )
    config = CompositorConfig(jpeg_quality=args.quality)
    Path(args.output).write_bytes(render_output(source, state, config))
    logger.info(f"Wrote {args.output}")
    return 0


def run_build(args: argparse.Namespace) -> int:
    try:
        document = get_photo_records(Path(args.base_dir), args.reading_id)
        report = ReportBuilder(ReportConfig(date_locale=args.locale)).build(document)
    except BuildError as e:
        logger.error(f"Report not built: {e}")
        return 1

    path = save_report(report, Path(args.output_dir))
    print(json.dumps({"path": str(path), **summarize_layout(report)}, indent=2))
    return 0


def run_categories(args: argparse.Namespace) -> int:
    for department in ReportKind.parse(args.kind).departments:
        print(department)
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Meter photo editing and inspection reports")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    edit = subparsers.add_parser("edit", help="Apply edits to one photo")
    edit.add_argument("source")
    edit.add_argument("output")
    edit.add_argument("--brightness", type=float, default=100.0)
    edit.add_argument("--contrast", type=float, default=100.0)
    edit.add_argument("--grayscale", action="store_true")
    edit.add_argument("--zoom", type=float, default=1.0)
    edit.add_argument("--offset-x", type=float, default=0.0)
    edit.add_argument("--offset-y", type=float, default=0.0)
    edit.add_argument("--aspect", default=None, help="Free, 1:1, 4:3, 16:9, 4:16 or W:H")
    edit.add_argument("--text", default="")
    edit.add_argument("--quality", type=int, default=90)
    edit.set_defaults(handler=run_edit)

    build = subparsers.add_parser("build", help="Build the PDF report of a stored reading")
    build.add_argument("base_dir")
    build.add_argument("reading_id")
    build.add_argument("output_dir")
    build.add_argument("--locale", choices=("fr", "en"), default="fr")
    build.set_defaults(handler=run_build)

    categories = subparsers.add_parser("categories", help="List departments for a reading kind")
    categories.add_argument("kind")
    categories.set_defaults(handler=run_categories)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        return args.handler(args)
    except ValueError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
