"""CLI for segmentation, plain conversion and schema validation."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .config import load_settings
from .convert import convert_regular_csv
from .errors import SegmenterError
from .logging_utils import configure_logging
from .pipeline import process_file
from .validation import load_schema, validate_document


def _segment(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    configure_logging(settings.log_level)
    output_dir = Path(args.output_dir or settings.output_dir)
    report = process_file(Path(args.input), output_dir, settings)
    print(report.model_dump_json(indent=2, exclude_none=True))
    return 0 if report.ok else 1


def _convert(args: argparse.Namespace) -> int:
    configure_logging()
    rows = convert_regular_csv(Path(args.input), Path(args.output))
    print(json.dumps({"rows": len(rows), "output": args.output}))
    return 0


def _validate(args: argparse.Namespace) -> int:
    try:
        document = json.loads(Path(args.document).read_text(encoding="utf-8"))
        schema = load_schema(Path(args.schema)) if args.schema else None
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"cannot load input: {exc}", file=sys.stderr)
        return 2
    issues = validate_document(document, schema)
    print(json.dumps({"ok": not issues, "errors": [issue.model_dump() for issue in issues]}, indent=2))
    return 0 if not issues else 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="csv-segmenter", description="Contact spreadsheets to segmentation JSON")
    sub = parser.add_subparsers(dest="command", required=True)

    segment = sub.add_parser("segment", help="Generate segmentation JSON from a .csv or .xlsx file")
    segment.add_argument("input")
    segment.add_argument("--output-dir", default=None)
    segment.add_argument("--config", default=None)
    segment.set_defaults(func=_segment)

    convert = sub.add_parser("convert", help="Convert a CSV file to a JSON array")
    convert.add_argument("input")
    convert.add_argument("output")
    convert.set_defaults(func=_convert)

    validate = sub.add_parser("validate", help="Validate a segmentation JSON document")
    validate.add_argument("document")
    validate.add_argument("--schema", default=None)
    validate.set_defaults(func=_validate)

    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except SegmenterError as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
