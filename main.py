#!/usr/bin/env python3
"""Genomic flat-file parser main entry point."""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from contextlib import nullcontext
from dataclasses import replace
from pathlib import Path
from typing import IO

from tqdm import tqdm

from flatio.config import ParserConfig
from flatio.exceptions import ParseError
from flatio.formats import available_formats, open_as
from flatio.parser import Parser
from flatio.translator import record_columns, strand_symbol

logger = logging.getLogger(__name__)

_REGION_PATTERN = re.compile(r"^(?P<seqname>[^:]+):(?P<start>\d+)-(?P<end>\d+)$")


def setup_logging(verbose: bool) -> None:
    """Configure logging with immediate flushing for cluster compatibility."""

    class FlushingHandler(logging.StreamHandler):
        def emit(self, record):
            super().emit(record)
            self.flush()

    level = logging.DEBUG if verbose else logging.INFO
    handler = FlushingHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logging.root.handlers = []
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_region(text: str) -> tuple[str, int, int]:
    """Parse ``CHROM:START-END`` into a closed region triple."""
    match = _REGION_PATTERN.match(text)
    if match is None:
        raise ValueError(f"Region must look like CHROM:START-END, got {text!r}")
    start, end = int(match.group("start")), int(match.group("end"))
    if start > end:
        raise ValueError(f"Region start {start} is after end {end}")
    return match.group("seqname"), start, end


def write_records(parser: Parser, out: IO[str], bed: bool, progress: bool) -> int:
    """Write every remaining record of *parser* to *out*; return the count."""
    count = 0
    with tqdm(desc="Parsing", unit="record", disable=not progress, leave=False) as bar:
        while parser.next():
            if parser.metadata_changed:
                logger.debug("Metadata changed: %s", parser.metadata)
            record = parser.record
            if bed:
                columns = record_columns(record)
                columns[5] = strand_symbol(columns[5])
                out.write("\t".join(str(c) for c in columns) + "\n")
            else:
                out.write(json.dumps(record.as_dict()) + "\n")
            count += 1
            bar.update()
    return count


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Stream records from a genomic flat file as JSON lines."
    )
    parser.add_argument(
        "format",
        choices=available_formats(),
        help="Input file format",
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Path to the input file",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file path. If not specified, records are written to stdout.",
    )
    parser.add_argument(
        "-r",
        "--region",
        default=None,
        help="Only emit records intersecting CHROM:START-END (indexed files only).",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON parser configuration file.",
    )
    parser.add_argument(
        "--no-metadata",
        action="store_true",
        help="Skip metadata blocks without decoding them.",
    )
    parser.add_argument(
        "--bed",
        action="store_true",
        help="Write the fixed BED-like columns instead of JSON.",
    )
    parser.add_argument(
        "-p",
        "--progress",
        action="store_true",
        help="Show a progress bar on stderr.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output (log every metadata change)",
    )

    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        config = ParserConfig.from_file(args.config) if args.config else ParserConfig()
        if args.no_metadata:
            config = replace(config, parse_metadata=False)
        region = parse_region(args.region) if args.region else None
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    try:
        with open_as(args.format, args.input, config) as flat_parser:
            if region is not None:
                flat_parser.seek(*region)
            output = open(args.output, "w") if args.output else nullcontext(sys.stdout)
            with output as out:
                count = write_records(flat_parser, out, args.bed, args.progress)
    except (ParseError, OSError) as e:
        print(f"Error processing {args.input}: {e}", file=sys.stderr)
        return 1

    logger.info("Wrote %d records", count)
    if args.output:
        logger.info("Output written to: %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
