"""BED (Browser Extensible Data) parser."""

from __future__ import annotations

import logging
import shlex
from typing import Any

from ..record import Record, encode_strand
from .text import TabixMixin, TextParser

logger = logging.getLogger(__name__)

FIELDNAMES = [
    "chrom", "chromStart", "chromEnd",  # required
    "name", "score", "strand", "thickStart", "thickEnd", "itemRgb",
    "blockCount", "blockSizes", "blockStarts",
]


def parse_key_values(text: str) -> dict[str, str]:
    """Parse shell-quoted ``key=value`` pairs as found on track lines."""
    result: dict[str, str] = {}
    for token in shlex.split(text):
        key, sep, value = token.partition("=")
        if sep:
            result[key] = value
    return result


def _int_list(value: str) -> list[int]:
    return [int(v) for v in value.rstrip(",").split(",") if v]


class BedParser(TabixMixin, TextParser):
    """Parser for BED files (3 to 12 columns).

    ``track`` and ``browser`` lines and ``#`` comments are metadata.
    Columns may be separated by tabs or runs of spaces.
    """

    format_name = "bed"

    def is_metadata(self) -> bool:
        line = self.current_block
        return line.startswith(("track", "browser", "#"))

    def read_metadata(self) -> None:
        line = self.current_block
        if line.startswith("track"):
            try:
                track = parse_key_values(line[len("track"):])
            except ValueError as e:
                raise self.malformed(f"unparseable track line ({e})") from e
            self.metadata["track"] = track
            logger.debug("Track line: %s", track)
        elif line.startswith("browser"):
            self.metadata.setdefault("browser", []).append(line[len("browser"):].strip())
        else:
            self.metadata.setdefault("comments", []).append(line[1:].strip())

    def region_of(self, fields: list[str]) -> tuple[int, int]:
        return int(fields[1]), int(fields[2])

    def read_record(self) -> Record:
        fields = self.split_fields(3, sep=None)
        if len(fields) > len(FIELDNAMES):
            raise self.malformed(
                f"expected at most {len(FIELDNAMES)} columns, got {len(fields)}"
            )
        values = dict(zip(FIELDNAMES, fields))

        attributes: dict[str, Any] = {}
        if "itemRgb" in values:
            attributes["itemRgb"] = values["itemRgb"]
        if "blockCount" in values:
            try:
                attributes["blockCount"] = int(values["blockCount"])
                attributes["blockSizes"] = _int_list(values.get("blockSizes", ""))
                attributes["blockStarts"] = _int_list(values.get("blockStarts", ""))
            except ValueError:
                raise self.malformed("block columns must be integers") from None

        try:
            strand = encode_strand(values.get("strand", "."))
        except ValueError as e:
            raise self.malformed(str(e)) from None

        return Record(
            seqname=values["chrom"],
            start=self.parse_int(values["chromStart"], "chromStart"),
            end=self.parse_int(values["chromEnd"], "chromEnd"),
            name=values.get("name", "."),
            score=values.get("score", "."),
            strand=strand,
            thick_start=self.parse_int(values.get("thickStart", "0"), "thickStart"),
            thick_end=self.parse_int(values.get("thickEnd", "0"), "thickEnd"),
            attributes=attributes,
        )
