"""GFF3 (Generic Feature Format version 3) parser."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import unquote

from ..record import Record, encode_strand
from .text import TabixMixin, TextParser

logger = logging.getLogger(__name__)

COLUMNS = [
    "seqid", "source", "type", "start", "end", "score", "strand", "phase",
    "attributes",
]

# Attributes whose values are comma separated lists in GFF3.
MULTI_VALUE_ATTRIBUTES: frozenset[str] = frozenset({
    "Parent", "Alias", "Note", "Dbxref", "Ontology_term",
})


def parse_attributes(text: str) -> dict[str, Any]:
    """Decode the ninth GFF3 column (``key=value;key=v1,v2``)."""
    attributes: dict[str, Any] = {}
    if text in ("", "."):
        return attributes
    for item in text.strip().strip(";").split(";"):
        item = item.strip()
        if not item:
            continue
        key, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"attribute without '=': {item!r}")
        key = unquote(key)
        if key in MULTI_VALUE_ATTRIBUTES:
            attributes[key] = [unquote(v) for v in value.split(",")]
        else:
            attributes[key] = unquote(value)
    return attributes


class GFF3Parser(TabixMixin, TextParser):
    """Parser for GFF3 files.

    ``##`` pragmas and ``#`` comments are metadata.  ``##sequence-region``
    pragmas are collected per seqid; other pragmas are stored under their
    name.  A ``##FASTA`` pragma ends the feature section: the embedded
    sequences are not feature records and are skipped.
    """

    format_name = "gff3"

    def __init__(self, *args, **kwargs) -> None:
        self._in_fasta = False
        super().__init__(*args, **kwargs)

    def read_block(self) -> str | None:
        if self._in_fasta:
            return None
        line = super().read_block()
        if line is not None and line.startswith("##FASTA"):
            self._in_fasta = True
            logger.debug("##FASTA section reached in %s; stopping", self.describe_source())
            return None
        return line

    def is_metadata(self) -> bool:
        return self.current_block.startswith("#")

    def read_metadata(self) -> None:
        line = self.current_block
        if not line.startswith("##"):
            self.metadata.setdefault("comments", []).append(line[1:].strip())
            return

        name, _, value = line[2:].strip().partition(" ")
        value = value.strip()
        if name == "sequence-region":
            parts = value.split()
            if len(parts) != 3:
                raise self.malformed("##sequence-region needs seqid, start and end")
            regions = self.metadata.setdefault("sequence-region", {})
            regions[parts[0]] = (
                self.parse_int(parts[1], "start"),
                self.parse_int(parts[2], "end"),
            )
        elif name == "#":
            # Forward-reference resolution marker; carries no data.
            return
        else:
            self.store_pragma(name, value)

    def store_pragma(self, name: str, value: str) -> None:
        self.metadata[name] = value

    def region_of(self, fields: list[str]) -> tuple[int, int]:
        return int(fields[3]), int(fields[4])

    def read_record(self) -> Record:
        fields = self.split_fields(9)
        values = dict(zip(COLUMNS, fields))
        try:
            attributes = parse_attributes(values["attributes"])
            # "?" marks a stranded feature whose strand is unknown.
            strand = encode_strand("." if values["strand"] == "?" else values["strand"])
        except ValueError as e:
            raise self.malformed(str(e)) from None

        attributes = self.extra_attributes(attributes)
        return Record(
            seqname=values["seqid"],
            start=self.parse_int(values["start"], "start"),
            end=self.parse_int(values["end"], "end"),
            name=attributes.get("ID", attributes.get("Name", ".")),
            score=values["score"],
            strand=strand,
            attributes={
                "source": values["source"],
                "type": values["type"],
                "phase": values["phase"],
                **attributes,
            },
        )

    def extra_attributes(self, attributes: dict[str, Any]) -> dict[str, Any]:
        """Hook for dialects that post-process the attribute column."""
        return attributes
