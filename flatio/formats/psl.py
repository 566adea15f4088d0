"""PSL (BLAT alignment) parser."""

from __future__ import annotations

from ..record import Record, encode_strand
from .text import TextParser

COLUMNS = [
    "matches", "misMatches", "repMatches", "nCount",
    "qNumInsert", "qBaseInsert", "tNumInsert", "tBaseInsert",
    "strand", "qName", "qSize", "qStart", "qEnd",
    "tName", "tSize", "tStart", "tEnd",
    "blockCount", "blockSizes", "qStarts", "tStarts",
]
_INT_COLUMNS = frozenset(COLUMNS) - {"strand", "qName", "tName"}
_LIST_COLUMNS = frozenset({"blockSizes", "qStarts", "tStarts"})


class PSLParser(TextParser):
    """Parser for PSL files, with or without the ``psLayout`` header.

    Header lines (``psLayout version``, the two column-title lines and the
    dashed separator) and ``track``/``browser``/``#`` lines are metadata.
    A data line always starts with the match count, so anything not starting
    with a digit is metadata.  The location is taken from the target
    columns; the query name becomes the record name and the match count its
    score.
    """

    format_name = "psl"

    def is_metadata(self) -> bool:
        return not self.current_block[:1].isdigit()

    def read_metadata(self) -> None:
        line = self.current_block
        if line.startswith("psLayout"):
            self.metadata["psLayout"] = line[len("psLayout"):].strip()
        elif line.startswith("track"):
            self.metadata["track"] = line[len("track"):].strip()
        elif line.startswith("-"):
            return
        else:
            self.metadata.setdefault("header", []).append(line.strip())

    def read_record(self) -> Record:
        fields = self.split_fields(len(COLUMNS))
        values: dict[str, object] = {}
        for column, raw in zip(COLUMNS, fields):
            if column in _LIST_COLUMNS:
                try:
                    values[column] = [int(v) for v in raw.rstrip(",").split(",") if v]
                except ValueError:
                    raise self.malformed(f"{column} must be a list of integers") from None
            elif column in _INT_COLUMNS:
                values[column] = self.parse_int(raw, column)
            else:
                values[column] = raw

        # Translated alignments carry two strand characters (query, target).
        try:
            strand = encode_strand(fields[8][:1])
        except ValueError as e:
            raise self.malformed(str(e)) from None

        return Record(
            seqname=fields[13],
            start=values["tStart"],
            end=values["tEnd"],
            name=fields[9],
            score=fields[0],
            strand=strand,
            attributes=values,
        )
