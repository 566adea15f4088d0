"""EMF (Ensembl Multi Format) alignment dump parser."""

from __future__ import annotations

import logging
import re
from typing import Any

from ..exceptions import MalformedBlockError
from ..record import Record, encode_strand
from .text import TextParser

logger = logging.getLogger(__name__)

BLOCK_END = "//"
_SEQ_PATTERN = re.compile(
    r"^SEQ\s+(?P<species>\S+)\s+(?P<chrom>\S+)\s+(?P<start>\d+)\s+(?P<end>\d+)"
    r"\s+(?P<strand>-?1|0)(?:\s+\(chr_length=(?P<length>\d+)\))?"
)
_NUMERIC_STRAND = {"1": "+", "0": ".", "-1": "-"}


class EMFParser(TextParser):
    """Parser for EMF multiple alignment dumps.

    A block runs up to the ``//`` terminator and holds ``SEQ`` lines,
    optional ``SCORE``/``TREE``/``ID`` lines, a ``DATA`` line and the
    alignment columns.  ``##`` headers and ``#`` comments between blocks
    are metadata.  The record location comes from the first ``SEQ`` line;
    every sequence, its aligned text and the score tracks are attributes.
    """

    format_name = "EMF"

    def read_block(self) -> list[str] | None:
        line = super().read_block()
        if line is None:
            return None
        if line.startswith("#"):
            return [line]

        block = [line]
        while True:
            line = super().read_block()
            if line is None:
                logger.warning(
                    "%s: last alignment block is not terminated by '//'",
                    self.describe_source(),
                )
                break
            if line.strip() == BLOCK_END:
                break
            block.append(line)
        return block

    def is_metadata(self) -> bool:
        return self.current_block[0].startswith("#")

    def read_metadata(self) -> None:
        line = self.current_block[0]
        if line.startswith("##"):
            key, _, value = line[2:].strip().partition(" ")
            self.metadata[key] = value.strip()
        else:
            self.metadata.setdefault("comments", []).append(line[1:].strip())

    def read_record(self) -> Record:
        sequences: list[dict[str, Any]] = []
        scores: list[str] = []
        trees: list[str] = []
        rows: list[list[str]] = []
        ids: list[str] = []
        in_data = False

        for line in self.current_block:
            if in_data:
                rows.append(line.split())
                continue
            if line.startswith("SEQ"):
                sequences.append(self._read_seq(line))
            elif line.startswith("SCORE"):
                scores.append(line[len("SCORE"):].strip())
            elif line.startswith("TREE"):
                trees.append(line[len("TREE"):].strip())
            elif line.startswith("ID"):
                ids.append(line[len("ID"):].strip())
            elif line.strip() == "DATA":
                in_data = True
            else:
                raise self.malformed(f"unexpected line in alignment header {line!r}")

        if not sequences:
            raise self.malformed("alignment block without SEQ lines")

        width = len(sequences) + len(scores)
        aligned = ["" for _ in sequences]
        score_values: list[list[str]] = [[] for _ in scores]
        for row in rows:
            if len(row) == 1 + len(scores) and len(row[0]) == len(sequences):
                # Compact form: one string with a character per sequence.
                row = list(row[0]) + row[1:]
            if len(row) != width:
                raise self.malformed(
                    f"DATA row has {len(row)} columns, expected {width}"
                )
            for index in range(len(sequences)):
                aligned[index] += row[index]
            for index in range(len(scores)):
                score_values[index].append(row[len(sequences) + index])

        for seq, text in zip(sequences, aligned):
            seq["alignment"] = text

        first = sequences[0]
        return Record(
            seqname=first["chrom"],
            start=first["start"],
            end=first["end"],
            name=first["species"],
            strand=first["strand"],
            attributes={
                "sequences": sequences,
                "scores": dict(zip(scores, score_values)),
                "trees": trees,
                "ids": ids,
            },
        )

    def _read_seq(self, line: str) -> dict[str, Any]:
        match = _SEQ_PATTERN.match(line)
        if match is None:
            raise self.malformed(f"unparseable SEQ line {line!r}")
        try:
            strand = encode_strand(_NUMERIC_STRAND[match.group("strand")])
        except (KeyError, MalformedBlockError):
            raise self.malformed(f"invalid strand in SEQ line {line!r}") from None
        length = match.group("length")
        return {
            "species": match.group("species"),
            "chrom": match.group("chrom"),
            "start": int(match.group("start")),
            "end": int(match.group("end")),
            "strand": strand,
            "chr_length": int(length) if length is not None else None,
        }
