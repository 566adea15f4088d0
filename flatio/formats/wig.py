"""Wiggle (and bedGraph) signal track parser."""

from __future__ import annotations

import logging

from ..record import Record
from .bed import parse_key_values
from .text import TextParser

logger = logging.getLogger(__name__)

_DECLARATIONS = ("variableStep", "fixedStep")


class WigParser(TextParser):
    """Parser for wiggle tracks.

    Metadata blocks are ``track``/``browser``/``#`` lines and the
    ``variableStep``/``fixedStep`` section declarations.  The current
    declaration is exposed as ``metadata["step"]``; ``metadata_changed`` is
    therefore raised on the first record of each new section.  Lines outside
    any declaration are read as bedGraph (``chrom start end value``).

    Declarations are decoded even with metadata parsing disabled, since data
    lines cannot be placed without them.
    """

    format_name = "wig"

    def __init__(self, *args, **kwargs) -> None:
        self._step: dict | None = None
        self._position: int | None = None
        super().__init__(*args, **kwargs)

    def is_metadata(self) -> bool:
        line = self.current_block
        if line.startswith(_DECLARATIONS):
            self._read_declaration(line)
            return True
        return line.startswith(("track", "browser", "#"))

    def read_metadata(self) -> None:
        line = self.current_block
        if line.startswith(_DECLARATIONS):
            self.metadata["step"] = dict(self._step)
        elif line.startswith("track"):
            try:
                self.metadata["track"] = parse_key_values(line[len("track"):])
            except ValueError as e:
                raise self.malformed(f"unparseable track line ({e})") from e
        elif line.startswith("browser"):
            self.metadata.setdefault("browser", []).append(line[len("browser"):].strip())
        else:
            self.metadata.setdefault("comments", []).append(line[1:].strip())

    def _read_declaration(self, line: str) -> None:
        mode, _, rest = line.partition(" ")
        try:
            options = parse_key_values(rest)
        except ValueError as e:
            raise self.malformed(f"unparseable {mode} line ({e})") from e
        if "chrom" not in options:
            raise self.malformed(f"{mode} declaration without chrom")

        step = {
            "mode": mode,
            "chrom": options["chrom"],
            "span": self.parse_int(options.get("span", "1"), "span"),
        }
        if mode == "fixedStep":
            if "start" not in options or "step" not in options:
                raise self.malformed("fixedStep declaration needs start and step")
            step["start"] = self.parse_int(options["start"], "start")
            step["step"] = self.parse_int(options["step"], "step")
            self._position = step["start"]
        self._step = step
        logger.debug("New %s section on %s", mode, step["chrom"])

    def read_record(self) -> Record:
        step = self._step
        fields = self.current_block.split()

        if step is None:
            if len(fields) != 4:
                raise self.malformed("expected a bedGraph line 'chrom start end value'")
            chrom, start, end, value = fields
            return Record(
                seqname=chrom,
                start=self.parse_int(start, "start"),
                end=self.parse_int(end, "end"),
                score=value,
            )

        if step["mode"] == "variableStep":
            if len(fields) != 2:
                raise self.malformed("expected a variableStep line 'position value'")
            start = self.parse_int(fields[0], "position")
            value = fields[1]
        else:
            if len(fields) != 1:
                raise self.malformed("expected a single fixedStep value")
            start = self._position
            value = fields[0]
            self._position += step["step"]

        return Record(
            seqname=step["chrom"],
            start=start,
            end=start + step["span"] - 1,
            score=value,
        )
