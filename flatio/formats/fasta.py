"""FASTA sequence parser."""

from __future__ import annotations

from ..exceptions import MalformedBlockError
from ..record import Record
from .text import TextParser


class FastaParser(TextParser):
    """Parser for FASTA files.

    A block is one whole entry: the ``>`` header line followed by its
    sequence lines.  Old-style ``;`` comment lines form metadata blocks of
    their own.  Records span ``1..len(sequence)`` on the entry itself.
    """

    format_name = "fasta"

    def __init__(self, *args, **kwargs) -> None:
        self._pending: str | None = None
        super().__init__(*args, **kwargs)

    def _next_line(self) -> str | None:
        if self._pending is not None:
            line, self._pending = self._pending, None
            return line
        return super().read_block()

    def read_block(self) -> list[str] | None:
        line = self._next_line()
        if line is None:
            return None
        if line.startswith(";"):
            return [line]
        if not line.startswith(">"):
            raise MalformedBlockError(
                f"{self.describe_source()}: sequence data before any header "
                f"(line {self.line_number}): {line!r}"
            )

        block = [line]
        while True:
            line = super().read_block()
            if line is None:
                break
            if line.startswith((">", ";")):
                self._pending = line
                break
            block.append(line.strip())
        return block

    def is_metadata(self) -> bool:
        return self.current_block[0].startswith(";")

    def read_metadata(self) -> None:
        self.metadata.setdefault("comments", []).append(self.current_block[0][1:].strip())

    def read_record(self) -> Record:
        header, *lines = self.current_block
        identifier, _, description = header[1:].strip().partition(" ")
        if not identifier:
            raise self.malformed("header without an identifier")
        sequence = "".join(lines)
        return Record(
            seqname=identifier,
            start=1,
            end=len(sequence),
            name=identifier,
            attributes={"description": description.strip(), "sequence": sequence},
        )
