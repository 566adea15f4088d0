"""Decoded record type and the canonical strand encoding."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from .exceptions import MalformedBlockError

STRAND_ENCODING: dict[str, int] = {"+": 1, ".": 0, "-": -1}


def encode_strand(symbol: str) -> int:
    """Map a strand symbol (``+``, ``.`` or ``-``) to ``1``, ``0`` or ``-1``."""
    try:
        return STRAND_ENCODING[symbol]
    except (KeyError, TypeError):
        raise MalformedBlockError(
            f"Invalid strand symbol {symbol!r}; expected one of '+', '.', '-'"
        ) from None


@dataclass(frozen=True)
class Record:
    """One decoded data block.

    ``start`` and ``end`` are stored exactly as the file writes them; no
    coordinate system conversion takes place.  ``thick_start`` and
    ``thick_end`` are zero for formats that do not carry them and only exist
    so every record has the same column shape.
    """

    seqname: str
    start: int
    end: int
    name: str = "."
    score: str = "."
    strand: int = 0
    thick_start: int = 0
    thick_end: int = 0
    attributes: dict[str, Any] = field(default_factory=dict)

    def get_seqname(self) -> str:
        return self.seqname

    def get_start(self) -> int:
        return self.start

    def get_end(self) -> int:
        return self.end

    def get_name(self) -> str:
        return self.name

    def get_score(self) -> str:
        return self.score

    def get_strand(self) -> int:
        return self.strand

    def get_thickStart(self) -> int:
        return self.thick_start

    def get_thickEnd(self) -> int:
        return self.thick_end

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable dict of the record."""
        return asdict(self)
