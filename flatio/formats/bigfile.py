"""bigBed and bigWig parsers backed by pyBigWig."""

from __future__ import annotations

import logging
from abc import abstractmethod
from pathlib import Path
from typing import Any, Iterator, Mapping

from ..config import ParserConfig
from ..exceptions import DependencyMissingError, MalformedBlockError, ParseError
from ..parser import Parser
from ..record import Record, encode_strand

logger = logging.getLogger(__name__)

HEADER = "header"
ENTRY = "entry"


class BigFileParser(Parser):
    """Base for the indexed binary formats.

    Blocks are tuples.  The first one, ``("header", {...})``, is metadata
    carrying the file header and the chromosome sizes; every following
    block is ``("entry", chrom, start, end, payload)``, walking chromosomes
    in file order.  ``seek`` queries the file's own R-tree index.
    """

    def __init__(
        self,
        path: str | Path,
        config: ParserConfig | Mapping[str, Any] | None = None,
    ) -> None:
        self.path = Path(path)
        self._handle: Any = None
        self._blocks: Iterator[tuple] | None = None
        super().__init__(config)

    def open(self) -> None:
        try:
            import pyBigWig
        except ImportError as e:
            raise DependencyMissingError(
                f"pyBigWig is required for {self.format_name} files. pip install pyBigWig"
            ) from e

        if not self.path.exists():
            raise FileNotFoundError(f"Input file not found: {self.path}")
        try:
            handle = pyBigWig.open(str(self.path))
        except RuntimeError as e:
            raise MalformedBlockError(f"{self.path} could not be opened: {e}") from e
        if handle is None or not self.check_kind(handle):
            if handle is not None:
                handle.close()
            raise MalformedBlockError(f"{self.path} is not a {self.format_name} file")
        self._handle = handle
        self._blocks = self._walk(self._handle.chroms(), header=True)
        logger.info("Reading %s input from: %s", self.format_name, self.path)

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
        self._handle = None
        self._blocks = None

    def read_block(self) -> tuple | None:
        if self._blocks is None:
            return None
        return next(self._blocks, None)

    def is_metadata(self) -> bool:
        return self.current_block[0] == HEADER

    def read_metadata(self) -> None:
        self.metadata.update(self.current_block[1])

    def seek(self, seqname: str, start: int, end: int) -> bool:
        if self._handle is None:
            raise ParseError(f"{self.format_name} parser for {self.path} is closed")
        chroms = self._handle.chroms()
        if seqname not in chroms:
            logger.warning("Sequence %r not present in %s", seqname, self.path)
            self._blocks = iter(())
            self.reset_blocks()
            return False

        # Closed [start, end]; the index query is half-open, so widen and filter.
        query = (max(start - 1, 0), min(end + 1, chroms[seqname]))
        logger.debug("Seeking %s:%d-%d in %s", seqname, start, end, self.path)
        self._blocks = (
            block for block in self._walk({seqname: chroms[seqname]}, query=query)
            if block[2] <= end and block[3] >= start
        )
        self.reset_blocks()
        return True

    def _walk(
        self,
        chroms: Mapping[str, int],
        header: bool = False,
        query: tuple[int, int] | None = None,
    ) -> Iterator[tuple]:
        if header:
            yield (HEADER, {"header": dict(self._handle.header()), "chroms": dict(chroms)})
        for chrom, length in chroms.items():
            first, last = query if query is not None else (0, length)
            if first >= last:
                continue
            for item in self.fetch(chrom, first, last) or ():
                yield (ENTRY, chrom, *item)

    @abstractmethod
    def check_kind(self, handle: Any) -> bool:
        """Return whether an open pyBigWig handle holds this format."""
        raise NotImplementedError("check_kind must be implemented by big file formats")

    @abstractmethod
    def fetch(self, chrom: str, start: int, end: int) -> Any:
        """Return the index entries overlapping a half-open range."""
        raise NotImplementedError("fetch must be implemented by big file formats")


class BigBedParser(BigFileParser):
    """Parser for bigBed files; entries decode like BED lines."""

    format_name = "bigBed"

    def check_kind(self, handle: Any) -> bool:
        return handle.isBigBed()

    def fetch(self, chrom: str, start: int, end: int) -> Any:
        return self._handle.entries(chrom, start, end, withString=True)

    def read_record(self) -> Record:
        _, chrom, start, end, rest = self.current_block
        extra = rest.split("\t") if rest else []
        name = extra[0] if len(extra) > 0 else "."
        score = extra[1] if len(extra) > 1 else "."
        try:
            strand = encode_strand(extra[2] if len(extra) > 2 else ".")
            thick_start = int(extra[3]) if len(extra) > 3 else 0
            thick_end = int(extra[4]) if len(extra) > 4 else 0
        except ValueError as e:
            raise MalformedBlockError(f"{self.path}: bad bigBed entry {rest!r}: {e}") from None
        return Record(
            seqname=chrom,
            start=start,
            end=end,
            name=name,
            score=score,
            strand=strand,
            thick_start=thick_start,
            thick_end=thick_end,
            attributes={"extra": extra[5:]} if len(extra) > 5 else {},
        )


class BigWigParser(BigFileParser):
    """Parser for bigWig files; each interval's value becomes the score."""

    format_name = "bigWig"

    def check_kind(self, handle: Any) -> bool:
        return handle.isBigWig()

    def fetch(self, chrom: str, start: int, end: int) -> Any:
        return self._handle.intervals(chrom, start, end)

    def read_record(self) -> Record:
        _, chrom, start, end, value = self.current_block
        return Record(
            seqname=chrom,
            start=start,
            end=end,
            score=f"{value:g}",
            attributes={"value": value},
        )
