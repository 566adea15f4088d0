"""Shared block source for line-oriented text formats."""

from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, Iterator, Mapping

from ..config import ParserConfig
from ..exceptions import DependencyMissingError, MalformedBlockError, NotSupportedError
from ..parser import Parser

logger = logging.getLogger(__name__)


class TextParser(Parser):
    """Parser whose blocks are the non-blank lines of a text stream.

    *source* is either a path, opened (and later closed) by the parser with
    the configured encoding, or an already open text stream that stays owned
    by the caller.
    """

    def __init__(
        self,
        source: str | Path | IO[str],
        config: ParserConfig | Mapping[str, Any] | None = None,
    ) -> None:
        self.source = source
        self.path: Path | None = None if hasattr(source, "readline") else Path(source)
        self.line_number = 0
        self._handle: IO[str] | None = None
        self._owns_handle = False
        self._lines: Iterator[str] | None = None
        super().__init__(config)

    def open(self) -> None:
        if self.path is None:
            self._handle = self.source  # type: ignore[assignment]
            self._owns_handle = False
        else:
            if not self.path.exists():
                raise FileNotFoundError(f"Input file not found: {self.path}")
            self._handle = open(self.path, "r", encoding=self.config.encoding)
            self._owns_handle = True
        self._lines = iter(self._handle)
        logger.info("Reading %s input from: %s", self.format_name, self.describe_source())

    def close(self) -> None:
        if self._handle is not None and self._owns_handle:
            self._handle.close()
        self._handle = None
        self._lines = None

    def describe_source(self) -> str:
        if self.path is not None:
            return str(self.path)
        return getattr(self.source, "name", "<stream>")

    def read_block(self) -> str | None:
        if self._lines is None:
            return None
        for line in self._lines:
            self.line_number += 1
            line = line.rstrip("\r\n")
            if line.strip():
                return line
        self._lines = None
        return None

    def malformed(self, message: str) -> MalformedBlockError:
        """Build an error naming the source and the offending block."""
        return MalformedBlockError(
            f"{self.describe_source()}: {message}: {self.current_block!r}"
        )

    def split_fields(self, minimum: int, sep: str | None = "\t") -> list[str]:
        fields = self.current_block.split(sep)
        if len(fields) < minimum:
            raise self.malformed(
                f"expected at least {minimum} columns, got {len(fields)}"
            )
        return fields

    def parse_int(self, value: str, column: str) -> int:
        try:
            return int(value)
        except ValueError:
            raise self.malformed(f"{column} is not an integer: {value!r}") from None


class TabixMixin(ABC):
    """Indexed access to bgzipped, tabix-indexed text files through pysam.

    A path ending in ``.gz`` with a ``.tbi`` index next to it is read
    through the index: header lines first, then every data line.  ``seek``
    replaces the block source with an index query, which never yields
    header lines.  Plain text input does not support ``seek``.

    Subclasses implement :meth:`region_of`.
    """

    _tabix: Any = None

    @abstractmethod
    def region_of(self, fields: list[str]) -> tuple[int, int]:
        """Return the (start, end) written in a data line's columns."""
        raise NotImplementedError("region_of must be implemented by indexed formats")

    def is_indexed(self) -> bool:
        path = getattr(self, "path", None)
        return (
            path is not None
            and path.suffix == ".gz"
            and Path(f"{path}.tbi").exists()
        )

    def open(self) -> None:
        if not self.is_indexed():
            super().open()
            return

        tabix = self._open_tabix()
        self._lines = itertools.chain(tabix.header, tabix.fetch())
        logger.info("Reading %s input from: %s (indexed)", self.format_name, self.path)

    def seek(self, seqname: str, start: int, end: int) -> bool:
        if not self.is_indexed():
            raise NotSupportedError(
                f"seek requires a bgzipped file with a tabix index; none found for "
                f"{self.describe_source()}"
            )
        tabix = self._open_tabix()
        if seqname not in tabix.contigs:
            logger.warning("Sequence %r not present in index of %s", seqname, self.path)
            self._lines = iter(())
            self.reset_blocks()
            return False

        # Closed [start, end] in file coordinates.  The tabix query is
        # half-open, so widen it by one on each side and filter exactly.
        logger.debug("Seeking %s:%d-%d in %s", seqname, start, end, self.path)
        query = tabix.fetch(seqname, max(start - 1, 0), end + 1)
        self._lines = (
            line for line in query
            if self._overlaps(line, start, end)
        )
        self.reset_blocks()
        return True

    def _overlaps(self, line: str, start: int, end: int) -> bool:
        try:
            first, last = self.region_of(line.split("\t"))
        except (ValueError, IndexError):
            raise MalformedBlockError(
                f"{self.describe_source()}: unreadable coordinates in indexed line: {line!r}"
            ) from None
        return first <= end and last >= start

    def _open_tabix(self) -> Any:
        if self._tabix is not None:
            return self._tabix
        try:
            import pysam
        except ImportError as e:
            raise DependencyMissingError(
                "pysam is required for indexed access. pip install pysam"
            ) from e

        self._tabix = pysam.TabixFile(str(self.path))
        logger.info("Using indexed access for %s", self.path)
        return self._tabix

    def close(self) -> None:
        if self._tabix is not None:
            self._tabix.close()
            self._tabix = None
        super().close()
