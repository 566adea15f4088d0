"""Streaming parser engine.

A format plugin subclasses :class:`Parser` and supplies six primitives:

- ``open``: acquire the stream
- ``close``: release it (idempotent)
- ``read_block``: return the next atomic chunk of input, or ``None`` at the
  end of the stream (indefinitely)
- ``is_metadata``: classify ``current_block``
- ``read_metadata``: merge ``current_block`` into ``metadata``
- ``read_record``: decode ``current_block`` into a :class:`Record`

``seek`` is optional and only makes sense for sorted/indexed files.

The engine owns iteration: it keeps one block of lookahead, skips over
metadata blocks (decoding them unless disabled) and hands every remaining
block to ``read_record``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator, Mapping

from .config import ParserConfig
from .exceptions import NotSupportedError
from .record import STRAND_ENCODING, Record

logger = logging.getLogger(__name__)

Block = Any


class BlockBuffer:
    """Two-slot lookahead over a block source.

    ``shift`` is the only writer of both slots: it moves ``waiting`` into
    ``current`` and fetches a fresh ``waiting`` block.  Once the source has
    returned ``None`` it is not called again until :meth:`reset`.
    """

    def __init__(self, fetch: Callable[[], Block | None]) -> None:
        self._fetch = fetch
        self.current: Block | None = None
        self.waiting: Block | None = None
        self.exhausted = False

    def shift(self) -> None:
        self.current = self.waiting
        if self.exhausted:
            self.waiting = None
            return
        self.waiting = self._fetch()
        if self.waiting is None:
            self.exhausted = True

    def reset(self) -> None:
        """Drop both slots and re-enable fetching."""
        self.current = None
        self.waiting = None
        self.exhausted = False


class Parser(ABC):
    """Abstract streaming parser.

    Construction acquires the stream through :meth:`open` and primes the
    lookahead buffer.  Call :meth:`next` until it returns False, then
    :meth:`close` (or use the parser as a context manager).

    Attributes:
        record: The record decoded by the last successful :meth:`next`, or
            ``None``.
        metadata: Metadata accumulated over the whole stream.
        config: The :class:`ParserConfig` in effect.
    """

    STRAND_ENCODING: Mapping[str, int] = STRAND_ENCODING
    format_name: str = ""

    def __init__(self, config: ParserConfig | Mapping[str, Any] | None = None) -> None:
        self.config = ParserConfig.coerce(config)
        self.record: Record | None = None
        self.metadata: dict[str, Any] = {}
        self._metadata_changed = False
        self.records_read = 0
        self.metadata_blocks_read = 0
        self._buffer = BlockBuffer(self.read_block)

        self.open()
        logger.debug("Opened %s parser", self.format_name or type(self).__name__)
        try:
            self.shift_block()
        except Exception:
            self.close()
            raise

    # ------------------------------------------------------------------
    # Lookahead
    # ------------------------------------------------------------------

    @property
    def current_block(self) -> Block | None:
        return self._buffer.current

    @property
    def waiting_block(self) -> Block | None:
        return self._buffer.waiting

    def shift_block(self) -> None:
        """Load the waiting block as current and fetch a new waiting block."""
        self._buffer.shift()

    def reset_blocks(self) -> None:
        """Forget buffered blocks and prime the buffer from the source again.

        Seekable plugins call this after repositioning their block source.
        """
        self._buffer.reset()
        self.record = None
        self.shift_block()

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def next_block(self) -> None:
        """Advance to the next non-metadata block, absorbing metadata."""
        self._metadata_changed = False
        self.shift_block()
        while self.current_block is not None and self.is_metadata():
            self.metadata_blocks_read += 1
            if self.config.parse_metadata:
                self.read_metadata()
                self._metadata_changed = True
            self.shift_block()

    def next(self) -> bool:
        """Load the next record.

        Returns True when ``record`` holds a freshly decoded record and
        False once the stream is exhausted.  Calling again after False keeps
        returning False.
        """
        self.record = None
        self.next_block()

        if self.current_block is None:
            logger.debug(
                "End of stream: %d records, %d metadata blocks",
                self.records_read,
                self.metadata_blocks_read,
            )
            return False

        self.record = self.read_record()
        self.records_read += 1
        return True

    @property
    def metadata_changed(self) -> bool:
        """Whether a metadata block was absorbed by the last :meth:`next`."""
        return self._metadata_changed

    def __iter__(self) -> Iterator[Record]:
        while self.next():
            yield self.record

    def __enter__(self) -> "Parser":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Optional capability
    # ------------------------------------------------------------------

    def seek(self, seqname: str, start: int, end: int) -> bool:
        """Restrict subsequent records to those intersecting a region.

        The region is a closed interval (both ends inclusive) in the
        coordinates used by the file.  Returns True when the stream was
        repositioned and False when the index does not know *seqname*.

        Raises:
            NotSupportedError: The format is not backed by an index.
        """
        raise NotSupportedError(
            f"seek is not supported by the {self.format_name or type(self).__name__} "
            "parser; it requires a sorted, indexed file"
        )

    # ------------------------------------------------------------------
    # Required primitives
    # ------------------------------------------------------------------

    @abstractmethod
    def open(self) -> None:
        """Acquire the underlying stream."""
        raise NotImplementedError("open must be implemented by format plugins")

    @abstractmethod
    def close(self) -> None:
        """Release the underlying stream.  Must be safe to call twice."""
        raise NotImplementedError("close must be implemented by format plugins")

    @abstractmethod
    def read_block(self) -> Block | None:
        """Return the next block, or ``None`` at (and after) end of stream."""
        raise NotImplementedError("read_block must be implemented by format plugins")

    @abstractmethod
    def is_metadata(self) -> bool:
        """Return whether ``current_block`` is metadata."""
        raise NotImplementedError("is_metadata must be implemented by format plugins")

    @abstractmethod
    def read_metadata(self) -> None:
        """Merge ``current_block`` into ``metadata``."""
        raise NotImplementedError("read_metadata must be implemented by format plugins")

    @abstractmethod
    def read_record(self) -> Record:
        """Decode ``current_block`` into a :class:`Record`."""
        raise NotImplementedError("read_record must be implemented by format plugins")
