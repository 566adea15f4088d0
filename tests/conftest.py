"""Shared fixtures for flatio tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from flatio.parser import Parser
from flatio.record import Record, encode_strand


# ---------------------------------------------------------------------------
# In-memory plugin
# ---------------------------------------------------------------------------


class ListParser(Parser):
    """Minimal plugin over a list of strings.

    Blocks starting with ``#`` are metadata of the form ``#key=value``.
    Data blocks are ``seqname start end [strand]``.  Every call to
    ``read_block`` is counted so tests can check the source is not touched
    after exhaustion.
    """

    format_name = "list"

    def __init__(self, blocks: list[str], config: Any = None) -> None:
        self.blocks = list(blocks)
        self.fetches = 0
        self.closed = False
        self.opened = False
        super().__init__(config)

    def open(self) -> None:
        self.opened = True
        self._iter = iter(self.blocks)

    def close(self) -> None:
        self.closed = True

    def read_block(self) -> str | None:
        self.fetches += 1
        return next(self._iter, None)

    def is_metadata(self) -> bool:
        return self.current_block.startswith("#")

    def read_metadata(self) -> None:
        key, _, value = self.current_block[1:].partition("=")
        self.metadata[key] = value

    def read_record(self) -> Record:
        seqname, start, end, *rest = self.current_block.split()
        return Record(
            seqname=seqname,
            start=int(start),
            end=int(end),
            strand=encode_strand(rest[0] if rest else "."),
        )


@pytest.fixture
def list_parser() -> Callable[..., ListParser]:
    """Factory for :class:`ListParser` instances."""

    def factory(blocks: list[str], config: Any = None) -> ListParser:
        return ListParser(blocks, config)

    return factory


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write *text* to ``tmp_path / name`` and return the path."""

    def writer(name: str, text: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path

    return writer


BED_SCENARIO = (
    "# sample features\n"
    "chr1  100  200  featA  .  +\n"
    "chr1  300  400  featB  .  -\n"
)


@pytest.fixture
def bed_scenario(write_file) -> Path:
    """The three-line BED input: one comment, two features."""
    return write_file("scenario.bed", BED_SCENARIO)
