"""Tests for flatio.parser – lookahead buffer and record iteration."""

from __future__ import annotations

import pytest

from flatio.exceptions import NotSupportedError
from flatio.parser import BlockBuffer, Parser


# ===================================================================
# BlockBuffer
# ===================================================================


class TestBlockBuffer:
    def _source(self, items):
        it = iter(items)
        calls = []

        def fetch():
            calls.append(1)
            return next(it, None)

        return fetch, calls

    def test_first_shift_only_primes_waiting(self) -> None:
        fetch, _ = self._source(["a", "b"])
        buffer = BlockBuffer(fetch)
        buffer.shift()
        assert buffer.current is None
        assert buffer.waiting == "a"

    def test_second_shift_exposes_first_block(self) -> None:
        fetch, _ = self._source(["a", "b"])
        buffer = BlockBuffer(fetch)
        buffer.shift()
        buffer.shift()
        assert buffer.current == "a"
        assert buffer.waiting == "b"

    def test_shift_past_end_is_not_an_error(self) -> None:
        fetch, _ = self._source(["a"])
        buffer = BlockBuffer(fetch)
        for _ in range(5):
            buffer.shift()
        assert buffer.current is None
        assert buffer.waiting is None
        assert buffer.exhausted

    def test_source_not_called_after_exhaustion(self) -> None:
        fetch, calls = self._source(["a"])
        buffer = BlockBuffer(fetch)
        buffer.shift()
        buffer.shift()
        assert len(calls) == 2
        buffer.shift()
        buffer.shift()
        assert len(calls) == 2

    def test_reset_reenables_fetching(self) -> None:
        fetch, calls = self._source(["a"])
        buffer = BlockBuffer(fetch)
        buffer.shift()
        buffer.shift()
        buffer.reset()
        assert buffer.current is None
        assert not buffer.exhausted
        buffer.shift()
        assert len(calls) == 3


# ===================================================================
# Parser.next
# ===================================================================


class TestNext:
    @pytest.mark.parametrize("n_meta, n_data", [(0, 0), (0, 3), (2, 0), (1, 1), (3, 4)])
    def test_m_plus_one_calls(self, list_parser, n_meta: int, n_data: int) -> None:
        blocks = [f"#k{i}=v{i}" for i in range(n_meta)]
        blocks += [f"chr1 {i} {i + 1}" for i in range(n_data)]
        parser = list_parser(blocks)

        results = [parser.next() for _ in range(n_data + 1)]
        assert results == [True] * n_data + [False]

    @pytest.mark.parametrize("n_meta, n_data", [(1, 1), (2, 3)])
    def test_metadata_changed_only_on_first_record(
        self, list_parser, n_meta: int, n_data: int
    ) -> None:
        blocks = [f"#k{i}=v{i}" for i in range(n_meta)]
        blocks += [f"chr1 {i} {i + 1}" for i in range(n_data)]
        parser = list_parser(blocks)

        flags = []
        while parser.next():
            flags.append(parser.metadata_changed)
        assert flags == [True] + [False] * (n_data - 1)

    def test_no_metadata_never_changes(self, list_parser) -> None:
        parser = list_parser(["chr1 1 2", "chr1 3 4"])
        flags = []
        while parser.next():
            flags.append(parser.metadata_changed)
        assert flags == [False, False]

    def test_interleaved_metadata_flags_following_record(self, list_parser) -> None:
        parser = list_parser(["chr1 1 2", "#track=b", "chr1 3 4", "chr1 5 6"])
        flags = []
        while parser.next():
            flags.append(parser.metadata_changed)
        assert flags == [False, True, False]
        assert parser.metadata == {"track": "b"}

    def test_metadata_only_stream_fails_immediately(self, list_parser) -> None:
        parser = list_parser(["#a=1", "#b=2"])
        assert parser.next() is False
        assert parser.record is None
        assert parser.metadata == {"a": "1", "b": "2"}

    def test_empty_stream(self, list_parser) -> None:
        parser = list_parser([])
        assert parser.next() is False
        assert parser.record is None

    def test_record_decoded(self, list_parser) -> None:
        parser = list_parser(["chr2 10 20 -"])
        assert parser.next()
        assert parser.record.seqname == "chr2"
        assert parser.record.start == 10
        assert parser.record.end == 20
        assert parser.record.strand == -1

    def test_record_cleared_on_exhaustion(self, list_parser) -> None:
        parser = list_parser(["chr1 1 2"])
        assert parser.next()
        assert parser.record is not None
        assert parser.next() is False
        assert parser.record is None

    def test_exhaustion_is_idempotent(self, list_parser) -> None:
        parser = list_parser(["chr1 1 2"])
        assert parser.next()
        assert parser.next() is False
        fetches = parser.fetches
        for _ in range(3):
            assert parser.next() is False
        assert parser.fetches == fetches
        assert parser.current_block is None

    def test_metadata_overwritten_by_later_blocks(self, list_parser) -> None:
        parser = list_parser(["#name=first", "chr1 1 2", "#name=second", "chr1 3 4"])
        parser.next()
        assert parser.metadata["name"] == "first"
        parser.next()
        assert parser.metadata["name"] == "second"

    def test_lookahead_holds_next_block(self, list_parser) -> None:
        parser = list_parser(["chr1 1 2", "chr1 3 4"])
        parser.next()
        assert parser.current_block == "chr1 1 2"
        assert parser.waiting_block == "chr1 3 4"

    def test_counters(self, list_parser) -> None:
        parser = list_parser(["#a=1", "chr1 1 2", "#b=2", "chr1 3 4"])
        list(parser)
        assert parser.records_read == 2
        assert parser.metadata_blocks_read == 2

    def test_plugin_errors_propagate(self, list_parser) -> None:
        parser = list_parser(["chr1 1 2 x"])
        with pytest.raises(ValueError, match="Invalid strand"):
            parser.next()


# ===================================================================
# Disabled metadata parsing
# ===================================================================


class TestDisabledMetadata:
    def test_metadata_skipped_not_decoded(self, list_parser) -> None:
        parser = list_parser(
            ["#a=1", "chr1 1 2", "#b=2", "chr1 3 4"],
            config={"parse_metadata": False},
        )
        starts = []
        while parser.next():
            assert parser.metadata_changed is False
            starts.append(parser.record.start)
        assert starts == [1, 3]
        assert parser.metadata == {}

    def test_legacy_option_spellings(self, list_parser) -> None:
        for key in ("must_parse_metadata", "mustParseMetadata"):
            parser = list_parser(["#a=1", "chr1 1 2"], config={key: False})
            assert parser.next()
            assert parser.metadata == {}
            assert parser.config.parse_metadata is False

    def test_metadata_blocks_still_counted(self, list_parser) -> None:
        parser = list_parser(["#a=1", "#b=2", "chr1 1 2"], config={"parse_metadata": False})
        parser.next()
        assert parser.metadata_blocks_read == 2


# ===================================================================
# Lifecycle
# ===================================================================


class TestLifecycle:
    def test_construction_opens(self, list_parser) -> None:
        parser = list_parser(["chr1 1 2"])
        assert parser.opened
        assert parser.current_block is None
        assert parser.waiting_block == "chr1 1 2"

    def test_context_manager_closes(self, list_parser) -> None:
        with list_parser(["chr1 1 2"]) as parser:
            assert parser.next()
        assert parser.closed

    def test_context_manager_closes_on_error(self, list_parser) -> None:
        with pytest.raises(ValueError):
            with list_parser(["chr1 x 2"]) as parser:
                parser.next()
        assert parser.closed

    def test_iteration(self, list_parser) -> None:
        parser = list_parser(["#a=1", "chr1 1 2", "chr1 3 4"])
        assert [r.start for r in parser] == [1, 3]

    def test_strand_encoding_constant(self, list_parser) -> None:
        parser = list_parser([])
        assert parser.STRAND_ENCODING == {"+": 1, ".": 0, "-": -1}
        assert Parser.STRAND_ENCODING is parser.STRAND_ENCODING


# ===================================================================
# Seek and required primitives
# ===================================================================


class TestSeekAndPrimitives:
    def test_seek_not_supported_by_default(self, list_parser) -> None:
        parser = list_parser(["chr1 1 2"])
        with pytest.raises(NotSupportedError):
            parser.seek("chr1", 1, 10)

    def test_parser_still_usable_after_failed_seek(self, list_parser) -> None:
        parser = list_parser(["chr1 1 2"])
        with pytest.raises(NotSupportedError):
            parser.seek("chr1", 1, 10)
        assert parser.next()

    def test_missing_primitives_cannot_instantiate(self) -> None:
        class Incomplete(Parser):
            def open(self) -> None:
                pass

        with pytest.raises(TypeError):
            Incomplete()

    def test_primitive_deferring_to_base_raises(self) -> None:
        class Deferring(Parser):
            def open(self) -> None:
                pass

            def close(self) -> None:
                pass

            def read_block(self):
                return super().read_block()

            def is_metadata(self) -> bool:
                return super().is_metadata()

            def read_metadata(self) -> None:
                super().read_metadata()

            def read_record(self):
                return super().read_record()

        with pytest.raises(NotImplementedError, match="read_block"):
            Deferring()
