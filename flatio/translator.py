"""Translate API feature objects into the fixed record column shape."""

from __future__ import annotations

from typing import Any

from .record import STRAND_ENCODING, Record

COLUMNS = [
    "seqname", "start", "end", "name", "score", "strand", "thickStart", "thickEnd",
]

_STRAND_SYMBOLS = {value: symbol for symbol, value in STRAND_ENCODING.items()}


class FeatureTranslator:
    """Column accessors for genome features.

    A feature is any object exposing ``slice.seq_region_name``, ``start``,
    ``end``, ``stable_id`` and ``strand``.  ``score`` is always ``"."`` and
    the thick start/end columns are placeholders that keep the column count
    fixed.
    """

    def get_seqname(self, feature: Any) -> str:
        return feature.slice.seq_region_name

    def get_start(self, feature: Any) -> int:
        return feature.start

    def get_end(self, feature: Any) -> int:
        return feature.end

    def get_name(self, feature: Any) -> str:
        return feature.stable_id

    def get_score(self, feature: Any) -> str:
        return "."

    def get_strand(self, feature: Any) -> int:
        return feature.strand

    def get_thickStart(self, feature: Any) -> int:
        return 0

    def get_thickEnd(self, feature: Any) -> int:
        return 0

    def columns(self, feature: Any) -> list[Any]:
        """Return the feature as a list ordered like ``COLUMNS``."""
        return [getattr(self, f"get_{column}")(feature) for column in COLUMNS]

    def to_record(self, feature: Any) -> Record:
        """Build a :class:`Record` carrying the same columns."""
        seqname, start, end, name, score, strand, thick_start, thick_end = self.columns(feature)
        return Record(
            seqname=seqname,
            start=start,
            end=end,
            name=name,
            score=score,
            strand=strand,
            thick_start=thick_start,
            thick_end=thick_end,
        )


def strand_symbol(value: int) -> str:
    """Inverse of the strand encoding: ``1`` -> ``+``, ``0`` -> ``.``, ``-1`` -> ``-``."""
    try:
        return _STRAND_SYMBOLS[value]
    except KeyError:
        raise ValueError(f"Invalid strand value {value!r}; expected 1, 0 or -1") from None


def record_columns(record: Record) -> list[Any]:
    """Return a parsed record in the same column order as ``COLUMNS``."""
    return [
        record.get_seqname(),
        record.get_start(),
        record.get_end(),
        record.get_name(),
        record.get_score(),
        record.get_strand(),
        record.get_thickStart(),
        record.get_thickEnd(),
    ]
