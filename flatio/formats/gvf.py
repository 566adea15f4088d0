"""GVF (Genome Variation Format) parser, a GFF3 dialect for variants."""

from __future__ import annotations

from typing import Any

from .gff3 import GFF3Parser

# Pragmas that may legitimately repeat; their values accumulate in a list.
REPEATABLE_PRAGMAS: frozenset[str] = frozenset({
    "individual-id",
    "technology-platform",
    "data-source",
    "attribute-method",
    "phenotype-description",
    "phased-genotypes",
    "genomic-source",
})

LIST_ATTRIBUTES: tuple[str, ...] = (
    "Variant_seq", "Reference_seq", "Variant_reads", "Genotype",
    "Variant_effect",
)


class GVFParser(GFF3Parser):
    """Parser for GVF files.

    Behaves like :class:`GFF3Parser`; repeatable pragmas are collected in
    lists and comma separated variant attributes are split.
    """

    format_name = "gvf"

    def store_pragma(self, name: str, value: str) -> None:
        if name in REPEATABLE_PRAGMAS:
            self.metadata.setdefault(name, []).append(value)
        else:
            self.metadata[name] = value

    def extra_attributes(self, attributes: dict[str, Any]) -> dict[str, Any]:
        for key in LIST_ATTRIBUTES:
            value = attributes.get(key)
            if isinstance(value, str):
                attributes[key] = value.split(",")
        return attributes
