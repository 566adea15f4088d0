"""Format plugins package."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from ..exceptions import UnsupportedFormatError
from ..parser import Parser
from .bed import BedParser
from .bigfile import BigBedParser, BigWigParser
from .emf import EMFParser
from .fasta import FastaParser
from .gff3 import GFF3Parser
from .gvf import GVFParser
from .psl import PSLParser
from .text import TabixMixin, TextParser
from .wig import WigParser

logger = logging.getLogger(__name__)


class Format(str, Enum):
    """Supported format identifiers."""

    BED = "bed"
    BIGBED = "bigBed"
    BIGWIG = "bigWig"
    EMF = "EMF"
    FASTA = "fasta"
    GFF3 = "gff3"
    GVF = "gvf"
    PSL = "psl"
    WIG = "wig"


PARSERS: dict[Format, type[Parser]] = {
    Format.BED: BedParser,
    Format.BIGBED: BigBedParser,
    Format.BIGWIG: BigWigParser,
    Format.EMF: EMFParser,
    Format.FASTA: FastaParser,
    Format.GFF3: GFF3Parser,
    Format.GVF: GVFParser,
    Format.PSL: PSLParser,
    Format.WIG: WigParser,
}


def available_formats() -> list[str]:
    """Return the recognised format identifiers."""
    return [fmt.value for fmt in Format]


def get_parser(format_identifier: str | Format) -> type[Parser]:
    """Get the parser class for a format identifier.

    Raises:
        UnsupportedFormatError: If the identifier is not recognised.
    """
    try:
        return PARSERS[Format(format_identifier)]
    except ValueError:
        joined = ", ".join(available_formats())
        raise UnsupportedFormatError(
            f"Unsupported format {format_identifier!r}; expected one of: {joined}"
        ) from None


def open_as(format_identifier: str | Format, *args: Any, **kwargs: Any) -> Parser:
    """Open a parser for *format_identifier*.

    Remaining arguments go to the parser constructor, typically the input
    path (or text stream) and an optional configuration.
    """
    parser_class = get_parser(format_identifier)
    logger.debug("Opening %s with %s", format_identifier, parser_class.__name__)
    return parser_class(*args, **kwargs)


__all__ = [
    "BedParser",
    "BigBedParser",
    "BigWigParser",
    "EMFParser",
    "FastaParser",
    "Format",
    "GFF3Parser",
    "GVFParser",
    "PARSERS",
    "PSLParser",
    "TabixMixin",
    "TextParser",
    "WigParser",
    "available_formats",
    "get_parser",
    "open_as",
]
