"""Streaming parsers for genomic flat-file formats."""

from .config import ParserConfig
from .exceptions import (
    DependencyMissingError,
    MalformedBlockError,
    NotSupportedError,
    ParseError,
    UnsupportedFormatError,
)
from .formats import Format, available_formats, get_parser, open_as
from .parser import BlockBuffer, Parser
from .record import STRAND_ENCODING, Record, encode_strand
from .translator import FeatureTranslator, record_columns, strand_symbol

__all__ = [
    "BlockBuffer",
    "DependencyMissingError",
    "FeatureTranslator",
    "Format",
    "MalformedBlockError",
    "NotSupportedError",
    "ParseError",
    "Parser",
    "ParserConfig",
    "Record",
    "STRAND_ENCODING",
    "UnsupportedFormatError",
    "available_formats",
    "encode_strand",
    "get_parser",
    "open_as",
    "record_columns",
    "strand_symbol",
]
