"""Parser configuration loading and validation."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

# Historical spellings of ``parse_metadata``.  They name one logical option.
_PARSE_METADATA_ALIASES: tuple[str, ...] = (
    "parse_metadata",
    "must_parse_metadata",
    "mustParseMetadata",
)


@dataclass(frozen=True)
class ParserConfig:
    """Options fixed for the lifetime of a parser.

    Attributes:
        parse_metadata: Decode metadata blocks into ``Parser.metadata``.
            When False, metadata blocks are still detected and skipped but
            their content is ignored.
        encoding: Text encoding used by line-oriented plugins that open
            files themselves.
    """

    parse_metadata: bool = True
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not isinstance(self.parse_metadata, bool):
            raise ValueError(
                f"parse_metadata must be a bool, got {self.parse_metadata!r}"
            )
        if not isinstance(self.encoding, str) or not self.encoding:
            raise ValueError("encoding must be a non-empty string")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParserConfig":
        """Create a ParserConfig from a mapping of option names.

        ``must_parse_metadata`` and ``mustParseMetadata`` are accepted as
        aliases of ``parse_metadata``.  Giving aliases with conflicting
        values, or any unknown key, raises ``ValueError``.
        """
        if not isinstance(data, Mapping):
            raise ValueError("Parser config must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(
            key for key in data
            if key not in known and key not in _PARSE_METADATA_ALIASES
        )
        if unknown:
            joined = ", ".join(unknown)
            raise ValueError(f"Unknown parser option(s): {joined}")

        kwargs: dict[str, Any] = {}
        given = {key: data[key] for key in _PARSE_METADATA_ALIASES if key in data}
        if given:
            values = set(given.values())
            if len(values) > 1:
                joined = ", ".join(f"{k}={v!r}" for k, v in given.items())
                raise ValueError(f"Conflicting metadata options: {joined}")
            kwargs["parse_metadata"] = values.pop()
        if "encoding" in data:
            kwargs["encoding"] = data["encoding"]
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: str | Path) -> "ParserConfig":
        """Load configuration from a JSON file holding a single object."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a JSON object: {path}")
        return cls.from_dict(data)

    @classmethod
    def coerce(cls, config: "ParserConfig | Mapping[str, Any] | None") -> "ParserConfig":
        """Return *config* as a ParserConfig (``None`` gives the defaults)."""
        if config is None:
            return cls()
        if isinstance(config, cls):
            return config
        return cls.from_dict(config)
