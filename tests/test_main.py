"""Tests for the command line entry point."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from main import main, parse_region


@pytest.fixture(autouse=True)
def restore_logging():
    """``setup_logging`` replaces the root handlers; put them back."""
    handlers = list(logging.root.handlers)
    level = logging.root.level
    yield
    logging.root.handlers = handlers
    logging.root.setLevel(level)


class TestParseRegion:
    def test_valid(self) -> None:
        assert parse_region("chr1:100-200") == ("chr1", 100, 200)

    @pytest.mark.parametrize("text", ["chr1", "chr1:100", "chr1:a-b", "chr1:200-100"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_region(text)


class TestMain:
    def test_json_lines(self, bed_scenario: Path, capsys) -> None:
        assert main(["bed", str(bed_scenario)]) == 0
        lines = capsys.readouterr().out.splitlines()
        records = [json.loads(line) for line in lines]
        assert [(r["start"], r["end"], r["strand"]) for r in records] == [
            (100, 200, 1),
            (300, 400, -1),
        ]

    def test_bed_columns(self, bed_scenario: Path, capsys) -> None:
        assert main(["bed", str(bed_scenario), "--bed"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "chr1\t100\t200\tfeatA\t.\t+\t0\t0",
            "chr1\t300\t400\tfeatB\t.\t-\t0\t0",
        ]

    def test_output_file(self, bed_scenario: Path, tmp_path: Path) -> None:
        output = tmp_path / "out.jsonl"
        assert main(["bed", str(bed_scenario), "-o", str(output), "--no-metadata"]) == 0
        assert len(output.read_text().splitlines()) == 2

    def test_config_file(self, bed_scenario: Path, tmp_path: Path, capsys) -> None:
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"mustParseMetadata": False}))
        assert main(["bed", str(bed_scenario), "-c", str(config)]) == 0
        assert len(capsys.readouterr().out.splitlines()) == 2

    def test_bad_config(self, bed_scenario: Path, tmp_path: Path, capsys) -> None:
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"unknown": 1}))
        assert main(["bed", str(bed_scenario), "-c", str(config)]) == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_missing_input(self, tmp_path: Path, capsys) -> None:
        assert main(["bed", str(tmp_path / "missing.bed")]) == 1
        assert "Error processing" in capsys.readouterr().err

    def test_region_on_unindexed_file(self, bed_scenario: Path, capsys) -> None:
        assert main(["bed", str(bed_scenario), "-r", "chr1:1-500"]) == 1
        assert "seek" in capsys.readouterr().err

    def test_malformed_input(self, write_file, capsys) -> None:
        path = write_file("bad.bed", "chr1\tx\t10\n")
        assert main(["bed", str(path)]) == 1
        assert "chromStart" in capsys.readouterr().err

    def test_unknown_format_rejected(self, bed_scenario: Path) -> None:
        with pytest.raises(SystemExit):
            main(["nope", str(bed_scenario)])
