#!/usr/bin/env python3
"""
Tests for the tile_editor command line driver
"""

import logging

import pytest

from tile_patcher.logging_config import LOGGER_NAME
from tile_patcher.tile_editor import build_parser, main


@pytest.fixture(autouse=True)
def reset_logger():
    """main() installs handlers on the package logger; drop them afterwards"""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def script_file(tmp_path, source_bin, dest_bin):
    path = tmp_path / "edits.txt"
    path.write_text(f"{dest_bin}:\n 05 {source_bin}:0A\n")
    return path


@pytest.mark.unit
class TestArgumentParsing:

    def test_defaults(self):
        args = build_parser().parse_args(["edits.txt"])
        assert args.script == "edits.txt"
        assert args.log_level == "INFO"
        assert args.log_file is None
        assert not args.dry_run

    def test_script_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


@pytest.mark.integration
class TestMain:

    def test_applies_script(self, script_file, source_bin, dest_bin):
        assert main([str(script_file)]) == 0

        data = dest_bin.read_bytes()
        assert data[160:192] == source_bin.read_bytes()[320:352]
        assert data[:160] == bytes(160)
        assert data[192:] == bytes(len(data) - 192)

    def test_dry_run_writes_nothing(self, script_file, dest_bin, capsys):
        assert main([str(script_file), "--dry-run"]) == 0

        assert dest_bin.read_bytes() == bytes(64 * 32)
        out = capsys.readouterr().out
        assert ":0xA -> " in out
        assert "nothing written" in out

    def test_dry_run_listing_ignores_log_level(self, script_file, capsys):
        assert main([str(script_file), "--dry-run", "--log-level", "WARNING"]) == 0

        out = capsys.readouterr().out
        assert ":0xA -> " in out
        assert "nothing written" in out

    def test_malformed_raster_exit_status(self, tmp_path, dest_bin, malformed_pgm, capsys):
        script = tmp_path / "edits.txt"
        script.write_text(f"{dest_bin}:\n 00 {malformed_pgm}:0\n")

        assert main([str(script)]) == 1
        assert "Could not read raster" in capsys.readouterr().out
        assert dest_bin.read_bytes() == bytes(64 * 32)

    def test_parse_error_exit_status(self, tmp_path, capsys):
        script = tmp_path / "bad.txt"
        script.write_text(" 05 src.bin:0A\n")

        assert main([str(script)]) == 1
        assert "before any destination" in capsys.readouterr().out

    def test_missing_script(self, tmp_path):
        assert main([str(tmp_path / "missing.txt")]) == 1

    def test_short_destination_fails(self, tmp_path, source_bin):
        dest = tmp_path / "short.bin"
        dest.write_bytes(bytes(32))
        script = tmp_path / "edits.txt"
        script.write_text(f"{dest}:\n 01 {source_bin}:00\n")

        assert main([str(script)]) == 1
        assert dest.read_bytes() == bytes(32)

    def test_log_file(self, script_file, tmp_path):
        log_file = tmp_path / "patch.log"

        assert main([str(script_file), "--log-file", str(log_file)]) == 0
        logging.getLogger(LOGGER_NAME).handlers[-1].flush()
        assert "wrote 1 tile(s)" in log_file.read_text()
