"""End-to-end tests for the command line interface."""

import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from fatfilefinder import __version__
from fatfilefinder.cli.main import cli
from fatfilefinder.core import logging_config


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    """Config file that keeps the holding directory inside tmp_path."""
    path = tmp_path / "config.ini"
    path.write_text(f"[actions]\ntemp_root = {tmp_path / 'temp-root'}\n")
    return path


@pytest.fixture
def scan_dir(tmp_path):
    """Directory with a.log (50 bytes), b.log (5000 bytes) and c.txt (5000 bytes)."""
    directory = tmp_path / "scan"
    directory.mkdir()
    (directory / "a.log").write_bytes(b"a" * 50)
    (directory / "b.log").write_bytes(b"b" * 5000)
    (directory / "c.txt").write_bytes(b"c" * 5000)
    return directory


@pytest.fixture(autouse=True)
def detach_logging():
    """Drop the handlers a CLI run bound to the runner's streams."""
    yield
    if logging_config._logging_manager is not None:
        logging_config._logging_manager.close()


def invoke(runner, config_file, args, answers=""):
    return runner.invoke(cli, ["--config", str(config_file)] + args, input=answers)


def test_reports_matching_files_only(runner, config_file, scan_dir):
    result = invoke(runner, config_file,
                    ["-d", str(scan_dir), "-s", "1000", "-e", "log"], "n\nn\n")

    assert result.exit_code == 0
    assert "Files found:" in result.output
    assert f"{scan_dir / 'b.log'} - 5000 bytes" in result.output
    assert "a.log" not in result.output
    assert "c.txt" not in result.output


def test_empty_directory(runner, config_file, tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()

    result = invoke(runner, config_file, ["-d", str(empty), "-s", "0"])

    assert result.exit_code == 0
    assert "No files found that match the criteria." in result.output


def test_missing_directory_is_not_fatal(runner, config_file, tmp_path):
    result = invoke(runner, config_file, ["-d", str(tmp_path / "missing"), "-s", "0"])

    assert result.exit_code == 0
    assert "No files found that match the criteria." in result.output


def test_unit_suffix_size(runner, config_file, scan_dir):
    result = invoke(runner, config_file, ["--directory", str(scan_dir), "--size", "4KB"], "n\nn\n")

    assert result.exit_code == 0
    assert "b.log - 5000 bytes" in result.output
    assert "c.txt - 5000 bytes" in result.output
    assert "a.log" not in result.output


def test_pattern_filter(runner, config_file, scan_dir):
    result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "0", "-p", r"^c\."], "n\nn\n")

    assert result.exit_code == 0
    assert "c.txt - 5000 bytes" in result.output
    assert "b.log" not in result.output


def test_bytes_format_rejects_units(runner, config_file, scan_dir):
    result = invoke(runner, config_file,
                    ["-d", str(scan_dir), "-s", "4KB", "--size-format", "bytes"])

    assert result.exit_code == 1
    assert "Files found:" not in result.output


def test_invalid_size(runner, config_file, scan_dir):
    result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "abc"])

    assert result.exit_code == 1
    assert "Files found:" not in result.output


def test_invalid_pattern(runner, config_file, scan_dir):
    result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "0", "-p", "(unclosed"])

    assert result.exit_code == 1


def test_missing_required_option(runner, config_file, scan_dir):
    result = invoke(runner, config_file, ["-d", str(scan_dir)])

    assert result.exit_code == 1
    assert "--size" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_first_match(runner, config_file, scan_dir):
    result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "0", "--first-match"], "n\nn\n")

    assert result.exit_code == 0
    assert result.output.count(" bytes\n") == 1


def test_archive_confirmed(runner, config_file, scan_dir, tmp_path):
    output = tmp_path / "found.zip"

    result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "1000"],
                    f"y\n{output}\nn\n")

    assert result.exit_code == 0
    assert "Files compressed successfully." in result.output
    with zipfile.ZipFile(output) as zf:
        assert sorted(zf.namelist()) == ["b.log", "c.txt"]
        assert zf.read("b.log") == b"b" * 5000
    assert (scan_dir / "b.log").exists()


def test_archive_onto_existing_file_reports_incomplete(runner, config_file, scan_dir, tmp_path):
    output = tmp_path / "taken.zip"
    output.write_bytes(b"occupied")

    result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "1000"],
                    f"Y\n{output}\nn\n")

    assert result.exit_code == 0
    assert "Archive incomplete" in result.output
    assert output.read_bytes() == b"occupied"


def test_relocate_confirmed(runner, config_file, scan_dir, tmp_path):
    holding = tmp_path / "temp-root" / "FatFileFinder"

    result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "1000", "-e", ".log"],
                    "n\n  Y  \n")

    assert result.exit_code == 0
    assert f"Moved: {scan_dir / 'b.log'} to {holding / 'b.log'}" in result.output
    assert "Files moved successfully." in result.output
    assert (holding / "b.log").read_bytes() == b"b" * 5000
    assert not (scan_dir / "b.log").exists()


@pytest.mark.parametrize("answer", ["", "yes", "n", "no", "yy"])
def test_only_y_confirms(runner, config_file, scan_dir, tmp_path, answer):
    result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "1000"],
                    f"{answer}\n{answer}\n")

    assert result.exit_code == 0
    assert "Enter the output ZIP file path" not in result.output
    assert "Moved:" not in result.output
    assert (scan_dir / "b.log").exists()
    assert not (tmp_path / "temp-root" / "FatFileFinder").exists()


def test_unexpected_error_exits_non_zero(runner, config_file, scan_dir):
    with patch("fatfilefinder.cli.main.FileScanner.scan", side_effect=RuntimeError("disk on fire")):
        result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "0"])

    assert result.exit_code == 1


def test_verbose_shows_statistics(runner, config_file, scan_dir):
    result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "1000", "-v"], "n\nn\n")

    assert result.exit_code == 0
    assert "Scanned 3 files in 1 directories" in result.output


def test_size_format_from_config(runner, tmp_path, scan_dir):
    config_file = tmp_path / "bytes.ini"
    config_file.write_text("[scan]\nsize_format = bytes\n")

    result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "4KB"])

    assert result.exit_code == 1


def test_log_file_option(runner, config_file, tmp_path):
    log_file = tmp_path / "logs" / "run.log"

    result = invoke(runner, config_file,
                    ["-d", str(tmp_path / "missing"), "-s", "0", "--log-file", str(log_file)])

    assert result.exit_code == 0
    assert "missing" in log_file.read_text()


def test_end_of_input_answers_no(runner, config_file, scan_dir, tmp_path):
    result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "1000"], "")

    assert result.exit_code == 0
    assert f"{scan_dir / 'b.log'} - 5000 bytes" in result.output
    assert "Enter the output ZIP file path" not in result.output
    assert (scan_dir / "b.log").exists()
    assert not (tmp_path / "temp-root" / "FatFileFinder").exists()


@pytest.mark.parametrize("answers", ["y\n\nn\n", "y\n"])
def test_blank_or_missing_zip_path_skips_archive(runner, config_file, scan_dir, tmp_path, answers):
    result = invoke(runner, config_file, ["-d", str(scan_dir), "-s", "1000"], answers)

    assert result.exit_code == 0
    assert "No output path given, skipping archive." in result.output
    assert "Files compressed successfully." not in result.output
    assert not list(tmp_path.glob("*.zip"))
    assert (scan_dir / "b.log").exists()
