"""
espc Command-Line Tests
=======================

Tests for the espc command: output locations, modes, options and exit
codes.
"""

import pytest
from click.testing import CliRunner

from esp32_sdk import __version__
from esp32_sdk.cli.espc import main
from esp32_sdk.cli.errors import ExitCode, exit_code_for, handle_cli_exception
from esp32_sdk.errors import ESP32Error
from esp32_sdk.transpiler.errors import MappingLoadError, TranspilerIOError


BLINK_SOURCE = """package main

import "github.com/andygeiss/esp32/api/controller/wifi"

func setup() {
    serial.Begin(115200)
    wifi.Begin(ssid)
}
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "blink.go"
    path.write_text(BLINK_SOURCE, encoding="utf-8")
    return path


class TestCommand:
    """Tests for normal translation runs."""

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Translate Go source code into an Arduino sketch" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
        assert "espc" in result.output

    def test_default_output_path(self, runner, source_file):
        """Without -o the sketch goes next to the input with .ino."""
        result = runner.invoke(main, [str(source_file)])

        assert result.exit_code == 0
        sketch_path = source_file.with_suffix(".ino")
        assert sketch_path.exists()
        sketch = sketch_path.read_text(encoding="utf-8")
        assert sketch.startswith("#include <WiFi.h>\n")
        assert "Serial.begin(115200);" in sketch
        assert "WiFi.begin(ssid);" in sketch
        assert f"Translated {source_file} -> {sketch_path}" in result.output

    def test_output_option(self, runner, source_file, tmp_path):
        output_path = tmp_path / "out" / "sketch.ino"
        output_path.parent.mkdir()
        result = runner.invoke(main, [str(source_file), "-o", str(output_path)])

        assert result.exit_code == 0
        assert output_path.exists()
        assert not source_file.with_suffix(".ino").exists()

    def test_stdout(self, runner, source_file):
        """--stdout prints the sketch and writes no file."""
        result = runner.invoke(main, ["--stdout", str(source_file)])

        assert result.exit_code == 0
        assert "void setup() {" in result.output
        assert "Translated" not in result.output
        assert not source_file.with_suffix(".ino").exists()

    def test_ast(self, runner, source_file):
        """--ast prints the parsed tree and writes no file."""
        result = runner.invoke(main, ["--ast", str(source_file)])

        assert result.exit_code == 0
        assert "Program: package main" in result.output
        assert "Function: setup()" in result.output
        assert not source_file.with_suffix(".ino").exists()

    def test_mapping_option(self, runner, source_file, tmp_path):
        """-m replaces the bundled identifier rules."""
        mapping_path = tmp_path / "rules.json"
        mapping_path.write_text('{"serial.Begin": "startSerial"}', encoding="utf-8")

        result = runner.invoke(main, ["--stdout", "-m", str(mapping_path), str(source_file)])

        assert result.exit_code == 0
        assert "startSerial(115200);" in result.output

    def test_verbose(self, runner, source_file):
        result = runner.invoke(main, ["-v", str(source_file)])

        assert result.exit_code == 0
        assert f"Translating {source_file}" in result.output
        assert "Identifier rules: bundled" in result.output
        assert "Parsed: 1 declarations" in result.output
        assert "Includes: <WiFi.h>" in result.output
        assert "Added empty loop() and setup()" not in result.output

    def test_verbose_entry_points(self, runner, tmp_path):
        path = tmp_path / "empty.go"
        path.write_text("package main\n", encoding="utf-8")
        result = runner.invoke(main, ["-v", str(path)])

        assert result.exit_code == 0
        assert "Added empty loop() and setup()" in result.output


class TestErrors:
    """Tests for failures and exit codes."""

    def test_missing_input(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing.go")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_missing_mapping(self, runner, source_file, tmp_path):
        result = runner.invoke(main, ["-m", str(tmp_path / "missing.json"), str(source_file)])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_malformed_mapping(self, runner, source_file, tmp_path):
        """A malformed mapping fails the run instead of being ignored."""
        mapping_path = tmp_path / "rules.json"
        mapping_path.write_text("{broken", encoding="utf-8")

        result = runner.invoke(main, [str(source_file), "-m", str(mapping_path)])

        assert result.exit_code == ExitCode.TRANSLATION_ERROR
        assert "invalid JSON" in result.output
        assert not source_file.with_suffix(".ino").exists()

    def test_syntax_error(self, runner, tmp_path):
        path = tmp_path / "bad.go"
        path.write_text("package main\nfunc f( {}\n", encoding="utf-8")

        result = runner.invoke(main, [str(path)])

        assert result.exit_code == ExitCode.TRANSLATION_ERROR
        assert f"{path}:2:9: error:" in result.output
        assert not path.with_suffix(".ino").exists()

    def test_unsupported_feature(self, runner, tmp_path):
        path = tmp_path / "loop.go"
        path.write_text("package main\nfunc loop() {\n    for {}\n}\n", encoding="utf-8")

        result = runner.invoke(main, [str(path)])

        assert result.exit_code == ExitCode.TRANSLATION_ERROR
        assert "unsupported feature: 'for' statement" in result.output

    def test_directory_input_rejected(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path)])
        assert result.exit_code == ExitCode.INVALID_ARGS


class TestHandleCliException:
    """Tests for the shared exception handler."""

    def test_transpiler_error(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(MappingLoadError("x.json", "file not found"))
        assert exc_info.value.code == ExitCode.TRANSLATION_ERROR

    def test_file_not_found(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(FileNotFoundError("gone"))
        assert exc_info.value.code == ExitCode.INVALID_ARGS

    def test_internal_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(RuntimeError("boom"))
        assert exc_info.value.code == ExitCode.INTERNAL_ERROR
        assert "Internal error: boom" in capsys.readouterr().err

    def test_exit_code_mapping(self):
        assert exit_code_for(TranspilerIOError("writing sketch", "disk full")) == ExitCode.TRANSLATION_ERROR
        assert exit_code_for(ESP32Error("other")) == ExitCode.TRANSLATION_ERROR
        assert exit_code_for(PermissionError("denied")) == ExitCode.INVALID_ARGS
        assert exit_code_for(KeyError("x")) == ExitCode.INTERNAL_ERROR
