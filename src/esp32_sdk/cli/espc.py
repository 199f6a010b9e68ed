"""
espc - Go to Arduino Sketch Transpiler Command-Line Interface
=============================================================

This module implements the command-line interface for the transpiler.
It translates a Go source file into an Arduino sketch for ESP32 boards.

Usage Examples
--------------
Basic translation:
    $ espc blink.go

With output file:
    $ espc blink.go -o sketch/sketch.ino

With custom identifier rules:
    $ espc -m rules.json blink.go

Full pipeline to the board:
    $ espc blink.go -o blink/blink.ino && arduino-cli compile blink

Verbose mode:
    $ espc -v blink.go
"""

import logging
from pathlib import Path
from typing import Optional

import click

from esp32_sdk import __version__
from esp32_sdk.transpiler import SketchTranspiler, TranspilerOptions
from esp32_sdk.cli.errors import handle_cli_exception


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output sketch file (default: input.ino)",
)
@click.option(
    "-m", "--mapping",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file of identifier overrides (default: bundled rules)",
)
@click.option(
    "--stdout",
    "to_stdout",
    is_flag=True,
    help="Print the sketch instead of writing a file",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="espc")
def main(
    input_file: Path,
    output: Optional[Path],
    mapping: Optional[Path],
    to_stdout: bool,
    ast: bool,
    verbose: bool,
) -> None:
    """
    Translate Go source code into an Arduino sketch for ESP32.

    INPUT_FILE is the Go source file (.go) to translate.

    The sketch can be compiled and flashed with the Arduino IDE or
    arduino-cli using the ESP32 board package.

    \b
    Examples:
        espc blink.go                # Outputs blink.ino
        espc blink.go -o out.ino     # Specify output file
        espc -m rules.json blink.go  # Custom identifier rules
        espc --stdout blink.go       # Print the sketch
        espc -v blink.go             # Verbose output

    \b
    Supported Go features:
        - package, import, func, const, var
        - typed parameters, no results
        - assignments and calls
        - unary and binary operators

    \b
    Identifier rules:
        serial.X and wifi.X become Serial.x and WiFi.x; other names
        are rewritten only by exact matches in the mapping file.
    """
    setup_logging(verbose)

    if output is None:
        output = input_file.with_suffix(".ino")

    options = TranspilerOptions(
        mapping_file=str(mapping) if mapping else None,
    )

    try:
        if verbose:
            click.echo(f"Translating {input_file}...")
            click.echo(f"Identifier rules: {mapping or 'bundled'}")

        transpiler = SketchTranspiler(options)

        # Nothing is written in --ast and --stdout modes
        write_to = None if (ast or to_stdout) else output
        result = transpiler.transpile_file(input_file, write_to)

        if ast:
            from esp32_sdk.transpiler.ast import ASTPrinter
            printer = ASTPrinter()
            click.echo(printer.print(result.ast))
            return

        if to_stdout:
            click.echo(result.sketch, nl=False)
            return

        if verbose:
            click.echo(f"Wrote {len(result.sketch)} bytes to {output}")
            if result.ast:
                decl_count = len(result.ast.declarations)
                click.echo(f"Parsed: {decl_count} declarations")
            if result.includes:
                click.echo(f"Includes: {', '.join(result.includes)}")
            if result.entry_points_added:
                click.echo("Added empty loop() and setup()")

        click.echo(f"Translated {input_file} -> {output}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
