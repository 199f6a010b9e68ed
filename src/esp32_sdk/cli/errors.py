"""
espc Exit Codes and Error Reporting
===================================

Every failure of a translation run ends the process with one of the
ExitCode values; handle_cli_exception prints the message on stderr.

| Exit | Meaning                                                 |
|------|---------------------------------------------------------|
| 0    | sketch written                                          |
| 1    | syntax, unsupported feature, mapping or stream error    |
| 2    | bad arguments, missing or unreadable input files        |
| 3    | bug in espc itself                                      |
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from esp32_sdk.errors import ESP32Error
from esp32_sdk.transpiler.errors import TranspilerError


class ExitCode(IntEnum):
    """Process exit codes of espc."""
    SUCCESS = 0
    TRANSLATION_ERROR = 1
    INVALID_ARGS = 2
    INTERNAL_ERROR = 3


# Failures caused by how espc was invoked rather than by the Go source
USAGE_ERRORS = (click.BadParameter, FileNotFoundError, PermissionError)


def exit_code_for(error: BaseException) -> ExitCode:
    """Map an exception raised during a run to its exit code."""
    if isinstance(error, ESP32Error):
        return ExitCode.TRANSLATION_ERROR
    if isinstance(error, USAGE_ERRORS):
        return ExitCode.INVALID_ARGS
    return ExitCode.INTERNAL_ERROR


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report error on stderr and exit with the matching code.

    Transpiler errors already carry location, source line and hint, so
    they are printed as they are. Internal errors get a traceback in
    verbose mode.

    Raises:
        SystemExit: Always
    """
    code = exit_code_for(error)

    if isinstance(error, TranspilerError):
        message = str(error)
    elif code == ExitCode.INTERNAL_ERROR:
        message = f"Internal error: {error}"
    else:
        message = f"Error: {error}"

    click.echo(message, err=True)
    if verbose and code == ExitCode.INTERNAL_ERROR:
        traceback.print_exc()
    sys.exit(code)
