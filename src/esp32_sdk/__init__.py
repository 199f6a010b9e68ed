"""
ESP32 SDK - Go Toolchain for Arduino-Based ESP32 Firmware
=========================================================

This package lets firmware for ESP32 boards be written in a small subset
of Go and turned into an Arduino sketch that the regular Arduino/ESP32
toolchain compiles and flashes.

Main Components
---------------
- **transpiler**: Go-to-sketch transpiler (espc)
    Converts Go source files (.go) into Arduino sketches (.ino)

Quick Start
-----------
Translate a file:
    >>> from esp32_sdk import transpile_file
    >>> sketch = transpile_file("blink.go", "blink.ino")

Translate source text with custom identifier rules:
    >>> from esp32_sdk import transpile, IdentifierMapping
    >>> rules = IdentifierMapping.from_dict({"led.Pin": "LED_BUILTIN"})
    >>> sketch = transpile(source, mapping=rules)

Or use the command-line tool:
    $ espc blink.go -o blink.ino
    $ arduino-cli compile --fqbn esp32:esp32:esp32 blink

Version History
---------------
1.0.0 - Initial release with the transpiler and espc
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from esp32_sdk.errors import ESP32Error, SourceLocation
from esp32_sdk.transpiler import (
    SketchTranspiler,
    TranspilerOptions,
    IdentifierMapping,
    transpile,
    transpile_file,
    TranspilerError,
    SketchSyntaxError,
    UnsupportedFeatureError,
    MappingLoadError,
    TranspilerIOError,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "ESP32Error",
    "SourceLocation",
    "TranspilerError",
    "SketchSyntaxError",
    "UnsupportedFeatureError",
    "MappingLoadError",
    "TranspilerIOError",
    # Transpiler
    "SketchTranspiler",
    "TranspilerOptions",
    "IdentifierMapping",
    "transpile",
    "transpile_file",
]
