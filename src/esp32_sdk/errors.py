"""
ESP32 SDK Base Errors
=====================

Root exception and source positions shared by every part of the SDK.

Exception Hierarchy
-------------------
ESP32Error
└── TranspilerError (esp32_sdk.transpiler.errors)
    ├── SketchSyntaxError - malformed Go source
    ├── UnsupportedFeatureError - Go outside the translatable subset
    ├── ResourceLoadError - identifier mapping missing or malformed
    └── TranspilerIOError - source or sketch stream failed

Errors raised for a position in the Go source render as:
    blink.go:3:18: error: unexpected token ')'
        const pin int = 2)
                         ^
    hint: expected newline or ';'
"""

from dataclasses import dataclass


# =============================================================================
# Root Exception
# =============================================================================

class ESP32Error(Exception):
    """
    Base class of every exception the SDK raises.

        try:
            transpile_file("blink.go", "blink.ino")
        except ESP32Error as e:
            print(e)
    """
    pass


# =============================================================================
# Source Positions
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in a Go source file.

    Attributes:
        filename: Source path, or "<input>" when translating a string
        line: 1-based line
        column: 1-based column
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"
