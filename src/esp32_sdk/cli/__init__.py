"""
ESP32 SDK Command-Line Interface
================================

This package provides command-line tools for the ESP32 SDK:

- **espc**: Go-to-sketch transpiler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["espc"]
