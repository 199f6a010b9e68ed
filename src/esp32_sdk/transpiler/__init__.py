"""
Go to Arduino Sketch Transpiler
===============================

This package translates a small, statically typed subset of Go into
Arduino sketch text (C++) for ESP32 boards. Firmware logic is written in
Go against thin facade packages (serial, wifi, digital, timer) and turned
into a sketch the Arduino toolchain can compile.

This implementation provides:

- A lexer for the Go subset, with Go's automatic statement terminators
- A recursive descent parser producing an immutable AST
- An identifier mapping loaded from JSON (exact-match overrides)
- A controller registry naming the board's hardware objects
- A code generator emitting sketch text

Pipeline
--------
    Go Source → Lexer → Parser → AST → Code Generator → Sketch

Usage
-----
>>> from esp32_sdk.transpiler import transpile
>>> source = '''
... package main
...
... import "github.com/andygeiss/esp32/api/controller/serial"
...
... func setup() {
...     serial.Begin(115200)
... }
...
... func loop() {
...     serial.Println("tick")
... }
... '''
>>> print(transpile(source))
void setup() {
    Serial.begin(115200);
}
<BLANKLINE>
void loop() {
    Serial.println("tick");
}

Language Subset
---------------
Supported:
- package clause, import declarations (single and grouped)
- const and var declarations with an explicit type, global or local
- functions with typed parameters and no results
- assignments and call statements
- selectors, calls, literals, unary and binary operators, parentheses

Not supported (rejected with UnsupportedFeatureError):
- if, for, switch, return and the other control statements
- ':=', compound assignment, '++' and '--'
- result types, receivers, generics
- slices, maps, structs, pointers and other composite types
"""

# =============================================================================
# Public API Imports
# =============================================================================

from esp32_sdk.transpiler.worker import (
    Worker,
    SketchTranspiler,
    TranspilerOptions,
    TranspilerResult,
    transpile,
    transpile_file,
)
from esp32_sdk.transpiler.errors import (
    TranspilerError,
    SketchSyntaxError,
    UnterminatedStringError,
    InvalidCharacterError,
    UnexpectedTokenError,
    MissingTokenError,
    UnsupportedFeatureError,
    SketchCompilationError,
    ResourceLoadError,
    MappingLoadError,
    MappingFormatError,
    TranspilerIOError,
)
from esp32_sdk.transpiler.lexer import GoLexer, GoTokenType, GoToken
from esp32_sdk.transpiler.parser import GoParser, parse_source
from esp32_sdk.transpiler.codegen import CodeGenerator
from esp32_sdk.transpiler.mapping import IdentifierMapping, default_mapping
from esp32_sdk.transpiler.controllers import (
    Controller,
    ControllerRegistry,
    DEFAULT_CONTROLLERS,
    DEFAULT_REGISTRY,
)
from esp32_sdk.transpiler.imports import resolve_includes, trailing_segment
from esp32_sdk.transpiler.resolver import IdentifierResolver, lower_first
from esp32_sdk.transpiler.ast import (
    ASTNode,
    ASTPrinter,
    ProgramNode,
    ImportSpec,
    FunctionNode,
    ParameterNode,
    VariableDeclaration,
    BlockStatement,
    AssignmentStatement,
    ExpressionStatement,
    IdentifierExpression,
    SelectorExpression,
    LiteralExpression,
    CallExpression,
    BinaryExpression,
    UnaryExpression,
    ParenExpression,
)

__all__ = [
    # Main API
    "Worker",
    "SketchTranspiler",
    "TranspilerOptions",
    "TranspilerResult",
    "transpile",
    "transpile_file",
    "parse_source",
    # Errors
    "TranspilerError",
    "SketchSyntaxError",
    "UnterminatedStringError",
    "InvalidCharacterError",
    "UnexpectedTokenError",
    "MissingTokenError",
    "UnsupportedFeatureError",
    "SketchCompilationError",
    "ResourceLoadError",
    "MappingLoadError",
    "MappingFormatError",
    "TranspilerIOError",
    # Lexer and Parser
    "GoLexer",
    "GoTokenType",
    "GoToken",
    "GoParser",
    # Translation
    "CodeGenerator",
    "IdentifierMapping",
    "default_mapping",
    "Controller",
    "ControllerRegistry",
    "DEFAULT_CONTROLLERS",
    "DEFAULT_REGISTRY",
    "resolve_includes",
    "trailing_segment",
    "IdentifierResolver",
    "lower_first",
    # AST Nodes
    "ASTNode",
    "ASTPrinter",
    "ProgramNode",
    "ImportSpec",
    "FunctionNode",
    "ParameterNode",
    "VariableDeclaration",
    "BlockStatement",
    "AssignmentStatement",
    "ExpressionStatement",
    "IdentifierExpression",
    "SelectorExpression",
    "LiteralExpression",
    "CallExpression",
    "BinaryExpression",
    "UnaryExpression",
    "ParenExpression",
]
