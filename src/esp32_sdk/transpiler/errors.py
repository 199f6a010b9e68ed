"""
Transpiler Errors
=================

Exceptions raised while translating Go source into a sketch. They all
derive from TranspilerError, and through it from ESP32Error.

Exception Hierarchy
-------------------
TranspilerError
├── SketchSyntaxError - lexer and parser syntax errors
│   ├── UnterminatedStringError - missing closing quote
│   ├── InvalidCharacterError - unexpected character
│   ├── UnexpectedTokenError - token does not fit the grammar
│   └── MissingTokenError - required token absent
├── UnsupportedFeatureError - valid Go outside the translatable subset
├── SketchCompilationError - aggregate of several collected errors
├── ResourceLoadError - external resource could not be loaded
│   └── MappingLoadError - identifier mapping file missing or unreadable
│       └── MappingFormatError - mapping file is not a flat JSON object
└── TranspilerIOError - reading source or writing the sketch failed

Message Layout
--------------
    filename:line:column: error: description
        offending source line
        ^ under the column
    hint: suggested fix

For example:
    blink.go:5:5: error: unsupported feature: 'for' statement
            for {
            ^
    hint: the sketch runtime already repeats loop(); put the body there
"""
from typing import Optional, List

from esp32_sdk.errors import ESP32Error, SourceLocation


# =============================================================================
# Base Transpiler Exception
# =============================================================================

# Indentation of the quoted source line under the message
CONTEXT_INDENT = "    "


class TranspilerError(ESP32Error):
    """
    Base class of all transpiler errors.

    The exception text is built once, at construction, from the fields
    below; see the module docstring for the layout.

    Attributes:
        message: One-line description, without location
        location: Position in the Go source, if known
        hint: Suggested fix, if any
        source_line: Text of the offending source line, if known
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Render headline, quoted source with caret, and hint."""
        headline = f"error: {self.message}"
        if self.location:
            headline = f"{self.location}: {headline}"

        lines = [headline]
        if self.location is not None and self.source_line is not None:
            lines.append(CONTEXT_INDENT + self.source_line)
            if self.location.column > 0:
                lines.append(CONTEXT_INDENT + " " * (self.location.column - 1) + "^")
        if self.hint:
            lines.append(f"hint: {self.hint}")
        return "\n".join(lines)


class SketchCompilationError(TranspilerError):
    """
    Several errors found in one run.

    The parser keeps going after a bad top-level declaration so that one
    run reports every problem it can find. The message is the report
    built by ErrorCollector.
    """

    def _format_message(self) -> str:
        return self.message


# =============================================================================
# Syntax Errors (Lexer and Parser)
# =============================================================================

class SketchSyntaxError(TranspilerError):
    """
    Go source that cannot be tokenized or parsed.

    Covers bad literals and characters from the lexer as well as
    missing or misplaced tokens from the parser, such as a missing
    package clause or an unclosed brace.
    """
    pass


class UnterminatedStringError(SketchSyntaxError):
    """
    String literal without its closing quote.

    Interpreted strings must close on their own line; raw strings before
    the end of the file.
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        raw: bool = False,
    ):
        quote = "`" if raw else '"'
        super().__init__(
            "unterminated raw string literal" if raw else "unterminated string literal",
            location=location,
            hint=f"add closing '{quote}' to complete the string",
            source_line=source_line,
        )


class InvalidCharacterError(SketchSyntaxError):
    """A character that starts no Go token, e.g. '@' or '$'."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid character '{char}' (U+{ord(char):04X})",
            location=location,
            source_line=source_line,
        )


class UnexpectedTokenError(SketchSyntaxError):
    """
    A token the grammar does not allow at this point.

    Attributes:
        found: Text of the token ("newline" for an inserted terminator)
        expected: What the parser was looking for, shown as the hint
    """

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected
        super().__init__(
            f"unexpected token '{found}'",
            location=location,
            hint=f"expected {expected}" if expected else None,
            source_line=source_line,
        )


class MissingTokenError(SketchSyntaxError):
    """A required token, such as ')' or the package name, is absent."""

    def __init__(
        self,
        expected: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        super().__init__(
            f"expected {expected}",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Unsupported Language Surface
# =============================================================================

class UnsupportedFeatureError(TranspilerError):
    """
    Unsupported language feature.

    Raised when the source is valid Go but uses a construct the
    transpiler does not translate.

    Examples:
        - if/for/switch statements
        - return values and result types
        - short variable declarations (:=)
        - composite types (slices, maps, structs)
    """

    def __init__(
        self,
        feature: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        alternative: Optional[str] = None,
    ):
        self.feature = feature
        super().__init__(
            f"unsupported feature: {feature}",
            location=location,
            hint=alternative,
            source_line=source_line,
        )


# =============================================================================
# Resource Errors
# =============================================================================

class ResourceLoadError(TranspilerError):
    """
    An external resource needed by the transpiler could not be loaded.

    The transpiler never proceeds with a partially loaded resource.
    """

    def __init__(self, resource: str, reason: str, hint: Optional[str] = None):
        self.resource = resource
        self.reason = reason
        super().__init__(f"cannot load '{resource}': {reason}", hint=hint)


class MappingLoadError(ResourceLoadError):
    """Identifier mapping file is missing or cannot be read."""
    pass


class MappingFormatError(MappingLoadError):
    """
    Identifier mapping file is not a flat JSON object of strings.

    Raised for invalid JSON, a non-object top level, or any key or value
    that is not a string.
    """

    def __init__(self, resource: str, reason: str):
        super().__init__(
            resource,
            reason,
            hint='the mapping must be a JSON object such as {"digital.Low": "LOW"}',
        )


# =============================================================================
# I/O Errors
# =============================================================================

class TranspilerIOError(TranspilerError):
    """
    Reading the source stream or writing the sketch stream failed.

    Also raised when the source bytes are not valid UTF-8.
    """

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed: {reason}")

# =============================================================================
# Error Collection
# =============================================================================

class ErrorCollector:
    """
    Gathers the errors of one parse so they can be reported together.

        collector = ErrorCollector()
        ...
        collector.add(error)
        if collector.should_stop():
            break
        ...
        collector.raise_if_errors()

    Attributes:
        errors: Collected errors in the order they were found
        max_errors: Count at which should_stop() turns True
    """

    def __init__(self, max_errors: int = 50):
        self.errors: List[TranspilerError] = []
        self.max_errors = max_errors

    def add(self, error: TranspilerError) -> None:
        self.errors.append(error)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def should_stop(self) -> bool:
        """True once max_errors errors have been collected."""
        return len(self.errors) >= self.max_errors

    def report(self) -> str:
        """Every error followed by a blank line, then the total."""
        count = len(self.errors)
        blocks = [f"{error}\n" for error in self.errors]
        blocks.append(f"{count} {'error' if count == 1 else 'errors'}")
        return "\n".join(blocks)

    def raise_if_errors(self) -> None:
        """
        Raise what was collected, if anything.

        A single error is raised as itself; several are wrapped in one
        SketchCompilationError.
        """
        if not self.has_errors():
            return
        if len(self.errors) == 1:
            raise self.errors[0]
        raise SketchCompilationError(self.report())
