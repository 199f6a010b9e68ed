"""
Go Subset Lexer (Tokenizer)
===========================

This module implements a lexer for the Go subset accepted by the
transpiler. It converts source text into a stream of tokens for the
parser.

Token Categories
----------------
- Keywords: package, import, func, const, var (translated) and the rest
  of Go's keywords (recognised so the parser can reject them clearly)
- Identifiers: package, function, variable and member names, in any
  script (größe, 温度)
- Numbers: decimal, hexadecimal (0x), octal (0o / 0), binary (0b),
  floating point, with optional '_' digit separators
- Strings: "interpreted" and `raw`
- Runes: 'x'
- Operators and delimiters

Literal values are kept as the exact source text, quotes included. The
sketch receives them unchanged.

Statement Terminators
---------------------
Go source rarely spells out ';'. Following the language rule, a newline
becomes a SEMICOLON token when the last token on the line is:

- an identifier or a literal
- one of the keywords break, continue, fallthrough, return
- one of the operators ++ -- ) ] }

The same rule applies at end of input. Inserted tokens carry the value
"\\n" so they can be told apart from an explicit ';'.

Comments
--------
- Single-line: // comment
- Multi-line: /* comment */ (counts as a newline if it spans lines)

Example Usage
-------------
>>> from esp32_sdk.transpiler.lexer import GoLexer
>>> lexer = GoLexer('package main\\nfunc setup() {}', "blink.go")
>>> for token in lexer.tokenize():
...     print(token)
Token(PACKAGE, 'package', 1:1)
Token(IDENTIFIER, 'main', 1:9)
Token(SEMICOLON, '\\n', 1:13)
Token(FUNC, 'func', 2:1)
Token(IDENTIFIER, 'setup', 2:6)
Token(LPAREN, '(', 2:11)
Token(RPAREN, ')', 2:12)
Token(LBRACE, '{', 2:14)
Token(RBRACE, '}', 2:15)
Token(SEMICOLON, '\\n', 2:16)
Token(EOF, 2:16)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import re
import string

from esp32_sdk.errors import SourceLocation
from esp32_sdk.transpiler.errors import (
    SketchSyntaxError,
    UnterminatedStringError,
    InvalidCharacterError,
)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class GoTokenType(Enum):
    """
    Token types for the Go subset.

    Keywords are distinguished from identifiers to simplify parsing.
    """

    # === Structural Tokens ===
    EOF = auto()

    # === Identifiers and Literals ===
    IDENTIFIER = auto()
    NUMBER = auto()
    STRING = auto()         # "interpreted"
    RAW_STRING = auto()     # `raw`
    RUNE = auto()           # 'x'

    # === Keywords - Translated ===
    PACKAGE = auto()
    IMPORT = auto()
    FUNC = auto()
    CONST = auto()
    VAR = auto()

    # === Keywords - Recognised Only ===
    BREAK = auto()
    CASE = auto()
    CHAN = auto()
    CONTINUE = auto()
    DEFAULT = auto()
    DEFER = auto()
    ELSE = auto()
    FALLTHROUGH = auto()
    FOR = auto()
    GO = auto()
    GOTO = auto()
    IF = auto()
    INTERFACE = auto()
    MAP = auto()
    RANGE = auto()
    RETURN = auto()
    SELECT = auto()
    STRUCT = auto()
    SWITCH = auto()
    TYPE = auto()

    # === Arithmetic and Bitwise Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /
    PERCENT = auto()        # %
    AMPERSAND = auto()      # &
    PIPE = auto()           # |
    CARET = auto()          # ^
    LSHIFT = auto()         # <<
    RSHIFT = auto()         # >>
    AND_NOT = auto()        # &^

    # === Comparison and Logical Operators ===
    EQ = auto()             # ==
    NE = auto()             # !=
    LT = auto()             # <
    GT = auto()             # >
    LE = auto()             # <=
    GE = auto()             # >=
    AND = auto()            # &&
    OR = auto()             # ||
    NOT = auto()            # !
    TILDE = auto()          # ~

    # === Assignment ===
    ASSIGN = auto()         # =
    DEFINE = auto()         # :=
    OP_ASSIGN = auto()      # += -= *= /= %= &= |= ^= <<= >>= &^=
    INCREMENT = auto()      # ++
    DECREMENT = auto()      # --
    ARROW = auto()          # <-

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    LBRACKET = auto()       # [
    RBRACKET = auto()       # ]
    SEMICOLON = auto()      # ; (explicit or inserted)
    COMMA = auto()          # ,
    DOT = auto()            # .
    ELLIPSIS = auto()       # ...
    COLON = auto()          # :


# =============================================================================
# Keyword Mapping
# =============================================================================

KEYWORDS: dict[str, GoTokenType] = {
    "package": GoTokenType.PACKAGE,
    "import": GoTokenType.IMPORT,
    "func": GoTokenType.FUNC,
    "const": GoTokenType.CONST,
    "var": GoTokenType.VAR,
    "break": GoTokenType.BREAK,
    "case": GoTokenType.CASE,
    "chan": GoTokenType.CHAN,
    "continue": GoTokenType.CONTINUE,
    "default": GoTokenType.DEFAULT,
    "defer": GoTokenType.DEFER,
    "else": GoTokenType.ELSE,
    "fallthrough": GoTokenType.FALLTHROUGH,
    "for": GoTokenType.FOR,
    "go": GoTokenType.GO,
    "goto": GoTokenType.GOTO,
    "if": GoTokenType.IF,
    "interface": GoTokenType.INTERFACE,
    "map": GoTokenType.MAP,
    "range": GoTokenType.RANGE,
    "return": GoTokenType.RETURN,
    "select": GoTokenType.SELECT,
    "struct": GoTokenType.STRUCT,
    "switch": GoTokenType.SWITCH,
    "type": GoTokenType.TYPE,
}

# A newline after one of these becomes a statement terminator
SEMICOLON_TRIGGERS = frozenset({
    GoTokenType.IDENTIFIER,
    GoTokenType.NUMBER,
    GoTokenType.STRING,
    GoTokenType.RAW_STRING,
    GoTokenType.RUNE,
    GoTokenType.BREAK,
    GoTokenType.CONTINUE,
    GoTokenType.FALLTHROUGH,
    GoTokenType.RETURN,
    GoTokenType.INCREMENT,
    GoTokenType.DECREMENT,
    GoTokenType.RPAREN,
    GoTokenType.RBRACKET,
    GoTokenType.RBRACE,
})

# Operators, longest first so that greedy matching picks '<<=' over '<<'
OPERATORS: list[tuple[str, GoTokenType]] = [
    ("...", GoTokenType.ELLIPSIS),
    ("<<=", GoTokenType.OP_ASSIGN),
    (">>=", GoTokenType.OP_ASSIGN),
    ("&^=", GoTokenType.OP_ASSIGN),
    ("+=", GoTokenType.OP_ASSIGN),
    ("-=", GoTokenType.OP_ASSIGN),
    ("*=", GoTokenType.OP_ASSIGN),
    ("/=", GoTokenType.OP_ASSIGN),
    ("%=", GoTokenType.OP_ASSIGN),
    ("&=", GoTokenType.OP_ASSIGN),
    ("|=", GoTokenType.OP_ASSIGN),
    ("^=", GoTokenType.OP_ASSIGN),
    ("&^", GoTokenType.AND_NOT),
    ("<<", GoTokenType.LSHIFT),
    (">>", GoTokenType.RSHIFT),
    ("&&", GoTokenType.AND),
    ("||", GoTokenType.OR),
    ("<-", GoTokenType.ARROW),
    ("++", GoTokenType.INCREMENT),
    ("--", GoTokenType.DECREMENT),
    ("==", GoTokenType.EQ),
    ("!=", GoTokenType.NE),
    ("<=", GoTokenType.LE),
    (">=", GoTokenType.GE),
    (":=", GoTokenType.DEFINE),
    ("+", GoTokenType.PLUS),
    ("-", GoTokenType.MINUS),
    ("*", GoTokenType.STAR),
    ("/", GoTokenType.SLASH),
    ("%", GoTokenType.PERCENT),
    ("&", GoTokenType.AMPERSAND),
    ("|", GoTokenType.PIPE),
    ("^", GoTokenType.CARET),
    ("<", GoTokenType.LT),
    (">", GoTokenType.GT),
    ("=", GoTokenType.ASSIGN),
    ("!", GoTokenType.NOT),
    ("~", GoTokenType.TILDE),
    ("(", GoTokenType.LPAREN),
    (")", GoTokenType.RPAREN),
    ("{", GoTokenType.LBRACE),
    ("}", GoTokenType.RBRACE),
    ("[", GoTokenType.LBRACKET),
    ("]", GoTokenType.RBRACKET),
    (";", GoTokenType.SEMICOLON),
    (",", GoTokenType.COMMA),
    (".", GoTokenType.DOT),
    (":", GoTokenType.COLON),
]

# Integer and floating point literal forms (text is validated, not converted)
NUMBER_PATTERN = re.compile(
    r"""
    0[xX]_?[0-9a-fA-F]+(_[0-9a-fA-F]+)*
    | 0[bB]_?[01]+(_[01]+)*
    | 0[oO]_?[0-7]+(_[0-7]+)*
    | (\d+(_\d+)*)?(\.(\d+(_\d+)*)?)?([eE][+-]?\d+(_\d+)*)?
    """,
    re.VERBOSE,
)

BYTE_ORDER_MARK = "\ufeff"


def is_identifier_start(char: str) -> bool:
    """Letters of any script and '_' start an identifier."""
    return char.isalpha() or char == "_"


def is_identifier_char(char: str) -> bool:
    # Go allows Unicode decimal digits after the first character
    return char.isalpha() or char.isdecimal() or char == "_"


def is_decimal_digit(char: str) -> bool:
    return len(char) == 1 and "0" <= char <= "9"


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class GoToken:
    """
    Represents a single token from Go source code.

    Attributes:
        type: The GoTokenType classification
        value: The exact source text of the token (None for EOF)
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: GoTokenType
    value: Optional[str]
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def is_inserted_semicolon(self) -> bool:
        """True for a terminator produced from a newline."""
        return self.type == GoTokenType.SEMICOLON and self.value == "\n"


# =============================================================================
# Lexer Implementation
# =============================================================================

class GoLexer:
    """
    Tokenizes Go source code.

    Usage:
        lexer = GoLexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    # Characters that can continue a numeric literal
    NUMBER_CHARS = string.ascii_letters + string.digits + "_."

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: The Go source code to tokenize
            filename: Name of the source file (for error messages)
        """
        # A leading byte-order mark is not part of the program
        self.source = source[1:] if source.startswith(BYTE_ORDER_MARK) else source
        self.filename = filename

        # Current position in source
        self._pos = 0
        self._line = 1
        self._column = 1

        # Track line start position for error reporting
        self._line_start_pos = 0

        # Type of the last emitted token, for terminator insertion
        self._last_type: Optional[GoTokenType] = None

    def tokenize(self) -> Iterator[GoToken]:
        """
        Generate tokens from the source code.

        Yields:
            GoToken objects, ending with a single EOF token

        Raises:
            SketchSyntaxError: If invalid syntax is encountered
        """
        while True:
            newline_at = self._skip_whitespace_and_comments()

            if newline_at is not None and self._needs_semicolon():
                line, column = newline_at
                yield self._emit(self._make_token(GoTokenType.SEMICOLON, "\n", line, column))

            if self._at_end():
                break

            yield self._emit(self._scan_token())

        if self._needs_semicolon():
            yield self._emit(self._make_token(GoTokenType.SEMICOLON, "\n"))

        yield self._make_token(GoTokenType.EOF, None)

    def _emit(self, token: GoToken) -> GoToken:
        """Remember the token type for terminator insertion, then return it."""
        self._last_type = token.type
        return token

    def _needs_semicolon(self) -> bool:
        """True when a newline here ends the current statement."""
        return self._last_type in SEMICOLON_TRIGGERS

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at character at current position + offset without advancing.

        Returns empty string if past end of source.
        """
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """
        Consume and return the current character, advancing position.

        Updates line and column tracking for error reporting.
        """
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: GoTokenType,
        value: Optional[str],
        start_line: Optional[int] = None,
        start_column: Optional[int] = None,
    ) -> GoToken:
        """Create a token with current or specified position."""
        return GoToken(
            type=token_type,
            value=value,
            line=start_line or self._line,
            column=start_column or self._column,
            filename=self.filename,
        )

    def _error(
        self,
        message: str,
        line: int,
        column: int,
        hint: Optional[str] = None,
    ) -> SketchSyntaxError:
        """Create a syntax error at the given position with source context."""
        return SketchSyntaxError(
            message,
            SourceLocation(self.filename, line, column),
            hint=hint,
            source_line=self._get_current_line(),
        )

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> Optional[tuple[int, int]]:
        """
        Skip all whitespace and comments.

        Returns:
            (line, column) of the first newline crossed, or None
        """
        newline_at = None

        while not self._at_end():
            char = self._peek()

            if char == "\n":
                if newline_at is None:
                    newline_at = (self._line, self._column)
                self._advance()
                continue

            if char in " \t\r":
                self._advance()
                continue

            if char == "/" and self._peek(1) == "/":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            if char == "/" and self._peek(1) == "*":
                start = (self._line, self._column)
                if self._skip_multi_line_comment() and newline_at is None:
                    newline_at = start
                continue

            break

        return newline_at

    def _skip_multi_line_comment(self) -> bool:
        """
        Skip a multi-line comment (/* ... */).

        Returns:
            True if the comment spanned a newline

        Raises:
            SketchSyntaxError: If comment is not terminated
        """
        start_line = self._line
        start_col = self._column

        self._advance()
        self._advance()

        while not self._at_end():
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return self._line != start_line
            self._advance()

        raise SketchSyntaxError(
            "unterminated multi-line comment",
            SourceLocation(self.filename, start_line, start_col),
            hint="add closing */ to terminate the comment",
        )

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> GoToken:
        """Scan the next token from source."""
        start_line = self._line
        start_column = self._column

        char = self._peek()

        if is_identifier_start(char):
            return self._scan_identifier(start_line, start_column)

        if is_decimal_digit(char) or (char == "." and is_decimal_digit(self._peek(1))):
            return self._scan_number(start_line, start_column)

        if char == '"':
            return self._scan_string(start_line, start_column)

        if char == "`":
            return self._scan_raw_string(start_line, start_column)

        if char == "'":
            return self._scan_rune(start_line, start_column)

        return self._scan_operator(start_line, start_column)

    def _scan_identifier(self, start_line: int, start_column: int) -> GoToken:
        """Scan an identifier or keyword."""
        chars = []
        while self._peek() and is_identifier_char(self._peek()):
            chars.append(self._advance())

        name = "".join(chars)
        token_type = KEYWORDS.get(name, GoTokenType.IDENTIFIER)
        return self._make_token(token_type, name, start_line, start_column)

    def _scan_number(self, start_line: int, start_column: int) -> GoToken:
        """
        Scan a numeric literal, keeping its source text.

        Handles decimal, 0x/0b/0o prefixed and legacy octal integers,
        '_' separators, and decimal floats with optional exponent.
        """
        chars = []
        is_hex = self._peek() == "0" and self._peek(1) in ("x", "X")

        while True:
            char = self._peek()
            if char and char in self.NUMBER_CHARS:
                chars.append(self._advance())
                continue
            # Exponent sign belongs to a decimal float: 1e-3
            if char in ("+", "-") and not is_hex and chars and chars[-1] in ("e", "E"):
                chars.append(self._advance())
                continue
            break

        text = "".join(chars)
        if not NUMBER_PATTERN.fullmatch(text):
            raise self._error(
                f"malformed number literal '{text}'",
                start_line,
                start_column,
            )
        return self._make_token(GoTokenType.NUMBER, text, start_line, start_column)

    def _scan_string(self, start_line: int, start_column: int) -> GoToken:
        """
        Scan an interpreted string literal.

        Escape sequences are skipped over, not decoded: the sketch gets
        the literal exactly as written.
        """
        chars = [self._advance()]

        while not self._at_end():
            char = self._peek()

            if char == '"':
                chars.append(self._advance())
                return self._make_token(
                    GoTokenType.STRING,
                    "".join(chars),
                    start_line,
                    start_column,
                )

            if char == "\n":
                break

            if char == "\\":
                chars.append(self._advance())
                if self._at_end() or self._peek() == "\n":
                    break
            chars.append(self._advance())

        raise UnterminatedStringError(
            SourceLocation(self.filename, start_line, start_column),
            self._get_current_line(),
        )

    def _scan_raw_string(self, start_line: int, start_column: int) -> GoToken:
        """Scan a raw string literal, which may span lines."""
        chars = [self._advance()]

        while not self._at_end():
            char = self._advance()
            chars.append(char)
            if char == "`":
                return self._make_token(
                    GoTokenType.RAW_STRING,
                    "".join(chars),
                    start_line,
                    start_column,
                )

        raise UnterminatedStringError(
            SourceLocation(self.filename, start_line, start_column),
            raw=True,
        )

    def _scan_rune(self, start_line: int, start_column: int) -> GoToken:
        """Scan a rune literal such as 'a' or '\\n'."""
        chars = [self._advance()]

        while not self._at_end() and self._peek() != "\n":
            char = self._advance()
            chars.append(char)
            if char == "\\" and not self._at_end() and self._peek() != "\n":
                chars.append(self._advance())
                continue
            if char == "'":
                if len(chars) == 2:
                    raise self._error("empty rune literal", start_line, start_column)
                return self._make_token(
                    GoTokenType.RUNE,
                    "".join(chars),
                    start_line,
                    start_column,
                )

        raise self._error(
            "unterminated rune literal",
            start_line,
            start_column,
            hint="add closing ' to complete the rune literal",
        )

    def _scan_operator(self, start_line: int, start_column: int) -> GoToken:
        """Scan an operator or delimiter, longest match first."""
        for text, token_type in OPERATORS:
            if self.source.startswith(text, self._pos):
                for _ in text:
                    self._advance()
                return self._make_token(token_type, text, start_line, start_column)

        char = self._peek()
        raise InvalidCharacterError(
            char,
            SourceLocation(self.filename, start_line, start_column),
            self._get_current_line(),
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]


def tokenize(source: str, filename: str = "<input>") -> list[GoToken]:
    """Tokenize source text into a list ending with EOF."""
    return list(GoLexer(source, filename).tokenize())
