"""
Go Subset Recursive Descent Parser
==================================

This module implements a recursive descent parser for the Go subset
accepted by the transpiler. It takes the token stream from the lexer and
builds an Abstract Syntax Tree (AST).

Grammar (Simplified EBNF)
-------------------------
file        ::= 'package' IDENT ';' { import ';' } { topdecl ';' } EOF
import      ::= 'import' ( spec | '(' { spec ';' } ')' )
spec        ::= [ IDENT | '.' | '_' ] STRING
topdecl     ::= func | const | var
func        ::= 'func' IDENT '(' [ params ] ')' block
params      ::= group { ',' group }
group       ::= IDENT { ',' IDENT } TYPE
const/var   ::= keyword ( vspec | '(' { vspec ';' } ')' )
vspec       ::= IDENT TYPE [ '=' expr ]

block       ::= '{' { statement ';' } '}'
statement   ::= const | var | expr [ '=' expr ]

Expression Precedence (lowest to highest)
-----------------------------------------
1. logical_or      ||
2. logical_and     &&
3. comparison      == != < <= > >=
4. additive        + - | ^
5. multiplicative  * / % << >> & &^
6. unary           - + ! ^
7. primary         operand { '.' IDENT | '(' args ')' }

Unsupported Constructs
----------------------
Valid Go outside this subset (if/for/switch/return, ':=', compound
assignment, '++', result types, receivers, composite types, raw strings,
untyped declarations) raises UnsupportedFeatureError instead of being
skipped, so nothing is silently dropped from the sketch.

Example Usage
-------------
>>> from esp32_sdk.transpiler.parser import parse_source
>>> program = parse_source('package main\\nfunc setup() { serial.Begin(9600) }')
>>> program.functions[0].name
'setup'
"""

from typing import Optional

from esp32_sdk.errors import SourceLocation
from esp32_sdk.transpiler.lexer import GoLexer, GoToken, GoTokenType
from esp32_sdk.transpiler.ast import (
    ProgramNode,
    ImportSpec,
    FunctionNode,
    ParameterNode,
    VariableDeclaration,
    BlockStatement,
    AssignmentStatement,
    ExpressionStatement,
    Expression,
    IdentifierExpression,
    SelectorExpression,
    LiteralExpression,
    LiteralKind,
    CallExpression,
    BinaryExpression,
    BinaryOperator,
    UnaryExpression,
    UnaryOperator,
    ParenExpression,
)
from esp32_sdk.transpiler.errors import (
    TranspilerError,
    SketchSyntaxError,
    UnexpectedTokenError,
    MissingTokenError,
    UnsupportedFeatureError,
    ErrorCollector,
)


# Statement keywords that Go accepts but the transpiler does not translate,
# with a hint for each.
UNSUPPORTED_STATEMENTS: dict[GoTokenType, Optional[str]] = {
    GoTokenType.IF: "sketch logic must be a straight sequence of calls and assignments",
    GoTokenType.FOR: "the sketch runtime already repeats loop(); put the body there",
    GoTokenType.SWITCH: "sketch logic must be a straight sequence of calls and assignments",
    GoTokenType.SELECT: "channels are not available in sketches",
    GoTokenType.RETURN: "functions translate to void functions without results",
    GoTokenType.GO: "goroutines are not available in sketches",
    GoTokenType.DEFER: "defer has no sketch equivalent",
    GoTokenType.GOTO: None,
    GoTokenType.BREAK: None,
    GoTokenType.CONTINUE: None,
    GoTokenType.FALLTHROUGH: None,
    GoTokenType.TYPE: "declare values with basic types only",
}

# Tokens that begin a type other than a plain name
COMPOSITE_TYPE_STARTS: dict[GoTokenType, str] = {
    GoTokenType.LBRACKET: "array and slice types",
    GoTokenType.STAR: "pointer types",
    GoTokenType.MAP: "map types",
    GoTokenType.CHAN: "channel types",
    GoTokenType.STRUCT: "struct types",
    GoTokenType.INTERFACE: "interface types",
    GoTokenType.FUNC: "function types",
}

# Binary precedence levels, lowest first
BINARY_LEVELS: list[dict[GoTokenType, BinaryOperator]] = [
    {GoTokenType.OR: BinaryOperator.LOGICAL_OR},
    {GoTokenType.AND: BinaryOperator.LOGICAL_AND},
    {
        GoTokenType.EQ: BinaryOperator.EQUAL,
        GoTokenType.NE: BinaryOperator.NOT_EQUAL,
        GoTokenType.LT: BinaryOperator.LESS,
        GoTokenType.LE: BinaryOperator.LESS_EQ,
        GoTokenType.GT: BinaryOperator.GREATER,
        GoTokenType.GE: BinaryOperator.GREATER_EQ,
    },
    {
        GoTokenType.PLUS: BinaryOperator.ADD,
        GoTokenType.MINUS: BinaryOperator.SUBTRACT,
        GoTokenType.PIPE: BinaryOperator.BITWISE_OR,
        GoTokenType.CARET: BinaryOperator.BITWISE_XOR,
    },
    {
        GoTokenType.STAR: BinaryOperator.MULTIPLY,
        GoTokenType.SLASH: BinaryOperator.DIVIDE,
        GoTokenType.PERCENT: BinaryOperator.MODULO,
        GoTokenType.LSHIFT: BinaryOperator.LEFT_SHIFT,
        GoTokenType.RSHIFT: BinaryOperator.RIGHT_SHIFT,
        GoTokenType.AMPERSAND: BinaryOperator.BITWISE_AND,
        GoTokenType.AND_NOT: BinaryOperator.AND_NOT,
    },
]

UNARY_OPERATORS: dict[GoTokenType, UnaryOperator] = {
    GoTokenType.MINUS: UnaryOperator.NEGATE,
    GoTokenType.PLUS: UnaryOperator.POSITIVE,
    GoTokenType.NOT: UnaryOperator.LOGICAL_NOT,
    GoTokenType.CARET: UnaryOperator.BITWISE_NOT,
}

# Where top-level error recovery may resume
TOP_LEVEL_STARTS = (
    GoTokenType.FUNC,
    GoTokenType.CONST,
    GoTokenType.VAR,
    GoTokenType.IMPORT,
    GoTokenType.TYPE,
)


class GoParser:
    """
    Recursive descent parser for the Go subset.

    Parses a list of tokens into a ProgramNode. Errors inside one
    top-level declaration are collected, the parser skips ahead to the
    next declaration keyword, and all errors are reported together at
    the end.

    Attributes:
        tokens: List of tokens to parse
        filename: Source filename for error reporting
    """

    def __init__(
        self,
        tokens: list[GoToken],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer (ending with EOF)
            filename: Source filename for error messages
            source_lines: Lines of the source, quoted in error messages
        """
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []

        self._pos = 0
        self._errors = ErrorCollector()

    def parse(self) -> ProgramNode:
        """
        Parse the token stream into an AST.

        Returns:
            ProgramNode with imports and declarations in source order

        Raises:
            SketchSyntaxError: If exactly one error was found
            UnsupportedFeatureError: If exactly one unsupported construct was found
            SketchCompilationError: If several errors were found
        """
        package = self._parse_package_clause()

        imports: list[ImportSpec] = []
        declarations = []

        while self._check(GoTokenType.IMPORT):
            try:
                imports.extend(self._parse_import_declaration())
                self._expect_terminator()
                self._skip_terminators()
            except TranspilerError as e:
                self._record(e)

        while not self._at_end():
            try:
                declarations.extend(self._parse_top_level_declaration())
                self._expect_terminator()
                self._skip_terminators()
            except TranspilerError as e:
                self._record(e)
                if self._errors.should_stop():
                    break

        self._errors.raise_if_errors()

        return ProgramNode(
            location=SourceLocation(self.filename, 1, 1),
            package=package,
            imports=tuple(imports),
            declarations=tuple(declarations),
        )

    def _record(self, error: TranspilerError) -> None:
        """Collect an error and skip to the next top-level declaration."""
        self._errors.add(error)
        self._synchronize()

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self._peek().type == GoTokenType.EOF

    def _peek(self, offset: int = 0) -> GoToken:
        """Look at token at current position + offset."""
        pos = self._pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[pos]

    def _advance(self) -> GoToken:
        """Consume and return the current token."""
        if not self._at_end():
            token = self.tokens[self._pos]
            self._pos += 1
            return token
        return self.tokens[-1]

    def _check(self, *types: GoTokenType) -> bool:
        """Check if current token is one of the given types."""
        return self._peek().type in types

    def _match(self, *types: GoTokenType) -> Optional[GoToken]:
        """Consume current token if it matches one of the types."""
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: GoTokenType, description: str) -> GoToken:
        """
        Expect and consume a specific token type.

        Raises:
            MissingTokenError: If the expected token is not found
        """
        if self._check(token_type):
            return self._advance()

        current = self._peek()
        raise MissingTokenError(
            description,
            current.location,
            self._get_source_line(current.line),
        )

    def _expect_terminator(self) -> None:
        """Require ';' or a newline, except right before '}' ')' or EOF."""
        if self._match(GoTokenType.SEMICOLON):
            return
        if self._check(GoTokenType.RBRACE, GoTokenType.RPAREN, GoTokenType.EOF):
            return
        raise self._unexpected("newline or ';'")

    def _skip_terminators(self) -> None:
        """Skip any run of statement terminators."""
        while self._match(GoTokenType.SEMICOLON):
            pass

    def _get_source_line(self, line: int) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _unexpected(self, expected: str) -> UnexpectedTokenError:
        """Build an UnexpectedTokenError for the current token."""
        token = self._peek()
        found = "end of file" if token.type == GoTokenType.EOF else token.value
        if token.is_inserted_semicolon:
            found = "newline"
        return UnexpectedTokenError(
            found,
            expected=expected,
            location=token.location,
            source_line=self._get_source_line(token.line),
        )

    def _unsupported(
        self,
        feature: str,
        token: GoToken,
        alternative: Optional[str] = None,
    ) -> UnsupportedFeatureError:
        """Build an UnsupportedFeatureError located at token."""
        return UnsupportedFeatureError(
            feature,
            location=token.location,
            source_line=self._get_source_line(token.line),
            alternative=alternative,
        )

    def _synchronize(self) -> None:
        """
        Skip tokens until the start of the next top-level declaration.

        Only keywords at brace depth zero that begin a line count, so a
        bad statement inside a function body does not resume parsing
        mid-function. At least one token is always consumed.
        """
        depth = 0
        for token in self.tokens[:self._pos]:
            if token.type == GoTokenType.LBRACE:
                depth += 1
            elif token.type == GoTokenType.RBRACE:
                depth -= 1

        first = True
        while not self._at_end():
            token = self._peek()
            if (
                not first
                and depth <= 0
                and token.type in TOP_LEVEL_STARTS
                and self.tokens[self._pos - 1].type == GoTokenType.SEMICOLON
            ):
                return
            first = False
            if token.type == GoTokenType.LBRACE:
                depth += 1
            elif token.type == GoTokenType.RBRACE:
                depth -= 1
            self._advance()

    # =========================================================================
    # Package Clause and Imports
    # =========================================================================

    def _parse_package_clause(self) -> str:
        """Parse 'package NAME' which must open the file."""
        self._skip_terminators()
        self._expect(GoTokenType.PACKAGE, "'package' clause")
        name = self._expect(GoTokenType.IDENTIFIER, "package name").value
        self._expect_terminator()
        self._skip_terminators()
        return name

    def _parse_import_declaration(self) -> list[ImportSpec]:
        """Parse one import declaration, single or grouped."""
        self._advance()  # consume 'import'

        if not self._match(GoTokenType.LPAREN):
            return [self._parse_import_spec()]

        specs = []
        self._skip_terminators()
        while not self._check(GoTokenType.RPAREN, GoTokenType.EOF):
            specs.append(self._parse_import_spec())
            self._expect_terminator()
            self._skip_terminators()
        self._expect(GoTokenType.RPAREN, "')'")
        return specs

    def _parse_import_spec(self) -> ImportSpec:
        """Parse '[alias] "path"'."""
        location = self._peek().location

        alias = None
        alias_token = self._match(GoTokenType.IDENTIFIER, GoTokenType.DOT)
        if alias_token:
            alias = alias_token.value

        if self._check(GoTokenType.RAW_STRING):
            raise self._unsupported("raw string import path", self._peek())
        path_token = self._expect(GoTokenType.STRING, "import path string")

        return ImportSpec(
            location=location,
            path=path_token.value[1:-1],
            alias=alias,
        )

    # =========================================================================
    # Top-Level Declarations
    # =========================================================================

    def _parse_top_level_declaration(self) -> list:
        """
        Parse one top-level declaration.

        Returns:
            A list with one FunctionNode, or the VariableDeclarations of a
            const/var declaration (grouped forms give several)
        """
        token = self._peek()

        if token.type == GoTokenType.FUNC:
            return [self._parse_function()]

        if token.type in (GoTokenType.CONST, GoTokenType.VAR):
            return self._parse_variable_declaration(is_global=True)

        if token.type == GoTokenType.IMPORT:
            raise SketchSyntaxError(
                "imports must appear before other declarations",
                token.location,
                source_line=self._get_source_line(token.line),
            )

        if token.type == GoTokenType.TYPE:
            raise self._unsupported("type declarations", token, UNSUPPORTED_STATEMENTS[GoTokenType.TYPE])

        raise self._unexpected("'func', 'const' or 'var'")

    def _parse_function(self) -> FunctionNode:
        """Parse 'func NAME(params) { ... }'."""
        func_token = self._advance()  # consume 'func'

        if self._check(GoTokenType.LPAREN):
            raise self._unsupported("method receivers", self._peek())

        name_token = self._expect(GoTokenType.IDENTIFIER, "function name")

        if self._check(GoTokenType.LBRACKET):
            raise self._unsupported("generic type parameters", self._peek())

        self._expect(GoTokenType.LPAREN, "'('")
        parameters = self._parse_parameter_list()
        self._expect(GoTokenType.RPAREN, "')'")

        if not self._check(GoTokenType.LBRACE):
            if self._check(GoTokenType.SEMICOLON, GoTokenType.EOF):
                raise self._unsupported("function declarations without a body", func_token)
            raise self._unsupported(
                "function results",
                self._peek(),
                UNSUPPORTED_STATEMENTS[GoTokenType.RETURN],
            )

        body = self._parse_block()

        return FunctionNode(
            location=func_token.location,
            name=name_token.value,
            parameters=tuple(parameters),
            body=body,
        )

    def _parse_parameter_list(self) -> list[ParameterNode]:
        """
        Parse parameters between the parentheses.

        Grouped names share the type that follows them:
            func f(a, b int, s string) -> int a, int b, char* s
        """
        parameters: list[ParameterNode] = []
        pending: list[GoToken] = []

        while not self._check(GoTokenType.RPAREN):
            name_token = self._expect(GoTokenType.IDENTIFIER, "parameter name")
            pending.append(name_token)

            if self._match(GoTokenType.COMMA):
                continue

            if self._check(GoTokenType.ELLIPSIS):
                raise self._unsupported("variadic parameters", self._peek())

            type_name = self._parse_type()
            for pending_token in pending:
                parameters.append(ParameterNode(
                    location=pending_token.location,
                    name=pending_token.value,
                    type_name=type_name,
                ))
            pending = []

            if not self._match(GoTokenType.COMMA):
                break

        if pending:
            raise self._unsupported(
                "parameters without names",
                pending[0],
                "write parameters as 'name type'",
            )

        return parameters

    def _parse_type(self) -> str:
        """Parse a type, which must be a plain or package-qualified name."""
        token = self._peek()

        if token.type in COMPOSITE_TYPE_STARTS:
            raise self._unsupported(
                COMPOSITE_TYPE_STARTS[token.type],
                token,
                "use basic types such as int, bool or string",
            )

        name = self._expect(GoTokenType.IDENTIFIER, "type name").value
        if self._match(GoTokenType.DOT):
            name = f"{name}.{self._expect(GoTokenType.IDENTIFIER, 'type name').value}"
        return name

    def _parse_variable_declaration(self, is_global: bool) -> list[VariableDeclaration]:
        """Parse a const or var declaration, single or grouped."""
        keyword = self._advance()
        is_const = keyword.type == GoTokenType.CONST

        if not self._match(GoTokenType.LPAREN):
            return [self._parse_value_spec(is_const, is_global)]

        declarations = []
        self._skip_terminators()
        while not self._check(GoTokenType.RPAREN, GoTokenType.EOF):
            declarations.append(self._parse_value_spec(is_const, is_global))
            self._expect_terminator()
            self._skip_terminators()
        self._expect(GoTokenType.RPAREN, "')'")
        return declarations

    def _parse_value_spec(self, is_const: bool, is_global: bool) -> VariableDeclaration:
        """Parse 'NAME TYPE [= expr]'."""
        name_token = self._expect(GoTokenType.IDENTIFIER, "declared name")

        if self._check(GoTokenType.COMMA):
            raise self._unsupported(
                "multiple names in one declaration",
                self._peek(),
                "declare each name separately",
            )

        if self._check(
            GoTokenType.ASSIGN,
            GoTokenType.SEMICOLON,
            GoTokenType.RPAREN,
            GoTokenType.EOF,
        ):
            raise self._unsupported(
                "declarations without an explicit type",
                name_token,
                f"write the type, e.g. '{name_token.value} int'",
            )

        type_name = self._parse_type()

        initializer = None
        if self._match(GoTokenType.ASSIGN):
            initializer = self._parse_expression()

        return VariableDeclaration(
            location=name_token.location,
            name=name_token.value,
            type_name=type_name,
            initializer=initializer,
            is_const=is_const,
            is_global=is_global,
        )

    # =========================================================================
    # Blocks and Statements
    # =========================================================================

    def _parse_block(self) -> BlockStatement:
        """Parse '{ statement* }'."""
        lbrace = self._expect(GoTokenType.LBRACE, "'{'")

        statements = []
        self._skip_terminators()
        while not self._check(GoTokenType.RBRACE, GoTokenType.EOF):
            statements.extend(self._parse_statement())
            self._expect_terminator()
            self._skip_terminators()

        self._expect(GoTokenType.RBRACE, "'}'")

        return BlockStatement(location=lbrace.location, statements=tuple(statements))

    def _parse_statement(self) -> list:
        """Parse one statement; local const/var groups may give several."""
        token = self._peek()

        if token.type in (GoTokenType.CONST, GoTokenType.VAR):
            return self._parse_variable_declaration(is_global=False)

        if token.type in UNSUPPORTED_STATEMENTS:
            raise self._unsupported(
                f"'{token.value}' statement",
                token,
                UNSUPPORTED_STATEMENTS[token.type],
            )

        if token.type == GoTokenType.LBRACE:
            raise self._unsupported("nested blocks", token)

        return [self._parse_simple_statement()]

    def _parse_simple_statement(self):
        """Parse an assignment or an expression statement."""
        start = self._peek()
        expression = self._parse_expression()

        if self._check(GoTokenType.COMMA):
            raise self._unsupported("multiple assignment", self._peek())

        if self._check(GoTokenType.DEFINE):
            raise self._unsupported(
                "short variable declarations (':=')",
                self._peek(),
                "use 'var name type = value'",
            )

        if self._check(GoTokenType.OP_ASSIGN):
            op = self._peek()
            raise self._unsupported(
                f"compound assignment ('{op.value}')",
                op,
                "write 'x = x op y'",
            )

        if self._check(GoTokenType.INCREMENT, GoTokenType.DECREMENT):
            op = self._peek()
            raise self._unsupported(f"'{op.value}' statement", op, "write 'x = x + 1'")

        if self._match(GoTokenType.ASSIGN):
            if not isinstance(expression, (IdentifierExpression, SelectorExpression)):
                raise SketchSyntaxError(
                    "cannot assign to this expression",
                    start.location,
                    hint="the left side must be a name or a selector",
                    source_line=self._get_source_line(start.line),
                )
            value = self._parse_expression()
            return AssignmentStatement(location=start.location, target=expression, value=value)

        if not isinstance(expression, CallExpression):
            raise SketchSyntaxError(
                "expression is evaluated but not used",
                start.location,
                hint="only calls and assignments can stand alone as statements",
                source_line=self._get_source_line(start.line),
            )

        return ExpressionStatement(location=start.location, expression=expression)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """Parse a full expression."""
        return self._parse_binary(0)

    def _parse_binary(self, level: int) -> Expression:
        """Parse a left-associative binary level of BINARY_LEVELS."""
        if level == len(BINARY_LEVELS):
            return self._parse_unary()

        operators = BINARY_LEVELS[level]
        left = self._parse_binary(level + 1)

        while self._peek().type in operators:
            op_token = self._advance()
            right = self._parse_binary(level + 1)
            left = BinaryExpression(
                location=op_token.location,
                operator=operators[op_token.type],
                left=left,
                right=right,
            )

        return left

    def _parse_unary(self) -> Expression:
        """Parse prefix unary operators."""
        token = self._peek()

        if token.type in UNARY_OPERATORS:
            self._advance()
            operand = self._parse_unary()
            return UnaryExpression(
                location=token.location,
                operator=UNARY_OPERATORS[token.type],
                operand=operand,
            )

        if token.type in (GoTokenType.AMPERSAND, GoTokenType.STAR, GoTokenType.ARROW):
            raise self._unsupported(f"'{token.value}' operator", token)

        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        """Parse an operand followed by selectors and calls."""
        expression = self._parse_operand()

        while True:
            if self._match(GoTokenType.DOT):
                member = self._expect(GoTokenType.IDENTIFIER, "member name after '.'")
                expression = SelectorExpression(
                    location=expression.location,
                    operand=expression,
                    member=member.value,
                )
            elif self._check(GoTokenType.LPAREN):
                expression = self._parse_call(expression)
            elif self._check(GoTokenType.LBRACKET):
                raise self._unsupported("indexing", self._peek())
            elif self._check(GoTokenType.LBRACE) and isinstance(
                expression, (IdentifierExpression, SelectorExpression)
            ):
                # No supported statement puts a block right after an expression
                raise self._unsupported("composite literals", self._peek())
            else:
                return expression

    def _parse_call(self, callee: Expression) -> CallExpression:
        """Parse '(' args ')' after callee."""
        self._advance()  # consume '('

        arguments: list[Expression] = []
        while not self._check(GoTokenType.RPAREN):
            arguments.append(self._parse_expression())
            if self._check(GoTokenType.ELLIPSIS):
                raise self._unsupported("variadic arguments", self._peek())
            if not self._match(GoTokenType.COMMA):
                break

        self._expect(GoTokenType.RPAREN, "')' after arguments")

        return CallExpression(
            location=callee.location,
            callee=callee,
            arguments=tuple(arguments),
        )

    def _parse_operand(self) -> Expression:
        """Parse an identifier, a literal or a parenthesised expression."""
        token = self._peek()

        if token.type == GoTokenType.IDENTIFIER:
            self._advance()
            return IdentifierExpression(location=token.location, name=token.value)

        literal_kind = {
            GoTokenType.NUMBER: LiteralKind.NUMBER,
            GoTokenType.STRING: LiteralKind.STRING,
            GoTokenType.RUNE: LiteralKind.RUNE,
        }.get(token.type)
        if literal_kind is not None:
            self._advance()
            return LiteralExpression(location=token.location, text=token.value, kind=literal_kind)

        if token.type == GoTokenType.RAW_STRING:
            raise self._unsupported(
                "raw string literals",
                token,
                'use an interpreted "..." string',
            )

        if token.type == GoTokenType.LPAREN:
            self._advance()
            inner = self._parse_expression()
            self._expect(GoTokenType.RPAREN, "')'")
            return ParenExpression(location=token.location, expression=inner)

        if token.type == GoTokenType.FUNC:
            raise self._unsupported("function literals", token)

        if token.type in COMPOSITE_TYPE_STARTS:
            raise self._unsupported("composite literals", token)

        raise self._unexpected("expression")


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, filename: str = "<input>") -> ProgramNode:
    """
    Lex and parse Go source text.

    Args:
        source: Go source code
        filename: Source filename for error messages

    Returns:
        The parsed ProgramNode

    Raises:
        SketchSyntaxError: If the source is malformed
        UnsupportedFeatureError: If the source leaves the supported subset
        SketchCompilationError: If several errors were found
    """
    lexer = GoLexer(source, filename)
    tokens = list(lexer.tokenize())
    parser = GoParser(tokens, filename, lexer.source.splitlines())
    return parser.parse()
