"""
Sketch Code Generator
=====================

This module generates Arduino sketch text (C++) from the Go subset AST.

Translation Rules
-----------------
| Go                              | Sketch                              |
|---------------------------------|-------------------------------------|
| import ".../wifi"               | #include <WiFi.h>                   |
| const ssid string = "home"      | const char* ssid = "home";          |
| var count int                   | int count;                          |
| func blink(pin int) { ... }     | void blink(int pin) { ... }         |
| x = y + 1                       | x = y + 1;                          |
| serial.Println("hi")            | Serial.println("hi");               |
| digital.Write(pin, digital.Low) | digitalWrite(pin, LOW);             |

Names go through IdentifierResolver. Types go through TYPE_MAP; any type
not listed there is written unchanged. Literals are copied verbatim.

Operators
---------
Binary and unary operators keep their spelling except where C has none:

    a &^ b  ->  a & ~b
    ^a      ->  ~a

Go and C rank some operators differently (C binds '==' tighter than '&',
Go the other way round). The tree already fixes the grouping, so
parentheses are added wherever C would otherwise regroup it.

Layout
------
Four-space indentation, one statement per line, a blank line between
top-level items. Consumers compare sketches without regard to
whitespace.

Example output:
    #include <WiFi.h>

    const char* ssid = "home";

    void setup() {
        Serial.begin(115200);
        WiFi.begin(ssid);
    }
"""

from typing import Iterable

from esp32_sdk.transpiler.ast import (
    ProgramNode,
    Declaration,
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
    CallExpression,
    BinaryExpression,
    BinaryOperator,
    UnaryExpression,
    UnaryOperator,
    ParenExpression,
)
from esp32_sdk.transpiler.errors import UnsupportedFeatureError
from esp32_sdk.transpiler.resolver import IdentifierResolver


# Go type name -> sketch type name
TYPE_MAP: dict[str, str] = {
    "string": "char*",
}

# Operators whose sketch spelling differs from Go
C_BINARY_OPERATORS: dict[BinaryOperator, str] = {
    BinaryOperator.AND_NOT: "&",
}

C_UNARY_OPERATORS: dict[UnaryOperator, str] = {
    UnaryOperator.BITWISE_NOT: "~",
}

# C binding strength, higher binds tighter
C_PRECEDENCE: dict[BinaryOperator, int] = {
    BinaryOperator.MULTIPLY: 10,
    BinaryOperator.DIVIDE: 10,
    BinaryOperator.MODULO: 10,
    BinaryOperator.ADD: 9,
    BinaryOperator.SUBTRACT: 9,
    BinaryOperator.LEFT_SHIFT: 8,
    BinaryOperator.RIGHT_SHIFT: 8,
    BinaryOperator.LESS: 7,
    BinaryOperator.LESS_EQ: 7,
    BinaryOperator.GREATER: 7,
    BinaryOperator.GREATER_EQ: 7,
    BinaryOperator.EQUAL: 6,
    BinaryOperator.NOT_EQUAL: 6,
    BinaryOperator.BITWISE_AND: 5,
    BinaryOperator.AND_NOT: 5,
    BinaryOperator.BITWISE_XOR: 4,
    BinaryOperator.BITWISE_OR: 3,
    BinaryOperator.LOGICAL_AND: 2,
    BinaryOperator.LOGICAL_OR: 1,
}

# Functions the Arduino runtime calls; every sketch must define both
ENTRY_POINTS = ("loop", "setup")


class CodeGenerator:
    """
    Generates sketch text from the AST.

    Example:
        generator = CodeGenerator(resolver)
        sketch = generator.generate(program, ["<WiFi.h>"])

    Attributes:
        resolver: Translates identifiers and selectors
        indent: Text used for one level of indentation
    """

    def __init__(self, resolver: IdentifierResolver, indent: str = "    "):
        self.resolver = resolver
        self.indent = indent

        # Sketch output lines
        self._output: list[str] = []
        self._indent_level = 0

    def generate(self, program: ProgramNode, headers: Iterable[str] = ()) -> str:
        """
        Generate the sketch for a program.

        Args:
            program: The root AST node
            headers: Include targets, written first in the given order

        Returns:
            Sketch text, one top-level item per paragraph
        """
        self._output = []
        self._indent_level = 0

        for header in headers:
            self._emit(f"#include {header}")

        for decl in program.declarations:
            self._begin_item()
            self._generate_declaration(decl)

        return self._text()

    def generate_entry_points(self) -> str:
        """Empty definitions of the runtime entry points."""
        self._output = []
        self._indent_level = 0
        for name in ENTRY_POINTS:
            self._begin_item()
            self._emit(f"void {name}() {{}}")
        return self._text()

    # =========================================================================
    # Output Methods
    # =========================================================================

    def _emit(self, line: str) -> None:
        """Emit a line at the current indentation."""
        self._output.append(f"{self.indent * self._indent_level}{line}")

    def _begin_item(self) -> None:
        """Separate top-level items by a blank line."""
        if self._output:
            self._output.append("")

    def _text(self) -> str:
        if not self._output:
            return ""
        return "\n".join(self._output) + "\n"

    # =========================================================================
    # Declarations
    # =========================================================================

    def _generate_declaration(self, decl: Declaration) -> None:
        """Generate a top-level declaration."""
        if isinstance(decl, FunctionNode):
            self._generate_function(decl)
        elif isinstance(decl, VariableDeclaration):
            self._generate_variable(decl)
        else:
            raise UnsupportedFeatureError(
                f"top-level {type(decl).__name__}",
                location=decl.location,
            )

    def _generate_function(self, func: FunctionNode) -> None:
        """Generate 'void name(params) { body }'."""
        params = ", ".join(self._parameter_str(p) for p in func.parameters)
        signature = f"void {func.name}({params})"

        statements = func.body.statements if func.body else ()
        if not statements:
            self._emit(f"{signature} {{}}")
            return

        self._emit(f"{signature} {{")
        self._indent_level += 1
        for stmt in statements:
            self._generate_statement(stmt)
        self._indent_level -= 1
        self._emit("}")

    def _parameter_str(self, param: ParameterNode) -> str:
        return f"{self.type_name(param.type_name)} {param.name}"

    def _generate_variable(self, decl: VariableDeclaration) -> None:
        """Generate '[const ]type name[ = init];'."""
        prefix = "const " if decl.is_const else ""
        text = f"{prefix}{self.type_name(decl.type_name)} {decl.name}"
        if decl.initializer is not None:
            text = f"{text} = {self.expression(decl.initializer)}"
        self._emit(f"{text};")

    @staticmethod
    def type_name(name: str) -> str:
        """Translate a Go type name."""
        return TYPE_MAP.get(name, name)

    # =========================================================================
    # Statements
    # =========================================================================

    def _generate_statement(self, stmt) -> None:
        """Generate one statement inside a function body."""
        if isinstance(stmt, VariableDeclaration):
            self._generate_variable(stmt)
        elif isinstance(stmt, AssignmentStatement):
            self._emit(f"{self.expression(stmt.target)} = {self.expression(stmt.value)};")
        elif isinstance(stmt, ExpressionStatement):
            self._emit(f"{self.expression(stmt.expression)};")
        elif isinstance(stmt, BlockStatement):
            raise UnsupportedFeatureError("nested blocks", location=stmt.location)
        else:
            raise UnsupportedFeatureError(
                type(stmt).__name__,
                location=getattr(stmt, "location", None),
            )

    # =========================================================================
    # Expressions
    # =========================================================================

    def expression(self, expr: Expression) -> str:
        """Translate an expression to sketch text."""
        if isinstance(expr, IdentifierExpression):
            return self.resolver.resolve_identifier(expr.name)
        elif isinstance(expr, SelectorExpression):
            return self._selector(expr)
        elif isinstance(expr, LiteralExpression):
            return expr.text
        elif isinstance(expr, CallExpression):
            args = ", ".join(self.expression(a) for a in expr.arguments)
            return f"{self.expression(expr.callee)}({args})"
        elif isinstance(expr, BinaryExpression):
            return self._binary(expr)
        elif isinstance(expr, UnaryExpression):
            return self._unary(expr)
        elif isinstance(expr, ParenExpression):
            return f"({self.expression(expr.expression)})"

        raise UnsupportedFeatureError(
            f"{type(expr).__name__} expressions",
            location=getattr(expr, "location", None),
        )

    def _selector(self, expr: SelectorExpression) -> str:
        """Translate 'operand.member'."""
        if expr.qualifier is not None:
            return self.resolver.resolve_selector(expr.qualifier, expr.member)
        # f().x, a.b.c: only the innermost bare selector is resolved
        return f"{self.expression(expr.operand)}.{expr.member}"

    def _binary(self, expr: BinaryExpression) -> str:
        """Translate 'left op right', parenthesising where C would regroup."""
        precedence = C_PRECEDENCE[expr.operator]

        left = self._operand(expr.left, precedence, is_right=False)
        right = self._operand(expr.right, precedence, is_right=True)

        if expr.operator == BinaryOperator.AND_NOT:
            right = f"~{right}"

        op = C_BINARY_OPERATORS.get(expr.operator, expr.operator.value)
        return f"{left} {op} {right}"

    def _operand(self, expr: Expression, parent_precedence: int, is_right: bool) -> str:
        """Translate a binary operand, wrapped in parentheses if needed."""
        text = self.expression(expr)
        if not isinstance(expr, BinaryExpression):
            return text

        precedence = C_PRECEDENCE[expr.operator]
        if precedence < parent_precedence or (is_right and precedence == parent_precedence):
            return f"({text})"
        return text

    def _unary(self, expr: UnaryExpression) -> str:
        """Translate a prefix operator."""
        op = C_UNARY_OPERATORS.get(expr.operator, expr.operator.value)
        operand = self.expression(expr.operand)

        if isinstance(expr.operand, BinaryExpression):
            operand = f"({operand})"
        elif op in ("-", "+") and operand.startswith(op):
            # '- -x' must not become the decrement '--x'
            operand = f" {operand}"

        return f"{op}{operand}"
