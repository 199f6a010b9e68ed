"""
Go Subset Abstract Syntax Tree (AST) Definitions
================================================

This module defines the AST node types produced by the parser and
consumed by the code generator.

Node Hierarchy
--------------
ASTNode (base)
├── ProgramNode - root: package name, imports, top-level declarations
├── ImportSpec - one import path with optional alias
├── Declarations
│   ├── FunctionNode - function definition
│   ├── VariableDeclaration - const or var, global or local
│   └── ParameterNode - function parameter
├── Statements
│   ├── BlockStatement - { ... }
│   ├── AssignmentStatement - target = value
│   └── ExpressionStatement - expression used as a statement
└── Expressions
    ├── IdentifierExpression - bare name
    ├── SelectorExpression - operand.member
    ├── LiteralExpression - number, string or rune, as written
    ├── CallExpression - callee(arguments)
    ├── BinaryExpression - left op right
    ├── UnaryExpression - op operand
    └── ParenExpression - ( expression )

Design Notes
------------
- All nodes are frozen dataclasses; child sequences are tuples. The tree
  is never modified after parsing.
- Each node stores its source location for error reporting.
- The kind of every expression is fixed when it is parsed, so later
  stages dispatch on node type rather than re-reading dotted strings.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from esp32_sdk.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: SourceLocation

    def __repr__(self) -> str:
        """Default representation showing node type."""
        return f"{self.__class__.__name__}@{self.location.line}:{self.location.column}"


@dataclass(frozen=True, repr=False)
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


@dataclass(frozen=True, repr=False)
class Statement(ASTNode):
    """Base class for all statement nodes."""
    pass


@dataclass(frozen=True, repr=False)
class Declaration(ASTNode):
    """Base class for nodes that introduce a name."""
    pass


# =============================================================================
# Imports
# =============================================================================

@dataclass(frozen=True, repr=False)
class ImportSpec(ASTNode):
    """
    A single import.

    Represents:
        import "github.com/andygeiss/esp32/api/controller/serial"
        import wifi "github.com/andygeiss/esp32/api/controller/wifi"

    Attributes:
        path: Import path without quotes
        alias: Local name, '.' or '_' when given, otherwise None
    """
    path: str = ""
    alias: Optional[str] = None


# =============================================================================
# Declaration Nodes
# =============================================================================

@dataclass(frozen=True, repr=False)
class ParameterNode(Declaration):
    """
    Function parameter.

    Attributes:
        name: Parameter name
        type_name: Source type name, e.g. "int"
    """
    name: str = ""
    type_name: str = ""


@dataclass(frozen=True, repr=False)
class VariableDeclaration(Declaration):
    """
    Constant or variable declaration.

    Represents declarations like:
        const ssid string = "home"
        var counter int = 0
        var ready bool

    Attributes:
        name: Declared name
        type_name: Source type name
        initializer: Optional initialization expression
        is_const: True for 'const', False for 'var'
        is_global: True at package level, False inside a function
    """
    name: str = ""
    type_name: str = ""
    initializer: Optional[Expression] = None
    is_const: bool = False
    is_global: bool = False


@dataclass(frozen=True, repr=False)
class BlockStatement(Statement):
    """
    Block enclosed in braces.

    Local declarations and statements share one ordered sequence so that
    emission keeps their source order.

    Attributes:
        statements: Statements and local declarations in order
    """
    statements: tuple[Union[Statement, VariableDeclaration], ...] = ()


@dataclass(frozen=True, repr=False)
class FunctionNode(Declaration):
    """
    Function definition.

    Attributes:
        name: Function name
        parameters: Parameters in declaration order
        body: The function body
    """
    name: str = ""
    parameters: tuple[ParameterNode, ...] = ()
    body: Optional[BlockStatement] = None


# =============================================================================
# Program Root Node
# =============================================================================

@dataclass(frozen=True, repr=False)
class ProgramNode(ASTNode):
    """
    Root node of the AST representing one source file.

    Attributes:
        package: Name from the package clause
        imports: Import specs in source order
        declarations: Top-level functions and variables in source order
    """
    package: str = ""
    imports: tuple[ImportSpec, ...] = ()
    declarations: tuple[Declaration, ...] = ()

    @property
    def functions(self) -> list[FunctionNode]:
        """Top-level function declarations."""
        return [d for d in self.declarations if isinstance(d, FunctionNode)]


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True, repr=False)
class AssignmentStatement(Statement):
    """
    Plain assignment.

    Attributes:
        target: Assigned expression (identifier or selector)
        value: Assigned value
    """
    target: Expression = None
    value: Expression = None


@dataclass(frozen=True, repr=False)
class ExpressionStatement(Statement):
    """
    Expression used as a statement, in practice a call:
        serial.Println("ready")

    Attributes:
        expression: The expression
    """
    expression: Expression = None


# =============================================================================
# Expression Nodes
# =============================================================================

class LiteralKind(Enum):
    """Literal categories. Raw strings never reach the tree."""
    NUMBER = "number"
    STRING = "string"
    RUNE = "rune"


class BinaryOperator(Enum):
    """Binary operators, valued by their source spelling."""
    # Arithmetic
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"

    # Bitwise
    BITWISE_AND = "&"
    BITWISE_OR = "|"
    BITWISE_XOR = "^"
    AND_NOT = "&^"
    LEFT_SHIFT = "<<"
    RIGHT_SHIFT = ">>"

    # Comparison
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS = "<"
    GREATER = ">"
    LESS_EQ = "<="
    GREATER_EQ = ">="

    # Logical
    LOGICAL_AND = "&&"
    LOGICAL_OR = "||"


class UnaryOperator(Enum):
    """Unary operators, valued by their source spelling."""
    NEGATE = "-"
    POSITIVE = "+"
    LOGICAL_NOT = "!"
    BITWISE_NOT = "^"


@dataclass(frozen=True, repr=False)
class IdentifierExpression(Expression):
    """
    Bare name reference.

    Attributes:
        name: The identifier
    """
    name: str = ""


@dataclass(frozen=True, repr=False)
class SelectorExpression(Expression):
    """
    Qualified reference 'operand.member'.

    Attributes:
        operand: Expression on the left of the dot
        member: Name on the right of the dot
    """
    operand: Expression = None
    member: str = ""

    @property
    def qualifier(self) -> Optional[str]:
        """Left-hand name when the operand is a bare identifier."""
        if isinstance(self.operand, IdentifierExpression):
            return self.operand.name
        return None


@dataclass(frozen=True, repr=False)
class LiteralExpression(Expression):
    """
    Literal carried through verbatim.

    Attributes:
        text: Exact source text, quotes included for strings and runes
        kind: Literal category
    """
    text: str = ""
    kind: LiteralKind = LiteralKind.NUMBER


@dataclass(frozen=True, repr=False)
class CallExpression(Expression):
    """
    Function or method call.

    Attributes:
        callee: Called expression (identifier, selector, ...)
        arguments: Argument expressions in order
    """
    callee: Expression = None
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True, repr=False)
class BinaryExpression(Expression):
    """
    Binary operation (left op right).

    Attributes:
        operator: The binary operator
        left: Left operand
        right: Right operand
    """
    operator: BinaryOperator = None
    left: Expression = None
    right: Expression = None


@dataclass(frozen=True, repr=False)
class UnaryExpression(Expression):
    """
    Prefix unary operation.

    Attributes:
        operator: The unary operator
        operand: The operand
    """
    operator: UnaryOperator = None
    operand: Expression = None


@dataclass(frozen=True, repr=False)
class ParenExpression(Expression):
    """
    Parenthesised expression, kept so the sketch groups the same way.

    Attributes:
        expression: The inner expression
    """
    expression: Expression = None


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about; anything else falls through to generic_visit, which walks the
    node's children.

    Usage:
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_IdentifierExpression(self, node):
                self.names.append(node.name)

        collector = NameCollector()
        collector.visit(program)
    """

    def visit(self, node: ASTNode) -> Any:
        """Visit a node by dispatching to the appropriate method."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all children of the node."""
        for field_value in node.__dict__.values():
            if isinstance(field_value, ASTNode):
                self.visit(field_value)
            elif isinstance(field_value, tuple):
                for item in field_value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        """Emit a line with current indentation."""
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_ProgramNode(self, node: ProgramNode):
        self._emit(f"Program: package {node.package}")
        self.indent_level += 1
        for spec in node.imports:
            self.visit(spec)
        for decl in node.declarations:
            self.visit(decl)
        self.indent_level -= 1

    def visit_ImportSpec(self, node: ImportSpec):
        alias = f"{node.alias} " if node.alias else ""
        self._emit(f'Import: {alias}"{node.path}"')

    def visit_FunctionNode(self, node: FunctionNode):
        params = ", ".join(f"{p.name} {p.type_name}" for p in node.parameters)
        self._emit(f"Function: {node.name}({params})")
        if node.body:
            self.indent_level += 1
            self.visit(node.body)
            self.indent_level -= 1

    def visit_VariableDeclaration(self, node: VariableDeclaration):
        keyword = "Const" if node.is_const else "Var"
        scope = "global" if node.is_global else "local"
        init = f" = {self._expr_str(node.initializer)}" if node.initializer else ""
        self._emit(f"{keyword} ({scope}): {node.name} {node.type_name}{init}")

    def visit_BlockStatement(self, node: BlockStatement):
        self._emit("Block")
        self.indent_level += 1
        for stmt in node.statements:
            self.visit(stmt)
        self.indent_level -= 1

    def visit_AssignmentStatement(self, node: AssignmentStatement):
        self._emit(f"Assign: {self._expr_str(node.target)} = {self._expr_str(node.value)}")

    def visit_ExpressionStatement(self, node: ExpressionStatement):
        self._emit(f"Expr: {self._expr_str(node.expression)}")

    def _expr_str(self, expr: Optional[Expression]) -> str:
        """Convert expression to its source-like string form."""
        if expr is None:
            return ""
        if isinstance(expr, IdentifierExpression):
            return expr.name
        if isinstance(expr, LiteralExpression):
            return expr.text
        if isinstance(expr, SelectorExpression):
            return f"{self._expr_str(expr.operand)}.{expr.member}"
        if isinstance(expr, CallExpression):
            args = ", ".join(self._expr_str(a) for a in expr.arguments)
            return f"{self._expr_str(expr.callee)}({args})"
        if isinstance(expr, BinaryExpression):
            return f"({self._expr_str(expr.left)} {expr.operator.value} {self._expr_str(expr.right)})"
        if isinstance(expr, UnaryExpression):
            return f"({expr.operator.value}{self._expr_str(expr.operand)})"
        if isinstance(expr, ParenExpression):
            return f"({self._expr_str(expr.expression)})"
        return f"<{type(expr).__name__}>"
