"""
Go Subset Parser Tests
======================

Tests for building the AST from Go source and for rejecting
constructs outside the supported subset.
"""

import pytest

from esp32_sdk.transpiler.parser import parse_source
from esp32_sdk.transpiler.ast import (
    ASTPrinter,
    ASTVisitor,
    FunctionNode,
    VariableDeclaration,
    AssignmentStatement,
    ExpressionStatement,
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
    SketchSyntaxError,
    MissingTokenError,
    UnexpectedTokenError,
    UnsupportedFeatureError,
    SketchCompilationError,
)


def parse_body(body: str) -> list:
    """Parse statements wrapped in a function and return them."""
    program = parse_source(f"package test\nfunc f() {{\n{body}\n}}\n")
    return list(program.functions[0].body.statements)


def parse_expr(text: str):
    """Parse an expression through a global initializer."""
    program = parse_source(f"package test\nvar v int = {text}\n")
    return program.declarations[0].initializer


# =============================================================================
# Package Clause and Imports
# =============================================================================

class TestPackageAndImports:
    """Tests for the file header."""

    def test_package_only(self):
        """A bare package clause parses to an empty program."""
        program = parse_source("package test")
        assert program.package == "test"
        assert program.imports == ()
        assert program.declarations == ()

    def test_missing_package_clause(self):
        """Every file must start with a package clause."""
        with pytest.raises(MissingTokenError, match="expected 'package' clause"):
            parse_source("func f() {}")

    def test_leading_comments_allowed(self):
        """Comments before the package clause are ignored."""
        program = parse_source("// blink example\npackage main\n")
        assert program.package == "main"

    def test_single_imports(self):
        """Each import keeps its path without quotes and its alias."""
        program = parse_source(
            'package test\n'
            'import "github.com/andygeiss/esp32/api/controller/serial"\n'
            'import wifi "github.com/andygeiss/esp32/api/controller/wifi"\n'
        )
        assert [i.path for i in program.imports] == [
            "github.com/andygeiss/esp32/api/controller/serial",
            "github.com/andygeiss/esp32/api/controller/wifi",
        ]
        assert [i.alias for i in program.imports] == [None, "wifi"]

    def test_grouped_imports(self):
        """A parenthesised import group yields one spec per line."""
        program = parse_source(
            'package test\n'
            'import (\n'
            '\t"a/serial"\n'
            '\t. "b/wifi"\n'
            '\t_ "c/timer"\n'
            ')\n'
        )
        assert [i.path for i in program.imports] == ["a/serial", "b/wifi", "c/timer"]
        assert [i.alias for i in program.imports] == [None, ".", "_"]

    def test_raw_string_import_path(self):
        """Import paths must be interpreted strings."""
        with pytest.raises(UnsupportedFeatureError, match="raw string import path"):
            parse_source("package test\nimport `a/b`\n")

    def test_import_after_declaration(self):
        """Imports must come before other declarations."""
        with pytest.raises(SketchSyntaxError, match="imports must appear before"):
            parse_source('package test\nfunc f() {}\nimport "a/b"\n')


# =============================================================================
# Top-Level Declarations
# =============================================================================

class TestDeclarations:
    """Tests for functions, constants and variables."""

    def test_functions_in_order(self):
        """Functions are kept in source order."""
        program = parse_source("package test\nfunc foo() {}\nfunc bar() {}\n")
        assert [f.name for f in program.functions] == ["foo", "bar"]

    def test_function_parameters(self):
        """Grouped parameter names share the following type."""
        program = parse_source("package test\nfunc f(a, b int, s string) {}\n")
        params = program.functions[0].parameters
        assert [(p.name, p.type_name) for p in params] == [
            ("a", "int"),
            ("b", "int"),
            ("s", "string"),
        ]

    def test_qualified_parameter_type(self):
        """Package-qualified type names are kept dotted."""
        program = parse_source("package test\nfunc f(p digital.Pin) {}\n")
        assert program.functions[0].parameters[0].type_name == "digital.Pin"

    def test_global_const(self):
        """A global const keeps name, type and initializer."""
        program = parse_source('package test\nconst foo string = "bar"\n')
        decl = program.declarations[0]
        assert isinstance(decl, VariableDeclaration)
        assert decl.name == "foo"
        assert decl.type_name == "string"
        assert decl.is_const
        assert decl.is_global
        assert isinstance(decl.initializer, LiteralExpression)
        assert decl.initializer.text == '"bar"'
        assert decl.initializer.kind == LiteralKind.STRING

    def test_var_without_initializer(self):
        """A var may omit the initializer when it has a type."""
        program = parse_source("package test\nvar ready bool\n")
        decl = program.declarations[0]
        assert not decl.is_const
        assert decl.initializer is None

    def test_grouped_declarations(self):
        """A const group yields one declaration per line."""
        program = parse_source(
            "package test\n"
            "const (\n"
            "\tledPin int = 2\n"
            "\tbaud int = 115200\n"
            ")\n"
        )
        assert [d.name for d in program.declarations] == ["ledPin", "baud"]
        assert all(d.is_const for d in program.declarations)

    def test_mixed_declarations_keep_order(self):
        """Functions and variables stay interleaved as written."""
        program = parse_source(
            "package test\nvar a int\nfunc f() {}\nconst b int = 1\n"
        )
        assert [type(d) for d in program.declarations] == [
            VariableDeclaration,
            FunctionNode,
            VariableDeclaration,
        ]
        assert len(program.functions) == 1

    def test_untyped_declaration(self):
        """Declarations must spell out their type."""
        with pytest.raises(UnsupportedFeatureError, match="without an explicit type"):
            parse_source("package test\nvar x = 1\n")

    def test_multiple_names(self):
        """One name per declaration."""
        with pytest.raises(UnsupportedFeatureError, match="multiple names"):
            parse_source("package test\nvar a, b int\n")

    def test_function_results(self):
        """Functions cannot declare results."""
        with pytest.raises(UnsupportedFeatureError, match="function results"):
            parse_source("package test\nfunc f() int {}\n")

    def test_method_receiver(self):
        """Methods are not supported."""
        with pytest.raises(UnsupportedFeatureError, match="method receivers"):
            parse_source("package test\nfunc (d Device) f() {}\n")

    def test_composite_type(self):
        """Slice types are not supported."""
        with pytest.raises(UnsupportedFeatureError, match="array and slice types"):
            parse_source("package test\nvar pins []int\n")

    def test_type_declaration(self):
        """Type declarations are not supported."""
        with pytest.raises(UnsupportedFeatureError, match="type declarations"):
            parse_source("package test\ntype Pin int\n")

    def test_variadic_parameter(self):
        """Variadic parameters are not supported."""
        with pytest.raises(UnsupportedFeatureError, match="variadic parameters"):
            parse_source("package test\nfunc f(args ...int) {}\n")

    def test_stray_token_at_top_level(self):
        """Only func, const and var may appear at top level."""
        with pytest.raises(UnexpectedTokenError):
            parse_source("package test\nx = 1\n")


# =============================================================================
# Statements
# =============================================================================

class TestStatements:
    """Tests for function bodies."""

    def test_statement_kinds(self):
        """Assignments, calls and local declarations keep their order."""
        statements = parse_body('x = 1\nfoo.Bar(1, "2")\nvar y int')
        assert isinstance(statements[0], AssignmentStatement)
        assert isinstance(statements[1], ExpressionStatement)
        assert isinstance(statements[2], VariableDeclaration)
        assert not statements[2].is_global

    def test_assignment_parts(self):
        """An assignment keeps target and value expressions."""
        stmt = parse_body("y = pkg.Bar()")[0]
        assert isinstance(stmt.target, IdentifierExpression)
        assert stmt.target.name == "y"
        assert isinstance(stmt.value, CallExpression)

    def test_selector_assignment_target(self):
        """A selector may be assigned to."""
        stmt = parse_body("cfg.Pin = 4")[0]
        assert isinstance(stmt.target, SelectorExpression)

    def test_explicit_semicolons(self):
        """Statements may be separated by ';' on one line."""
        statements = parse_body("a(); b(); c()")
        assert len(statements) == 3

    def test_empty_body(self):
        """An empty body has no statements."""
        assert parse_body("") == []

    @pytest.mark.parametrize("body, feature", [
        ("if x {}", "'if' statement"),
        ("for {}", "'for' statement"),
        ("return", "'return' statement"),
        ("x := 1", "short variable declarations"),
        ("x += 1", "compound assignment"),
        ("x++", r"'\+\+' statement"),
        ("a, b = 1, 2", "multiple assignment"),
        ("go f()", "'go' statement"),
        ("{}", "nested blocks"),
    ])
    def test_unsupported_statements(self, body, feature):
        """Statements outside the subset raise UnsupportedFeatureError."""
        with pytest.raises(UnsupportedFeatureError, match=feature):
            parse_body(body)

    def test_unused_expression(self):
        """A non-call expression cannot stand alone."""
        with pytest.raises(SketchSyntaxError, match="evaluated but not used"):
            parse_body("x + 1")

    def test_assign_to_call(self):
        """Only names and selectors can be assigned to."""
        with pytest.raises(SketchSyntaxError, match="cannot assign"):
            parse_body("f() = 1")

    def test_missing_closing_brace(self):
        """An unclosed body is reported."""
        with pytest.raises(SketchSyntaxError):
            parse_source("package test\nfunc f() {\n\tx = 1\n")

    def test_error_location(self):
        """Errors point at the offending token."""
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            parse_source("package test\nfunc f() {\n\tx := 1\n}\n", "blink.go")
        error = exc_info.value
        assert error.location.filename == "blink.go"
        assert (error.location.line, error.location.column) == (3, 4)
        assert str(error).startswith("blink.go:3:4: error: unsupported feature")
        assert "\tx := 1" in str(error)
        assert "hint: use 'var name type = value'" in str(error)


# =============================================================================
# Expressions
# =============================================================================

class TestExpressions:
    """Tests for expression trees."""

    def test_call_arguments(self):
        """Call arguments keep their order."""
        expr = parse_expr('bar(1, "2", digital.Low)')
        assert isinstance(expr, CallExpression)
        assert isinstance(expr.callee, IdentifierExpression)
        assert len(expr.arguments) == 3
        assert isinstance(expr.arguments[2], SelectorExpression)
        assert (expr.arguments[2].qualifier, expr.arguments[2].member) == ("digital", "Low")

    def test_nested_calls(self):
        """Calls may appear as arguments."""
        expr = parse_expr("serial.Println(wifi.LocalIP())")
        assert expr.callee.qualifier == "serial"
        assert expr.callee.member == "Println"
        inner = expr.arguments[0]
        assert isinstance(inner, CallExpression)
        assert (inner.callee.qualifier, inner.callee.member) == ("wifi", "LocalIP")

    def test_selector_on_call(self):
        """A selector on a call result has no qualifier."""
        expr = parse_expr("f().x")
        assert isinstance(expr, SelectorExpression)
        assert expr.qualifier is None
        assert expr.member == "x"

    def test_multiplication_binds_tighter(self):
        """'*' binds tighter than '+'."""
        expr = parse_expr("a + b * c")
        assert expr.operator == BinaryOperator.ADD
        assert expr.right.operator == BinaryOperator.MULTIPLY

    def test_left_associative(self):
        """Operators of one level group to the left."""
        expr = parse_expr("a - b - c")
        assert expr.operator == BinaryOperator.SUBTRACT
        assert isinstance(expr.left, BinaryExpression)
        assert isinstance(expr.right, IdentifierExpression)

    def test_logical_precedence(self):
        """'&&' binds tighter than '||' and comparisons tighter than both."""
        expr = parse_expr("a == 1 || b && c")
        assert expr.operator == BinaryOperator.LOGICAL_OR
        assert expr.left.operator == BinaryOperator.EQUAL
        assert expr.right.operator == BinaryOperator.LOGICAL_AND

    def test_parentheses_kept(self):
        """Parentheses are kept as a node."""
        expr = parse_expr("(a + b) * c")
        assert expr.operator == BinaryOperator.MULTIPLY
        assert isinstance(expr.left, ParenExpression)

    def test_unary_operators(self):
        """Prefix operators nest."""
        expr = parse_expr("-^x")
        assert isinstance(expr, UnaryExpression)
        assert expr.operator == UnaryOperator.NEGATE
        assert expr.operand.operator == UnaryOperator.BITWISE_NOT

    def test_literal_kinds(self):
        """Numbers, strings and runes are literals."""
        assert parse_expr("0x1F").kind == LiteralKind.NUMBER
        assert parse_expr('"hi"').kind == LiteralKind.STRING
        assert parse_expr("'a'").kind == LiteralKind.RUNE

    def test_continuation_after_operator(self):
        """An expression may continue after a trailing operator."""
        expr = parse_expr("a +\n\tb")
        assert expr.operator == BinaryOperator.ADD

    @pytest.mark.parametrize("text, feature", [
        ("&x", "'&' operator"),
        ("*p", "'\\*' operator"),
        ("xs[0]", "indexing"),
        ("`raw`", "raw string literals"),
        ("func() {}", "function literals"),
        ("Point{1, 2}", "composite literals"),
        ("f(xs...)", "variadic arguments"),
    ])
    def test_unsupported_expressions(self, text, feature):
        """Expressions outside the subset raise UnsupportedFeatureError."""
        with pytest.raises(UnsupportedFeatureError, match=feature):
            parse_expr(text)


# =============================================================================
# Error Recovery
# =============================================================================

class TestErrorRecovery:
    """Tests for multi-error collection."""

    def test_all_bad_declarations_reported(self):
        """Errors in several declarations are reported together."""
        with pytest.raises(SketchCompilationError) as exc_info:
            parse_source(
                "package test\n"
                "func a() int {}\n"
                "func b() {\n\tx := 1\n}\n"
            )
        report = str(exc_info.value)
        assert "function results" in report
        assert "short variable declarations" in report
        assert report.endswith("2 errors")

    def test_single_error_keeps_its_type(self):
        """One error is raised as itself, not wrapped."""
        with pytest.raises(UnsupportedFeatureError):
            parse_source(
                "package test\n"
                "func a() {\n\tfor {}\n}\n"
                "func b() {}\n"
            )


# =============================================================================
# AST Utilities
# =============================================================================

class TestASTUtilities:
    """Tests for the printer and visitor."""

    def test_printer(self):
        """The printer shows the program outline."""
        program = parse_source(
            'package test\nimport "a/wifi"\nfunc foo(x int) {\n\tbar(x)\n}\n'
        )
        text = ASTPrinter().print(program)
        assert text.splitlines()[0] == "Program: package test"
        assert 'Import: "a/wifi"' in text
        assert "Function: foo(x int)" in text
        assert "Expr: bar(x)" in text

    def test_visitor_walks_children(self):
        """generic_visit reaches nested expressions."""
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_IdentifierExpression(self, node):
                self.names.append(node.name)

        program = parse_source("package test\nfunc f() {\n\tx = a + g(b)\n}\n")
        collector = NameCollector()
        collector.visit(program)
        assert collector.names == ["x", "a", "g", "b"]

    def test_nodes_are_immutable(self):
        """AST nodes cannot be modified."""
        program = parse_source("package test")
        with pytest.raises(AttributeError):
            program.package = "other"
