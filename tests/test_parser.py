"""
Unit tests for the Monkey parser.
"""

import pytest
from monkeylang import (
    tokenize, parse, Parser, Lexer, Token, TokenType,
    # AST nodes
    Program, Identifier, IntegerLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression,
    LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
)


def parse_ok(source: str) -> Program:
    """Parse source and assert that it has no syntax errors."""
    program, errors = parse(source)
    assert errors == [], f"unexpected parse errors: {errors}"
    return program


def parse_expression(source: str):
    """Parse a single expression statement and return its expression."""
    program = parse_ok(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


class TestStatements:
    """Test statement-level parsing."""

    def test_empty_program(self):
        program = parse_ok("")
        assert program.statements == []

    def test_let_statements(self):
        program = parse_ok("let x = 5; let y = true; let foobar = y;")
        assert len(program.statements) == 3
        expected = [
            ("x", IntegerLiteral(5)),
            ("y", BooleanLiteral(True)),
            ("foobar", Identifier("y")),
        ]
        for stmt, (name, value) in zip(program.statements, expected):
            assert isinstance(stmt, LetStatement)
            assert stmt.name == Identifier(name)
            assert stmt.value == value

    def test_let_value_is_full_expression(self):
        program = parse_ok("let x = 1 + 2 * 3;")
        stmt = program.statements[0]
        assert str(stmt.value) == "(1 + (2 * 3))"

    def test_return_statements(self):
        program = parse_ok("return 5; return 10; return 993322;")
        assert len(program.statements) == 3
        assert all(isinstance(s, ReturnStatement) for s in program.statements)
        assert [s.value.value for s in program.statements] == [5, 10, 993322]

    def test_semicolons_are_optional(self):
        program = parse_ok("let x = 5 let y = 6 x")
        assert len(program.statements) == 3
        assert isinstance(program.statements[2], ExpressionStatement)

    def test_statement_spans(self):
        program = parse_ok("let x = 5;\nreturn x;")
        ret = program.statements[1]
        assert ret.span.start.line == 2
        assert ret.span.start.column == 1


class TestExpressions:
    """Test expression parsing."""

    def test_identifier(self):
        assert parse_expression("foobar;") == Identifier("foobar")

    def test_integer_literal(self):
        assert parse_expression("5;") == IntegerLiteral(5)

    def test_boolean_literals(self):
        assert parse_expression("true;") == BooleanLiteral(True)
        assert parse_expression("false;") == BooleanLiteral(False)

    @pytest.mark.parametrize("source,operator,operand", [
        ("!5;", "!", IntegerLiteral(5)),
        ("-15;", "-", IntegerLiteral(15)),
        ("!true;", "!", BooleanLiteral(True)),
        ("!false;", "!", BooleanLiteral(False)),
    ])
    def test_prefix_expressions(self, source, operator, operand):
        expr = parse_expression(source)
        assert isinstance(expr, PrefixExpression)
        assert expr.operator == operator
        assert expr.operand == operand

    @pytest.mark.parametrize("operator", ["+", "-", "*", "/", ">", "<", "==", "!="])
    def test_infix_expressions(self, operator):
        expr = parse_expression(f"5 {operator} 6;")
        assert expr == InfixExpression(operator, IntegerLiteral(5), IntegerLiteral(6))

    def test_boolean_infix(self):
        expr = parse_expression("true != false")
        assert expr == InfixExpression("!=", BooleanLiteral(True), BooleanLiteral(False))

    def test_largest_integer(self):
        assert parse_expression("9223372036854775807") == IntegerLiteral(2 ** 63 - 1)


class TestPrecedence:
    """Test operator precedence and associativity."""

    @pytest.mark.parametrize("source,expected", [
        ("-a * b", "((-a) * b)"),
        ("!-a", "(!(-a))"),
        ("a + b + c", "((a + b) + c)"),
        ("a + b - c", "((a + b) - c)"),
        ("a * b * c", "((a * b) * c)"),
        ("a * b / c", "((a * b) / c)"),
        ("a + b / c", "(a + (b / c))"),
        ("a + b * c + d / e - f", "(((a + (b * c)) + (d / e)) - f)"),
        ("3 + 4; -5 * 5", "(3 + 4) ((-5) * 5)"),
        ("5 > 4 == 3 < 4", "((5 > 4) == (3 < 4))"),
        ("5 < 4 != 3 > 4", "((5 < 4) != (3 > 4))"),
        ("3 + 4 * 5 == 3 * 1 + 4 * 5", "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))"),
        ("true", "true"),
        ("3 > 5 == false", "((3 > 5) == false)"),
        ("1 + (2 + 3) + 4", "((1 + (2 + 3)) + 4)"),
        ("(5 + 5) * 2", "((5 + 5) * 2)"),
        ("2 / (5 + 5)", "(2 / (5 + 5))"),
        ("-(5 + 5)", "(-(5 + 5))"),
        ("!(true == true)", "(!(true == true))"),
    ])
    def test_operator_precedence(self, source, expected):
        assert str(parse_ok(source)) == expected

    def test_left_associative_subtraction(self):
        expr = parse_expression("10 - 4 - 3")
        assert isinstance(expr.left, InfixExpression)
        assert expr.left.operator == "-"
        assert expr.right == IntegerLiteral(3)


class TestIfExpressions:
    """Test if/else parsing."""

    def test_if_without_else(self):
        expr = parse_expression("if (x < y) { x }")
        assert isinstance(expr, IfExpression)
        assert str(expr.condition) == "(x < y)"
        assert isinstance(expr.consequence, BlockStatement)
        assert expr.consequence.statements == [ExpressionStatement(Identifier("x"))]
        assert expr.alternative is None

    def test_if_else(self):
        expr = parse_expression("if (x < y) { x } else { y }")
        assert expr.alternative.statements == [ExpressionStatement(Identifier("y"))]

    def test_empty_blocks(self):
        expr = parse_expression("if (true) { } else { }")
        assert expr.consequence.statements == []
        assert expr.alternative.statements == []

    def test_nested_if_with_returns(self):
        program = parse_ok("if (10 > 1) { if (10 > 1) { return 10; } return 1; }")
        outer = program.statements[0].expression
        assert len(outer.consequence.statements) == 2
        inner = outer.consequence.statements[0].expression
        assert isinstance(inner, IfExpression)
        assert isinstance(inner.consequence.statements[0], ReturnStatement)

    def test_unterminated_block_ends_at_eof(self):
        expr = parse_expression("if (true) { 1")
        assert expr.consequence.statements == [ExpressionStatement(IntegerLiteral(1))]


class TestParseErrors:
    """Test syntax error messages and recovery."""

    @pytest.mark.parametrize("source,message", [
        ("let x 5;", "expected next token to be ASSIGN, got INT_LITERAL instead"),
        ("let = 10;", "expected next token to be IDENTIFIER, got ASSIGN instead"),
        ("let 838383;", "expected next token to be IDENTIFIER, got INT_LITERAL instead"),
        ("(1 + 2", "expected next token to be RPAREN, got EOF instead"),
        ("if x { 1 }", "expected next token to be LPAREN, got IDENTIFIER instead"),
        ("if (x) 1", "expected next token to be LBRACE, got INT_LITERAL instead"),
        ("@", "no prefix parse function for ILLEGAL found"),
        ("fn(x) { x };", "no prefix parse function for FN found"),
        ("9223372036854775808", "could not parse 9223372036854775808 as integer"),
    ])
    def test_error_messages(self, source, message):
        program, errors = parse(source)
        assert errors == [message]
        assert program.statements == []

    def test_error_codes(self):
        parser = Parser(Lexer("let x 5; +; 99999999999999999999;"))
        parser.parse_program()
        codes = [d.code for d in parser.diagnostics.diagnostics]
        assert codes == ["E101", "E102", "E103"]

    def test_recovery_resumes_after_semicolon(self):
        program, errors = parse("let x = ; let y = 5;")
        assert errors == ["no prefix parse function for SEMICOLON found"]
        assert len(program.statements) == 1
        assert str(program.statements[0]) == "let y = 5;"

    def test_multiple_errors_in_order(self):
        program, errors = parse("let = 1; let y 2; 3;")
        assert errors == [
            "expected next token to be IDENTIFIER, got ASSIGN instead",
            "expected next token to be ASSIGN, got INT_LITERAL instead",
        ]
        assert program.statements == [ExpressionStatement(IntegerLiteral(3))]

    def test_recovery_inside_block(self):
        program, errors = parse("if (true) { let = 1; 5 } 7")
        assert len(errors) == 1
        assert len(program.statements) == 2
        block = program.statements[0].expression.consequence
        assert block.statements == [ExpressionStatement(IntegerLiteral(5))]

    def test_recovery_stops_at_closing_brace(self):
        program, errors = parse("if (true) { let } 7")
        assert errors == ["expected next token to be IDENTIFIER, got RBRACE instead"]
        assert len(program.statements) == 2
        assert program.statements[1] == ExpressionStatement(IntegerLiteral(7))

    def test_max_errors_stops_parsing(self):
        program, errors = parse("@; @; @; @; @;", max_errors=2)
        assert len(errors) == 2

    def test_fn_diagnostic_has_hint(self):
        parser = Parser(Lexer("fn(x) { x }"))
        parser.parse_program()
        diag = parser.diagnostics.diagnostics[0]
        assert diag.hints == ["function literals are not supported"]

    def test_diagnostic_location(self):
        parser = Parser(Lexer("let x = 1;\nlet y 2;", "prog.mk"))
        parser.parse_program()
        diag = parser.diagnostics.diagnostics[0]
        assert diag.span.start.line == 2
        assert diag.span.start.column == 7
        assert diag.source_line == "let y 2;"
        assert "prog.mk:2:7" in diag.format()


class TestTokenSources:
    """Test parsing from token sequences other than a Lexer."""

    def test_token_list(self):
        program = Parser(tokenize("1 + 2")).parse_program()
        assert str(program) == "(1 + 2)"

    def test_token_list_without_eof(self):
        """A source that runs dry is treated as ending in EOF."""
        tokens = [Token(TokenType.INT_LITERAL, "5"), Token(TokenType.STAR, "*"),
                  Token(TokenType.IDENTIFIER, "x")]
        parser = Parser(tokens)
        program = parser.parse_program()
        assert parser.errors == []
        assert str(program) == "(5 * x)"

    def test_reparse_is_structurally_identical(self):
        source = "let a = -(1 + 2) * b; if (a > 0) { return a; } else { !true }"
        first, _ = parse(source)
        second, _ = parse(source)
        assert first == second
        assert first is not second


class TestDiagnosticOutput:
    """Test formatted diagnostic output."""

    def test_format_all_summarises(self):
        parser = Parser(Lexer("let = 1;\n@;"))
        parser.parse_program()
        text = parser.diagnostics.format_all()
        assert "error[E101]" in text
        assert "error[E102]" in text
        assert text.endswith("2 error(s)")
        assert "  2 | @;" in text


class TestNestingDepth:
    """Test the recursion bound on nested input."""

    def test_moderate_nesting_parses(self):
        program = parse_ok("(" * 50 + "1" + ")" * 50)
        assert program.statements == [ExpressionStatement(IntegerLiteral(1))]

    def test_excessive_nesting_raises_recursion_error(self):
        with pytest.raises(RecursionError):
            parse("(" * 5000 + "1" + ")" * 5000)
