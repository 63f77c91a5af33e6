import pytest

from calculator.parser import (
    Assignment,
    BinaryOperation,
    BinaryOperator,
    FunctionCall,
    ParserError,
    Statement,
    UnaryOperation,
    UnaryOperator,
    Variable,
    get_op_precedence,
    parse,
)
from calculator.tokenizer import tokenize


def add(a, b) -> BinaryOperation:
    return BinaryOperation(BinaryOperator.ADD, a, b)


def sub(a, b) -> BinaryOperation:
    return BinaryOperation(BinaryOperator.SUB, a, b)


def mul(a, b) -> BinaryOperation:
    return BinaryOperation(BinaryOperator.MUL, a, b)


def div(a, b) -> BinaryOperation:
    return BinaryOperation(BinaryOperator.DIV, a, b)


def pow_(a, b) -> BinaryOperation:
    return BinaryOperation(BinaryOperator.POW, a, b)


@pytest.mark.parametrize(
    "code, expected_ast",
    [
        pytest.param("1", 1.0),
        pytest.param("x", Variable("x")),
        pytest.param("1 - 2 + 3", add(sub(1.0, 2.0), 3.0)),
        pytest.param("1 / 2 * 3", mul(div(1.0, 2.0), 3.0)),
        pytest.param("2 ^ 3 ^ 2", pow_(pow_(2.0, 3.0), 2.0)),
        pytest.param("1 + 2 * 3 ^ 4", add(1.0, mul(2.0, pow_(3.0, 4.0)))),
        pytest.param("(1 + 2) * 3", mul(add(1.0, 2.0), 3.0)),
        pytest.param("-1 + 2", UnaryOperation(UnaryOperator.NEG, add(1.0, 2.0))),
        pytest.param("+x", UnaryOperation(UnaryOperator.POS, Variable("x"))),
        pytest.param(
            "-(-1)",
            UnaryOperation(UnaryOperator.NEG, UnaryOperation(UnaryOperator.NEG, 1.0)),
        ),
        pytest.param("cos(pi)", FunctionCall("cos", Variable("pi"))),
        pytest.param("sin(-x) ^ 2", pow_(FunctionCall("sin", UnaryOperation(UnaryOperator.NEG, Variable("x"))), 2.0)),
        pytest.param("a = 1", Assignment("a", 1.0)),
        pytest.param("b2 = -a * 2", Assignment("b2", UnaryOperation(UnaryOperator.NEG, mul(Variable("a"), 2.0)))),
    ],
)
def test_parse(code: str, expected_ast: Statement) -> None:
    assert parse(tokenize(code)) == expected_ast


@pytest.mark.parametrize(
    "code, error_token_idx",
    [
        pytest.param("", 0),
        pytest.param("1 +", 2),
        pytest.param("1*(1+1", 6),
        pytest.param("()", 1),
        pytest.param("1 2", 1),
        pytest.param("2 * -1", 2),
        pytest.param("f1(2)", 1),
        pytest.param("a = b = 1", 3),
    ],
)
def test_parser_error(code: str, error_token_idx: int) -> None:
    with pytest.raises(ParserError) as exc_info:
        parse(tokenize(code))
    assert exc_info.value.error_token_idx == error_token_idx


def test_parser_error_message_points_at_token() -> None:
    with pytest.raises(ParserError) as exc_info:
        parse(tokenize("1 + 2 3"))
    assert str(exc_info.value).splitlines() == [
        "Parser error: Unexpected NUMBER after the end of expression",
        "1 + 2 3",
        "      ^",
    ]


def test_precedence_order() -> None:
    assert get_op_precedence(BinaryOperator.ADD) == get_op_precedence(BinaryOperator.SUB)
    assert get_op_precedence(BinaryOperator.MUL) == get_op_precedence(BinaryOperator.DIV)
    assert (
        get_op_precedence(BinaryOperator.SUB)
        < get_op_precedence(BinaryOperator.MUL)
        < get_op_precedence(BinaryOperator.POW)
    )
