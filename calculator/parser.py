import enum
from dataclasses import dataclass

from calculator.tokenizer import Token, TokenType, untokenize
from calculator.utils import PrintableEnum


@dataclass
class ParserError(Exception):
    errmsg: str
    tokens: list[Token]
    error_token_idx: int

    def __str__(self) -> str:
        parsed_tokens = self.tokens[: self.error_token_idx]
        filler_whitespace = " " * len(untokenize(parsed_tokens)) + (" " if parsed_tokens else "")
        return "\n".join([f"Parser error: {self.errmsg}", untokenize(self.tokens), filler_whitespace + "^"])


class BinaryOperator(PrintableEnum):
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    POW = enum.auto()


@dataclass
class BinaryOperation:
    operator: BinaryOperator
    left: "Expression"
    right: "Expression"


class UnaryOperator(PrintableEnum):
    NEG = enum.auto()
    POS = enum.auto()


@dataclass
class UnaryOperation:
    operator: UnaryOperator
    operand: "Expression"


@dataclass
class Variable:
    name: str


@dataclass
class FunctionCall:
    name: str
    argument: "Expression"


@dataclass
class Assignment:
    name: str
    expression: "Expression"


Expression = float | Variable | FunctionCall | BinaryOperation | UnaryOperation
Statement = Expression | Assignment


BINARY_OPERATORS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
    TokenType.STAR: BinaryOperator.MUL,
    TokenType.SLASH: BinaryOperator.DIV,
    TokenType.CARET: BinaryOperator.POW,
}

UNARY_OPERATORS = {
    TokenType.MINUS: UnaryOperator.NEG,
    TokenType.PLUS: UnaryOperator.POS,
}

# lowest to highest binding strength; every level is left-associative, including ^
PRECEDENCE_LEVELS: list[tuple[BinaryOperator, ...]] = [
    (BinaryOperator.ADD, BinaryOperator.SUB),
    (BinaryOperator.MUL, BinaryOperator.DIV),
    (BinaryOperator.POW,),
]


def get_op_precedence(op: BinaryOperator) -> int:
    for precedence, level_ops in enumerate(PRECEDENCE_LEVELS):
        if op in level_ops:
            return precedence
    raise ValueError(f"Unknown binary operator: {op}")


def parse(tokens: list[Token]) -> Statement:
    """Parse a whole line: ``[ varName '=' ] expr``, nothing may follow"""
    if not tokens or tokens[-1].type is not TokenType.END:
        raise ParserError("Internal error, token list must end with END", tokens=tokens, error_token_idx=len(tokens))

    if len(tokens) > 2 and tokens[0].type is TokenType.IDENTIFIER and tokens[1].type is TokenType.EQUAL:
        expr, i = _consume_expression(tokens, 2)
        result: Statement = Assignment(name=tokens[0].lexeme, expression=expr)
    else:
        result, i = _consume_expression(tokens, 0)

    if tokens[i].type is not TokenType.END:
        raise ParserError(f"Unexpected {tokens[i].type} after the end of expression", tokens=tokens, error_token_idx=i)
    return result


def _consume_expression(tokens: list[Token], i: int) -> tuple[Expression, int]:
    """expr := [ '-' | '+' ] sums"""
    unary_operator = UNARY_OPERATORS.get(tokens[i].type)
    if unary_operator is None:
        return _consume_binary_level(tokens, i, precedence=0)
    operand, i = _consume_binary_level(tokens, i + 1, precedence=0)
    return UnaryOperation(operator=unary_operator, operand=operand), i


def _consume_binary_level(tokens: list[Token], i: int, precedence: int) -> tuple[Expression, int]:
    result, i = _consume_operand(tokens, i, precedence + 1)
    while True:
        operator = BINARY_OPERATORS.get(tokens[i].type)
        if operator is None or get_op_precedence(operator) != precedence:
            return result, i
        right, i = _consume_operand(tokens, i + 1, precedence + 1)
        result = BinaryOperation(operator=operator, left=result, right=right)


def _consume_operand(tokens: list[Token], i: int, precedence: int) -> tuple[Expression, int]:
    if precedence < len(PRECEDENCE_LEVELS):
        return _consume_binary_level(tokens, i, precedence)
    else:
        return _consume_atom(tokens, i)


def _consume_atom(tokens: list[Token], i: int) -> tuple[Expression, int]:
    """atom := number | functionCall | variable | '(' expr ')'"""
    first = tokens[i]
    if first.type is TokenType.NUMBER:
        return float(first.lexeme), i + 1
    elif first.type is TokenType.IDENTIFIER:
        # function names are letters only, "f1(2)" is a variable followed by garbage
        if tokens[i + 1].type is TokenType.BRACKET_OPEN and first.lexeme.isalpha():
            argument, j = _consume_bracketed(tokens, i + 1)
            return FunctionCall(name=first.lexeme, argument=argument), j
        return Variable(first.lexeme), i + 1
    elif first.type is TokenType.BRACKET_OPEN:
        return _consume_bracketed(tokens, i)
    elif first.type is TokenType.END:
        raise ParserError("Unexpected end of input, operand expected", tokens=tokens, error_token_idx=i)
    else:
        raise ParserError(f"Operand expected, found {first.type}", tokens=tokens, error_token_idx=i)


def _consume_bracketed(tokens: list[Token], i: int) -> tuple[Expression, int]:
    if tokens[i + 1].type is TokenType.BRACKET_CLOSE:
        raise ParserError("Empty parenthesis", tokens=tokens, error_token_idx=i + 1)
    expr, j = _consume_expression(tokens, i + 1)
    if tokens[j].type is not TokenType.BRACKET_CLOSE:
        raise ParserError("Unclosed bracket", tokens=tokens, error_token_idx=j)
    return expr, j + 1
