import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from calculator.builtins import BUILTIN_CONSTANTS, BUILTIN_FUNCS, BuiltinFunc
from calculator.parser import (
    Assignment,
    BinaryOperation,
    BinaryOperator,
    Expression,
    FunctionCall,
    Statement,
    UnaryOperation,
    UnaryOperator,
    Variable,
)
from calculator.result import EvalInfo
from calculator.utils import is_odd_integer


@dataclass
class CalcRuntimeError(Exception):
    errmsg: str

    def __str__(self) -> str:
        return self.errmsg


class UnknownIdentifierError(CalcRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"{name!r} is not a valid variable name")
        self.name = name


class UnknownFunctionError(CalcRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"{name!r} is not a valid function name")
        self.name = name


class ConstantReassignmentError(CalcRuntimeError):
    def __init__(self, name: str):
        super().__init__("Can't change value of a constant")
        self.name = name


class Environment:
    """Variable bindings of one calculator session plus fixed constant and function tables

    Variables are looked up before constants, but a constant can never become a variable
    since assigning to its name is rejected. Function names live in their own namespace:
    ``sin = 2`` is allowed and ``sin(0)`` still calls the function.
    """

    def __init__(
        self,
        constants: Optional[Mapping[str, float]] = None,
        functions: Optional[Mapping[str, BuiltinFunc]] = None,
    ) -> None:
        self._variables: dict[str, float] = dict()
        self.constants: Mapping[str, float] = MappingProxyType(
            dict(BUILTIN_CONSTANTS if constants is None else constants)
        )
        self.functions: Mapping[str, BuiltinFunc] = MappingProxyType(
            dict(BUILTIN_FUNCS if functions is None else functions)
        )

    @property
    def variables(self) -> Mapping[str, float]:
        return MappingProxyType(self._variables)

    def resolve_identifier(self, name: str) -> float:
        if name in self._variables:
            return self._variables[name]
        elif name in self.constants:
            return self.constants[name]
        else:
            raise UnknownIdentifierError(name)

    def apply_function(self, name: str, arg: float) -> float:
        fn = self.functions.get(name)
        if fn is None:
            raise UnknownFunctionError(name)
        return fn(arg)

    def assign(self, name: str, value: float) -> None:
        if name in self.constants:
            raise ConstantReassignmentError(name)
        self._variables[name] = value


def evaluate_statement(statement: Statement, env: Environment) -> EvalInfo:
    if isinstance(statement, Assignment):
        value = evaluate_expression(statement.expression, env)
        env.assign(statement.name, value)
        return EvalInfo(var_name=statement.name, result=value)
    else:
        return EvalInfo(var_name=None, result=evaluate_expression(statement, env))


def evaluate_expression(expression: Expression, env: Environment) -> float:
    if isinstance(expression, float):
        return expression
    elif isinstance(expression, Variable):
        return env.resolve_identifier(expression.name)
    elif isinstance(expression, FunctionCall):
        return env.apply_function(expression.name, evaluate_expression(expression.argument, env))
    elif isinstance(expression, BinaryOperation):
        # "1+1+...+1" is a left-deep tree, fold its left spine in a loop instead of recursing on .left
        spine: list[BinaryOperation] = []
        node: Expression = expression
        while isinstance(node, BinaryOperation):
            spine.append(node)
            node = node.left
        # left first, so the first unknown name in reading order is reported
        result = evaluate_expression(node, env)
        for operation in reversed(spine):
            right_res = evaluate_expression(operation.right, env)
            impl = binary_operation_impls.get(operation.operator)
            if impl is None:
                raise RuntimeError(f"Unexpected binary operator: {operation.operator}")
            result = impl(result, right_res)
        return result
    elif isinstance(expression, UnaryOperation):
        operand = evaluate_expression(expression.operand, env)
        if expression.operator is UnaryOperator.NEG:
            return -operand
        elif expression.operator is UnaryOperator.POS:
            return operand
        else:
            raise RuntimeError(f"Unexpected unary operator: {expression.operator}")
    else:
        raise RuntimeError(f"Unexpected expression type: {expression}")


# Python raises where IEEE 754 doubles produce inf / nan, the two functions below restore the latter


def ieee_div(a: float, b: float) -> float:
    if b != 0.0:
        return a / b
    if a == 0.0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def ieee_pow(a: float, b: float) -> float:
    # math.pow gives 1.0 for 1^nan and (+-1)^inf, these are undefined (NaN) here
    if math.isnan(b) or (math.isinf(b) and abs(a) == 1.0):
        return math.nan
    try:
        return math.pow(a, b)
    except OverflowError:
        if a < 0.0 and is_odd_integer(b):
            return -math.inf
        return math.inf
    except ValueError:
        if a == 0.0:
            # zero to a negative power
            if is_odd_integer(b):
                return math.copysign(math.inf, a)
            return math.inf
        # negative base, fractional exponent
        return math.nan


BinaryOperationImpl = Callable[[float, float], float]

binary_operation_impls: dict[BinaryOperator, BinaryOperationImpl] = {
    BinaryOperator.ADD: lambda a, b: a + b,
    BinaryOperator.SUB: lambda a, b: a - b,
    BinaryOperator.MUL: lambda a, b: a * b,
    BinaryOperator.DIV: ieee_div,
    BinaryOperator.POW: ieee_pow,
}
