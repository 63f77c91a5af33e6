import logging
from typing import Mapping

from calculator.parser import ParserError, parse
from calculator.result import EvalError, EvalResult
from calculator.runtime import CalcRuntimeError, Environment, evaluate_statement
from calculator.tokenizer import TokenizerError, tokenize

logger = logging.getLogger(__name__)

SYNTAX_ERROR_MESSAGE = "invalid expression"
NESTING_TOO_DEEP_MESSAGE = "expression is nested too deeply"


class Calculator:
    """One calculator session

    Variables assigned by one :meth:`evaluate` call are visible to all later calls
    on the same instance; separate instances share nothing.
    """

    def __init__(self, env: Environment | None = None) -> None:
        self.env = env if env is not None else Environment()

    @property
    def variables(self) -> Mapping[str, float]:
        return self.env.variables

    def evaluate(self, code: str) -> EvalResult:
        try:
            tokens = tokenize(code)
            logger.debug("tokens: %s", " ".join(str(t) for t in tokens))
            statement = parse(tokens)
            # no repr of the tree here, it is recursive and long chains are deep
            logger.debug("parsed %s from %d tokens", type(statement).__name__, len(tokens))
        except (TokenizerError, ParserError) as e:
            logger.debug("syntax error in %r:\n%s", code, e)
            return EvalError(SYNTAX_ERROR_MESSAGE, details=str(e))
        except RecursionError:
            logger.debug("parsing %r exceeded the recursion limit", code)
            return EvalError(SYNTAX_ERROR_MESSAGE, details=NESTING_TOO_DEEP_MESSAGE)

        try:
            info = evaluate_statement(statement, self.env)
        except CalcRuntimeError as e:
            logger.debug("evaluation of %r failed: %s", code, e)
            return EvalError(e.errmsg)
        except RecursionError:
            logger.debug("evaluating %r exceeded the recursion limit", code)
            return EvalError(NESTING_TOO_DEEP_MESSAGE)

        if info.var_name is not None:
            logger.debug("variable %s set to %r", info.var_name, info.result)
        return info
