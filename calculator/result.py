from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EvalInfo:
    """Successful evaluation: the value and, for ``name = expr`` lines, the assigned variable"""

    var_name: Optional[str]
    result: float

    def formatted_result(self) -> str:
        return str(self.result)

    def __str__(self) -> str:
        if self.var_name is None:
            return self.formatted_result()
        else:
            return f"{self.var_name} = {self.formatted_result()}"


@dataclass(frozen=True)
class EvalError:
    errmsg: str
    details: Optional[str] = None

    def __str__(self) -> str:
        return f"ERROR: {self.errmsg}"


EvalResult = EvalInfo | EvalError


def format_result(result: EvalResult) -> str:
    return str(result)
