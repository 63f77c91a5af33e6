import argparse
import logging
import sys
from typing import Optional, Sequence

from calculator.log_support import setup_loggers
from calculator.result import EvalError, format_result
from calculator.session import Calculator

logger = logging.getLogger("calculator.repl")

MANUAL = """
This is an interactive calculator.

MANUAL

Enter an arithmetic expression and get the result immediately.
Allowed operators: unary '-', '+' and binary '-', '+', '*', '/', '^'.

You could use constants 'pi' and 'e'.

There are predefined functions - 'sin', 'cos', 'tg', 'ctg'.
For example,

> sin(0)
0.0

Also you could assign the result to a variable and use it in any later expressions.
For example,

> x = 2 * 5
x = 10.0

> x * 2
20.0

To see this manual again enter "help"

To terminate enter "quit"
"""

QUIT_COMMAND = "quit"
HELP_COMMAND = "help"


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive arithmetic calculator")
    parser.add_argument(
        "expressions",
        nargs="*",
        help="evaluate these expressions in one session and exit instead of starting the prompt",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="do not print the manual on start")
    parser.add_argument("-d", "--debug", action="store_true", help="enable debug logging")
    parser.add_argument("-L", "--logfile", metavar="FILE", help="also write logs to FILE")
    parser.add_argument(
        "-v",
        "--verbose-errors",
        action="store_true",
        help="print parser diagnostics under syntax errors",
    )
    return parser.parse_args(argv)


def print_result(calc: Calculator, code: str, verbose_errors: bool) -> bool:
    result = calc.evaluate(code)
    print(format_result(result))
    if isinstance(result, EvalError):
        if verbose_errors and result.details:
            print(result.details)
        return False
    return True


def run_prompt(calc: Calculator, quiet: bool = False, verbose_errors: bool = False) -> None:
    if not quiet:
        print(MANUAL)

    while True:
        try:
            code = input("> ")
        except EOFError:
            print()
            break

        command = code.strip()
        if command == QUIT_COMMAND:
            break
        elif command == HELP_COMMAND:
            print(MANUAL)
        elif not command:
            continue
        else:
            print_result(calc, code, verbose_errors)
            print()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_loggers(def_level=logging.DEBUG if args.debug else logging.WARNING, log_fname=args.logfile)

    calc = Calculator()
    if args.expressions:
        ok = True
        for code in args.expressions:
            ok = print_result(calc, code, args.verbose_errors) and ok
        logger.debug("session variables: %s", dict(calc.variables))
        return 0 if ok else 1

    try:
        run_prompt(calc, quiet=args.quiet, verbose_errors=args.verbose_errors)
    except KeyboardInterrupt:
        print()
    logger.debug("session variables: %s", dict(calc.variables))
    return 0


if __name__ == "__main__":
    sys.exit(main())
