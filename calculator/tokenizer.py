import enum
import re
import string
from dataclasses import dataclass

from calculator.utils import PrintableEnum


@dataclass
class TokenizerError(Exception):
    errmsg: str
    code: str
    error_char_idx: int

    def __str__(self) -> str:
        print_start_idx = max(0, self.error_char_idx - 10)
        print_ellipsis_pre = print_start_idx > 0
        print_end_idx = min(len(self.code), self.error_char_idx + 10)
        print_ellipsis_post = print_end_idx < len(self.code)
        return "\n".join(
            [
                f"[Tokenizer error] {self.errmsg}",
                (
                    ("..." if print_ellipsis_pre else "")
                    + f"{self.code[print_start_idx:print_end_idx]}"
                    + ("..." if print_ellipsis_post else "")
                ),
                " " * (self.error_char_idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
            ]
        )


class TokenType(PrintableEnum):
    NUMBER = enum.auto()
    IDENTIFIER = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    STAR = enum.auto()
    SLASH = enum.auto()
    CARET = enum.auto()
    EQUAL = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()
    END = enum.auto()


@dataclass
class Token:
    type: TokenType
    lexeme: str

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


# only ASCII, str.isdigit() / str.isalpha() accept e.g. "²" and "é"
def _is_digit(s: str) -> bool:
    return s in string.digits


def _is_letter(s: str) -> bool:
    return s in string.ascii_letters


SINGLE_CHAR_TOKENS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "^": TokenType.CARET,
    "=": TokenType.EQUAL,
    "(": TokenType.BRACKET_OPEN,
    ")": TokenType.BRACKET_CLOSE,
}


def _consume_while(code: str, i: int, predicate) -> int:
    while i < len(code) and predicate(code[i]):
        i += 1
    return i


def tokenize(code: str) -> list[Token]:
    """Split a single input line into tokens; the result always ends with an END token

    Numbers are digits with an optional fractional part (``12``, ``1.5``, but not ``1.`` or ``.5``),
    identifiers are letters optionally followed by digits (``x``, ``var12``). Anything after the
    digits of an identifier starts a new token, so ``a1b`` is two identifiers.
    """
    i = 0
    tokens: list[Token] = []
    while i < len(code):
        if _is_digit(code[i]):
            number_end_idx = _consume_while(code, i, _is_digit)
            if (
                number_end_idx + 1 < len(code)
                and code[number_end_idx] == "."
                and _is_digit(code[number_end_idx + 1])
            ):
                number_end_idx = _consume_while(code, number_end_idx + 1, _is_digit)
            tokens.append(Token(type=TokenType.NUMBER, lexeme=code[i:number_end_idx]))
            i = number_end_idx
        elif _is_letter(code[i]):
            ident_end_idx = _consume_while(code, i, _is_letter)
            ident_end_idx = _consume_while(code, ident_end_idx, _is_digit)
            tokens.append(Token(type=TokenType.IDENTIFIER, lexeme=code[i:ident_end_idx]))
            i = ident_end_idx
        elif code[i] in SINGLE_CHAR_TOKENS:
            tokens.append(Token(type=SINGLE_CHAR_TOKENS[code[i]], lexeme=code[i]))
            i += 1
        elif code[i].isspace():
            i += 1
        else:
            raise TokenizerError(f"Unexpected character: {code[i]!r}", code=code, error_char_idx=i)

    tokens.append(Token(type=TokenType.END, lexeme=""))
    return tokens


def untokenize(tokens: list[Token]) -> str:
    result = " ".join(t.lexeme for t in tokens if t.type is not TokenType.END)

    # ( 1 + 2 ) => (1 + 2)
    result = re.sub(r"\(\s+", "(", result)
    result = re.sub(r"\s+\)", ")", result)

    # sin (0) => sin(0)
    result = re.sub(r"([a-zA-Z])\s+\(", r"\1(", result)

    # 4 ^ 5 => 4^5
    result = re.sub(r"\s+\^\s+", "^", result)
    return result
