"""
#if expression tokenizer and evaluator.

Expressions are evaluated while they are parsed; no tree is built.

Grammar (lowest precedence first):

    or    := and ( '||' and )*
    and   := not ( '&&' not )*
    not   := '!' not | cmp
    cmp   := '(' or ')' | value ( ('==' | '!=') value )?
    value := IDENT | STRING | NUMBER
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from textpp.definitions import Definitions
from textpp.errors import ExpressionError

FALSE_WORDS = {"0", "F", "FALSE", "NO"}


class TokenType(Enum):
    """Token types for #if expressions"""
    IDENT = auto()
    STRING = auto()
    NUMBER = auto()
    LAND = auto()                # &&
    LOR = auto()                 # ||
    EQ = auto()                  # ==
    NEQ = auto()                 # !=
    BANG = auto()                # !
    LPAREN = auto()              # (
    RPAREN = auto()              # )


VALUE_TYPES = (TokenType.IDENT, TokenType.STRING, TokenType.NUMBER)

_OPERATORS = {
    "&&": TokenType.LAND,
    "||": TokenType.LOR,
    "==": TokenType.EQ,
    "!=": TokenType.NEQ,
}


@dataclass
class Token:
    type: TokenType
    value: str
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.column})"


def _is_ident_start(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def _is_ident_continue(ch: str) -> bool:
    return _is_ident_start(ch) or _is_digit(ch)


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def is_truthy(value: str) -> bool:
    """Convert a resolved value to a boolean.

    Empty, `0`, `F`, `FALSE` and `NO` (any case) are false.
    """
    if value == "":
        return False
    return value.upper() not in FALSE_WORDS


def tokenize(expr: str) -> List[Token]:
    toks: List[Token] = []
    i = 0
    n = len(expr)
    while i < n:
        ch = expr[i]
        if ch.isspace():
            i += 1
            continue
        two = expr[i : i + 2]
        if two in _OPERATORS:
            toks.append(Token(_OPERATORS[two], two, i))
            i += 2
            continue
        if ch in ("&", "|", "="):
            raise ExpressionError(f"single {ch!r} (column {i})")
        if ch == "!":
            toks.append(Token(TokenType.BANG, ch, i))
            i += 1
            continue
        if ch == "(":
            toks.append(Token(TokenType.LPAREN, ch, i))
            i += 1
            continue
        if ch == ")":
            toks.append(Token(TokenType.RPAREN, ch, i))
            i += 1
            continue
        if ch == '"':
            start = i
            i += 1
            chars: List[str] = []
            while i < n and expr[i] != '"':
                # A backslash keeps the next character as is.
                if expr[i] == "\\" and i + 1 < n:
                    chars.append(expr[i + 1])
                    i += 2
                    continue
                chars.append(expr[i])
                i += 1
            if i >= n:
                raise ExpressionError(f"unterminated string (column {start})")
            i += 1
            toks.append(Token(TokenType.STRING, "".join(chars), start))
            continue
        if _is_digit(ch):
            j = i + 1
            while j < n and _is_digit(expr[j]):
                j += 1
            toks.append(Token(TokenType.NUMBER, expr[i:j], i))
            i = j
            continue
        if _is_ident_start(ch):
            j = i + 1
            while j < n and _is_ident_continue(expr[j]):
                j += 1
            toks.append(Token(TokenType.IDENT, expr[i:j], i))
            i = j
            continue
        raise ExpressionError(f"unexpected character {ch!r} (column {i})")
    return toks


class _ExprParser:
    def __init__(self, *, tokens: List[Token], definitions: Definitions) -> None:
        self._toks = tokens
        self._i = 0
        self._definitions = definitions

    def at_end(self) -> bool:
        return self._i >= len(self._toks)

    def _peek(self) -> Optional[Token]:
        return self._toks[self._i] if self._i < len(self._toks) else None

    def _eat(self, t: TokenType) -> bool:
        tok = self._peek()
        if tok is not None and tok.type == t:
            self._i += 1
            return True
        return False

    def parse_expr(self) -> bool:
        return self._parse_or()

    def check_trailing(self) -> None:
        tok = self._peek()
        if tok is not None:
            raise ExpressionError(f"unexpected token {tok.value!r} (column {tok.column})")

    def _parse_or(self) -> bool:
        v = self._parse_and()
        while self._eat(TokenType.LOR):
            rhs = self._parse_and()
            v = v or rhs
        return v

    def _parse_and(self) -> bool:
        v = self._parse_not()
        while self._eat(TokenType.LAND):
            rhs = self._parse_not()
            v = v and rhs
        return v

    def _parse_not(self) -> bool:
        if self._eat(TokenType.BANG):
            return not self._parse_not()
        return self._parse_cmp()

    def _parse_cmp(self) -> bool:
        if self._eat(TokenType.LPAREN):
            v = self._parse_or()
            if not self._eat(TokenType.RPAREN):
                tok = self._peek()
                found = "end of expression" if tok is None else f"{tok.value!r} (column {tok.column})"
                raise ExpressionError(f"missing ')', found {found}")
            return v
        lhs = self._parse_value()
        if self._eat(TokenType.EQ):
            return lhs == self._parse_value()
        if self._eat(TokenType.NEQ):
            return lhs != self._parse_value()
        return is_truthy(lhs)

    def _parse_value(self) -> str:
        tok = self._peek()
        if tok is None:
            raise ExpressionError("unexpected end of expression, expected a value")
        if tok.type not in VALUE_TYPES:
            raise ExpressionError(f"expected a value, found {tok.value!r} (column {tok.column})")
        self._i += 1
        if tok.type == TokenType.IDENT:
            return self._definitions.get_value(tok.value)
        return tok.value


def evaluate(expr: str, definitions: Definitions) -> bool:
    """Evaluate the text following `#if` against the definitions."""
    tokens = tokenize(expr)
    p = _ExprParser(tokens=tokens, definitions=definitions)
    val = p.parse_expr()
    p.check_trailing()
    return val
