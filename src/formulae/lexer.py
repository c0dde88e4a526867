# -----------------------------------------------------------------------------
# Tokenizer
# Purpose: convert raw formula text into a flat list of tokens (numbers,
# identifiers, function names, operators, punctuation) in one left-to-right
# pass with a single character of lookahead.
# - Function names are recognized after the identifier scan, so a variable
#   cannot be called "sin".
# - Every token keeps the offset of its first character for diagnostics.
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, List

from .catalog import lookup_function
from .errors import InvalidNumber, UnexpectedCharacter

OPERATORS = "+-*/^%"
WHITESPACE = " \t\n\r\f\v"


class TokenKind(Enum):
    NUMBER = "number"
    VARIABLE = "variable"
    FUNCTION = "function"
    OPERATOR = "operator"
    LPAREN = "lparen"
    RPAREN = "rparen"
    COMMA = "comma"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: Any          # float | str | MathFunction | None
    position: int       # offset of the first character in the input
    text: str           # source lexeme, used in error messages

    def is_operator(self, *ops: str) -> bool:
        return self.kind is TokenKind.OPERATOR and self.value in ops


def _is_greek(c: str) -> bool:
    return "α" <= c <= "ω" or "Α" <= c <= "Ω"


def _starts_identifier(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or c == "_" or _is_greek(c)


def _continues_identifier(c: str) -> bool:
    return c.isalnum() or c == "_" or _is_greek(c)


def tokenize(text: str) -> List[Token]:
    """
    Tokenize a formula.

    Raises
    ------
    UnexpectedCharacter
        A character outside the supported alphabet.
    InvalidNumber
        A numeric-looking run (digits, '.', 'e'/'E', exponent '-') that
        float() rejects, e.g. "1.2.3" or "2e".
    """
    tokens: List[Token] = []
    b = 0
    n = len(text)

    while b < n:
        c = text[b]
        start = b

        # --- Whitespace ---
        if c in WHITESPACE:
            b += 1

        # --- Numbers: greedy digits / '.' / exponent marker (+ optional '-') ---
        elif c.isascii() and (c.isdigit() or c == "."):
            while b < n and text[b].isascii() and (text[b].isdigit() or text[b] in ".eE"):
                if text[b] in "eE" and b + 1 < n and text[b + 1] == "-":
                    b += 1
                b += 1
            literal = text[start:b]
            try:
                value = float(literal)
            except ValueError:
                raise InvalidNumber(literal, start) from None
            tokens.append(Token(TokenKind.NUMBER, value, start, literal))

        # --- Identifiers: functions or variables ---
        elif _starts_identifier(c):
            while b < n and _continues_identifier(text[b]):
                b += 1
            name = text[start:b]
            func = lookup_function(name)
            if func is not None:
                tokens.append(Token(TokenKind.FUNCTION, func, start, name))
            else:
                tokens.append(Token(TokenKind.VARIABLE, name, start, name))

        # --- Operators & punctuation ---
        elif c in OPERATORS:
            tokens.append(Token(TokenKind.OPERATOR, c, start, c))
            b += 1
        elif c == "(":
            tokens.append(Token(TokenKind.LPAREN, None, start, c))
            b += 1
        elif c == ")":
            tokens.append(Token(TokenKind.RPAREN, None, start, c))
            b += 1
        elif c == ",":
            tokens.append(Token(TokenKind.COMMA, None, start, c))
            b += 1

        else:
            raise UnexpectedCharacter(c, start)

    return tokens
