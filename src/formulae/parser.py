# -----------------------------------------------------------------------------
# Parser (recursive descent)
# Purpose: build an expression tree from the token list.
# Precedence, lowest to highest:
#   additive        := multiplicative (('+'|'-') multiplicative)*   left-assoc
#   multiplicative  := power (('*'|'/'|'%') power)*                 left-assoc
#   power           := unary ('^' power)?                           right-assoc
#   unary           := ('+'|'-') unary | primary
#   primary         := NUMBER | VARIABLE | FUNCTION '(' additive ')' | '(' additive ')'
# The first structural error aborts the parse; there is no recovery.
# -----------------------------------------------------------------------------

from __future__ import annotations
from contextlib import contextmanager
from typing import List, Optional

from .errors import (
    EmptyExpression,
    MissingOperand,
    NestingTooDeep,
    TrailingInput,
    UnexpectedToken,
    UnknownFunction,
    UnmatchedParenthesis,
)
from .expression import BinaryOp, Expression, FunctionCall, Number, UnaryOp, Variable
from .lexer import Token, TokenKind, tokenize

# operand nesting levels (parens, unary and power chains); a few Python frames each
DEFAULT_MAX_DEPTH = 100


def _describe(token: Optional[Token]) -> str:
    return "end of input" if token is None else f"'{token.text}'"


class Parser:
    def __init__(self, tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH):
        self.tokens = tokens
        self.pos = 0
        self.max_depth = max_depth
        self._depth = 0
        self._deepest = 0

    # ---------------- cursor ----------------

    def _peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _advance(self) -> Optional[Token]:
        token = self._peek()
        self.pos += 1
        return token

    def _end_position(self) -> int:
        if not self.tokens:
            return 0
        last = self.tokens[-1]
        return last.position + len(last.text)

    def _expect(self, kind: TokenKind, label: str) -> Token:
        token = self._peek()
        if token is not None and token.kind is kind:
            self.pos += 1
            return token
        if token is None and kind is TokenKind.RPAREN:
            raise UnmatchedParenthesis(self._end_position())
        raise UnexpectedToken(
            f"Expected {label}, got {_describe(token)}",
            token.position if token is not None else self._end_position(),
        )

    # ---------------- entry ----------------

    def parse(self) -> Expression:
        if not self.tokens:
            raise EmptyExpression()
        try:
            expr = self._parse_additive()
        except RecursionError:
            # max_depth set above what the interpreter stack can hold
            token = self._peek()
            raise NestingTooDeep(
                self._deepest,
                token.position if token is not None else self._end_position(),
            ) from None
        if self.pos < len(self.tokens):
            rest = self.tokens[self.pos:]
            raise TrailingInput(" ".join(t.text for t in rest), rest[0].position)
        return expr

    # ---------------- precedence levels ----------------

    def _parse_additive(self) -> Expression:
        left = self._parse_multiplicative()
        while True:
            token = self._peek()
            if token is None or not token.is_operator("+", "-"):
                return left
            self._advance()
            right = self._parse_multiplicative()
            left = BinaryOp(token.value, left, right)

    def _parse_multiplicative(self) -> Expression:
        left = self._parse_power()
        while True:
            token = self._peek()
            if token is None or not token.is_operator("*", "/", "%"):
                return left
            self._advance()
            right = self._parse_power()
            left = BinaryOp(token.value, left, right)

    @contextmanager
    def _nested(self):
        # parens, calls, unary chains and power chains all recurse through here
        self._depth += 1
        self._deepest = max(self._deepest, self._depth)
        try:
            if self._depth > self.max_depth:
                token = self._peek()
                raise NestingTooDeep(
                    self.max_depth,
                    token.position if token is not None else self._end_position(),
                )
            yield
        finally:
            self._depth -= 1

    def _parse_power(self) -> Expression:
        base = self._parse_unary()
        token = self._peek()
        if token is not None and token.is_operator("^"):
            self._advance()
            with self._nested():
                exponent = self._parse_power()  # right associative
            return BinaryOp("^", base, exponent)
        return base

    def _parse_unary(self) -> Expression:
        with self._nested():
            token = self._peek()
            if token is not None and token.is_operator("+", "-"):
                self._advance()
                return UnaryOp(token.value, self._parse_unary())
            return self._parse_primary()

    def _parse_primary(self) -> Expression:
        token = self._peek()
        if token is None:
            raise MissingOperand(self._end_position())

        if token.kind is TokenKind.NUMBER:
            self._advance()
            return Number(token.value)

        if token.kind is TokenKind.VARIABLE:
            self._advance()
            nxt = self._peek()
            if nxt is not None and nxt.kind is TokenKind.LPAREN:
                # "foo(x)": looks like a call but foo is not in the catalog
                raise UnknownFunction(token.value, token.position)
            return Variable(token.value)

        if token.kind is TokenKind.FUNCTION:
            self._advance()
            self._expect(TokenKind.LPAREN, "'('")
            arg = self._parse_additive()
            self._expect(TokenKind.RPAREN, "')'")
            return FunctionCall(token.value, (arg,))

        if token.kind is TokenKind.LPAREN:
            self._advance()
            expr = self._parse_additive()
            self._expect(TokenKind.RPAREN, "')'")
            return expr

        raise UnexpectedToken(_describe(token), token.position)


def parse_tokens(tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH) -> Expression:
    return Parser(tokens, max_depth=max_depth).parse()


def parse_expression(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Expression:
    """Tokenize and parse `text`; raises a FormulaParseError subclass on failure."""
    return Parser(tokenize(text), max_depth=max_depth).parse()
