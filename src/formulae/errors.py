# -----------------------------------------------------------------------------
# Diagnostics
# Purpose:
#   One exception hierarchy for everything that can go wrong between raw
#   formula text and a number. Parse-time failures (lexer + parser) derive
#   from FormulaParseError, evaluation-time failures from FormulaEvalError.
# Codes:
#   1xxx lexer, 2xxx parser, 3xxx evaluation.
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Any, Dict, Optional


class FormulaError(Exception):
    kind = "formula_error"
    code = "9999"

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.position = position

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "code": self.code, "message": self.message,
                "position": self.position}


class FormulaParseError(FormulaError):
    kind = "parse_error"


class FormulaEvalError(FormulaError):
    kind = "eval_error"


# ---- Lexer ------------------------------------------------------------------

class UnexpectedCharacter(FormulaParseError):
    kind = "unexpected_character"
    code = "1001"

    def __init__(self, char: str, position: Optional[int] = None):
        super().__init__(f"Unexpected character: '{char}'", position)
        self.char = char


class InvalidNumber(FormulaParseError):
    kind = "invalid_number"
    code = "1002"

    def __init__(self, text: str, position: Optional[int] = None):
        super().__init__(f"Invalid number: {text}", position)
        self.text = text


# ---- Parser -----------------------------------------------------------------

class UnexpectedToken(FormulaParseError):
    kind = "unexpected_token"
    code = "2001"

    def __init__(self, detail: str, position: Optional[int] = None):
        super().__init__(f"Unexpected token: {detail}", position)
        self.detail = detail


class UnmatchedParenthesis(UnexpectedToken):
    # A ')' was expected but the input ran out.
    kind = "unmatched_parenthesis"
    code = "2002"

    def __init__(self, position: Optional[int] = None):
        super().__init__("Expected ')', got end of input", position)
        self.message = "Unmatched parenthesis"
        self.args = (self.message,)


class EmptyExpression(FormulaParseError):
    kind = "empty_expression"
    code = "2003"

    def __init__(self):
        super().__init__("Empty expression", None)


class UnknownFunction(FormulaParseError):
    kind = "unknown_function"
    code = "2004"

    def __init__(self, name: str, position: Optional[int] = None):
        super().__init__(f"Unknown function: {name}", position)
        self.name = name


class MissingOperand(FormulaParseError):
    kind = "missing_operand"
    code = "2005"

    def __init__(self, position: Optional[int] = None):
        super().__init__("Missing operand", position)


class TrailingInput(FormulaParseError):
    kind = "trailing_input"
    code = "2006"

    def __init__(self, rest: str, position: Optional[int] = None):
        super().__init__(f"Trailing input: {rest}", position)
        self.rest = rest


class NestingTooDeep(FormulaParseError):
    kind = "nesting_too_deep"
    code = "2007"

    def __init__(self, limit: int, position: Optional[int] = None):
        super().__init__(f"Expression nested deeper than {limit} levels", position)
        self.limit = limit


# ---- Evaluation -------------------------------------------------------------

class UndefinedVariable(FormulaEvalError):
    kind = "undefined_variable"
    code = "3001"

    def __init__(self, name: str):
        super().__init__(f"Undefined variable: {name}")
        self.name = name


class FunctionArityMismatch(FormulaEvalError):
    kind = "function_arity_mismatch"
    code = "3002"

    def __init__(self, function: str, expected: int, actual: int):
        super().__init__(f"Function {function} expects {expected} argument, got {actual}")
        self.function = function
        self.expected = expected
        self.actual = actual


class UnknownOperator(FormulaEvalError):
    kind = "unknown_operator"
    code = "3003"

    def __init__(self, op: str):
        super().__init__(f"Unknown operator: {op}")
        self.op = op
