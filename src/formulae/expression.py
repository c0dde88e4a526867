# -----------------------------------------------------------------------------
# Expression tree
# Purpose:
#   Immutable parse-tree nodes plus the operations callers need on them:
#   free-variable discovery, numeric evaluation against an environment,
#   and canonical (fully parenthesized) text rendering.
# Notes:
#   - Each node owns its children; trees are never shared or cyclic.
#   - Walks use an explicit stack, so a long left-associative chain
#     ("1+1+...+1") cannot hit Python's recursion limit.
#   - Arithmetic follows float64 semantics: x/0 is +-inf or NaN, never an error.
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Set, Tuple

from .catalog import CONSTANTS, MathFunction
from .errors import FunctionArityMismatch, UndefinedVariable, UnknownOperator

INF = math.inf
NAN = math.nan

BINARY_OPERATORS = "+-*/^%"
UNARY_OPERATORS = "+-"


class Expression:
    """Base class of all tree nodes."""

    def children(self) -> Tuple["Expression", ...]:
        return ()

    def variables(self) -> Set[str]:
        """Names of every Variable node in the tree (constants included)."""
        names: Set[str] = set()
        stack: List[Expression] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, Variable):
                names.add(node.name)
            stack.extend(node.children())
        return names

    def free_variables(self) -> Set[str]:
        """Variables that must come from the caller's environment."""
        return {v for v in self.variables() if v not in CONSTANTS}

    def evaluate(self, env: Optional[Mapping[str, float]] = None) -> float:
        """
        Evaluate the tree to a float.

        Parameters
        ----------
        env : Mapping[str, float] | None
            Variable bindings. Never mutated. Named constants (pi, e, tau and
            their symbol/upper-case spellings) take priority over entries here.

        Raises
        ------
        UndefinedVariable
            A variable is neither a constant nor bound in `env`.
        FunctionArityMismatch
            A FunctionCall node does not carry exactly one argument.
        """
        bindings = env or {}

        def check_arity(node: Expression) -> None:
            if isinstance(node, FunctionCall) and len(node.args) != 1:
                raise FunctionArityMismatch(node.function.value, 1, len(node.args))

        def visit(node: Expression, args: List[float]) -> float:
            if isinstance(node, Number):
                return node.value
            if isinstance(node, Variable):
                return _resolve(node.name, bindings)
            if isinstance(node, BinaryOp):
                return apply_binary(node.op, args[0], args[1])
            if isinstance(node, UnaryOp):
                return apply_unary(node.op, args[0])
            if isinstance(node, FunctionCall):
                return node.function.evaluate(args[0])
            raise TypeError(f"Not an expression node: {node!r}")

        return _fold(self, visit, enter=check_arity)

    def __str__(self) -> str:
        def visit(node: Expression, args: List[str]) -> str:
            if isinstance(node, Number):
                return format_number(node.value)
            if isinstance(node, Variable):
                return node.name
            if isinstance(node, BinaryOp):
                return f"({args[0]} {node.op} {args[1]})"
            if isinstance(node, UnaryOp):
                return f"({node.op}{args[0]})"
            if isinstance(node, FunctionCall):
                return f"{node.function.value}({', '.join(args)})"
            raise TypeError(f"Not an expression node: {node!r}")

        return _fold(self, visit)


@dataclass(frozen=True, eq=True)
class Number(Expression):
    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True, eq=True)
class Variable(Expression):
    name: str


@dataclass(frozen=True, eq=True)
class BinaryOp(Expression):
    op: str
    left: Expression
    right: Expression

    def children(self) -> Tuple[Expression, ...]:
        return (self.left, self.right)


@dataclass(frozen=True, eq=True)
class UnaryOp(Expression):
    op: str
    operand: Expression

    def children(self) -> Tuple[Expression, ...]:
        return (self.operand,)


@dataclass(frozen=True, eq=True)
class FunctionCall(Expression):
    function: MathFunction
    # the grammar always produces one argument; evaluate() still checks
    args: Tuple[Expression, ...]

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

    def children(self) -> Tuple[Expression, ...]:
        return self.args


# ---- Walk ---------------------------------------------------------------------

def _fold(root: Expression, visit: Callable[[Expression, List[Any]], Any],
          enter: Optional[Callable[[Expression], None]] = None) -> Any:
    """
    Post-order walk without recursion. `visit(node, child_results)` runs after
    all children of `node` (left to right); `enter(node)` runs before them.
    """
    results: List[Any] = []
    stack: List[Tuple[Expression, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        kids = node.children()
        if not expanded:
            if enter is not None:
                enter(node)
            if kids:
                stack.append((node, True))
                stack.extend((k, False) for k in reversed(kids))
                continue
        k = len(kids)
        args = results[len(results) - k:] if k else []
        if k:
            del results[len(results) - k:]
        results.append(visit(node, args))
    return results[0]


# ---- Arithmetic ---------------------------------------------------------------

def _resolve(name: str, env: Mapping[str, float]) -> float:
    if name in CONSTANTS:
        return CONSTANTS[name]
    if name in env:
        return float(env[name])
    raise UndefinedVariable(name)


def _divide(left: float, right: float) -> float:
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return NAN
        return math.copysign(INF, left) * math.copysign(1.0, right)
    return left / right


def _odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0.0 and _odd_integer(exponent):
            return -INF
        return INF
    except ValueError:
        # zero base with negative exponent is a pole, the rest (negative base,
        # fractional exponent) has no real value
        if base == 0.0 and exponent < 0.0:
            if math.copysign(1.0, base) < 0.0 and _odd_integer(exponent):
                return -INF
            return INF
        return NAN


def _remainder(left: float, right: float) -> float:
    try:
        return math.fmod(left, right)
    except ValueError:
        return NAN


def apply_binary(op: str, left: float, right: float) -> float:
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op == "/":
        return _divide(left, right)
    if op == "^":
        return _power(left, right)
    if op == "%":
        return _remainder(left, right)
    raise UnknownOperator(op)


def apply_unary(op: str, operand: float) -> float:
    if op == "-":
        return -operand
    if op == "+":
        return operand
    raise UnknownOperator(op)


def format_number(value: float) -> str:
    """Literal text for a Number node; re-parses to the same float."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        text = "1e999"
    elif value.is_integer():
        text = f"{abs(value):.0f}"
    else:
        text = repr(abs(value))
    if math.copysign(1.0, value) < 0.0:
        return f"(-{text})"
    return text
