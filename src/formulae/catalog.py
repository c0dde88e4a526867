# -----------------------------------------------------------------------------
# Function & constant catalog
# Purpose:
#   The closed set of unary functions a formula may call, their accepted
#   aliases and numeric rules, plus the named constants (pi, e, tau).
# Notes:
#   - Built once at import; read-only afterwards, so safe to share across threads.
#   - Every rule maps one float to one float with IEEE-754 results
#     (NaN / +-inf) instead of raising, as float64 math does.
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

INF = math.inf
NAN = math.nan


def _guard(fn: Callable[[float], float], overflow: Callable[[float], float] = lambda x: INF):
    # math.* raises where float64 math saturates; map back to NaN / inf.
    def rule(x: float) -> float:
        try:
            return fn(x)
        except ValueError:
            return NAN
        except OverflowError:
            return overflow(x)
    return rule


def _log(fn: Callable[[float], float]):
    def rule(x: float) -> float:
        if x == 0.0:
            return -INF
        return _guard(fn)(x)
    return rule


def _integral(fn: Callable[[float], int]):
    # floor/ceil return ints and reject inf/nan; keep non-finite values as-is
    def rule(x: float) -> float:
        if not math.isfinite(x):
            return x
        return float(fn(x))
    return rule


def _round(x: float) -> float:
    # half away from zero (Python's round() is half-to-even)
    if not math.isfinite(x) or abs(x) >= 2.0 ** 52:
        return x
    # compare the fraction; abs(x) + 0.5 rounds up for 0.49999999999999994
    r = math.floor(abs(x))
    if abs(x) - r >= 0.5:
        r += 1.0
    return math.copysign(r, x)


def _sign(x: float) -> float:
    if x > 0.0:
        return 1.0
    if x < 0.0:
        return -1.0
    if math.isnan(x):
        return x
    return 0.0


def _factorial(x: float) -> float:
    if math.isnan(x) or x < 0.0 or not x.is_integer():
        return NAN
    if x > 170.0:
        return INF
    return float(math.factorial(int(x)))


class MathFunction(Enum):
    # Trigonometric
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    ASIN = "asin"
    ACOS = "acos"
    ATAN = "atan"
    SINH = "sinh"
    COSH = "cosh"
    TANH = "tanh"
    # Exponential / logarithmic
    EXP = "exp"
    LN = "ln"
    LOG10 = "log10"
    LOG2 = "log2"
    # Power / root
    SQRT = "sqrt"
    CBRT = "cbrt"
    ABS = "abs"
    # Rounding
    FLOOR = "floor"
    CEIL = "ceil"
    ROUND = "round"
    # Special
    SIGN = "sign"
    FACTORIAL = "factorial"

    @property
    def canonical(self) -> str:
        return self.value

    @property
    def aliases(self) -> Tuple[str, ...]:
        return _ALIASES.get(self, ())

    def evaluate(self, arg: float) -> float:
        return _RULES[self](float(arg))

    def __str__(self) -> str:
        return self.value


_RULES: Dict[MathFunction, Callable[[float], float]] = {
    MathFunction.SIN: _guard(math.sin),
    MathFunction.COS: _guard(math.cos),
    MathFunction.TAN: _guard(math.tan),
    MathFunction.ASIN: _guard(math.asin),
    MathFunction.ACOS: _guard(math.acos),
    MathFunction.ATAN: _guard(math.atan),
    MathFunction.SINH: _guard(math.sinh, overflow=lambda x: math.copysign(INF, x)),
    MathFunction.COSH: _guard(math.cosh),
    MathFunction.TANH: _guard(math.tanh),
    MathFunction.EXP: _guard(math.exp),
    MathFunction.LN: _log(math.log),
    MathFunction.LOG10: _log(math.log10),
    MathFunction.LOG2: _log(math.log2),
    MathFunction.SQRT: _guard(math.sqrt),
    MathFunction.CBRT: _guard(math.cbrt),
    MathFunction.ABS: abs,
    MathFunction.FLOOR: _integral(math.floor),
    MathFunction.CEIL: _integral(math.ceil),
    MathFunction.ROUND: _round,
    MathFunction.SIGN: _sign,
    MathFunction.FACTORIAL: _factorial,
}

_ALIASES: Dict[MathFunction, Tuple[str, ...]] = {
    MathFunction.ASIN: ("arcsin",),
    MathFunction.ACOS: ("arccos",),
    MathFunction.ATAN: ("arctan",),
    MathFunction.LN: ("log",),
    MathFunction.SIGN: ("sgn",),
    MathFunction.FACTORIAL: ("fact",),
}

# lowercase name or alias -> function
_BY_NAME: Dict[str, MathFunction] = {}
for _fn in MathFunction:
    _BY_NAME[_fn.value] = _fn
    for _alias in _fn.aliases:
        _BY_NAME[_alias] = _fn

# Named constants; matched exactly, not case-folded ("Pi" is an ordinary variable)
CONSTANTS: Dict[str, float] = {
    "pi": math.pi, "PI": math.pi, "π": math.pi,
    "e": math.e, "E": math.e,
    "tau": math.tau, "TAU": math.tau, "τ": math.tau,
}


def lookup_function(name: str) -> Optional[MathFunction]:
    """Resolve a function name or alias (case-insensitive); None if unknown."""
    return _BY_NAME.get(name.lower())


def is_constant(name: str) -> bool:
    return name in CONSTANTS


def resolve_constant(name: str) -> Optional[float]:
    return CONSTANTS.get(name)


def list_functions() -> List[Dict[str, object]]:
    """
    Flat listing of the registry, e.g. for an API introspection endpoint.
    One entry per function: canonical name and accepted aliases.
    """
    return [{"name": fn.value, "aliases": list(fn.aliases)} for fn in MathFunction]
