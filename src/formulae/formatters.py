from __future__ import annotations
import math
from typing import Optional

from .errors import FormulaError
from .formula import FormulaResult

ROUND_SIG = 3
DISPLAY_DECIMALS = 10


def sig(x: float, n: int = ROUND_SIG) -> float:
    if x == 0 or not math.isfinite(x):
        return x
    p = -int(math.floor(math.log10(abs(x)))) + (n - 1)
    return round(x, p)


def format_value(x: float, decimals: int = DISPLAY_DECIMALS) -> str:
    """Fixed decimals with trailing zeros (and a bare '.') trimmed: 2.5000 -> '2.5'."""
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "∞" if x > 0 else "-∞"
    text = f"{x:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def describe_error(err: FormulaError, text: Optional[str] = None) -> str:
    # Message, plus the source line with a caret under the offending offset.
    if text is None or err.position is None:
        return err.message
    line = text.replace("\n", " ")
    caret = " " * min(err.position, len(line)) + "^"
    return f"{err.message}\n  {line}\n  {caret}"


def format_result(result: FormulaResult, sig_figs: Optional[int] = None) -> str:
    # sig_figs: round the value to that many significant figures before display
    if result.error is not None:
        return describe_error(result.error, result.text)
    if result.value is not None:
        value = result.value if sig_figs is None else sig(result.value, sig_figs)
        return f"= {format_value(value)}"
    if result.expression is not None:
        return f"Parsed: {result.expression}"
    return ""
