# -----------------------------------------------------------------------------
# Formula pipeline: text -> tokens -> tree -> value
# Responsibilities:
#   • Tokenize and parse caller text (bounded nesting depth)
#   • Collect the variables the formula refers to
#   • Evaluate only when every variable is bound or is a named constant
#   • Funnel any FormulaError into the result instead of raising
#   • Record each step on a Tracer for the API layer / debugging
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set

from .catalog import CONSTANTS
from .errors import FormulaError
from .expression import Expression
from .lexer import tokenize
from .parser import DEFAULT_MAX_DEPTH, parse_tokens
from .tracer import Tracer


@dataclass
class FormulaResult:
    # Re-computed on every input change; never persisted
    text: str
    expression: Optional[Expression] = None
    error: Optional[FormulaError] = None
    variables: Set[str] = field(default_factory=set)
    value: Optional[float] = None
    trace: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def free_variables(self) -> Set[str]:
        return {v for v in self.variables if v not in CONSTANTS}

    def missing_variables(self, env: Optional[Mapping[str, float]] = None) -> Set[str]:
        env = env or {}
        return {v for v in self.free_variables if v not in env}

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view; non-finite values are spelled out as strings."""
        value: Any = self.value
        if value is not None and not math.isfinite(value):
            value = str(value)
        return {
            "ok": self.ok,
            "text": self.text,
            "expression": str(self.expression) if self.expression is not None else None,
            "variables": sorted(self.variables),
            "free_variables": sorted(self.free_variables),
            "value": value,
            "error": self.error.to_dict() if self.error is not None else None,
            "trace": self.trace,
        }


def evaluate_formula(
    text: str,
    variables: Optional[Mapping[str, float]] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> FormulaResult:
    """
    Parse `text` and, when possible, evaluate it against `variables`.

    Never raises for bad input: parse errors leave `expression` and `value`
    unset; a formula with unbound variables parses but has no `value`.
    """
    env: Mapping[str, float] = variables or {}
    trace = Tracer()
    trace.add("input", {"text": text, "bound": sorted(env.keys())})

    try:
        tokens = tokenize(text)
        trace.add("tokens", {"count": len(tokens), "lexemes": [t.text for t in tokens]})
        expr = parse_tokens(tokens, max_depth=max_depth)
        trace.add("parsed", {"expression": str(expr)})
    except FormulaError as e:
        trace.add("error", e.to_dict())
        return FormulaResult(text=text, error=e, trace=trace.steps())

    names = expr.variables()
    unbound = sorted(v for v in names if v not in CONSTANTS and v not in env)
    trace.add("variables", {"all": sorted(names), "unbound": unbound})

    if unbound:
        trace.add("skipped_evaluation", {"missing": unbound})
        return FormulaResult(text=text, expression=expr, variables=names, trace=trace.steps())

    try:
        value = expr.evaluate(env)
    except FormulaError as e:
        trace.add("error", e.to_dict())
        return FormulaResult(text=text, expression=expr, error=e, variables=names,
                             trace=trace.steps())

    trace.add("evaluated", {"value": value if math.isfinite(value) else str(value)})
    return FormulaResult(text=text, expression=expr, variables=names, value=value,
                         trace=trace.steps())
