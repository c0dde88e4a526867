# --- formulae: Formula Parser & Evaluator API (FastAPI) ------------------------
# Purpose: thin HTTP layer over the formulae library: parse a formula, evaluate
# it against caller-supplied variables, and parse complex / uncertain values.
# The library is pure; configuration, trace persistence and HTTP status
# mapping live here.
# ------------------------------------------------------------------------------

from __future__ import annotations
import math
import os
import platform
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from formulae.catalog import CONSTANTS, list_functions
from formulae.complex_value import parse_complex
from formulae.errors import FormulaError
from formulae.formatters import format_result
from formulae.formula import evaluate_formula
from formulae.lexer import tokenize
from formulae.parser import DEFAULT_MAX_DEPTH, parse_tokens
from formulae.uncertain import parse_uncertain_value

from api.tracing import save_trace

# Load .env for external configuration (limits, trace directory, bind address)
load_dotenv()
MAX_DEPTH = int(os.getenv("FORMULAE_MAX_DEPTH", str(DEFAULT_MAX_DEPTH)))
MAX_LENGTH = int(os.getenv("FORMULAE_MAX_LENGTH", "10000"))
TRACE_DIR = os.getenv("FORMULAE_TRACE_DIR") or None
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8000"))

VERSION = "0.1.0"

app = FastAPI(title="formulae API", version=VERSION)


# ----------------------------- Schemas ----------------------------------------
class ParseRequest(BaseModel):
    formula: str


class EvaluateRequest(BaseModel):
    formula: str
    variables: Dict[str, float] = Field(default_factory=dict)
    sig_figs: Optional[int] = Field(default=None, ge=1, le=17)


class ComplexRequest(BaseModel):
    text: str
    degrees: bool = True


class UncertainRequest(BaseModel):
    text: str


# ----------------------------- Helpers ----------------------------------------
def _json_float(x: float) -> Any:
    # JSON has no NaN / Infinity; spell them out
    return x if math.isfinite(x) else str(x)


def _check_length(text: str) -> None:
    if len(text) > MAX_LENGTH:
        raise HTTPException(status_code=413, detail=f"Input longer than {MAX_LENGTH} characters.")


def _meta() -> Dict[str, Any]:
    return {"version": VERSION, "platform": platform.platform(), "max_depth": MAX_DEPTH}


# ----------------------------- Routes -----------------------------------------
@app.get("/health")
def health(): return {"ok": True}


@app.get("/functions")
def functions():
    """Introspection: the function registry and the named constants."""
    items = list_functions()
    return {"count": len(items), "items": items, "constants": sorted(CONSTANTS)}


@app.post("/parse")
def parse(req: ParseRequest):
    """
    Structure only, no evaluation:
    tokens (lexeme + offset), canonical rendering and referenced variables.
    """
    _check_length(req.formula)
    try:
        tokens = tokenize(req.formula)
        expr = parse_tokens(tokens, max_depth=MAX_DEPTH)
    except FormulaError as e:
        return {"ok": False, "error": e.to_dict()}
    return {
        "ok": True,
        "expression": str(expr),
        "variables": sorted(expr.variables()),
        "free_variables": sorted(expr.free_variables()),
        "tokens": [{"kind": t.kind.value, "text": t.text, "position": t.position} for t in tokens],
    }


@app.post("/evaluate")
def evaluate(req: EvaluateRequest):
    """
    Full pipeline. Bad formulas are reported in the body (ok=false) rather than
    as HTTP errors, the same way the library funnels them into FormulaResult.
    """
    _check_length(req.formula)
    result = evaluate_formula(req.formula, req.variables, max_depth=MAX_DEPTH)
    payload = result.to_dict()
    payload["display"] = format_result(result, sig_figs=req.sig_figs)
    payload["missing_variables"] = sorted(result.missing_variables(req.variables))
    trace_path = save_trace(TRACE_DIR, _meta(), req.model_dump(), result.trace,
                            {"ok": result.ok, "value": payload["value"], "error": payload["error"]})
    if trace_path:
        payload["trace_path"] = trace_path
    return payload


@app.post("/complex")
def complex_value(req: ComplexRequest):
    _check_length(req.text)
    c = parse_complex(req.text, angle_in_degrees=req.degrees)
    if c is None:
        raise HTTPException(status_code=422, detail=f"Not a complex number: {req.text!r}")
    return {
        "real": _json_float(c.real),
        "imaginary": _json_float(c.imaginary),
        "magnitude": _json_float(c.magnitude()),
        "angle": _json_float(c.angle()),
        "rectangular": c.to_rectangular_string(),
        "polar": c.to_polar_string(degrees=req.degrees),
    }


@app.post("/uncertain")
def uncertain_value(req: UncertainRequest):
    _check_length(req.text)
    u = parse_uncertain_value(req.text)
    if u is None:
        raise HTTPException(status_code=422, detail=f"Not a value with uncertainty: {req.text!r}")
    return {
        "value": _json_float(u.value),
        "upper": _json_float(u.upper),
        "lower": _json_float(u.lower),
        "symmetric": u.is_symmetric(),
        "bounds": [_json_float(u.lower_bound()), _json_float(u.upper_bound())],
        "display": str(u),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)
