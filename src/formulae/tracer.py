# -----------------------------------------------------------------------------
# Tracing utility
# Purpose:
#   Append-only collector for structured pipeline steps (input, tokens, parse,
#   evaluation, errors). Exports plain dicts so callers can return or persist
#   the trace as JSON. The library never prints or logs on its own.
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class TraceStep:
    # short label ('tokens', 'parsed', 'error', ...) + free-form detail
    kind: str
    detail: Dict[str, Any] = field(default_factory=dict)


class Tracer:
    def __init__(self):
        self._steps: List[TraceStep] = []

    def add(self, kind: str, detail: Optional[Dict[str, Any]] = None) -> None:
        self._steps.append(TraceStep(kind, dict(detail or {})))

    def kinds(self) -> List[str]:
        return [s.kind for s in self._steps]

    def steps(self) -> List[Dict[str, Any]]:
        return [{"kind": s.kind, "detail": s.detail} for s in self._steps]

    def __len__(self) -> int:
        return len(self._steps)
