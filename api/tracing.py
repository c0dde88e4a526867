from __future__ import annotations
import json
import os
import time
from typing import Any, Dict, List, Optional


def ts() -> str:
    return time.strftime("%Y%m%d_%H%M%SZ", time.gmtime())


def save_trace(trace_dir: Optional[str], meta: Dict[str, Any], request: Dict[str, Any],
               trace: List[Dict[str, Any]], outcome: Dict[str, Any]) -> Optional[str]:
    """Write one JSON file per request into `trace_dir`; no-op when it is unset."""
    if not trace_dir:
        return None
    os.makedirs(trace_dir, exist_ok=True)
    data = {
        "meta": meta,
        "input": request,
        "trace": trace,
        "outcome": outcome,
    }
    # nanosecond suffix: one file per request within the same second
    fname = f"run_{ts()}_{time.time_ns() % 1_000_000_000:09d}.json"
    fpath = os.path.join(trace_dir, fname)
    with open(fpath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return fpath
