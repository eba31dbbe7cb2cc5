"""
Integer expression evaluator: traceable steps with error propagation.

Public API:
- math_parse(expr: str) -> int | None
- evaluate(expr: str) -> int
- evaluate_with_trace(expr: str) -> (int, [steps...])

math_parse() turns grammar failures into None. Arithmetic faults
(ZeroDivisionError, Int32OverflowError) are never swallowed, by any of them.

On a grammar or arithmetic failure evaluate_with_trace() attaches
`e._trace_steps = steps` so callers can show the operations attempted
before the failure.
"""

import logging
from typing import List, Optional, Tuple

from .errors import GrammarError
from .evaluator import _Recorder, calc
from .parser import MAX_DEPTH, parse

log = logging.getLogger(__name__)


def _raise_with_trace(exc: Exception, rec: _Recorder):
    exc._trace_steps = list(rec.steps)
    raise exc


def evaluate_with_trace(expr: str, *, strict: bool = False,
                        max_depth: int = MAX_DEPTH) -> Tuple[int, List[str]]:
    """Return (result, steps). On failure, attach `_trace_steps` and re-raise."""
    rec = _Recorder()

    try:
        tree = parse(expr, strict=strict, max_depth=max_depth)
    except GrammarError as ge:
        rec.log(f"ERROR {ge}")
        return _raise_with_trace(ge, rec)

    try:
        result = calc(tree, rec)
    except ArithmeticError as ae:
        rec.log(f"ERROR {type(ae).__name__}: {ae}")
        return _raise_with_trace(ae, rec)

    rec.log(f"RESULT = {result}")
    return result, rec.steps


def evaluate(expr: str, *, strict: bool = False, max_depth: int = MAX_DEPTH) -> int:
    """Like math_parse(), but a malformed expression raises GrammarError."""
    result = calc(parse(expr, strict=strict, max_depth=max_depth))
    log.debug("%r = %d", expr[:200], result)
    return result


def math_parse(expr: str, *, strict: bool = False, max_depth: int = MAX_DEPTH) -> Optional[int]:
    try:
        return evaluate(expr, strict=strict, max_depth=max_depth)
    except GrammarError:
        return None
