from .api import evaluate, evaluate_with_trace, math_parse
from .errors import GrammarError, Int32OverflowError, MathParseError
from .evaluator import INT32_MAX, INT32_MIN, calc
from .parser import MAX_DEPTH, parse

__all__ = [
    "math_parse", "evaluate", "evaluate_with_trace", "parse", "calc",
    "MathParseError", "GrammarError", "Int32OverflowError",
    "MAX_DEPTH", "INT32_MIN", "INT32_MAX",
]
