"""
Reduce a parsed tree to a signed 32-bit integer.

Every intermediate result is range-checked; nothing wraps or saturates.
Division by zero surfaces as ZeroDivisionError, range violations as
Int32OverflowError. Pass a _Recorder to collect one step per reduction.
"""

import math

from .errors import Int32OverflowError
from .nodes import Add, Div, Exp, Group, Literal, Mul, MulDiv, Power, Sub, Value

INT32_MIN = -2**31
INT32_MAX = 2**31 - 1


class _Recorder:
    def __init__(self):
        self.steps = []
    def log(self, msg: str):
        self.steps.append(msg)


def _i32(value: int, what: str) -> int:
    if not INT32_MIN <= value <= INT32_MAX:
        raise Int32OverflowError(f"{what} = {value} does not fit in 32 bits")
    return value


def _trunc_div(left: int, right: int) -> int:
    if right == 0:
        raise ZeroDivisionError(f"integer division by zero ({left} / 0)")
    q = abs(left) // abs(right)
    return q if (left < 0) == (right < 0) else -q


def _pow(base: int, exponent: int) -> int:
    # float base, integer exponent, truncated back to int
    try:
        res = float(base) ** exponent
    except OverflowError:
        raise Int32OverflowError(f"{base} ^ {exponent} does not fit in 32 bits") from None
    if not math.isfinite(res):
        raise Int32OverflowError(f"{base} ^ {exponent} is not finite")
    return _i32(math.trunc(res), f"{base} ^ {exponent}")


def _apply(node, left: int, right: int, rec=None) -> int:
    if isinstance(node, Exp):
        res = _pow(left, right)
        if rec: rec.log(f"POW  {left} ^ {right} = {res}")
        return res
    if isinstance(node, Add):
        res = _i32(left + right, f"{left} + {right}")
        if rec: rec.log(f"ADD  {left} + {right} = {res}")
        return res
    if isinstance(node, Sub):
        res = _i32(left - right, f"{left} - {right}")
        if rec: rec.log(f"SUB  {left} - {right} = {res}")
        return res
    if isinstance(node, Mul):
        res = _i32(left * right, f"{left} * {right}")
        if rec: rec.log(f"MUL  {left} * {right} = {res}")
        return res
    res = _i32(_trunc_div(left, right), f"{left} / {right}")
    if rec: rec.log(f"DIV  {left} / {right} = {res}")
    return res


def _fold(node, kinds: tuple, rec=None) -> int:
    # walk the `rest` links of one level instead of recursing per operator
    links = []
    while isinstance(node, kinds):
        links.append(node)
        node = node.rest
    lefts = [_eval(link.operand, rec) for link in links]
    res = _eval(node, rec)
    # first-parsed operand on the left, remainder on the right
    for link, left in zip(reversed(links), reversed(lefts)):
        res = _apply(link, left, res, rec)
    return res


def _eval(node, rec=None) -> int:
    if isinstance(node, Literal):
        if rec:
            rec.log(f"LIT  {node.value}")
        return node.value

    if isinstance(node, Group):
        res = _eval(node.inner, rec)
        if rec:
            rec.log(f"GRP  ( {res} )")
        return res

    if isinstance(node, (Value, Power, MulDiv)):
        return _eval(node.operand, rec)

    if isinstance(node, Exp):
        return _fold(node, (Exp,), rec)
    if isinstance(node, (Mul, Div)):
        return _fold(node, (Mul, Div), rec)
    if isinstance(node, (Add, Sub)):
        return _fold(node, (Add, Sub), rec)

    raise TypeError(f"Unsupported node: {type(node).__name__}")


def calc(tree, rec=None) -> int:
    """Evaluate a tree produced by `parser.parse`."""
    return _eval(tree, rec)
