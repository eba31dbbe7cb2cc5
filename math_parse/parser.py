"""
Recursive-descent parser for the expression grammar.

    addsub  -> muldiv (("+" | "-") addsub)?
    muldiv  -> power  (("*" | "/") muldiv)?
    power   -> bracket ("^" power)?
    bracket -> NUMBER | "(" addsub ")"

Whitespace may appear around every operand and operator. Each level parses
its first operand and nests whatever follows the operator into the node's
`rest` field. Operator chains are read in a loop and only parentheses add
stack depth, which `max_depth` bounds.
"""

import logging
from contextlib import contextmanager

from .errors import GrammarError
from .evaluator import INT32_MAX
from .nodes import (
    Add, AddSubExpr, BracketExpr, Div, Exp, Group, Literal, Mul, MulDiv,
    MulDivExpr, Power, PowerExpr, Sub, Value,
)

log = logging.getLogger(__name__)

MAX_DEPTH = 100
WHITESPACE = frozenset(" \t\r\n")
DIGITS = frozenset("0123456789")


class _Cursor:
    def __init__(self, text: str, max_depth: int):
        self.text = text
        self.pos = 0
        self.depth = 0
        self.max_depth = max_depth

    def peek(self):
        return self.text[self.pos] if self.pos < len(self.text) else None

    def skip_ws(self):
        while self.pos < len(self.text) and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    def accept(self, ch: str) -> bool:
        if self.peek() == ch:
            self.pos += 1
            return True
        return False

    def expect(self, ch: str):
        if not self.accept(ch):
            found = self.peek()
            raise GrammarError(
                f"Expected {ch!r}, got {'end of input' if found is None else repr(found)}",
                self.pos,
            )

    @contextmanager
    def group(self):
        self.depth += 1
        try:
            if self.depth > self.max_depth:
                raise GrammarError(f"Parentheses nested deeper than {self.max_depth} levels", self.pos)
            yield
        finally:
            self.depth -= 1


def _literal(cur: _Cursor):
    """
    Longest digit run as an int, or None when it is empty or too large.

    An oversized run is still consumed, so the parenthesis alternative is
    tried right after it.
    """
    start = cur.pos
    end = start
    while end < len(cur.text) and cur.text[end] in DIGITS:
        end += 1
    if end == start:
        return None
    cur.pos = end
    # int32 has at most 10 significant digits; keeps int() off huge runs
    digits = cur.text[start:end].lstrip("0") or "0"
    if len(digits) > 10:
        return None
    value = int(digits)
    if value > INT32_MAX:
        return None
    return value


def _chain(cur: _Cursor, parse_operand, ops: dict, single):
    """
    operand (op operand)* as a right-nested tree: the first operand ends up
    outermost and everything after its operator in `rest`.
    """
    operands, kinds = [], []
    while True:
        cur.skip_ws()
        operands.append(parse_operand(cur))
        cur.skip_ws()
        op = cur.peek()
        if op not in ops:
            break
        cur.pos += 1
        kinds.append(ops[op])

    tree = single(operands.pop())
    while kinds:
        tree = kinds.pop()(tree, operands.pop())
    return tree


def parse_bracket(cur: _Cursor) -> BracketExpr:
    cur.skip_ws()
    value = _literal(cur)
    if value is not None:
        return Literal(value)
    cur.expect("(")
    with cur.group():
        cur.skip_ws()
        inner = parse_add_sub(cur)
        cur.skip_ws()
    cur.expect(")")
    return Group(inner)


def parse_power(cur: _Cursor) -> PowerExpr:
    return _chain(cur, parse_bracket, {"^": Exp}, Value)


def parse_mul_div(cur: _Cursor) -> MulDivExpr:
    return _chain(cur, parse_power, {"*": Mul, "/": Div}, Power)


def parse_add_sub(cur: _Cursor) -> AddSubExpr:
    return _chain(cur, parse_mul_div, {"+": Add, "-": Sub}, MulDiv)


def parse(text: str, *, strict: bool = False, max_depth: int = MAX_DEPTH) -> AddSubExpr:
    """
    Parse `text` into an AddSub tree.

    Trailing characters after the expression are ignored unless `strict` is
    set, in which case anything but whitespace raises GrammarError.
    """
    if not isinstance(text, str):
        raise TypeError(f"Expression must be a string, not {type(text).__name__}")
    cur = _Cursor(text, max_depth)
    try:
        tree = parse_add_sub(cur)
        if strict:
            cur.skip_ws()
            if cur.pos != len(text):
                raise GrammarError(f"Unexpected trailing input {text[cur.pos:cur.pos + 16]!r}", cur.pos)
    except GrammarError as e:
        log.debug("rejected %r: %s", text[:200], e)
        raise
    if cur.pos != len(text):
        log.debug("ignoring trailing input %r at offset %d", text[cur.pos:cur.pos + 16], cur.pos)
    return tree
