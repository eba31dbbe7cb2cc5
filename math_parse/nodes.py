"""
Syntax tree for the four grammar levels.

Each level is a small tagged union: either a single operand from the level
below, or that operand combined with the remainder parsed to its right.
`operand` is always the leftmost operand by source position and `rest` the
recursively parsed remainder.
"""

from dataclasses import dataclass
from typing import Union


# Bracket/Number level
@dataclass(frozen=True)
class Literal:
    value: int


@dataclass(frozen=True)
class Group:
    inner: "AddSubExpr"


# Power level
@dataclass(frozen=True)
class Value:
    operand: "BracketExpr"


@dataclass(frozen=True)
class Exp:
    rest: "PowerExpr"
    operand: "BracketExpr"


# MulDiv level
@dataclass(frozen=True)
class Power:
    operand: "PowerExpr"


@dataclass(frozen=True)
class Mul:
    rest: "MulDivExpr"
    operand: "PowerExpr"


@dataclass(frozen=True)
class Div:
    rest: "MulDivExpr"
    operand: "PowerExpr"


# AddSub level
@dataclass(frozen=True)
class MulDiv:
    operand: "MulDivExpr"


@dataclass(frozen=True)
class Add:
    rest: "AddSubExpr"
    operand: "MulDivExpr"


@dataclass(frozen=True)
class Sub:
    rest: "AddSubExpr"
    operand: "MulDivExpr"


BracketExpr = Union[Literal, Group]
PowerExpr = Union[Value, Exp]
MulDivExpr = Union[Power, Mul, Div]
AddSubExpr = Union[MulDiv, Add, Sub]
