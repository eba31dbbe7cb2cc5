"""Exceptions raised by the parser and the evaluator."""


class MathParseError(Exception):
    """Base class for everything math_parse raises on its own."""


class GrammarError(MathParseError, ValueError):
    """Malformed input. `offset` is where the parser gave up."""

    def __init__(self, message: str, offset: int = 0):
        super().__init__(f"{message} (at offset {offset})")
        self.offset = offset


class Int32OverflowError(MathParseError, OverflowError):
    """An intermediate or final value left the signed 32-bit range."""
