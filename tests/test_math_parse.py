"""
Tests for the public entry point math_parse().

math_parse() returns an int for a valid expression and None for malformed
input. Arithmetic faults are not part of the None contract and propagate.
"""

import pytest

from math_parse import MAX_DEPTH, Int32OverflowError, math_parse


class TestScenarios:
    """Reference input/output pairs."""

    @pytest.mark.parametrize("expr, expected", [
        ("1", 1),
        ("1+ 2", 3),
        ("1* 2", 2),
        ("2* 2 + 3", 7),
        ("2* (2 + 3)", 10),
        ("2 ^ (1 + 3 * 2)", 128),
    ])
    def test_scenario(self, expr, expected):
        assert math_parse(expr) == expected

    def test_parentheses_change_grouping(self):
        assert math_parse("2*(2+3)") == 10
        assert math_parse("2*2+3") == 7

    def test_division_truncates(self):
        assert math_parse("7/2") == 3
        assert math_parse("9/10") == 0


class TestLiterals:
    """Bare digit strings evaluate to their value."""

    @pytest.mark.parametrize("n", [0, 1, 9, 10, 42, 65535, 1000000, 2147483647])
    def test_digit_string_round_trips(self, n):
        assert math_parse(str(n)) == n

    def test_leading_zeros(self):
        assert math_parse("007") == 7
        assert math_parse("000") == 0

    def test_literal_above_int32_is_rejected(self):
        assert math_parse("2147483648") is None
        assert math_parse("99999999999") is None

    def test_very_long_digit_runs(self):
        assert math_parse("1" * 5000) is None
        assert math_parse("0" * 5000 + "7") == 7
        assert math_parse("0" * 5000 + "2147483647") == 2147483647
        assert math_parse("0" * 5000 + "2147483648") is None

    def test_oversized_run_is_consumed_before_the_parenthesis(self):
        assert math_parse("2147483648(5)") == 5
        assert math_parse("99999999999(2 + 3)") == 5
        # the parenthesis must follow the digits directly
        assert math_parse("99999999999 (2 + 3)") is None
        assert math_parse("1" * 5000 + "(1)") == 1

    def test_non_ascii_digits_are_rejected(self):
        assert math_parse("١٢") is None


class TestWhitespace:
    """Whitespace around operands and operators never changes the result."""

    @pytest.mark.parametrize("expr", ["1+2", "1 + 2", " 1+2 ", "  1  +  2  ", "\t1\n+\r\n2"])
    def test_sum(self, expr):
        assert math_parse(expr) == 3

    def test_inside_parentheses(self):
        assert math_parse("( 2 * ( 2 + 3 ) )") == math_parse("(2*(2+3))") == 10


class TestMalformed:
    """Grammar failures come back as None, never as an exception."""

    @pytest.mark.parametrize("expr", [
        "", "   ", "(1+2", "((1)", "()", "+1", "-1", "1+", "2*", "2^", "abc", "(", ")",
        "1+(2",
    ])
    def test_returns_none(self, expr):
        assert math_parse(expr) is None

    def test_non_string_is_a_type_error(self):
        with pytest.raises(TypeError):
            math_parse(12)


class TestTrailingInput:
    """
    Characters after a complete expression are ignored by default.

    This is the long-standing behaviour of the evaluator; strict=True is the
    opt-in for full-string validation.
    """

    @pytest.mark.parametrize("expr, expected", [
        ("1abc", 1),
        ("1)", 1),
        ("1 2", 1),
        ("2*3 )(", 6),
        ("1.5", 1),
    ])
    def test_lenient_default(self, expr, expected):
        assert math_parse(expr) == expected

    @pytest.mark.parametrize("expr", ["1abc", "1)", "1 2", "2*3 )("])
    def test_strict_rejects_trailing(self, expr):
        assert math_parse(expr, strict=True) is None

    def test_strict_accepts_trailing_whitespace(self):
        assert math_parse(" 1 + 2 \n", strict=True) == 3


class TestArithmeticFaults:
    """Arithmetic faults are not grammar failures and are not swallowed."""

    def test_division_by_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            math_parse("1/0")

    def test_overflow_raises(self):
        with pytest.raises(Int32OverflowError):
            math_parse("2147483647+1")

    def test_overflow_is_an_overflow_error(self):
        with pytest.raises(OverflowError):
            math_parse("65536*65536")


class TestDepthGuard:
    """Deeply nested parentheses are rejected as malformed instead of exhausting
    the stack. Operator chains are read in a loop and are not limited."""

    def test_moderate_nesting_is_fine(self):
        expr = "(" * 50 + "1" + ")" * 50
        assert math_parse(expr) == 1

    def test_long_chains_do_not_count_as_depth(self):
        assert math_parse("1+" * 5000 + "1") == 5001
        assert math_parse("2*" * 20 + "1") == 2**20
        assert math_parse("1^" * 5000 + "1") == 1
        assert math_parse("1+" * 420 + "1", max_depth=1) == 421

    def test_deepest_allowed_nesting(self):
        expr = "(" * MAX_DEPTH + "1" + ")" * MAX_DEPTH
        assert math_parse(expr) == 1
        assert math_parse("(" + expr + ")") is None

    def test_deep_nesting_is_rejected(self):
        expr = "(" * 5000 + "1" + ")" * 5000
        assert math_parse(expr) is None

    def test_custom_limit(self):
        assert math_parse("((((1))))", max_depth=3) is None
        assert math_parse("((((1))))", max_depth=4) == 1


class TestIdempotence:
    def test_repeated_evaluation(self):
        results = {math_parse("2 ^ (1 + 3 * 2) - 7 / 2") for _ in range(10)}
        assert results == {125}
