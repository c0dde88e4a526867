import math

import pytest

from formulae.catalog import MathFunction
from formulae.errors import FunctionArityMismatch, UndefinedVariable, UnknownOperator
from formulae.expression import BinaryOp, FunctionCall, Number, UnaryOp, Variable, format_number
from formulae.parser import parse_expression


def ev(text, env=None):
    return parse_expression(text).evaluate(env)


def test_arithmetic_properties():
    assert ev("1 + 2 * 3") == 7.0
    assert ev("2^3^2") == 512.0
    assert ev("10 - 3 - 2") == 5.0
    assert ev("--5") == 5.0
    assert ev("-5") == -5.0
    assert ev("1e-3") == pytest.approx(0.001)
    assert ev("7 % 3") == 1.0
    assert ev("-7 % 3") == -1.0


def test_functions():
    assert ev("sqrt(16)") == 4.0
    assert ev("factorial(5)") == 120.0
    assert math.isnan(ev("factorial(-1)"))
    assert math.isinf(ev("factorial(171)"))
    assert ev("sin(pi / 2)") == pytest.approx(1.0)
    assert ev("ln(e)") == pytest.approx(1.0)
    assert ev("SQRT(abs(-16))") == 4.0


def test_constants_win_over_environment():
    assert ev("pi") == math.pi
    assert ev("pi", {"pi": 3.0}) == math.pi
    assert ev("τ / 2") == pytest.approx(math.pi)
    # constants are case-sensitive
    assert ev("Pi", {"Pi": 3.0}) == 3.0


def test_division_and_power_follow_float_semantics():
    assert ev("1/0") == math.inf
    assert ev("-1/0") == -math.inf
    assert math.isnan(ev("0/0"))
    assert math.isnan(ev("5 % 0"))
    assert math.isnan(ev("(-8)^(1/3)"))
    assert ev("0^-1") == math.inf
    assert ev("10^400") == math.inf
    assert ev("(-10)^401") == -math.inf


def test_variables():
    assert parse_expression("x + y * z").variables() == {"x", "y", "z"}
    assert parse_expression("x + x").variables() == {"x"}
    expr = parse_expression("pi * r^2")
    assert expr.variables() == {"pi", "r"}
    assert expr.free_variables() == {"r"}
    assert parse_expression("sin(1)").variables() == set()


def test_evaluate_with_environment():
    env = {"x": 2.0, "y": 3.0}
    assert ev("2 * x + y", env) == 7.0
    assert env == {"x": 2.0, "y": 3.0}


def test_undefined_variable():
    with pytest.raises(UndefinedVariable) as ei:
        ev("x")
    assert ei.value.name == "x"
    assert str(ei.value) == "Undefined variable: x"
    with pytest.raises(UndefinedVariable):
        ev("x + y", {"x": 1.0})


def test_arity_mismatch():
    call = FunctionCall(MathFunction.SQRT, (Number(1), Number(2)))
    with pytest.raises(FunctionArityMismatch) as ei:
        call.evaluate()
    assert ei.value.message == "Function sqrt expects 1 argument, got 2"
    with pytest.raises(FunctionArityMismatch):
        FunctionCall(MathFunction.SIN, ()).evaluate()


def test_unknown_operator():
    with pytest.raises(UnknownOperator):
        BinaryOp("&", Number(1), Number(2)).evaluate()
    with pytest.raises(UnknownOperator):
        UnaryOp("*", Number(1)).evaluate()


@pytest.mark.parametrize("text", [
    "1 + 2 * 3",
    "2^3^2",
    "-3.25 * x",
    "--5",
    "sqrt(x^2 + 1) / 0.1",
    "1e999 - 1",
    "1e-20 * x",
    "factorial(4) % 5",
])
def test_rendering_round_trips(text):
    env = {"x": 1.5}
    expr = parse_expression(text)
    again = parse_expression(str(expr))
    assert again.evaluate(env) == expr.evaluate(env)
    assert str(again) == str(expr)


def test_format_number():
    assert format_number(3.0) == "3"
    assert format_number(0.5) == "0.5"
    assert format_number(-2.0) == "(-2)"
    assert format_number(math.inf) == "1e999"
    assert str(Number(-2)) == "(-2)"
    assert parse_expression(str(Number(-2))).evaluate() == -2.0


def test_long_chains_do_not_recurse():
    expr = Number(1)
    for _ in range(10000):
        expr = BinaryOp("+", expr, Variable("x"))
    assert expr.evaluate({"x": 1.0}) == 10001.0
    assert expr.variables() == {"x"}
    assert str(expr).count("+") == 10000
