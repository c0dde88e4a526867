import math

from formulae.errors import MissingOperand, NestingTooDeep, UnknownFunction
from formulae.formula import evaluate_formula


def _kinds(result):
    return [step["kind"] for step in result.trace]


def test_evaluates_closed_formula():
    res = evaluate_formula("1 + 2 * 3")
    assert res.ok
    assert res.value == 7.0
    assert str(res.expression) == "(1 + (2 * 3))"
    assert res.variables == set()
    assert _kinds(res) == ["input", "tokens", "parsed", "variables", "evaluated"]


def test_evaluates_with_variables():
    res = evaluate_formula("pi * r^2", {"r": 2.0})
    assert res.ok
    assert math.isclose(res.value, 4 * math.pi)
    assert res.variables == {"pi", "r"}
    assert res.free_variables == {"r"}
    assert res.missing_variables({"r": 2.0}) == set()


def test_unbound_variables_skip_evaluation():
    res = evaluate_formula("x + 1")
    assert res.ok
    assert res.value is None
    assert res.expression is not None
    assert res.missing_variables() == {"x"}
    assert "skipped_evaluation" in _kinds(res)
    assert "evaluated" not in _kinds(res)


def test_parse_error_is_captured():
    res = evaluate_formula("1 +")
    assert not res.ok
    assert isinstance(res.error, MissingOperand)
    assert res.expression is None
    assert res.value is None
    assert res.variables == set()
    assert _kinds(res)[-1] == "error"


def test_unknown_function_is_captured():
    res = evaluate_formula("foo(2)")
    assert isinstance(res.error, UnknownFunction)


def test_max_depth_is_passed_through():
    res = evaluate_formula("((1))", max_depth=2)
    assert isinstance(res.error, NestingTooDeep)
    assert evaluate_formula("((1))", max_depth=3).value == 1.0


def test_environment_is_not_mutated():
    env = {"x": 1.0}
    evaluate_formula("x * 2", env)
    assert env == {"x": 1.0}


def test_to_dict():
    payload = evaluate_formula("1/0").to_dict()
    assert payload["ok"] is True
    assert payload["value"] == "inf"
    assert payload["expression"] == "(1 / 0)"
    assert payload["error"] is None

    failed = evaluate_formula("1 2").to_dict()
    assert failed["ok"] is False
    assert failed["expression"] is None
    assert failed["error"]["kind"] == "trailing_input"
    assert failed["error"]["code"] == "2006"
    assert failed["error"]["position"] == 2


def test_huge_max_depth_still_reports_nesting():
    res = evaluate_formula("(" * 400 + "1" + ")" * 400, max_depth=10**6)
    assert isinstance(res.error, NestingTooDeep)
    assert res.value is None
