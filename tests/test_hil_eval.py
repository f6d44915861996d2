"""
Evaluation of parsed templates against a scope.
"""

import pytest

from hilbridge import hil

from bridgetest import run_hil


@pytest.mark.parametrize("text, expected", [
    ("${1 + 2}", 3),
    ("${2 * 3 + 1}", 7),
    ("${2 * (3 + 1)}", 8),
    ("${10 - 4 - 3}", 3),
    ("${7 / 2}", 3),
    ("${-7 / 2}", -3),
    ("${7 % 3}", 1),
    ("${-7 % 3}", -1),
    ("${7.0 / 2}", 3.5),
    ("${1.5 + 1}", 2.5),
    ("${\"3\" + 4}", 7),
    ("${-(2 + 3)}", -5),
])
def test_arithmetic(text, expected):
    assert run_hil(text) == expected


@pytest.mark.parametrize("text, expected", [
    ("${1 < 2}", True),
    ("${2 <= 2}", True),
    ("${2 >= 3}", False),
    ("${3 > 2}", True),
    ("${1 == 1}", True),
    ("${1 != 1}", False),
    ("${\"a\" == \"a\"}", True),
    ("${\"a\" != \"b\"}", True),
    ("${1 == true}", False),
    ("${true && false}", False),
    ("${false || true}", True),
    ("${!true}", False),
    ("${!\"false\"}", True),
])
def test_comparison_and_logic(text, expected):
    assert run_hil(text) is expected


@pytest.mark.parametrize("text", [
    "${false && missing}",
    "${true || missing}",
])
def test_logical_operators_short_circuit(text):
    assert isinstance(run_hil(text), bool)


def test_conditional_only_evaluates_chosen_branch():
    assert run_hil("${flag ? 1 : missing}", {"flag": True}) == 1
    assert run_hil("${flag ? missing : \"no\"}", {"flag": False}) == "no"


@pytest.mark.parametrize("text, expected", [
    ("plain", "plain"),
    ("a${1}b", "a1b"),
    ("${1.5}x", "1.5x"),
    ("${2.0}x", "2x"),
    ("${true}-${false}", "true-false"),
    ("${true}", True),
    ("${42}", 42),
    ("", ""),
])
def test_output(text, expected):
    assert run_hil(text) == expected


def test_variables_and_indexing():
    variables = {
        "name": "web",
        "items": ["a", "b"],
        "tags": {"env": "prod"},
        "idx": 1,
    }
    assert run_hil("${name}-${items[idx]}", variables) == "web-b"
    assert run_hil("${tags[\"env\"]}", variables) == "prod"
    assert run_hil("${items}", variables) == ["a", "b"]
    assert run_hil("${items[\"0\"]}", variables) == "a"


def test_functions():
    functions = {
        "upper": lambda s: s.upper(),
        "add": lambda a, b: a + b,
    }
    assert run_hil("${upper(\"x\")}${add(1, 2)}", {}, functions) == "X3"
    assert run_hil("${add(add(1, 2), 3)}", {}, functions) == 6


def test_variadic_function():
    scope = hil.BasicScope(func_map={
        "concat": hil.Function(
            lambda args: "".join(args),
            arg_types=[hil.Type.STRING],
            return_type=hil.Type.STRING,
            variadic=True,
        ),
    })
    tree = hil.parse("${concat(\"a\", \"b\", \"c\")}")
    result = hil.evaluate(tree, hil.EvalConfig(global_scope=scope))
    assert result.value == "abc"
    assert result.type is hil.Type.STRING


@pytest.mark.parametrize("text", [
    "${x + 1}",
    "a-${x}",
    "${!x}",
    "${x ? 1 : 2}",
    "${items[x]}",
    "${x && true}",
    "${upper(x)}",
])
def test_unknown_values_propagate(text):
    variables = {"x": hil.UNKNOWN, "items": [1, 2]}
    functions = {"upper": lambda s: s.upper()}
    assert run_hil(text, variables, functions) is hil.UNKNOWN


@pytest.mark.parametrize("text, message", [
    ("${1 / 0}", "divide by zero"),
    ("${1 % 0}", "divide by zero"),
    ("${missing}", "unknown variable accessed: missing"),
    ("${nope()}", "unknown function called: nope"),
    ("${upper()}", "upper: expected 1 arguments, got 0"),
    ("${1 + true}", "cannot use a bool as a number"),
    ("${-\"x\"}", "cannot parse 'x' as a number"),
    ("${items[5]}", "out of range"),
    ("${tags[\"nope\"]}", "does not exist in map"),
    ("${1 ? 2 : 3}", "cannot use 1 as a bool"),
    ("x ${items}", "output of an interpolation must be a string"),
])
def test_evaluation_errors(text, message):
    variables = {"items": [1], "tags": {"a": "b"}}
    functions = {"upper": lambda s: s.upper()}
    with pytest.raises(hil.EvalError) as e:
        run_hil(text, variables, functions)
    assert message in str(e.value)


@pytest.mark.parametrize("text, expected", [
    ("3", 4),
    ("-3", -2),
    ("2.5", 3.5),
    ("007", 8),
])
def test_numeric_strings(text, expected):
    assert run_hil("${x + 1}", {"x": text}) == expected


@pytest.mark.parametrize("text", [
    " 3 ",
    "1_000",
    "nan",
    "inf",
    "+1",
    "1e3",
    ".5",
    "",
    "\u0663",
])
def test_non_decimal_strings_are_not_numbers(text):
    with pytest.raises(hil.EvalError) as e:
        run_hil("${x + 1}", {"x": text})
    assert "as a number" in str(e.value)


def test_huge_number_in_text_is_an_error():
    big = "9" * 3000
    with pytest.raises(hil.EvalError) as e:
        run_hil("x${" + big + " * " + big + "}")
    assert "too large" in str(e.value)


def test_long_expressions_do_not_recurse():
    text = "${" + " + ".join(["1"] * 200) + "}"
    assert run_hil(text) == 200


@pytest.mark.parametrize("text, kind", [
    ("${1 + 2}", hil.Type.INT),
    ("${1.5}", hil.Type.FLOAT),
    ("a${1}", hil.Type.STRING),
    ("${1 < 2}", hil.Type.BOOL),
    ("${name}", hil.Type.STRING),
    ("${upper(name)}", hil.Type.STRING),
    ("${items[0]}", hil.Type.ANY),
])
def test_static_types(text, kind):
    scope = hil.BasicScope(
        {"name": hil.Variable("web"), "items": hil.Variable([1])},
        {"upper": hil.Function(
            lambda args: args[0].upper(),
            arg_types=[hil.Type.STRING],
            return_type=hil.Type.STRING,
        )},
    )
    assert hil.parse(text).type(scope) is kind


@pytest.mark.parametrize("value, kind", [
    ("s", hil.Type.STRING),
    (1, hil.Type.INT),
    (1.0, hil.Type.FLOAT),
    (True, hil.Type.BOOL),
    ([1], hil.Type.LIST),
    ({"a": 1}, hil.Type.MAP),
    (hil.UNKNOWN, hil.Type.UNKNOWN),
    (None, hil.Type.ANY),
])
def test_type_of(value, kind):
    assert hil.type_of(value) is kind


def test_evaluation_result_type():
    result = hil.evaluate(hil.parse("${1 + 2}"))
    assert result == hil.EvaluationResult(hil.Type.INT, 3)
