from __future__ import annotations

import pytest

from logic_circuit.logic import (
    ExpressionError,
    ExpressionNode,
    Operator,
    ParsedExpression,
    equivalent,
    generate_truth_table,
    parse_expression,
    row_assignment,
    to_postfix,
    to_sympy,
    tokenize,
    validate_variable_count,
)


def test_tokenize_pads_parentheses_and_uppercases():
    assert tokenize("a and(b)") == ["A", "AND", "(", "B", ")"]
    assert tokenize("   ") == []
    assert tokenize("x1 nor\t$y") == ["X1", "NOR", "$Y"]


def test_postfix_respects_precedence_and_left_associativity():
    postfix = to_postfix(tokenize("A OR B AND C"))
    assert postfix == ["A", "B", "C", Operator.AND, Operator.OR]
    postfix = to_postfix(tokenize("A NAND B AND C"))
    assert postfix == ["A", "B", Operator.NAND, "C", Operator.AND]


def test_and_binds_tighter_than_or():
    assert parse_expression("A OR B AND C").ast == parse_expression("A OR (B AND C)").ast


def test_not_binds_tightest():
    ast = parse_expression("NOT A AND B").ast
    assert ast == parse_expression("(NOT A) AND B").ast
    assert ast.value is Operator.AND
    assert ast.left.value is Operator.NOT
    assert ast.left.left is None
    assert ast.left.right == ExpressionNode.variable("A")


def test_binary_operators_keep_source_order():
    ast = parse_expression("A AND B AND C").ast
    assert ast.left.to_infix() == "(A AND B)"
    assert ast.right == ExpressionNode.variable("C")


def test_variables_sorted_and_first_is_msb():
    parsed = parse_expression("B AND A")
    assert list(parsed.variables) == ["A", "B"]
    assert row_assignment(1, parsed.variables) == {"A": False, "B": True}
    assert generate_truth_table(parse_expression("B AND NOT A")) == [False, True, False, False]


def test_variables_are_case_insensitive_and_deduplicated():
    parsed = parse_expression("c or C and (a xor b)")
    assert parsed.variables == ("A", "B", "C")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("A AND B", [False, False, False, True]),
        ("A OR B", [False, True, True, True]),
        ("A XOR B", [False, True, True, False]),
        ("A NAND B", [True, True, True, False]),
        ("A NOR B", [True, False, False, False]),
        ("NOT A", [True, False]),
    ],
)
def test_operator_truth_tables(text, expected):
    assert generate_truth_table(parse_expression(text)) == expected


def test_missing_assignment_reads_false():
    parsed = parse_expression("A OR B")
    assert parsed.evaluate({"A": False}) is False
    assert parsed.evaluate({"B": True}) is True
    assert parsed.evaluate({}) is False


@pytest.mark.parametrize(
    "text",
    ["A AND", "NOT", "NOT NOT A", "(A AND B", "A AND B)", "A B", "", "()"],
)
def test_malformed_expressions_raise(text):
    with pytest.raises(ExpressionError):
        parse_expression(text)


def test_expression_error_is_value_error():
    with pytest.raises(ValueError, match="Invalid expression"):
        parse_expression("OR A")


def test_truth_table_over_custom_variable_order():
    parsed = parse_expression("A")
    assert generate_truth_table(parsed, ("A", "B")) == [False, False, True, True]


def test_truth_table_refuses_more_than_six_variables():
    parsed = parse_expression("A AND B AND C AND D AND E AND F AND G")
    with pytest.raises(ValueError, match="Maximum 6"):
        generate_truth_table(parsed)


def test_validate_variable_count_bounds():
    empty = ParsedExpression(variables=(), postfix=(), ast=ExpressionNode.variable("X"))
    with pytest.raises(ValueError, match="No variables"):
        validate_variable_count(empty)
    seven = parse_expression("A OR B OR C OR D OR E OR F OR G")
    with pytest.raises(ValueError, match="Maximum 6"):
        validate_variable_count(seven)
    validate_variable_count(parse_expression("A OR B OR C OR D OR E OR F"))
    with pytest.raises(ValueError, match="Maximum 2"):
        validate_variable_count(parse_expression("A OR B OR C"), max_variables=2)


def test_operator_lookup_and_arity():
    assert Operator.lookup("XOR") is Operator.XOR
    assert Operator.lookup("X") is None
    assert Operator.lookup("(") is None
    assert Operator.NOT.arity == 1
    assert Operator.NOR.precedence == Operator.OR.precedence == 2
    with pytest.raises(ValueError):
        Operator.NOT.apply(True, False)


def test_infix_rendering_reparses_to_same_tree():
    ast = parse_expression("NOT (A NOR B) XOR C NAND D").ast
    assert parse_expression(ast.to_infix()).ast == ast


def test_sympy_bridge_agrees_with_de_morgan():
    nand = to_sympy(parse_expression("A NAND B").ast)
    de_morgan = to_sympy(parse_expression("NOT A OR NOT B").ast)
    assert equivalent(nand, de_morgan)
    assert not equivalent(nand, to_sympy(parse_expression("A AND B").ast))
