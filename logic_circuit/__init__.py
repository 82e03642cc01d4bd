"""Convenience exports for the Boolean parsing and minimisation helpers."""

from .logic import (
    ExpressionError,
    ExpressionNode,
    Operator,
    ParsedExpression,
    equivalent,
    evaluate_postfix,
    generate_truth_table,
    minterms,
    parse_expression,
    to_sympy,
    tokenize,
    validate_variable_count,
)
from .qm_engine import (
    Implicant,
    SimplificationResult,
    SimplificationStep,
    implicant_to_term,
    simplify,
    simplify_expression,
    term_to_implicant,
)
from .analysis import Analysis, analyze_expression

__all__ = [
    "Analysis",
    "ExpressionError",
    "ExpressionNode",
    "Implicant",
    "Operator",
    "ParsedExpression",
    "SimplificationResult",
    "SimplificationStep",
    "analyze_expression",
    "equivalent",
    "evaluate_postfix",
    "generate_truth_table",
    "implicant_to_term",
    "minterms",
    "parse_expression",
    "simplify",
    "simplify_expression",
    "term_to_implicant",
    "to_sympy",
    "tokenize",
    "validate_variable_count",
]
