"""Full evaluate-and-simplify pass used by the page."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .config import Settings, get_settings
from .logic import (
    ExpressionNode,
    Operator,
    ParsedExpression,
    equivalent,
    generate_truth_table,
    parse_expression,
    to_sympy,
    validate_variable_count,
)
from .qm_engine import SimplificationResult, simplify_expression, term_to_implicant


@dataclass(frozen=True)
class Analysis:
    expression: str
    parsed: ParsedExpression
    truth_table: Tuple[bool, ...]
    result: SimplificationResult
    simplified_parsed: Optional[ParsedExpression]

    @property
    def variables(self) -> Tuple[str, ...]:
        return self.parsed.variables

    @property
    def simplified_ast(self) -> Optional[ExpressionNode]:
        return self.simplified_parsed.ast if self.simplified_parsed else None

    def simplified_truth_table(self) -> Tuple[bool, ...]:
        """Truth table of the minimised expression over the original variables."""
        if self.simplified_parsed is None:
            value = bool(self.result.constant)
            return tuple(value for _ in self.truth_table)
        return tuple(generate_truth_table(self.simplified_parsed, self.variables))

    def sympy_agrees(self) -> bool:
        """Cross-check the minimised form against the input with SymPy."""
        original = to_sympy(self.parsed.ast)
        if self.simplified_parsed is None:
            simplified = bool(self.result.constant)
        else:
            simplified = to_sympy(self.simplified_parsed.ast)
        return equivalent(original, simplified)

    def term_bits(self) -> List[Tuple[str, str]]:
        """Pair each product term of the minimised text with its implicant bits."""
        if self.result.is_constant:
            return []
        return [
            (term, term_to_implicant(term, self.variables))
            for term in self.result.simplified.split(f" {Operator.OR.value} ")
        ]


def analyze_expression(expression: str, settings: Settings | None = None) -> Analysis:
    """Parse, bound-check, tabulate and minimise ``expression``.

    Raises ``ValueError`` (``ExpressionError`` for syntax problems) when the
    text is malformed or uses an unsupported number of variables.
    """
    settings = settings or get_settings()
    if not expression.strip():
        raise ValueError("Enter an expression first.")
    parsed = parse_expression(expression)
    validate_variable_count(parsed, settings.min_variables, settings.max_variables)
    table = generate_truth_table(parsed)
    result = simplify_expression(parsed, table)
    simplified_parsed = None if result.is_constant else parse_expression(result.simplified)
    return Analysis(
        expression=expression,
        parsed=parsed,
        truth_table=tuple(table),
        result=result,
        simplified_parsed=simplified_parsed,
    )
