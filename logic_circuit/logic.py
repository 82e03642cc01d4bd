"""Boolean expression parsing and evaluation for the Logic Circuit Simulator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from sympy import And, Nand, Nor, Not, Or, Symbol, Xor
from sympy.logic.inference import satisfiable

LPAREN = "("
RPAREN = ")"

# Truth tables grow as 2**n; the page never asks for more than this.
HARD_MAX_VARIABLES = 6


class ExpressionError(ValueError):
    """Raised when a token sequence cannot be turned into an expression tree."""


class Operator(str, Enum):
    NOT = "NOT"
    AND = "AND"
    NAND = "NAND"
    OR = "OR"
    NOR = "NOR"
    XOR = "XOR"

    @classmethod
    def lookup(cls, token: str) -> Optional["Operator"]:
        """Return the operator spelled by ``token`` or ``None`` for operands."""
        try:
            return cls(token)
        except ValueError:
            return None

    @property
    def precedence(self) -> int:
        if self is Operator.NOT:
            return 4
        if self in (Operator.AND, Operator.NAND):
            return 3
        return 2

    @property
    def arity(self) -> int:
        return 1 if self is Operator.NOT else 2

    def apply(self, *operands: bool) -> bool:
        if len(operands) != self.arity:
            raise ValueError(f"{self.value} expects {self.arity} operand(s).")
        if self is Operator.NOT:
            return not operands[0]
        a, b = operands
        if self is Operator.AND:
            return a and b
        if self is Operator.NAND:
            return not (a and b)
        if self is Operator.OR:
            return a or b
        if self is Operator.NOR:
            return not (a or b)
        if self is Operator.XOR:
            return a != b
        raise ValueError(f"Unsupported operator: {self.value}")


PostfixItem = Union[Operator, str]


@dataclass(frozen=True)
class ExpressionNode:
    """Node of a binary expression tree.

    Variable leaves carry the name in ``value``; operator nodes carry the
    :class:`Operator`, always a ``right`` child and a ``left`` child for
    every binary operator.
    """

    kind: str
    value: Union[Operator, str]
    left: Optional["ExpressionNode"] = None
    right: Optional["ExpressionNode"] = None

    @classmethod
    def variable(cls, name: str) -> "ExpressionNode":
        return cls(kind="variable", value=name)

    @classmethod
    def operator(
        cls,
        op: Operator,
        right: "ExpressionNode",
        left: Optional["ExpressionNode"] = None,
    ) -> "ExpressionNode":
        return cls(kind="operator", value=op, left=left, right=right)

    @property
    def is_variable(self) -> bool:
        return self.kind == "variable"

    def to_infix(self) -> str:
        """Fully parenthesised text accepted by :func:`parse_expression`."""
        if self.is_variable:
            return str(self.value)
        op = self.value
        if op is Operator.NOT:
            return f"(NOT {self.right.to_infix()})"
        return f"({self.left.to_infix()} {op.value} {self.right.to_infix()})"


@dataclass(frozen=True)
class ParsedExpression:
    variables: Tuple[str, ...]
    postfix: Tuple[PostfixItem, ...]
    ast: ExpressionNode

    def evaluate(self, assignment: Mapping[str, bool]) -> bool:
        return evaluate_postfix(self.postfix, assignment)


def tokenize(expression: str) -> List[str]:
    """Split raw text into upper-cased atoms with parentheses standing alone."""
    normalized = (
        expression.upper().replace(LPAREN, f" {LPAREN} ").replace(RPAREN, f" {RPAREN} ")
    )
    return [part for part in normalized.split() if part]


def to_postfix(tokens: Sequence[str]) -> List[PostfixItem]:
    """Reorder tokens into postfix using operator precedence.

    Balance and arity are not checked here; a stray parenthesis is emitted
    into the output so that :func:`build_ast` rejects it.
    """
    output: List[PostfixItem] = []
    stack: List[PostfixItem] = []
    for token in tokens:
        if token == LPAREN:
            stack.append(token)
            continue
        if token == RPAREN:
            while stack and stack[-1] != LPAREN:
                output.append(stack.pop())
            if stack:
                stack.pop()
            else:
                output.append(token)
            continue
        op = Operator.lookup(token)
        if op is None:
            output.append(token)
            continue
        while (
            stack
            and isinstance(stack[-1], Operator)
            and stack[-1].precedence >= op.precedence
        ):
            output.append(stack.pop())
        stack.append(op)
    while stack:
        output.append(stack.pop())
    return output


def build_ast(postfix: Sequence[PostfixItem]) -> ExpressionNode:
    """Assemble an expression tree from a postfix sequence."""
    stack: List[ExpressionNode] = []

    def pop_operand(op: Operator) -> ExpressionNode:
        if not stack:
            raise ExpressionError(f"Invalid expression: {op.value} is missing an operand.")
        return stack.pop()

    for item in postfix:
        if isinstance(item, Operator):
            if item.arity == 1:
                stack.append(ExpressionNode.operator(item, right=pop_operand(item)))
            else:
                right = pop_operand(item)
                left = pop_operand(item)
                stack.append(ExpressionNode.operator(item, right=right, left=left))
        elif item in (LPAREN, RPAREN):
            raise ExpressionError("Invalid expression: unbalanced parentheses.")
        else:
            stack.append(ExpressionNode.variable(item))

    if not stack:
        raise ExpressionError("Invalid expression: nothing to evaluate.")
    if len(stack) > 1:
        leftover = ", ".join(node.to_infix() for node in stack)
        raise ExpressionError(f"Invalid expression: missing operator between {leftover}.")
    return stack[0]


def extract_variables(tokens: Sequence[str]) -> Tuple[str, ...]:
    names = {
        token
        for token in tokens
        if token not in (LPAREN, RPAREN) and Operator.lookup(token) is None
    }
    return tuple(sorted(names))


def parse_expression(expression: str) -> ParsedExpression:
    """Parse operator-keyword Boolean text (``A AND NOT (B XOR C)``)."""
    tokens = tokenize(expression)
    postfix = to_postfix(tokens)
    ast = build_ast(postfix)
    return ParsedExpression(
        variables=extract_variables(tokens),
        postfix=tuple(postfix),
        ast=ast,
    )


def evaluate_postfix(postfix: Sequence[PostfixItem], assignment: Mapping[str, bool]) -> bool:
    """Evaluate a postfix sequence; unassigned variables read as ``False``."""
    stack: List[bool] = []
    for item in postfix:
        if isinstance(item, Operator):
            operands = [stack.pop() for _ in range(item.arity)][::-1]
            stack.append(item.apply(*operands))
        else:
            stack.append(bool(assignment.get(item, False)))
    return stack[0]


def row_assignment(index: int, variables: Sequence[str]) -> dict:
    """Variable values for a truth-table row; the first variable is the MSB."""
    n = len(variables)
    return {var: bool((index >> (n - 1 - j)) & 1) for j, var in enumerate(variables)}


def generate_truth_table(
    parsed: ParsedExpression, variables: Optional[Sequence[str]] = None
) -> List[bool]:
    """Evaluate ``parsed`` for every row over ``variables`` (its own by default)."""
    order = tuple(parsed.variables if variables is None else variables)
    if len(order) > HARD_MAX_VARIABLES:
        raise ValueError(f"Maximum {HARD_MAX_VARIABLES} variables supported.")
    return [parsed.evaluate(row_assignment(i, order)) for i in range(2 ** len(order))]


def minterms(table: Sequence[bool]) -> List[int]:
    """Return row indices whose output is True."""
    return [idx for idx, value in enumerate(table) if value]


def validate_variable_count(
    parsed: ParsedExpression,
    min_variables: int = 1,
    max_variables: int = HARD_MAX_VARIABLES,
) -> None:
    """Ensure the expression has a variable count the page can tabulate."""
    count = len(parsed.variables)
    if count < max(min_variables, 1):
        raise ValueError("No variables found in expression")
    if count > min(max_variables, HARD_MAX_VARIABLES):
        raise ValueError(
            f"Maximum {min(max_variables, HARD_MAX_VARIABLES)} variables supported"
        )


def to_sympy(node: ExpressionNode):
    """Convert an expression tree into the equivalent SymPy Boolean expression."""
    if node.is_variable:
        return Symbol(str(node.value))
    op = node.value
    right = to_sympy(node.right)
    if op is Operator.NOT:
        return Not(right)
    left = to_sympy(node.left)
    if op is Operator.AND:
        return And(left, right)
    if op is Operator.NAND:
        return Nand(left, right)
    if op is Operator.OR:
        return Or(left, right)
    if op is Operator.NOR:
        return Nor(left, right)
    if op is Operator.XOR:
        return Xor(left, right)
    raise ValueError(f"Unsupported operator: {op}")


def equivalent(first, second) -> bool:
    """Return True when two SymPy Boolean expressions agree on every assignment."""
    return satisfiable(Xor(first, second)) is False


__all__ = [
    "ExpressionError",
    "ExpressionNode",
    "HARD_MAX_VARIABLES",
    "Operator",
    "ParsedExpression",
    "build_ast",
    "equivalent",
    "evaluate_postfix",
    "extract_variables",
    "generate_truth_table",
    "minterms",
    "parse_expression",
    "row_assignment",
    "to_postfix",
    "to_sympy",
    "tokenize",
    "validate_variable_count",
]
