"""Quine-McCluskey minimisation with a human-readable trace of each stage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from .logic import Operator, ParsedExpression, minterms as table_minterms

DONT_CARE = "-"


@dataclass(frozen=True)
class Implicant:
    """Product term as a ``{0,1,-}`` string plus the minterms it covers."""

    bits: str
    minterms: FrozenSet[int]

    @classmethod
    def from_minterm(cls, minterm: int, width: int) -> "Implicant":
        bits = format(minterm, f"0{width}b") if width else ""
        return cls(bits=bits, minterms=frozenset({minterm}))

    @property
    def ones(self) -> int:
        return self.bits.count("1")

    def covers(self, minterm: int) -> bool:
        return minterm in self.minterms

    def combine(self, other: "Implicant") -> Optional["Implicant"]:
        """Merge with ``other`` when exactly one fixed position differs."""
        diff = -1
        for idx, (a, b) in enumerate(zip(self.bits, other.bits)):
            if a == b:
                continue
            if a == DONT_CARE or b == DONT_CARE or diff != -1:
                return None
            diff = idx
        if diff == -1:
            return None
        bits = self.bits[:diff] + DONT_CARE + self.bits[diff + 1 :]
        return Implicant(bits=bits, minterms=self.minterms | other.minterms)

    def describe(self) -> str:
        return f"{self.bits} (m{', m'.join(str(m) for m in sorted(self.minterms))})"


@dataclass(frozen=True)
class SimplificationStep:
    title: str
    description: str
    data: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SimplificationResult:
    simplified: str
    steps: Tuple[SimplificationStep, ...]
    prime_implicants: Tuple[Implicant, ...] = ()
    selected: Tuple[Implicant, ...] = ()
    # set only for tables that are never or always true
    constant: Optional[bool] = None

    @property
    def is_constant(self) -> bool:
        return self.constant is not None


def implicant_to_term(bits: str, variables: Sequence[str]) -> str:
    """Render ``bits`` as a product of literals over ``variables``."""
    literals: List[str] = []
    for bit, var in zip(bits, variables):
        if bit == "1":
            literals.append(var)
        elif bit == "0":
            literals.append(f"{Operator.NOT.value} {var}")
    if not literals:
        return "1"
    if len(literals) == 1:
        return literals[0]
    return "(" + f" {Operator.AND.value} ".join(literals) + ")"


def term_to_implicant(term: str, variables: Sequence[str]) -> str:
    """Inverse of :func:`implicant_to_term` for a single rendered product."""
    bits = [DONT_CARE] * len(variables)
    text = term.strip()
    if text == "1" and "1" not in variables:
        return "".join(bits)
    if text.startswith("(") and text.endswith(")"):
        text = text[1:-1]
    for literal in text.split(f" {Operator.AND.value} "):
        words = literal.split()
        negated = len(words) == 2 and words[0] == Operator.NOT.value
        name = words[-1]
        if name not in variables or len(words) > 2 or (len(words) == 2 and not negated):
            raise ValueError(f"Not a product term over {', '.join(variables)}: {term}")
        bits[list(variables).index(name)] = "0" if negated else "1"
    return "".join(bits)


def render_sum(selected: Sequence[Implicant], variables: Sequence[str]) -> str:
    terms = [implicant_to_term(imp.bits, variables) for imp in selected]
    return terms[0] if len(terms) == 1 else f" {Operator.OR.value} ".join(terms)


def group_by_ones(implicants: Sequence[Implicant]) -> Dict[int, List[Implicant]]:
    groups: Dict[int, List[Implicant]] = {}
    for imp in implicants:
        groups.setdefault(imp.ones, []).append(imp)
    return dict(sorted(groups.items()))


def combine_round(
    implicants: Sequence[Implicant],
) -> Tuple[List[Implicant], List[Implicant]]:
    """Run one combination pass.

    Returns ``(combined, uncombined)``; both keep first-seen order and the
    combined list is de-duplicated by bit string.
    """
    groups = group_by_ones(implicants)
    combined: Dict[str, Implicant] = {}
    used: Set[str] = set()
    for ones, lower in groups.items():
        upper = groups.get(ones + 1)
        if not upper:
            continue
        for a in lower:
            for b in upper:
                merged = a.combine(b)
                if merged is None:
                    continue
                used.add(a.bits)
                used.add(b.bits)
                if merged.bits in combined:
                    merged = Implicant(
                        bits=merged.bits,
                        minterms=combined[merged.bits].minterms | merged.minterms,
                    )
                combined[merged.bits] = merged
    leftovers = [imp for imp in implicants if imp.bits not in used]
    return list(combined.values()), leftovers


def find_prime_implicants(
    minterm_list: Sequence[int], width: int
) -> Tuple[List[Implicant], List[List[Implicant]]]:
    """Return prime implicants and the combined implicants of each productive round."""
    current = [Implicant.from_minterm(m, width) for m in minterm_list]
    primes: Dict[str, Implicant] = {}
    rounds: List[List[Implicant]] = []
    while current:
        combined, leftovers = combine_round(current)
        for imp in leftovers:
            primes.setdefault(imp.bits, imp)
        if combined:
            rounds.append(combined)
        current = combined
    return list(primes.values()), rounds


def essential_implicants(
    primes: Sequence[Implicant], minterm_list: Sequence[int]
) -> List[Implicant]:
    chosen: Dict[str, Implicant] = {}
    for m in minterm_list:
        covering = [imp for imp in primes if imp.covers(m)]
        if len(covering) == 1:
            chosen.setdefault(covering[0].bits, covering[0])
    return list(chosen.values())


def greedy_cover(
    primes: Sequence[Implicant],
    uncovered: Set[int],
    selected: Sequence[Implicant],
) -> List[Implicant]:
    """Pick implicants covering the most remaining minterms; earliest wins ties."""
    remaining = set(uncovered)
    taken = {imp.bits for imp in selected}
    picks: List[Implicant] = []
    while remaining:
        best: Optional[Implicant] = None
        best_count = 0
        for imp in primes:
            if imp.bits in taken:
                continue
            count = len(imp.minterms & remaining)
            if count > best_count:
                best, best_count = imp, count
        if best is None:
            break
        picks.append(best)
        taken.add(best.bits)
        remaining -= best.minterms
    return picks


def simplify(variables: Sequence[str], truth_table: Sequence[bool]) -> SimplificationResult:
    """Minimise a single-output truth table into a sum of products."""
    variables = list(variables)
    width = len(variables)
    expected = 2 ** width
    if len(truth_table) != expected:
        raise ValueError(
            f"Truth table for {width} variables needs {expected} rows, got {len(truth_table)}."
        )

    steps: List[SimplificationStep] = []
    mins = table_minterms(truth_table)
    steps.append(
        SimplificationStep(
            title="Identify minterms",
            description=f"Rows where the output is 1 ({len(mins)} of {expected}).",
            data=tuple(f"m{m} = {format(m, f'0{width}b') if width else '-'}" for m in mins),
        )
    )

    if not mins or len(mins) == expected:
        constant = "1" if mins else "0"
        reason = "always true" if mins else "never true"
        steps.append(
            SimplificationStep(
                title="Final result",
                description=f"The expression is {reason}.",
                data=(constant,),
            )
        )
        return SimplificationResult(
            simplified=constant, steps=tuple(steps), constant=bool(mins)
        )

    initial = [Implicant.from_minterm(m, width) for m in mins]
    steps.append(
        SimplificationStep(
            title="Group by number of 1s",
            description="Each minterm starts as an implicant, grouped by its count of 1 bits.",
            data=tuple(
                f"Group {ones}: " + ", ".join(imp.describe() for imp in group)
                for ones, group in group_by_ones(initial).items()
            ),
        )
    )

    primes, rounds = find_prime_implicants(mins, width)
    for number, combined in enumerate(rounds, start=1):
        steps.append(
            SimplificationStep(
                title=f"Combination round {number}",
                description="Implicants differing in exactly one bit are merged; that bit becomes '-'.",
                data=tuple(imp.describe() for imp in combined),
            )
        )

    steps.append(
        SimplificationStep(
            title="Prime implicants",
            description=f"{len(primes)} implicant(s) could not be combined further.",
            data=tuple(
                f"{imp.describe()} = {implicant_to_term(imp.bits, variables)}" for imp in primes
            ),
        )
    )

    if len(primes) == 1:
        selected = list(primes)
    else:
        essentials = essential_implicants(primes, mins)
        covered: Set[int] = set()
        for imp in essentials:
            covered |= imp.minterms
        if essentials:
            steps.append(
                SimplificationStep(
                    title="Essential prime implicants",
                    description="Implicants that are the only cover for at least one minterm.",
                    data=tuple(
                        f"{implicant_to_term(imp.bits, variables)} covers "
                        f"m{', m'.join(str(m) for m in sorted(imp.minterms))}"
                        for imp in essentials
                    ),
                )
            )
        extra = greedy_cover(primes, set(mins) - covered, essentials)
        if extra:
            steps.append(
                SimplificationStep(
                    title="Additional implicants",
                    description="Remaining minterms covered greedily by the widest implicant.",
                    data=tuple(
                        f"{implicant_to_term(imp.bits, variables)} covers "
                        f"m{', m'.join(str(m) for m in sorted(imp.minterms))}"
                        for imp in extra
                    ),
                )
            )
        selected = essentials + extra

    simplified = render_sum(selected, variables)
    steps.append(
        SimplificationStep(
            title="Final result",
            description=f"Sum of {len(selected)} product term(s).",
            data=(simplified,),
        )
    )
    return SimplificationResult(
        simplified=simplified,
        steps=tuple(steps),
        prime_implicants=tuple(primes),
        selected=tuple(selected),
    )


def simplify_expression(parsed: ParsedExpression, truth_table: Sequence[bool]) -> SimplificationResult:
    return simplify(parsed.variables, truth_table)


__all__ = [
    "DONT_CARE",
    "Implicant",
    "SimplificationResult",
    "SimplificationStep",
    "combine_round",
    "essential_implicants",
    "find_prime_implicants",
    "greedy_cover",
    "group_by_ones",
    "implicant_to_term",
    "render_sum",
    "simplify",
    "simplify_expression",
    "term_to_implicant",
]
