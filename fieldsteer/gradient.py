import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from fieldsteer.basis import Axis, BasisFunction, Operator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Term:
    id: int
    operator: Operator
    fn: Callable[[float, float], float]
    label: str


class GradientField:
    """The velocity field a player builds for the current level.

    Each axis holds an ordered list of terms. The list is folded strictly
    left to right: the operator stored on the incoming term decides how it
    combines with the running total, with no precedence between Add and
    Multiply. An empty axis evaluates to 0.
    """

    def __init__(self):
        self._terms: Dict[Axis, List[Term]] = {Axis.X: [], Axis.Y: []}

    def add_term(self, axis: Axis, term_id: int, operator: Operator, fn, label: str) -> None:
        assert not self.is_active(axis, term_id), f"term {term_id} already active on {axis.value}"
        if self.is_active(axis, term_id):
            return
        self._terms[axis].append(Term(term_id, operator, fn, label))
        logger.debug("added %s term %d (%s, %s)", axis.value, term_id, label, operator.value)

    def add_basis(self, axis: Axis, basis: BasisFunction, operator: Operator) -> None:
        self.add_term(axis, basis.id, operator, basis.fn, basis.label)

    def remove_term(self, axis: Axis, term_id: int) -> None:
        terms = self._terms[axis]
        for i, term in enumerate(terms):
            if term.id == term_id:
                del terms[i]
                logger.debug("removed %s term %d", axis.value, term_id)
                return

    def is_active(self, axis: Axis, term_id: int) -> bool:
        return any(term.id == term_id for term in self._terms[axis])

    def terms(self, axis: Axis) -> Tuple[Term, ...]:
        return tuple(self._terms[axis])

    def evaluate(self, axis: Axis, x: float, y: float) -> float:
        terms = self._terms[axis]
        if not terms:
            return 0.0

        value = terms[0].fn(x, y)
        for term in terms[1:]:
            if term.operator is Operator.ADD:
                value = value + term.fn(x, y)
            else:
                value = value * term.fn(x, y)
        return float(value)

    def velocity(self, x: float, y: float) -> Tuple[float, float]:
        return self.evaluate(Axis.X, x, y), self.evaluate(Axis.Y, x, y)

    def magnitude(self, x: float, y: float) -> float:
        vx, vy = self.velocity(x, y)
        return math.hypot(vx, vy)

    def render_text(self, axis: Axis) -> str:
        """Human-readable formula that mirrors the evaluation fold."""
        terms = self._terms[axis]
        if not terms:
            return "0"

        text = terms[0].label
        for term in terms[1:]:
            if term.operator is Operator.ADD:
                text = f"{text} + {term.label}"
            else:
                text = f"({text}) * {term.label}"
        return text

    def clear_field(self) -> None:
        for terms in self._terms.values():
            terms.clear()
