from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Tuple


class Axis(Enum):
    X = "x"
    Y = "y"


class Operator(Enum):
    """How a term combines with everything accumulated before it."""

    ADD = "Add"
    MULTIPLY = "Multiply"

    def toggled(self):
        return Operator.MULTIPLY if self is Operator.ADD else Operator.ADD


@dataclass(frozen=True)
class BasisFunction:
    """A named scalar function of (x, y) offered by a level.

    The label and the callable live in one record so a catalog entry can
    never show one formula and evaluate another.
    """

    id: int
    label: str
    fn: Callable[[float, float], float]

    def __call__(self, x: float, y: float) -> float:
        return self.fn(x, y)


def make_catalog(pairs: Iterable[Tuple[str, Callable[[float, float], float]]]) -> Tuple[BasisFunction, ...]:
    """Build a catalog from ordered (label, fn) pairs; ids are positions."""
    return tuple(BasisFunction(i, label, fn) for i, (label, fn) in enumerate(pairs))
