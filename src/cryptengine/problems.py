"""Problem and result types exchanged with the task layer."""

from dataclasses import dataclass
from typing import NamedTuple

from cryptengine.errors import InvalidProblem


@dataclass(frozen=True)
class FactorizationProblem:
    n: int

    def __post_init__(self):
        if self.n < 2:
            raise InvalidProblem(f"cannot factor {self.n}, n must be at least 2")


@dataclass(frozen=True)
class DiscreteLogProblem:
    """Find x with g^x = a (mod n). Callers guarantee that n is prime."""
    g: int
    a: int
    n: int

    def __post_init__(self):
        if self.n < 2:
            raise InvalidProblem(f"modulus must be at least 2, got {self.n}")


class FactorizationResult(NamedTuple):
    """Two factors greater than one whose product is n. Neither is necessarily prime."""
    f1: int
    f2: int

    def verify(self, n: int) -> bool:
        return self.f1 > 1 and self.f2 > 1 and self.f1 * self.f2 == n
