"""
Relation collection of the general number field sieve.

Only the first half of the algorithm exists: polynomial selection by the
base-m method, rational and algebraic factor bases, sieving of (a, b) pairs
and the GF(2) dependency search. The square root step in the number field
is missing, so commit() always fails with Unsupported.
"""

import logging
import math
import random
from typing import NamedTuple

import tqdm

from cryptengine.errors import NoKernelVector, Unsupported
from cryptengine.factorlib.base import FactorizationMethod
from cryptengine.linalg.gf2 import MatrixGF2
from cryptengine.ntheory import first_primes, kroot, poly_eval, smoothness

logger = logging.getLogger(__name__)

DEFAULT_PAIR_BOUND = 1024


class PairRelation(NamedTuple):
    """(a, b) with a + b*m smooth over the rational base and N(a, b) smooth over the ideals."""
    a: int
    b: int
    rational_exponents: list[int]
    algebraic_exponents: list[int]


class SieveResult(NamedTuple):
    relations: list[PairRelation]
    nullspace: MatrixGF2|None


def base_m(n: int, degree: int=2, rng: random.Random|None=None) -> tuple[int, list[int]]:
    """
    Pick m between n^(1/(d+1)) and n^(1/d) and write n in base m.

    :return: (m, coefficients c_0..c_d) with sum(c_i * m^i) == n.
    """
    rng = rng or random.Random()
    low, high = max(kroot(n, degree + 1), 2), kroot(n, degree)
    m = rng.randint(low, max(low, high))
    coefficients = []
    remainder = n
    for _ in range(degree + 1):
        coefficients.append(remainder % m)
        remainder //= m
    # the top digit absorbs whatever does not fit in d + 1 digits
    coefficients[-1] += remainder * m
    return m, coefficients


def algebraic_factor_base(coefficients, size: int) -> list[tuple[int, int]]:
    """First `size` prime ideals (p, r) with f(r) = 0 (mod p)."""
    ideals = []
    candidates = 2 * size + 10
    while len(ideals) < size:
        ideals = []
        for p in first_primes(candidates):
            for r in range(p):
                if poly_eval(r, coefficients, p) == 0:
                    ideals.append((p, r))
            if len(ideals) >= size:
                break
        candidates *= 2
    return ideals[:size]


def norm(coefficients, a: int, b: int) -> int:
    """N(a + b*theta) = sum(c_i * a^i * (-b)^(d - i))."""
    degree = len(coefficients) - 1
    return sum(c * a ** i * (-b) ** (degree - i) for i, c in enumerate(coefficients))


class NumberFieldSieve(FactorizationMethod):

    name = "gnfs"

    def __init__(self, n: int, degree: int=2, seed: int|None=None, config=None, cancel_token=None):
        super().__init__(n, config=config, cancel_token=cancel_token)
        self._random = random.Random(seed)
        digits = len(str(n))
        self.base_size = 10 + digits ** 4 // 1024
        self.m, self.polynomial = base_m(n, degree, self._random)
        self.rational_base = first_primes(self.base_size)
        self.ideals = algebraic_factor_base(self.polynomial, self.base_size)
        self.ideal_primes = sorted({p for p, _ in self.ideals})

    def _ideal_exponents(self, a: int, b: int) -> list[int]|None:
        """Exponents of the prime ideals dividing (a + b*theta), None if the norm is not smooth."""
        prime_exponents = smoothness(norm(self.polynomial, a, b), self.ideal_primes)
        if prime_exponents is None:
            return None
        powers = dict(zip(self.ideal_primes, prime_exponents))
        # a = -b*r (mod p) picks the ideal above p
        return [powers[p] if (a + b * r) % p == 0 else 0 for p, r in self.ideals]

    def sieve(self, pair_bound: int=DEFAULT_PAIR_BOUND) -> SieveResult:
        """
        Scan coprime pairs with |a| <= pair_bound and 0 < b <= pair_bound.

        The parity matrix joins [sign, rational exponents] with [sign, ideal
        exponents]; its transposed nullspace selects pair subsets that are
        squares on both sides.
        """
        wanted = len(self.rational_base) + len(self.ideals) + 2 + self.config.matrix_offset
        relations = []
        for b in tqdm.tqdm(range(1, pair_bound + 1), desc="GNFS pairs      ", disable=not self.config.progress):
            self.cancel_token.check()
            for a in range(-pair_bound, pair_bound + 1):
                if a == 0 or math.gcd(a, b) != 1:
                    continue
                rational_value = a + b * self.m
                rational = smoothness(rational_value, self.rational_base)
                if rational is None:
                    continue
                algebraic = self._ideal_exponents(a, b)
                if algebraic is None:
                    continue
                value = norm(self.polynomial, a, b)
                relations.append(PairRelation(a, b, [int(rational_value < 0)] + rational,
                                              [int(value < 0)] + algebraic))
                if len(relations) >= wanted:
                    break
            if len(relations) >= wanted:
                break

        logger.debug("GNFS: %d pair relations (wanted %d)", len(relations), wanted)
        if not relations:
            return SieveResult(relations, None)

        rational = MatrixGF2.from_exponents([r.rational_exponents for r in relations])
        algebraic = MatrixGF2.from_exponents([r.algebraic_exponents for r in relations])
        try:
            nullspace = rational.right_join(algebraic).transpose().nullspace()
        except NoKernelVector:
            nullspace = None
        return SieveResult(relations, nullspace)

    def commit(self) -> list[int]:
        raise Unsupported("the number field sieve only collects relations; the square root step is not implemented")
