"""
Congruence of squares completion shared by Dixon's method, the quadratic sieve
and the number field sieve relation collector.

Given relations x_i^2 = Q_i (mod N) with every Q_i smooth over the factor
base, a subset whose Q_i multiply to a square Y^2 gives X^2 = Y^2 (mod N)
for X = prod(x_i), and gcd(X - Y, N) is a proper factor with probability 1/2.
"""

import logging
import math
from typing import NamedTuple

import numpy as np

from cryptengine.errors import NoKernelVector
from cryptengine.linalg.gf2 import MatrixGF2
from cryptengine.ntheory import perfect_power

logger = logging.getLogger(__name__)


class Relation(NamedTuple):
    """x with x^2 (or Q(x)) factoring over the factor base as prod(p_j^exponents_j)."""
    x: int
    exponents: list[int]


def trivial_split(n: int) -> int|None:
    """
    A factor of n that needs no sieving: 2 for even n, the root for perfect powers.

    Square-based methods cannot split these inputs, since every residue of a
    prime power has square roots that only differ by sign.
    """
    if n % 2 == 0 and n > 2:
        return 2
    power = perfect_power(n)
    if power is not None:
        return power[0]
    return None


def parity_matrix(relations: list[Relation], base_size: int) -> MatrixGF2:
    return MatrixGF2.from_exponents([r.exponents for r in relations], cols=base_size)


def find_dependencies(relations: list[Relation], base_size: int, progress: bool=False) -> MatrixGF2:
    """
    Subsets of relations whose values multiply to a square.

    :return: Nullspace of the transposed parity matrix; column k selects relation i when entry (i, k) is 1.
    :raises NoKernelVector: if the relations are linearly independent mod 2.
    """
    return parity_matrix(relations, base_size).transpose().nullspace(progress=progress)


def combine_relations(n: int, factor_base, relations: list[Relation], nullspace: MatrixGF2) -> int|None:
    """
    Try every nullspace vector until gcd(X - Y, n) is a proper factor.

    :param n: The integer to be factored.
    :param factor_base: Primes the exponent vectors refer to.
    :param relations: Relations, in the row order of the parity matrix.
    :param nullspace: Matrix whose columns select relation subsets.
    :return: A proper factor of n, or None if every vector gives a trivial gcd.
    """
    for k in range(nullspace.cols):
        selected = np.nonzero(nullspace.column(k))[0]
        if len(selected) == 0:
            continue

        X = 1
        Y2_exponents = [0] * len(factor_base)
        for i in selected:
            x_i, exponents_i = relations[i]
            X = X * x_i % n
            for j, e in enumerate(exponents_i):
                Y2_exponents[j] += e

        # redundant vectors from a pathological echelon form may not give a square
        if any(e % 2 for e in Y2_exponents):
            continue

        Y = 1
        for p, e in zip(factor_base, Y2_exponents):
            if e:
                Y = Y * pow(int(p), e // 2, n) % n

        g = math.gcd(X - Y, n)
        if 1 < g < n:
            logger.debug("Kernel vector %d of %d gave factor %d", k + 1, nullspace.cols, g)
            return g
    return None


def split_with_relations(n: int, factor_base, relations: list[Relation], progress: bool=False) -> int|None:
    """Linear algebra and gcd step in one call; None when nothing splits n."""
    try:
        nullspace = find_dependencies(relations, len(factor_base), progress=progress)
    except NoKernelVector:
        logger.debug("No dependency among %d relations", len(relations))
        return None
    return combine_relations(n, factor_base, relations, nullspace)
