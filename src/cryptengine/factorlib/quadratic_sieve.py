"""
Quadratic sieve.

Q(x) = (x + s)^2 - n with s = ceil(sqrt(n)). For every factor base prime p
the values of x with p | Q(x) form the two progressions x = +-t - s (mod p),
t^2 = n (mod p), so smooth candidates are found by adding log(p) along those
progressions (numpy slices) instead of trial dividing every x.
"""

import logging
import math

import numpy as np
import tqdm

from cryptengine.factorlib.base import FactorizationMethod
from cryptengine.factorlib.squares import Relation, split_with_relations, trivial_split
from cryptengine.ntheory import first_primes, isqrt, legendre, smoothness, tonelli_shanks

logger = logging.getLogger(__name__)

###############################
# Step 1: Parameter selection #
###############################

def select_parameters(n: int) -> tuple[int, int]:
    """
    Number of candidate primes for the factor base and the sieve interval length.

    :return: (candidate prime count, interval length)
    """
    bits = n.bit_length()
    digits = len(str(n))
    if bits <= 55:
        minimal_size, interval_divisor = 256, 256
    elif bits <= 65:
        minimal_size, interval_divisor = 512, 256
    else:
        minimal_size, interval_divisor = 384, 16384
    size = minimal_size + digits ** 4 // 1024
    interval = 512 + isqrt(n) // interval_divisor
    return size, interval

#############################
# Step 2: Build factor base #
#############################

def build_factor_base(n: int, candidates: int) -> tuple[list[int], int|None]:
    """
    Primes among the first `candidates` primes for which n is a quadratic residue.

    :return: (factor base, None), or ([], p) when a candidate prime p divides n.
    """
    factor_base = []
    for p in first_primes(candidates):
        symbol = legendre(n, p)
        if symbol == 0 and p < n:
            return [], p
        if symbol == 1:
            factor_base.append(p)
    return factor_base, None

def sieve_roots(n: int, s: int, p: int) -> list[int]:
    """Residues of x modulo p for which p divides (x + s)^2 - n, empty unless n is a nonzero square mod p."""
    if p == 2:
        return [(n - s) % 2]
    t = tonelli_shanks(n, p)
    if t is None:
        return []
    return sorted({(t - s) % p, (-t - s) % p})

###################
# Step 3: Sieving #
###################

def sieve_block(n: int, s: int, start: int, length: int, factor_base, roots, logs, threshold: float) -> list[int]:
    """
    Sieve x in [start, start + length).

    :return: Offsets x whose remaining log(Q(x)) is at most the threshold.
    """
    sieve_array = np.array([math.log((start + i + s) ** 2 - n) if (start + i + s) ** 2 > n else 0.0
                            for i in range(length)], dtype=np.float64)

    for p, residues, log_p in zip(factor_base, roots, logs):
        for r in residues:
            offset = (r - start) % p
            sieve_array[offset::p] -= log_p

    return [start + int(i) for i in np.nonzero(sieve_array <= threshold)[0]]


class QuadraticSieve(FactorizationMethod):
    """
    On failure the interval doubles, and every escalation_period failures the
    factor base doubles as well.
    """

    name = "quadratic_sieve"

    def __init__(self, n: int, config=None, cancel_token=None):
        super().__init__(n, config=config, cancel_token=cancel_token)
        self.candidate_primes, self.interval = select_parameters(n)
        self.sqrt_n = isqrt(n)

    def collect_relations(self, factor_base: list[int]) -> list[Relation]:
        """Sieve [0, interval) block by block until enough relations are found."""
        n, s = self.n, self.sqrt_n
        wanted = len(factor_base) + self.config.matrix_offset
        roots = [sieve_roots(n, s, p) for p in factor_base]
        logs = [math.log(p) for p in factor_base]
        threshold = self.config.sieve_tolerance * math.log(factor_base[-1])
        block_size = self.config.sieve_block_size

        relations = []
        starts = range(0, self.interval, block_size)
        for start in tqdm.tqdm(starts, desc="Sieving         ", disable=not self.config.progress):
            self.cancel_token.check()
            length = min(block_size, self.interval - start)
            for x in sieve_block(n, s, start, length, factor_base, roots, logs, threshold):
                exponents = smoothness((x + s) ** 2 - n, factor_base)
                if exponents is not None:
                    relations.append(Relation(x + s, exponents))
                    if len(relations) >= wanted:
                        return relations
        return relations

    def attempt(self) -> int|None:
        """One sieving cycle with the current parameters; None on failure."""
        factor_base, divisor = build_factor_base(self.n, self.candidate_primes)
        if divisor is not None:
            return divisor

        relations = self.collect_relations(factor_base)
        wanted = len(factor_base) + self.config.matrix_offset
        logger.debug("QS: %d/%d relations over %d primes, interval %d",
                     len(relations), wanted, len(factor_base), self.interval)
        if len(relations) < wanted:
            return None
        return split_with_relations(self.n, factor_base, relations, progress=self.config.progress)

    def find_factor(self) -> int:
        trivial = trivial_split(self.n)
        if trivial is not None:
            return trivial
        # (x + s)^2 - n vanishes at x = 0 for squares, caught above
        failures = 0
        while True:
            self.cancel_token.check()
            factor = self.attempt()
            if factor is not None:
                return factor
            failures += 1
            self.interval *= 2
            if failures % self.config.escalation_period == 0:
                self.candidate_primes *= 2
                logger.info("QS: %d failed cycles, %d candidate primes", failures, self.candidate_primes)

    def commit(self) -> list[int]:
        factor = self.find_factor()
        return [factor, self.n // factor]
