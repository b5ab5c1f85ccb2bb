"""Dixon's random squares method."""

import logging
import random

import tqdm

from cryptengine.factorlib.base import FactorizationMethod
from cryptengine.factorlib.squares import Relation, split_with_relations, trivial_split
from cryptengine.ntheory import first_primes, isqrt, smoothness

logger = logging.getLogger(__name__)


def factor_base_size(n: int) -> int:
    """10 + d^4 / 192 primes, d being the number of decimal digits of n."""
    digits = len(str(n))
    return 10 + digits ** 4 // 192


class Dixon(FactorizationMethod):
    """
    Sample x uniformly in [ceil(sqrt(n)), n), keep x whenever x^2 mod n is
    smooth over the first primes, and combine relations into a congruence
    of squares. Every escalation_period failed cycles the factor base doubles.
    """

    name = "dixon"

    def __init__(self, n: int, seed: int|None=None, config=None, cancel_token=None):
        super().__init__(n, config=config, cancel_token=cancel_token)
        self._random = random.Random(seed)
        self.base_size = factor_base_size(n)

    def collect_relations(self, factor_base: list[int]) -> list[Relation]:
        """Sample until len(factor_base) + matrix_offset distinct relations are found."""
        wanted = len(factor_base) + self.config.matrix_offset
        low = isqrt(self.n)
        seen = set()
        relations = []
        with tqdm.tqdm(total=wanted, desc="Relations       ", disable=not self.config.progress) as bar:
            while len(relations) < wanted:
                self.cancel_token.check()
                x = self._random.randrange(low, self.n)
                if x in seen:
                    continue
                exponents = smoothness(x * x % self.n, factor_base)
                if exponents is None:
                    continue
                seen.add(x)
                relations.append(Relation(x, exponents))
                bar.update(1)
        return relations

    def find_factor(self) -> int:
        """
        Retry full relation cycles until one yields a proper factor.

        There is no attempt cap: the search terminates with probability 1.
        """
        trivial = trivial_split(self.n)
        if trivial is not None:
            return trivial

        failures = 0
        while True:
            self.cancel_token.check()
            factor_base = first_primes(self.base_size)
            for p in factor_base:
                if self.n % p == 0 and p < self.n:
                    return p

            relations = self.collect_relations(factor_base)
            logger.debug("Dixon: %d relations over %d primes", len(relations), len(factor_base))
            factor = split_with_relations(self.n, factor_base, relations, progress=self.config.progress)
            if factor is not None:
                return factor

            failures += 1
            if failures % self.config.escalation_period == 0:
                self.base_size *= 2
                logger.info("Dixon: %d failed cycles, factor base grows to %d primes", failures, self.base_size)

    def commit(self) -> list[int]:
        factor = self.find_factor()
        return [factor, self.n // factor]
