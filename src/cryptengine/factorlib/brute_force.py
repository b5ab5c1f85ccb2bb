"""Trial division."""

import logging

from cryptengine.factorlib.base import FactorizationMethod
from cryptengine.ntheory import factor_trial

logger = logging.getLogger(__name__)


class BruteForce(FactorizationMethod):
    """
    Divide by 2, 3, 5, 7, ... up to a bound, extracting every prime's full
    exponent, and stop once the remaining cofactor is a probable prime.
    """

    name = "brute_force"

    def __init__(self, n: int, upper_bound: int|None=None, config=None, cancel_token=None):
        super().__init__(n, config=config, cancel_token=cancel_token)
        self.upper_bound = upper_bound if upper_bound is not None else self.config.brute_force_bound

    def prime_powers(self) -> list[tuple[int, int]]:
        """
        :return: (prime, exponent) pairs of n.
        :raises IterationCapExceeded: if the bound is exhausted before n is fully factored.
        """
        return factor_trial(self.n, bound=self.upper_bound, cancel_token=self.cancel_token)

    def commit(self) -> list[int]:
        """:return: Prime factors of n with multiplicity, in increasing order."""
        factors = []
        for p, e in self.prime_powers():
            factors.extend([p] * e)
        factors.sort()
        logger.debug("Trial division of %d: %s", self.n, factors)
        return factors
