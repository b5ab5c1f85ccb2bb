"""Pollard's rho factorization with Floyd cycle detection."""

import logging
import math
import random
from collections import deque

from cryptengine.errors import IterationCapExceeded
from cryptengine.factorlib.base import FactorizationMethod
from cryptengine.ntheory import is_probable_prime, poly_eval

logger = logging.getLogger(__name__)

# Divided out before the rho walk; tiny factors make x^2 + 1 cycle immediately
SMALL_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29)

# f(x) = x^2 + 1, lowest degree first
_STEP_POLYNOMIAL = (1, 0, 1)

# Walks that end in gcd = n before the whole search gives up
_MAX_DEGENERATE_WALKS = 64


class PollardRho(FactorizationMethod):
    """
    x_{i+1} = x_i^2 + 1 (mod n), tortoise one step and hare two steps per
    iteration, until gcd(|x - y|, n) is a proper divisor.

    Composite divisors and cofactors go back onto a work queue, so the result
    is the full prime factorization.
    """

    name = "pollard_rho"

    def __init__(self, n: int, seed: int|None=None, config=None, cancel_token=None):
        super().__init__(n, config=config, cancel_token=cancel_token)
        self._random = random.Random(seed)

    def find_divisor(self, m: int) -> int|None:
        """
        One rho walk on m from a random start.

        :return: A proper divisor of m, or None if the walk closed with gcd = m.
        :raises IterationCapExceeded: after config.rho_max_iterations steps without a result.
        """
        x = y = self._random.randrange(2, m)
        for _ in range(self.config.rho_max_iterations):
            self.cancel_token.check()
            x = poly_eval(x, _STEP_POLYNOMIAL, m)
            y = poly_eval(poly_eval(y, _STEP_POLYNOMIAL, m), _STEP_POLYNOMIAL, m)
            d = math.gcd(abs(x - y), m)
            if d == m:
                return None
            if d > 1:
                return d
        raise IterationCapExceeded(f"no divisor of {m} within {self.config.rho_max_iterations} rho steps")

    def commit(self) -> list[int]:
        """:return: Prime factors of n with multiplicity, in increasing order."""
        factors = []
        remainder = self.n
        for p in SMALL_PRIMES:
            while remainder % p == 0:
                factors.append(p)
                remainder //= p

        pending = deque([remainder] if remainder > 1 else [])
        degenerate = 0
        while pending:
            self.cancel_token.check()
            m = pending.popleft()
            if is_probable_prime(m):
                factors.append(m)
                continue
            d = self.find_divisor(m)
            if d is None:
                degenerate += 1
                if degenerate > _MAX_DEGENERATE_WALKS:
                    raise IterationCapExceeded(f"{degenerate} degenerate rho walks on {m}")
                logger.debug("Rho walk on %d closed without a divisor, restarting", m)
                pending.append(m)
                continue
            logger.debug("Rho split %d = %d * %d", m, d, m // d)
            pending.extend([d, m // d])

        factors.sort()
        return factors
