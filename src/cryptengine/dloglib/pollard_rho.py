"""Pollard's rho for discrete logarithms."""

import logging
import math
import random

from cryptengine.dloglib.base import DiscreteLogMethod
from cryptengine.errors import IterationCapExceeded, NotFound
from cryptengine.ntheory import mod_inverse

logger = logging.getLogger(__name__)

# Collisions leaving more candidate solutions than this are treated as degenerate
_MAX_CANDIDATES = 1 << 16


class PollardRhoDL(DiscreteLogMethod):
    """
    Random walk on values x = g^u * a^v (mod n), split three ways on x mod 3:
    square, multiply by g, or multiply by a. Tortoise and hare (Floyd) run
    until they meet, which gives (u1 - u2) = X * (v2 - v1) (mod n - 1).
    """

    name = "pollard_rho_dl"

    def __init__(self, g: int, a: int, n: int, seed: int|None=None, config=None, cancel_token=None):
        super().__init__(g, a, n, config=config, cancel_token=cancel_token)
        self._random = random.Random(seed)
        self.phi = n - 1

    def step(self, x: int, u: int, v: int) -> tuple[int, int, int]:
        branch = x % 3
        if branch == 0:
            return x * x % self.n, 2 * u % self.phi, 2 * v % self.phi
        if branch == 1:
            return x * self.g % self.n, (u + 1) % self.phi, v
        return x * self.a % self.n, u, (v + 1) % self.phi

    def collide(self) -> tuple[int, int]:
        """
        Walk from a random start until tortoise and hare meet.

        :return: (l, r) with g^l = a^r.
        """
        u, v = self._random.randrange(self.phi), self._random.randrange(self.phi)
        x = pow(self.g, u, self.n) * pow(self.a, v, self.n) % self.n
        tortoise = hare = (x, u, v)
        for _ in range(self.config.dlog_rho_max_iterations):
            self.cancel_token.check()
            tortoise = self.step(*tortoise)
            hare = self.step(*self.step(*hare))
            if tortoise[0] == hare[0]:
                return (tortoise[1] - hare[1]) % self.phi, (hare[2] - tortoise[2]) % self.phi
        raise IterationCapExceeded(f"no rho collision within {self.config.dlog_rho_max_iterations} steps")

    def candidates(self, l: int, r: int):
        """Every X in [0, phi) solving X * r = l (mod phi)."""
        d = math.gcd(r, self.phi)
        if r == 0 or l % d != 0 or d > _MAX_CANDIDATES:
            return
        reduced = self.phi // d
        base = (l // d) * mod_inverse((r // d) % reduced, reduced) % reduced if reduced > 1 else 0
        for k in range(d):
            yield base + k * reduced

    def commit(self) -> int:
        if self.a == 1 % self.n:
            return 0
        if self.a == 0:
            raise NotFound(f"0 is not a power of {self.g} modulo {self.n}")

        for attempt in range(self.config.dlog_rho_restarts + 1):
            l, r = self.collide()
            for x in self.candidates(l, r):
                if pow(self.g, x, self.n) == self.a:
                    return x
            logger.debug("Degenerate rho collision (attempt %d), restarting", attempt + 1)
        raise NotFound(f"no logarithm of {self.a} to base {self.g} modulo {self.n} "
                       f"after {self.config.dlog_rho_restarts + 1} rho walks")
