"""Shanks' baby-step giant-step."""

import logging
import random

from cryptengine.dloglib.base import DiscreteLogMethod
from cryptengine.errors import NotFound
from cryptengine.ntheory import isqrt, mod_inverse

logger = logging.getLogger(__name__)


class BabyStepGiantStep(DiscreteLogMethod):
    """
    Table of baby steps g^j for j in [0, m), m = ceil(sqrt(order)), then giant
    steps a * g^(-i*m) for i in [0, m] until one hits the table.

    When m exceeds config.bsgs_table_limit only a random sample of
    table_limit baby steps is stored, and the whole search is repeated with a
    fresh sample until it succeeds.
    """

    name = "bsgs"

    def __init__(self, g: int, a: int, n: int, order: int|None=None, table_limit: int|None=None,
                 seed: int|None=None, config=None, cancel_token=None):
        """
        :param order: Order of g if known (defaults to n, which bounds it for prime n).
        :param table_limit: Overrides config.bsgs_table_limit.
        """
        super().__init__(g, a, n, config=config, cancel_token=cancel_token)
        self.order = order if order is not None else n
        self.table_limit = table_limit if table_limit is not None else self.config.bsgs_table_limit
        self._random = random.Random(seed)

    def baby_steps(self, m: int) -> dict[int, int]:
        """Map g^j -> smallest such j, for all j < m or a random sample of them."""
        table = {}
        if m <= self.table_limit:
            power = 1 % self.n
            for j in range(m):
                self.cancel_token.check()
                table.setdefault(power, j)
                power = power * self.g % self.n
        else:
            for j in self._random.sample(range(m), self.table_limit):
                self.cancel_token.check()
                power = pow(self.g, j, self.n)
                if table.get(power, j) >= j:
                    table[power] = j
        return table

    def giant_steps(self, table: dict[int, int], m: int) -> int|None:
        factor = mod_inverse(pow(self.g, m, self.n), self.n)
        gamma = self.a
        for i in range(m + 1):
            self.cancel_token.check()
            j = table.get(gamma)
            if j is not None:
                return i * m + j
            gamma = gamma * factor % self.n
        return None

    def commit(self) -> int:
        m = isqrt(self.order)
        sampled = m > self.table_limit
        logger.debug("BSGS with m = %d (%s table)", m, "sampled" if sampled else "full")
        while True:
            table = self.baby_steps(m)
            x = self.giant_steps(table, m)
            if x is not None:
                return x
            if not sampled:
                raise NotFound(f"{self.a} is not a power of {self.g} modulo {self.n}")
            logger.debug("Sampled BSGS table missed, retrying with a new sample")
