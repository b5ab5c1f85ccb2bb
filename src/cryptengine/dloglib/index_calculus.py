"""Index calculus over the prime field Z/nZ."""

import logging
import random

import tqdm

from cryptengine.dloglib.base import DiscreteLogMethod
from cryptengine.errors import NotFound, SingularSystem
from cryptengine.linalg.gfn import MatrixGFn
from cryptengine.ntheory import factor_trial, first_primes, smoothness

logger = logging.getLogger(__name__)


class IndexCalculus(DiscreteLogMethod):
    """
    1. Collect relations g^e = prod(p_j^k_j) (mod n) over a base of small primes.
    2. Solve the system sum(k_j * log(p_j)) = e modulo n - 1 for the base logs.
    3. Find e with a * g^e smooth; then log(a) = sum(k_j * log(p_j)) - e.

    Assumes g generates the whole multiplicative group, otherwise the base
    logs need not exist and step 2 keeps failing.
    """

    name = "index_calculus"

    def __init__(self, g: int, a: int, n: int, factor_base_size: int|None=None, seed: int|None=None,
                 config=None, cancel_token=None):
        super().__init__(g, a, n, config=config, cancel_token=cancel_token)
        self._random = random.Random(seed)
        size = factor_base_size if factor_base_size is not None else self.config.index_calculus_base_size
        self.factor_base = [p for p in first_primes(size) if p < n]
        self.group_order = n - 1
        self.group_factors = factor_trial(self.group_order, cancel_token=self.cancel_token)

    def collect_relations(self) -> MatrixGFn:
        base = self.factor_base
        wanted = len(base) + self.config.index_calculus_extra_relations
        system = MatrixGFn(wanted, len(base) + 1, self.group_order, factors=self.group_factors)
        row = 0
        with tqdm.tqdm(total=wanted, desc="Relations       ", disable=not self.config.progress) as bar:
            while row < wanted:
                self.cancel_token.check()
                e = self._random.randrange(1, self.group_order)
                if system.insert_row_over_factor_base(row, pow(self.g, e, self.n), e, base):
                    row += 1
                    bar.update(1)
        return system

    def base_logarithms(self) -> list[int]:
        """log_g(p) for every p in the factor base. Re-collects until the system is solvable."""
        attempts = 0
        while True:
            attempts += 1
            system = self.collect_relations()
            try:
                logs = system.solve()
            except SingularSystem as e:
                logger.debug("Index calculus system %d unusable (%s), collecting again", attempts, e)
                continue
            logger.debug("Solved %d base logarithms after %d systems", len(logs), attempts)
            return logs

    def individual_log(self, logs: list[int]) -> int|None:
        """Search e with a * g^e smooth, at most index_calculus_attempt_cap samples."""
        for _ in range(self.config.index_calculus_attempt_cap):
            self.cancel_token.check()
            e = self._random.randrange(self.group_order)
            exponents = smoothness(self.a * pow(self.g, e, self.n) % self.n, self.factor_base)
            if exponents is None:
                continue
            x = (sum(k * log for k, log in zip(exponents, logs)) - e) % self.group_order
            if pow(self.g, x, self.n) == self.a:
                return x
        return None

    def commit(self) -> int:
        if self.a == 0:
            raise NotFound(f"0 is not a power of {self.g} modulo {self.n}")
        while True:
            logs = self.base_logarithms()
            x = self.individual_log(logs)
            if x is not None:
                return x
            logger.info("No smooth a * g^e within %d samples, starting over", self.config.index_calculus_attempt_cap)
