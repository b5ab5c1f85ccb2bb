"""Exhaustive search of the exponent."""

from cryptengine.dloglib.base import DiscreteLogMethod
from cryptengine.errors import NotFound


class BruteForce(DiscreteLogMethod):
    """Scan x = 0, 1, 2, ... keeping g^x as a running product."""

    name = "brute_force"

    def commit(self) -> int:
        power = 1 % self.n
        for x in range(self.n):
            self.cancel_token.check()
            if power == self.a:
                return x
            power = power * self.g % self.n
        raise NotFound(f"{self.a} is not a power of {self.g} modulo {self.n}")
