"""Silver-Pohlig-Hellman: discrete logarithms in groups of smooth order."""

import logging

from cryptengine.dloglib.base import DiscreteLogMethod
from cryptengine.dloglib.bsgs import BabyStepGiantStep
from cryptengine.errors import InvalidProblem, NotFound
from cryptengine.ntheory import crt, factor_trial, is_probable_prime, mod_inverse

logger = logging.getLogger(__name__)


def multiplicative_order(g: int, n: int, group_factors: list[tuple[int, int]]) -> int:
    """
    Order of g modulo n, given the factorization of the group order n - 1.
    """
    order = n - 1
    for p, _ in group_factors:
        while order % p == 0 and pow(g, order // p, n) == 1:
            order //= p
    return order


class SilverPohligHellman(DiscreteLogMethod):
    """
    For each prime power p^e dividing ord(g) the exponent is lifted one base-p
    digit at a time in the subgroup of order p, then the residues are joined
    with the Chinese Remainder Theorem.

    n - 1 is factored by trial division, so n - 1 must be reasonably smooth.
    """

    name = "silver_pohlig_hellman"

    def solve_digit(self, gamma: int, h: int, p: int) -> int:
        """d in [0, p) with gamma^d = h, where gamma has order p."""
        if p < 1 << self.config.sph_brute_force_bits:
            power = 1
            for d in range(p):
                self.cancel_token.check()
                if power == h:
                    return d
                power = power * gamma % self.n
            raise NotFound(f"{h} is not in the subgroup of order {p} generated by {gamma}")
        return BabyStepGiantStep(gamma, h, self.n, order=p, config=self.config,
                                 cancel_token=self.cancel_token).commit()

    def solve_prime_power(self, order: int, p: int, e: int) -> int:
        """x mod p^e."""
        gamma = pow(self.g, order // p, self.n)
        g_inverse = mod_inverse(self.g, self.n)
        x = 0
        for k in range(e):
            self.cancel_token.check()
            h = pow(self.a * pow(g_inverse, x, self.n), order // p ** (k + 1), self.n)
            x += self.solve_digit(gamma, h, p) * p ** k
        return x

    def commit(self) -> int:
        if not is_probable_prime(self.n):
            raise InvalidProblem(f"Silver-Pohlig-Hellman needs a prime modulus, {self.n} is composite")
        if self.a == 0:
            raise NotFound(f"0 is not a power of {self.g} modulo {self.n}")

        group_factors = factor_trial(self.n - 1, cancel_token=self.cancel_token)
        order = multiplicative_order(self.g, self.n, group_factors)
        if pow(self.a, order, self.n) != 1:
            raise NotFound(f"{self.a} is not in the subgroup generated by {self.g} modulo {self.n}")
        if order == 1:
            return 0

        residues, moduli = [], []
        for p, _ in group_factors:
            e = 0
            while order % p ** (e + 1) == 0:
                e += 1
            if e == 0:
                continue
            residues.append(self.solve_prime_power(order, p, e))
            moduli.append(p ** e)
            logger.debug("SPH: x = %d (mod %d^%d)", residues[-1], p, e)
        return crt(residues, moduli)
