import math
import random

import pytest
from sympy import factorint, isprime, sqrt_mod

from cryptengine.errors import InvalidInverse, IterationCapExceeded
from cryptengine.ntheory import (crt, factor_trial, first_primes, is_probable_prime, isqrt, kroot, legendre,
                                 mod_inverse, perfect_power, poly_eval, smoothness, tonelli_shanks)


@pytest.mark.parametrize("n", [0, 1, 2, 3, 4, 15, 16, 17, 8051, 10**20, 10**40 + 1, (2**61 - 1) ** 2, (2**61 - 1) ** 2 + 1])
def test_isqrt_is_ceiling_root(n):
    r = isqrt(n)
    assert r * r >= n
    assert r == 0 or (r - 1) * (r - 1) < n

def test_isqrt_rejects_negative():
    with pytest.raises(ValueError):
        isqrt(-1)

@pytest.mark.parametrize("n,k", [(27, 3), (26, 3), (28, 3), (10**30, 5), (2**64 + 7, 4), (1, 2), (0, 3), (8051, 1)])
def test_kroot_is_floor_root(n, k):
    r = kroot(n, k)
    assert r ** k <= n < (r + 1) ** k

def test_perfect_power():
    assert perfect_power(3 ** 7) == (3, 7)
    assert perfect_power(1000003 ** 2) == (1000003, 2)
    assert perfect_power(8051) is None

def test_mod_inverse():
    assert mod_inverse(3, 11) * 3 % 11 == 1
    with pytest.raises(InvalidInverse):
        mod_inverse(6, 9)

def test_crt_round_trip():
    rng = random.Random(7)
    moduli = [4, 9, 25, 7, 11]
    for _ in range(20):
        residues = [rng.randrange(m) for m in moduli]
        x = crt(residues, moduli)
        assert 0 <= x < math.prod(moduli)
        assert [x % m for m in moduli] == residues

def test_poly_eval_lowest_degree_first():
    # 1 + 0x + x^2
    assert poly_eval(5, (1, 0, 1), 1000) == 26
    assert poly_eval(5, (1, 0, 1), 7) == 26 % 7

def test_is_probable_prime_matches_sympy():
    for n in list(range(-3, 2000)) + [2**61 - 1, 2**61 + 1, 1000003 * 1000033, 561, 1105, 1729]:
        assert is_probable_prime(n) == isprime(n), n

def test_first_primes():
    assert first_primes(10) == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
    assert first_primes(0) == []

def test_legendre():
    p = 23
    residues = {x * x % p for x in range(1, p)}
    for n in range(1, p):
        assert legendre(n, p) == (1 if n in residues else -1)
    assert legendre(46, 23) == 0
    assert legendre(7, 2) == 1

@pytest.mark.parametrize("p", [3, 5, 13, 17, 41, 97, 257, 65537, 1000000007])
def test_tonelli_shanks(p):
    rng = random.Random(p)
    for _ in range(20):
        n = rng.randrange(1, p)
        r = tonelli_shanks(n, p)
        if sqrt_mod(n, p) is None:
            assert r is None
        else:
            assert r * r % p == n

def test_smoothness_product_reproduces_value():
    base = [2, 3, 5, 7, 11, 13]
    for value in [1, 2, 360, 2 * 3**4 * 13, 7 * 11 * 13, -90]:
        exponents = smoothness(value, base)
        assert exponents is not None
        assert math.prod(p ** e for p, e in zip(base, exponents)) == abs(value)

def test_smoothness_rejects():
    base = [2, 3, 5]
    assert smoothness(14, base) is None
    assert smoothness(0, base) is None

@pytest.mark.parametrize("n", [1, 2, 12, 8051, 2**10 * 3**5, 999983, 1000003 * 97, 600851475143])
def test_factor_trial_matches_sympy(n):
    assert dict(factor_trial(n)) == factorint(n)

def test_factor_trial_bound():
    with pytest.raises(IterationCapExceeded):
        factor_trial(1000003 * 1000033, bound=1000)
