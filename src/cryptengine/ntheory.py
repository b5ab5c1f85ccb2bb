"""
Number-theory primitives shared by the factorization and discrete logarithm methods.

All functions work on plain Python integers (arbitrary precision).
"""

import math
import random
from decimal import Decimal, ROUND_CEILING, localcontext

from sympy import isprime

from cryptengine.errors import InvalidInverse, IterationCapExceeded

# Guard digits for the Decimal Newton iteration of isqrt
_SQRT_GUARD_DIGITS = 12

_SMALL_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)

_random = random.SystemRandom()

##########################
# Roots of big integers  #
##########################

def isqrt(n: int) -> int:
    """
    Square root of n rounded up, i.e. the least r with r*r >= n.

    Newton's method runs on a high precision Decimal approximation of n,
    the result is rounded up and then corrected with exact integer arithmetic.

    :param n: Non-negative integer.
    :return: r such that r^2 >= n and (r-1)^2 < n.
    """
    if n < 0:
        raise ValueError("square root of a negative number")
    if n < 2:
        return n

    with localcontext() as ctx:
        ctx.prec = len(str(n)) + _SQRT_GUARD_DIGITS
        target = Decimal(n)
        precision = Decimal(10) ** -4
        # 2^ceil(bits/2) is above the root, so the iteration decreases monotonically
        root = Decimal(1 << ((n.bit_length() + 1) // 2))
        while True:
            following = (root + target / root) / 2
            if abs(root - following) <= precision:
                root = following
                break
            root = following
        result = int(root.to_integral_value(rounding=ROUND_CEILING))

    while result * result < n:
        result += 1
    while result > 0 and (result - 1) * (result - 1) >= n:
        result -= 1
    return result

def kroot(n: int, k: int) -> int:
    """
    Integer k-th root of n rounded down, found by bisection on [0, n].

    :param n: Non-negative integer.
    :param k: Degree of the root (k >= 1).
    :return: The largest r with r^k <= n.
    """
    if n < 0 or k < 1:
        raise ValueError("kroot needs n >= 0 and k >= 1")
    low, high = 0, n
    while high - low > 1:
        pivot = (low + high) // 2
        if pivot ** k <= n:
            low = pivot
        else:
            high = pivot
    return high if high ** k <= n else low

def perfect_power(n: int) -> tuple[int, int]|None:
    """
    Detect n = r^k with k >= 2.

    :return: (r, k) with the smallest such k, or None if n is not a perfect power.
    """
    for k in range(2, n.bit_length() + 1):
        r = kroot(n, k)
        if r > 1 and r ** k == n:
            return r, k
    return None

#######################
# Modular arithmetic  #
#######################

def mod_inverse(a: int, m: int) -> int:
    """
    Inverse of a modulo m.

    :raises InvalidInverse: if gcd(a, m) != 1.
    """
    try:
        return pow(a, -1, m)
    except ValueError:
        raise InvalidInverse(f"{a} has no inverse modulo {m} (gcd = {math.gcd(a, m)})") from None

def crt(residues: list[int], moduli: list[int]) -> int:
    """
    Chinese Remainder Theorem for pairwise coprime moduli.

    :param residues: r_i values.
    :param moduli: m_i values, pairwise coprime.
    :return: The unique x in [0, prod(m_i)) with x = r_i (mod m_i) for every i.
    """
    modulus = math.prod(moduli)
    solution = 0
    for residue, m in zip(residues, moduli):
        partial = modulus // m
        solution += residue * partial * mod_inverse(partial % m, m)
    return solution % modulus

def poly_eval(x: int, coefficients, n: int) -> int:
    """
    Value of f(x) mod n for f given by coefficients a_0, a_1, ..., a_d (lowest degree first).
    """
    value = 0
    for coefficient in reversed(coefficients):
        value = (value * x + coefficient) % n
    return value

#################
# Primality     #
#################

def is_probable_prime(n: int, certainty: int=40) -> bool:
    """
    Miller-Rabin probable prime test.

    Used instead of sympy.isprime where the caller picks the number of rounds.

    :param n: Integer to test.
    :param certainty: Number of random bases; a composite passes with probability at most 4^-certainty.
    """
    if n < 2:
        return False
    for p in _SMALL_PRIMES:
        if n % p == 0:
            return n == p

    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1

    for _ in range(certainty):
        witness = _random.randrange(2, n - 1)
        x = pow(witness, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(s - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True

def first_primes(count: int) -> list[int]:
    """The first `count` primes, in increasing order."""
    primes = []
    candidate = 2
    while len(primes) < count:
        if isprime(candidate):
            primes.append(candidate)
        candidate += 1
    return primes

############################
# Quadratic residuosity    #
############################

def legendre(n: int, p: int) -> int:
    """
    Legendre symbol (n/p) via Euler's criterion n^((p-1)/2) mod p.

    For p = 2 every odd n counts as a residue.

    :return: 1, 0 or -1.
    """
    if n % p == 0:
        return 0
    if p == 2:
        return 1
    return 1 if pow(n, (p - 1) // 2, p) == 1 else -1

def tonelli_shanks(n: int, p: int) -> int|None:
    """
    Square root of n modulo an odd prime p.

    :return: r with r^2 = n (mod p), or None if n is not a quadratic residue mod p.
    """
    n %= p
    if p == 2:
        return n
    if legendre(n, p) != 1:
        return None

    # p - 1 = q * 2^s with q odd
    q, s = p - 1, 0
    while q % 2 == 0:
        q //= 2
        s += 1
    if s == 1:
        return pow(n, (p + 1) // 4, p)

    z = 2
    while legendre(z, p) != -1:
        z += 1

    m = s
    c = pow(z, q, p)
    t = pow(n, q, p)
    r = pow(n, (q + 1) // 2, p)
    while t != 1:
        # least i with t^(2^i) = 1
        i, t_pow = 0, t
        while t_pow != 1:
            t_pow = t_pow * t_pow % p
            i += 1
        b = pow(c, 1 << (m - i - 1), p)
        m = i
        c = b * b % p
        t = t * c % p
        r = r * b % p
    return r

#########################################
# Factorization over a fixed base       #
#########################################

def smoothness(value: int, factor_base) -> list[int]|None:
    """
    Exponent vector of value over the factor base.

    For every prime in the base the maximal power dividing the running
    remainder is divided out and its exponent recorded.

    :param value: Integer to factor; the sign is ignored and 0 is never smooth.
    :param factor_base: Sequence of distinct primes.
    :return: List of exponents (one per base prime), or None if value is not smooth.
    """
    if value == 0:
        return None
    remainder = abs(value)
    exponents = [0] * len(factor_base)
    for i, p in enumerate(factor_base):
        if remainder == 1:
            break
        while remainder % p == 0:
            remainder //= p
            exponents[i] += 1
    return exponents if remainder == 1 else None

def factor_trial(n: int, bound: int|None=None, cancel_token=None) -> list[tuple[int, int]]:
    """
    Prime power factorization of n by trial division.

    Candidates run from 2 upward (2, then odd numbers) until the square of the
    candidate exceeds the remaining cofactor; the search stops early once the
    cofactor is a probable prime.

    :param n: Integer to factor (n >= 1).
    :param bound: Largest candidate divisor to try, None for no limit.
    :param cancel_token: Optional CancellationToken checked once per candidate.
    :return: List of (prime, exponent) pairs in order of discovery.
    :raises IterationCapExceeded: if the bound is reached before n is fully factored.
    """
    factors = []
    remainder = n
    if remainder > 1 and is_probable_prime(remainder):
        return [(remainder, 1)]

    candidate = 2
    while remainder > 1:
        if cancel_token is not None:
            cancel_token.check()
        if candidate * candidate > remainder:
            factors.append((remainder, 1))
            break
        if bound is not None and candidate > bound:
            raise IterationCapExceeded(f"trial division of {n} reached the bound {bound}")
        if remainder % candidate == 0:
            exponent = 0
            while remainder % candidate == 0:
                remainder //= candidate
                exponent += 1
            factors.append((candidate, exponent))
            if remainder > 1 and is_probable_prime(remainder):
                factors.append((remainder, 1))
                break
        candidate += 1 if candidate == 2 else 2
    return factors
