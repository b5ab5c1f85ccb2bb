import math

import pytest
from sympy import isprime

from cryptengine.cancellation import CancellationToken
from cryptengine.errors import IterationCapExceeded, NoApplicableMethod, SearchCancelled, Unsupported
from cryptengine.factorlib import (BruteForce, Dixon, NumberFieldSieve, PollardRho, QuadraticSieve, init_instance,
                                   select_method)
from cryptengine.factorlib.dixon import factor_base_size
from cryptengine.factorlib.number_field_sieve import algebraic_factor_base, base_m, norm
from cryptengine.factorlib.quadratic_sieve import build_factor_base, select_parameters, sieve_roots
from cryptengine.factorlib.squares import Relation, combine_relations, find_dependencies, trivial_split
from cryptengine.ntheory import first_primes, isqrt, poly_eval

# 32, 40 and 50 bit semiprimes
N32 = 65521 * 65537
N40 = 1000003 * 1000033
N50 = 1000003 * 1000000007


def assert_proper_split(n, factors):
    assert math.prod(factors) == n
    assert all(1 < f < n for f in factors)

#################
# Brute force   #
#################

def test_brute_force_8051():
    assert BruteForce(8051).commit() == [83, 97]

def test_brute_force_prime_powers():
    assert BruteForce(2**5 * 3 * 7**2).prime_powers() == [(2, 5), (3, 1), (7, 2)]

def test_brute_force_bound():
    with pytest.raises(IterationCapExceeded):
        BruteForce(N40, upper_bound=100).commit()

#################
# Pollard rho   #
#################

@pytest.mark.parametrize("n", [8051, 2**3 * 3 * 1009 * 1013, 10403, 536813567, 1009 ** 3])
def test_pollard_rho_full_factorization(n):
    factors = PollardRho(n, seed=1).commit()
    assert math.prod(factors) == n
    assert all(isprime(f) for f in factors)
    assert factors == sorted(factors)

def test_pollard_rho_iteration_cap(config):
    capped = config.replace(rho_max_iterations=1)
    with pytest.raises(IterationCapExceeded):
        PollardRho(N50, seed=3, config=capped).commit()

#################
# Squares       #
#################

def test_trivial_split():
    assert trivial_split(2 * 8051) == 2
    assert trivial_split(1009 ** 3) == 1009
    assert trivial_split(8051) is None

def test_combine_relations_small_example():
    # x^2 mod 1649: 41^2 = 32 = 2^5, 43^2 = 200 = 2^3 * 5^2
    n, base = 1649, [2, 3, 5]
    relations = [Relation(41, [5, 0, 0]), Relation(43, [3, 0, 2])]
    nullspace = find_dependencies(relations, len(base))
    factor = combine_relations(n, base, relations, nullspace)
    assert factor in (17, 97)

#################
# Dixon         #
#################

def test_dixon_factor_base_size():
    assert factor_base_size(N32) == 10 + 10**4 // 192

def test_dixon_splits_32_bit_semiprime():
    factors = Dixon(N32, seed=5).commit()
    assert sorted(factors) == [65521, 65537]

def test_dixon_relations_are_smooth_squares():
    dixon = Dixon(N32, seed=11)
    base = first_primes(dixon.base_size)
    for x, exponents in dixon.collect_relations(base):
        assert math.prod(p ** e for p, e in zip(base, exponents)) == x * x % N32
        assert x >= isqrt(N32)

def test_dixon_cancelled_before_sampling():
    token = CancellationToken()
    token.cancel()
    with pytest.raises(SearchCancelled):
        Dixon(N32, cancel_token=token).commit()

#######################
# Quadratic sieve     #
#######################

def test_qs_parameters():
    size, interval = select_parameters(N50)
    assert size == 256 + 16**4 // 1024
    assert interval == 512 + isqrt(N50) // 256

def test_qs_factor_base_is_residues():
    base, divisor = build_factor_base(N40, 100)
    assert divisor is None
    assert base[0] == 2
    for p in base[1:]:
        assert pow(N40, (p - 1) // 2, p) == 1

def test_qs_returns_base_prime_dividing_n():
    assert sorted(QuadraticSieve(8051).commit()) == [83, 97]

def test_qs_sieve_roots():
    s = isqrt(N40)
    base, _ = build_factor_base(N40, 60)
    for p in base:
        roots = sieve_roots(N40, s, p)
        assert roots
        for r in roots:
            assert ((r + s) ** 2 - N40) % p == 0

def test_qs_sieve_roots_of_non_residue():
    s = isqrt(N40)
    p = next(p for p in first_primes(60)[1:] if pow(N40, (p - 1) // 2, p) == p - 1)
    assert sieve_roots(N40, s, p) == []

@pytest.mark.parametrize("n", [N40, N50])
def test_qs_splits_semiprime(n):
    assert_proper_split(n, QuadraticSieve(n).commit())

#######################
# Number field sieve  #
#######################

def test_base_m_polynomial_has_root_m():
    m, coefficients = base_m(N40, 2)
    assert poly_eval(m, coefficients, N40) == 0
    assert sum(c * m ** i for i, c in enumerate(coefficients)) == N40

def test_algebraic_factor_base_ideals_are_roots():
    _, coefficients = base_m(N40, 2)
    ideals = algebraic_factor_base(coefficients, 15)
    assert len(ideals) == 15
    for p, r in ideals:
        assert poly_eval(r, coefficients, p) == 0

def test_norm_of_rational_integer():
    # N(a) = a^d for b = 0
    assert norm([3, 5, 1], 7, 0) == 49

def test_gnfs_sieve_dependencies_are_even():
    nfs = NumberFieldSieve(8051, seed=2)
    result = nfs.sieve(pair_bound=100)
    assert result.relations
    for a, b, rational, _ in result.relations:
        assert math.gcd(a, b) == 1
        assert math.prod(p ** e for p, e in zip(nfs.rational_base, rational[1:])) == abs(a + b * nfs.m)
    if result.nullspace is not None:
        for k in range(result.nullspace.cols):
            selected = result.nullspace.column(k)
            for side in ("rational_exponents", "algebraic_exponents"):
                total = [0] * len(getattr(result.relations[0], side))
                for i, bit in enumerate(selected):
                    if bit:
                        total = [t + e for t, e in zip(total, getattr(result.relations[i], side))]
                assert all(t % 2 == 0 for t in total)

def test_gnfs_commit_is_unsupported():
    with pytest.raises(Unsupported):
        NumberFieldSieve(N40).commit()

#################
# Dispatch      #
#################

@pytest.mark.parametrize("n,name", [
    (8051, "brute_force"),
    (2**19 - 1, "brute_force"),
    (2**19, "pollard_rho"),
    (2**29 - 1, "pollard_rho"),
    (2**29, "dixon"),
    (2**49 - 1, "dixon"),
    (2**49, "quadratic_sieve"),
    (2**69 - 1, "quadratic_sieve"),
])
def test_select_method(n, name):
    assert select_method(n) == name

def test_no_method_from_70_bits():
    with pytest.raises(NoApplicableMethod):
        select_method(2**69 * 3)

def test_init_instance_by_name():
    assert isinstance(init_instance(8051, method="gnfs"), NumberFieldSieve)
    with pytest.raises(NoApplicableMethod):
        init_instance(8051, method="ecm")
