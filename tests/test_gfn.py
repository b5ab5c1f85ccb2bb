import random

import pytest

from cryptengine.errors import SingularSystem
from cryptengine.linalg.gfn import MatrixGFn


def build_system(rng, unknowns, modulus, solution, extra_rows=0):
    system = MatrixGFn(unknowns + extra_rows, unknowns + 1, modulus)
    for row in range(unknowns + extra_rows):
        coefficients = [rng.randrange(modulus) for _ in range(unknowns)]
        rhs = sum(c * x for c, x in zip(coefficients, solution)) % modulus
        system.insert_row(coefficients + [rhs], row)
    return system

def test_components_are_prime_powers():
    system = MatrixGFn(1, 2, 2**3 * 3**2 * 5)
    assert sorted(system.components) == [5, 8, 9]

def test_element_reads_back_through_crt():
    system = MatrixGFn(2, 2, 360)
    system.set_element(1, 0, 1234)
    assert system.element(1, 0) == 1234 % 360

@pytest.mark.parametrize("modulus", [1000002, 2**4 * 3**3 * 7, 1018])
def test_solve_recovers_solution(modulus):
    rng = random.Random(modulus)
    solution = [rng.randrange(modulus) for _ in range(6)]
    # a random system is singular modulo small primes now and then
    for _ in range(50):
        system = build_system(rng, 6, modulus, solution, extra_rows=6)
        try:
            assert system.solve() == solution
            return
        except SingularSystem:
            continue
    pytest.fail("no solvable system in 50 attempts")

def test_singular_without_unit_pivot():
    system = MatrixGFn(2, 3, 12)
    system.insert_row([2, 4, 6], 0)
    system.insert_row([4, 2, 0], 1)
    with pytest.raises(SingularSystem):
        system.solve()

def test_too_few_equations():
    with pytest.raises(SingularSystem):
        MatrixGFn(1, 3, 10).solve()

def test_inconsistent_system():
    system = MatrixGFn(2, 2, 7)
    system.insert_row([1, 3], 0)
    system.insert_row([1, 4], 1)
    with pytest.raises(SingularSystem):
        system.solve()

def test_insert_row_over_factor_base():
    system = MatrixGFn(1, 4, 100)
    assert not system.insert_row_over_factor_base(0, 2 * 7, 5, [2, 3, 5])
    assert system.insert_row_over_factor_base(0, 2**3 * 5, 5, [2, 3, 5])
    assert [system.element(0, c) for c in range(4)] == [3, 0, 1, 5]
