import random

import pytest
from sympy import primitive_root

from cryptengine.cancellation import CancellationToken
from cryptengine.dloglib import (BabyStepGiantStep, BruteForce, IndexCalculus, PollardRhoDL, SilverPohligHellman,
                                 init_instance, select_method)
from cryptengine.dloglib.pohlig_hellman import multiplicative_order
from cryptengine.errors import (InvalidProblem, IterationCapExceeded, NoApplicableMethod, NotFound,
                                SearchCancelled)
from cryptengine.ntheory import factor_trial


def random_instance(p, seed):
    """(g, x, g^x mod p) with g a primitive root and 0 < x < p - 1."""
    g = primitive_root(p)
    x = random.Random(seed).randrange(1, p - 1)
    return g, x, pow(g, x, p)

#################
# Brute force   #
#################

def test_brute_force():
    g, x, a = random_instance(1019, 1)
    assert BruteForce(g, a, 1019).commit() == x

def test_brute_force_not_found():
    # 4 only generates the quadratic residues modulo 23
    with pytest.raises(NotFound):
        BruteForce(4, 5, 23).commit()

######################
# Baby-step giant-step
######################

def test_bsgs_small_scenario():
    assert BabyStepGiantStep(5, 8, 23).commit() == 6

@pytest.mark.parametrize("p", [1019, 65537, 1000003])
def test_bsgs(p):
    g, x, a = random_instance(p, p)
    assert BabyStepGiantStep(g, a, p).commit() == x

def test_bsgs_sampled_table_retries_until_hit():
    g, _, a = random_instance(1019, 5)
    x = BabyStepGiantStep(g, a, 1019, table_limit=10, seed=3).commit()
    assert pow(g, x, 1019) == a

def test_bsgs_not_found():
    with pytest.raises(NotFound):
        BabyStepGiantStep(4, 5, 23).commit()

def test_bsgs_cancelled():
    token = CancellationToken()
    token.cancel()
    with pytest.raises(SearchCancelled):
        BabyStepGiantStep(5, 8, 23, cancel_token=token).commit()

class CountdownToken(CancellationToken):
    """Cancels itself on the given check."""

    def __init__(self, cancel_at: int):
        super().__init__()
        self.cancel_at = cancel_at
        self.checks = 0

    def check(self):
        self.checks += 1
        if self.checks == self.cancel_at:
            self.cancel()
        super().check()

def test_bsgs_cancelled_while_building_table():
    n = 1000003
    g = primitive_root(n)
    token = CountdownToken(100)
    with pytest.raises(SearchCancelled):
        BabyStepGiantStep(g, pow(g, 123456, n), n, cancel_token=token).commit()
    assert token.checks == 100

################################
# Silver-Pohlig-Hellman        #
################################

@pytest.mark.parametrize("p", [23, 1019, 65537, 1000003, 1000000007])
def test_sph(p):
    g, x, a = random_instance(p, p + 1)
    assert SilverPohligHellman(g, a, p).commit() == x

def test_sph_subgroup_returns_least_solution():
    # 4 has order 11 modulo 23
    assert SilverPohligHellman(4, pow(4, 7, 23), 23).commit() == 7
    assert SilverPohligHellman(4, pow(4, 18, 23), 23).commit() == 7

def test_sph_large_subgroup_uses_bsgs(config):
    g, x, a = random_instance(1000003, 9)
    assert SilverPohligHellman(g, a, 1000003, config=config.replace(sph_brute_force_bits=2)).commit() == x

def test_sph_digit_search_cancelled():
    n = 1000003
    g = primitive_root(n)
    token = CountdownToken(100)
    sph = SilverPohligHellman(g, 1, n, cancel_token=token)
    with pytest.raises(SearchCancelled):
        sph.solve_digit(g, pow(g, 5000, n), n - 1)
    assert token.checks == 100

def test_sph_rejects_composite_modulus():
    with pytest.raises(InvalidProblem):
        SilverPohligHellman(2, 4, 8051).commit()

def test_sph_not_in_subgroup():
    with pytest.raises(NotFound):
        SilverPohligHellman(4, 5, 23).commit()

def test_multiplicative_order():
    assert multiplicative_order(4, 23, factor_trial(22)) == 11
    assert multiplicative_order(5, 23, factor_trial(22)) == 22

###############################
# Pollard rho (discrete log)  #
###############################

@pytest.mark.parametrize("p,seed", [(1019, 1), (65537, 2), (1000003, 3)])
def test_pollard_rho_dl(p, seed):
    g, x, a = random_instance(p, seed)
    assert PollardRhoDL(g, a, p, seed=seed).commit() == x

def test_pollard_rho_dl_trivial_target():
    assert PollardRhoDL(5, 1, 23).commit() == 0

def test_pollard_rho_dl_iteration_cap(config):
    g, _, a = random_instance(1000003, 4)
    with pytest.raises(IterationCapExceeded):
        PollardRhoDL(g, a, 1000003, seed=1, config=config.replace(dlog_rho_max_iterations=1)).commit()

#####################
# Index calculus    #
#####################

def test_index_calculus(config):
    p = 1000003
    g, x, a = random_instance(p, 12)
    solver = IndexCalculus(g, a, p, factor_base_size=10, seed=4,
                           config=config.replace(index_calculus_extra_relations=30))
    assert solver.factor_base == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
    assert solver.commit() == x

def test_index_calculus_base_logarithms(config):
    p = 1019
    g = primitive_root(p)
    solver = IndexCalculus(g, 1, p, factor_base_size=6, seed=8,
                           config=config.replace(index_calculus_extra_relations=20))
    for prime, log in zip(solver.factor_base, solver.base_logarithms()):
        assert pow(g, log, p) == prime

#################
# Dispatch      #
#################

@pytest.mark.parametrize("n,name", [
    (1019, "brute_force"),
    (2**19 - 1, "brute_force"),
    (2**19 + 21, "bsgs"),
    (2**34 - 41, "bsgs"),
    (2**34 + 25, "silver_pohlig_hellman"),
])
def test_select_method(n, name):
    assert select_method(n) == name

def test_init_instance_by_name():
    assert isinstance(init_instance(5, 8, 23, method="index_calculus"), IndexCalculus)
    assert isinstance(init_instance(5, 8, 23, method="pollard_rho_dl"), PollardRhoDL)
    with pytest.raises(NoApplicableMethod):
        init_instance(5, 8, 23, method="nfs")
