"""Integer factorization methods."""

from cryptengine.factorlib.base import FactorizationMethod
from cryptengine.factorlib.brute_force import BruteForce
from cryptengine.factorlib.dispatch import METHODS, init_instance, select_method
from cryptengine.factorlib.dixon import Dixon
from cryptengine.factorlib.number_field_sieve import NumberFieldSieve
from cryptengine.factorlib.pollard_rho import PollardRho
from cryptengine.factorlib.quadratic_sieve import QuadraticSieve

__all__ = [
    "FactorizationMethod", "BruteForce", "PollardRho", "Dixon", "QuadraticSieve",
    "NumberFieldSieve", "METHODS", "init_instance", "select_method",
]
