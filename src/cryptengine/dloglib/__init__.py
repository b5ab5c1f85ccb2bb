"""Discrete logarithm methods."""

from cryptengine.dloglib.base import DiscreteLogMethod
from cryptengine.dloglib.brute_force import BruteForce
from cryptengine.dloglib.bsgs import BabyStepGiantStep
from cryptengine.dloglib.dispatch import METHODS, init_instance, select_method
from cryptengine.dloglib.index_calculus import IndexCalculus
from cryptengine.dloglib.pohlig_hellman import SilverPohligHellman
from cryptengine.dloglib.pollard_rho import PollardRhoDL

__all__ = [
    "DiscreteLogMethod", "BruteForce", "BabyStepGiantStep", "SilverPohligHellman",
    "PollardRhoDL", "IndexCalculus", "METHODS", "init_instance", "select_method",
]
