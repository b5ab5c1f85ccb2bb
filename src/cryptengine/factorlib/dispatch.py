"""Choice of a factorization method by the bit length of n."""

import logging

from cryptengine.errors import NoApplicableMethod
from cryptengine.factorlib.brute_force import BruteForce
from cryptengine.factorlib.dixon import Dixon
from cryptengine.factorlib.number_field_sieve import NumberFieldSieve
from cryptengine.factorlib.pollard_rho import PollardRho
from cryptengine.factorlib.quadratic_sieve import QuadraticSieve

logger = logging.getLogger(__name__)

METHODS = {
    "brute_force": BruteForce,
    "pollard_rho": PollardRho,
    "dixon": Dixon,
    "quadratic_sieve": QuadraticSieve,
    "gnfs": NumberFieldSieve,
}

# (exclusive upper bit length, method name), checked in order
BIT_RANGES = [
    (20, "brute_force"),
    (30, "pollard_rho"),
    (50, "dixon"),
    (70, "quadratic_sieve"),
]


def select_method(n: int) -> str:
    """
    :return: Name of the method for n.
    :raises NoApplicableMethod: for n of 70 bits or more.
    """
    bits = n.bit_length()
    for limit, name in BIT_RANGES:
        if bits < limit:
            return name
    raise NoApplicableMethod(f"no internal factorization method for a {bits}-bit number")


def init_instance(n: int, method: str|None=None, config=None, cancel_token=None, **kwargs):
    """Construct the method instance for n, chosen by size unless `method` names one."""
    if method is None:
        method = select_method(n)
    elif method not in METHODS:
        raise NoApplicableMethod(f"unknown factorization method {method!r}, choose from {list(METHODS)}")
    logger.info("Factoring %d-bit number with %s", n.bit_length(), method)
    return METHODS[method](n, config=config, cancel_token=cancel_token, **kwargs)
