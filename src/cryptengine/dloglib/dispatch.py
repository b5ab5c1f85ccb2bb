"""Choice of a discrete logarithm method by the bit length of the modulus."""

import logging

from cryptengine.dloglib.brute_force import BruteForce
from cryptengine.dloglib.bsgs import BabyStepGiantStep
from cryptengine.dloglib.index_calculus import IndexCalculus
from cryptengine.dloglib.pohlig_hellman import SilverPohligHellman
from cryptengine.dloglib.pollard_rho import PollardRhoDL
from cryptengine.errors import NoApplicableMethod

logger = logging.getLogger(__name__)

# index_calculus and pollard_rho_dl are only reachable by name
METHODS = {
    "brute_force": BruteForce,
    "bsgs": BabyStepGiantStep,
    "silver_pohlig_hellman": SilverPohligHellman,
    "pollard_rho_dl": PollardRhoDL,
    "index_calculus": IndexCalculus,
}


def select_method(n: int) -> str:
    bits = n.bit_length()
    if bits < 20:
        return "brute_force"
    if bits < 35:
        return "bsgs"
    return "silver_pohlig_hellman"


def init_instance(g: int, a: int, n: int, method: str|None=None, config=None, cancel_token=None, **kwargs):
    """Construct the method instance, chosen by the size of n unless `method` names one."""
    if method is None:
        method = select_method(n)
    elif method not in METHODS:
        raise NoApplicableMethod(f"unknown discrete logarithm method {method!r}, choose from {list(METHODS)}")
    logger.info("Discrete logarithm modulo a %d-bit prime with %s", n.bit_length(), method)
    return METHODS[method](g, a, n, config=config, cancel_token=cancel_token, **kwargs)
