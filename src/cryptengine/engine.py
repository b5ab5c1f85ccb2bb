"""
Public entry points: factorize() and discrete_log().

Both pick a method by problem size (or by name), run it, and check the
answer before returning it.
"""

import logging
import random
from collections import Counter

from cryptengine import dloglib, factorlib
from cryptengine.cancellation import ensure_token
from cryptengine.config import DEFAULT_CONFIG
from cryptengine.errors import IterationCapExceeded, NotFound
from cryptengine.factorlib.pollard_rho import PollardRho
from cryptengine.ntheory import is_probable_prime
from cryptengine.problems import DiscreteLogProblem, FactorizationProblem, FactorizationResult

logger = logging.getLogger(__name__)

_seeds = random.SystemRandom()


def _split(n: int, factors: list[int]) -> FactorizationResult:
    """Reduce a method's factor list to two factors of n."""
    if len(factors) == 2 and factors[0] * factors[1] == n:
        return FactorizationResult(*factors)
    # full prime factorization: split off the whole power of the smallest prime
    counts = Counter(factors)
    p = min(counts)
    power = p ** counts[p]
    if power == n:
        return FactorizationResult(p, n // p)
    return FactorizationResult(power, n // power)


def _run_factorization(n: int, method: str|None, config, cancel_token) -> list[int]:
    instance = factorlib.init_instance(n, method=method, config=config, cancel_token=cancel_token)
    if not isinstance(instance, PollardRho):
        return instance.commit()

    for retry in range(config.rho_retries + 1):
        try:
            return instance.commit()
        except IterationCapExceeded as e:
            if retry == config.rho_retries:
                raise
            logger.info("Pollard rho failed (%s), retrying with a fresh seed", e)
            instance = PollardRho(n, seed=_seeds.getrandbits(64), config=config, cancel_token=cancel_token)


def factorize(n: int, cancel_token=None, config=None, method: str|None=None) -> tuple[int, int]:
    """
    Split n into two factors greater than one.

    :param n: Composite integer to factor.
    :param cancel_token: Optional CancellationToken, checked in every search loop.
    :param config: EngineConfig, DEFAULT_CONFIG if omitted.
    :param method: Force a method by name instead of choosing by bit length.
    :return: (f1, f2) with f1 * f2 == n. The factors are not necessarily prime.
    :raises NoApplicableMethod: if n has 70 bits or more and no method was forced.
    :raises NotFound: if n is prime.
    :raises Unsupported: if the number field sieve is forced.
    :raises SearchCancelled: if the token is cancelled during the search.
    """
    problem = FactorizationProblem(n)
    config = config if config is not None else DEFAULT_CONFIG
    cancel_token = ensure_token(cancel_token)
    cancel_token.check()

    if is_probable_prime(problem.n):
        raise NotFound(f"{problem.n} is prime")

    factors = _run_factorization(problem.n, method, config, cancel_token)
    result = _split(problem.n, factors)
    if not result.verify(problem.n):
        raise NotFound(f"method returned {factors}, which does not split {problem.n}")
    logger.info("%d = %d * %d", problem.n, result.f1, result.f2)
    return tuple(result)


def discrete_log(g: int, a: int, n: int, cancel_token=None, config=None, method: str|None=None) -> int:
    """
    Find x with g^x = a (mod n) for prime n.

    :param cancel_token: Optional CancellationToken, checked in every search loop.
    :param config: EngineConfig, DEFAULT_CONFIG if omitted.
    :param method: Force a method by name instead of choosing by bit length.
    :return: x in [0, n).
    :raises NotFound: if no solution is found.
    :raises InvalidInverse: if a needed modular inverse does not exist.
    :raises SearchCancelled: if the token is cancelled during the search.
    """
    problem = DiscreteLogProblem(g, a, n)
    config = config if config is not None else DEFAULT_CONFIG
    cancel_token = ensure_token(cancel_token)
    cancel_token.check()

    target = problem.a % problem.n
    if target == 1 % problem.n:
        return 0

    instance = dloglib.init_instance(problem.g, problem.a, problem.n, method=method, config=config,
                                     cancel_token=cancel_token)
    x = instance.commit()
    # sampled baby-step tables may hit a representative above the group order
    if x >= problem.n - 1 and pow(problem.g, x % (problem.n - 1), problem.n) == target:
        x %= problem.n - 1
    if pow(problem.g, x, problem.n) != target:
        raise NotFound(f"{instance.name} returned {x}, which does not solve {problem.g}^x = {target} (mod {problem.n})")
    logger.info("log_%d(%d) mod %d = %d", problem.g, target, problem.n, x)
    return x
