"""Tunable limits and parameters of the solvers."""

import dataclasses
from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """
    Parameters shared by every method of one solve call.

    :param brute_force_bound: Largest trial divisor tried by brute force factorization.
    :param rho_max_iterations: Step cap of a single Pollard's rho walk.
    :param rho_retries: Fresh-seed retries of Pollard's rho after hitting the step cap.
    :param matrix_offset: Extra relations collected beyond the factor base size.
    :param escalation_period: Failed attempts after which the factor base is doubled.
    :param sieve_block_size: Length of one quadratic sieve block.
    :param sieve_tolerance: Multiple of log(largest base prime) accepted as sieve leftover.
    :param bsgs_table_limit: Maximal number of baby steps kept in memory.
    :param sph_brute_force_bits: Sub-congruences for primes below 2**bits are brute forced.
    :param dlog_rho_max_iterations: Step cap of Pollard's rho for discrete logarithms.
    :param dlog_rho_restarts: Restarts of Pollard's rho (DL) after a degenerate collision.
    :param index_calculus_base_size: Number of primes in the index calculus factor base.
    :param index_calculus_extra_relations: Relations collected beyond the factor base size.
    :param index_calculus_attempt_cap: Samples tried for the final log before starting over.
    :param progress: Show tqdm progress bars.
    """
    brute_force_bound: int = 10**9
    rho_max_iterations: int = 1_000_000
    rho_retries: int = 16
    matrix_offset: int = 5
    escalation_period: int = 10
    sieve_block_size: int = 65_536
    sieve_tolerance: float = 2.0
    bsgs_table_limit: int = 4_000_000
    sph_brute_force_bits: int = 22
    dlog_rho_max_iterations: int = 5_000_000
    dlog_rho_restarts: int = 8
    index_calculus_base_size: int = 190
    index_calculus_extra_relations: int = 10
    index_calculus_attempt_cap: int = 1_000_000
    progress: bool = False

    def replace(self, **changes) -> "EngineConfig":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)


DEFAULT_CONFIG = EngineConfig()
