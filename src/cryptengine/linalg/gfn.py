"""
Linear systems modulo a composite number.

The modulus is split into its prime power factors q_i = p_i^e_i. Every entry
is kept as one residue per factor (one numpy object array per factor), the
elimination runs independently modulo each q_i, and values are recombined
with the Chinese Remainder Theorem only when they are read.
"""

import logging

import numpy as np

from cryptengine.errors import SingularSystem
from cryptengine.ntheory import crt, factor_trial, mod_inverse, smoothness

logger = logging.getLogger(__name__)


class MatrixGFn:
    """
    Matrix over Z/MZ for composite M.

    The last column is treated as the right-hand side by solve().
    """

    def __init__(self, rows: int, cols: int, modulus: int, factors: list[tuple[int, int]]|None=None):
        """
        :param rows: Number of rows.
        :param cols: Number of columns, including the right-hand side column.
        :param modulus: M, at least 2.
        :param factors: (prime, exponent) pairs of M, computed by trial division if omitted.
        """
        if modulus < 2:
            raise ValueError(f"modulus must be at least 2, got {modulus}")
        self.rows = rows
        self.cols = cols
        self.modulus = modulus
        if factors is None:
            factors = factor_trial(modulus)
        self.primes = [p for p, _ in factors]
        self.components = [p ** e for p, e in factors]
        # object arrays hold Python ints, so products never overflow
        self._residues = [np.zeros((rows, cols), dtype=object) for _ in self.components]

    def __repr__(self):
        return f"MatrixGFn({self.rows}x{self.cols} mod {self.modulus})"

    #######################
    # Element access      #
    #######################

    def set_element(self, row: int, col: int, value: int):
        for q, residues in zip(self.components, self._residues):
            residues[row, col] = value % q

    def element(self, row: int, col: int) -> int:
        """Entry as an integer in [0, M), recombined with CRT."""
        return crt([int(residues[row, col]) for residues in self._residues], self.components)

    def insert_row(self, values, row: int):
        if len(values) != self.cols:
            raise ValueError(f"row has {len(values)} entries, matrix has {self.cols} columns")
        for q, residues in zip(self.components, self._residues):
            residues[row] = [int(v) % q for v in values]

    def insert_row_over_factor_base(self, row: int, number: int, rhs: int, factor_base) -> bool:
        """
        Store the exponent vector of number over the factor base, followed by rhs.

        :return: False (and leave the row untouched) if number is not smooth over the base.
        """
        exponents = smoothness(number, factor_base)
        if exponents is None:
            return False
        self.insert_row(exponents + [rhs], row)
        return True

    ###########################
    # Gaussian elimination    #
    ###########################

    def _eliminate(self, index: int) -> np.ndarray:
        """
        Reduced row echelon form modulo one prime power component.

        Pivots must be units, i.e. not divisible by the component's prime.

        :raises SingularSystem: if some unknown has no unit pivot, or a leftover row is inconsistent.
        """
        q, p = self.components[index], self.primes[index]
        m = self._residues[index].copy()
        unknowns = self.cols - 1
        if self.rows < unknowns:
            raise SingularSystem(f"{self.rows} equations cannot determine {unknowns} unknowns")

        for col in range(unknowns):
            for pivot_row in range(col, self.rows):
                if m[pivot_row, col] % p != 0:
                    break
            else:
                raise SingularSystem(f"no unit pivot for column {col} modulo {q}")

            if pivot_row != col:
                m[[col, pivot_row]] = m[[pivot_row, col]]
            m[col] = (m[col] * mod_inverse(int(m[col, col]), q)) % q

            for row in range(self.rows):
                if row != col and m[row, col] % q != 0:
                    m[row] = (m[row] - m[row, col] * m[col]) % q

        if self.rows > unknowns and any(v % q != 0 for v in m[unknowns:].flat):
            raise SingularSystem(f"inconsistent equations modulo {q}")
        return m

    def reduced_echelon_form(self) -> "MatrixGFn":
        """Reduced form of the system, one elimination per prime power component."""
        reduced = MatrixGFn.__new__(MatrixGFn)
        reduced.rows, reduced.cols, reduced.modulus = self.rows, self.cols, self.modulus
        reduced.primes, reduced.components = list(self.primes), list(self.components)
        reduced._residues = [self._eliminate(i) for i in range(len(self.components))]
        return reduced

    def solve(self) -> list[int]:
        """
        Solve the system A x = b where b is the last column.

        :return: The unknowns as integers in [0, M).
        :raises SingularSystem: if the system has no unique solution modulo some component.
        """
        reduced = self.reduced_echelon_form()
        solution = [reduced.element(i, self.cols - 1) for i in range(self.cols - 1)]
        logger.debug("Solved %d unknowns modulo %d (components %s)", len(solution), self.modulus, self.components)
        return solution
