"""
Matrices over GF(2).

Used by the congruence-of-squares methods: rows of the parity matrix are
relations, columns are factor base primes, and the nullspace of the
transposed matrix selects subsets of relations whose product is a square.
"""

import numpy as np
import tqdm

from cryptengine.errors import NoKernelVector


class MatrixGF2:
    """
    Bit matrix backed by a numpy uint8 array. Every entry is 0 or 1.
    """

    def __init__(self, rows: int, cols: int, data=None):
        if data is None:
            self._data = np.zeros((rows, cols), dtype=np.uint8)
        else:
            array = np.asarray(data, dtype=np.int64).reshape(rows, cols)
            self._data = (array % 2).astype(np.uint8)

    @classmethod
    def from_exponents(cls, exponent_rows, cols: int|None=None) -> "MatrixGF2":
        """Parity matrix of a list of exponent vectors (one row per vector)."""
        exponent_rows = list(exponent_rows)
        if cols is None:
            cols = len(exponent_rows[0]) if exponent_rows else 0
        return cls(len(exponent_rows), cols, exponent_rows if exponent_rows else None)

    @classmethod
    def _wrap(cls, array: np.ndarray) -> "MatrixGF2":
        matrix = cls.__new__(cls)
        matrix._data = array
        return matrix

    #######################
    # Element access      #
    #######################

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self._data.shape

    def __getitem__(self, index):
        row, col = index
        return int(self._data[row, col])

    def set_element(self, row: int, col: int, value: int):
        self._data[row, col] = abs(value) % 2

    def insert_row(self, exponents, row: int):
        """Store the parity of an exponent vector in the given row."""
        if len(exponents) != self.cols:
            raise ValueError(f"row has {len(exponents)} entries, matrix has {self.cols} columns")
        self._data[row] = np.asarray(exponents, dtype=np.int64) % 2

    def row(self, index: int) -> np.ndarray:
        return self._data[index].copy()

    def column(self, index: int) -> np.ndarray:
        return self._data[:, index].copy()

    def to_array(self) -> np.ndarray:
        return self._data.copy()

    def __eq__(self, other):
        if not isinstance(other, MatrixGF2):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def __repr__(self):
        return f"MatrixGF2({self.rows}x{self.cols})"

    ###################
    # Row operations  #
    ###################

    def swap_rows(self, first: int, second: int):
        if first != second:
            self._data[[first, second]] = self._data[[second, first]]

    def add_row(self, target: int, source: int):
        """target row += source row (mod 2)."""
        self._data[target] ^= self._data[source]

    ######################
    # Whole-matrix ops   #
    ######################

    def copy(self) -> "MatrixGF2":
        return self._wrap(self._data.copy())

    def transpose(self) -> "MatrixGF2":
        return self._wrap(np.ascontiguousarray(self._data.T))

    def multiply(self, other: "MatrixGF2") -> "MatrixGF2":
        if self.cols != other.rows:
            raise ValueError(f"cannot multiply {self.shape} by {other.shape}")
        product = self._data.astype(np.int64) @ other._data.astype(np.int64)
        return self._wrap((product % 2).astype(np.uint8))

    def right_join(self, other: "MatrixGF2") -> "MatrixGF2":
        """Horizontal concatenation; the shorter matrix is padded with zero rows."""
        joined = np.zeros((max(self.rows, other.rows), self.cols + other.cols), dtype=np.uint8)
        joined[:self.rows, :self.cols] = self._data
        joined[:other.rows, self.cols:] = other._data
        return self._wrap(joined)

    def bottom_join(self, other: "MatrixGF2") -> "MatrixGF2":
        """Vertical concatenation; the narrower matrix is padded with zero columns."""
        joined = np.zeros((self.rows + other.rows, max(self.cols, other.cols)), dtype=np.uint8)
        joined[:self.rows, :self.cols] = self._data
        joined[self.rows:, :other.cols] = other._data
        return self._wrap(joined)

    def without_zero_rows(self) -> "MatrixGF2":
        return self._wrap(self._data[self._data.any(axis=1)].copy())

    def is_zero(self) -> bool:
        return not self._data.any()

    ###########################
    # Gaussian elimination    #
    ###########################

    def reduced_echelon_form(self, progress: bool=False) -> tuple["MatrixGF2", list[int]]:
        """
        Gaussian elimination mod 2 into reduced row echelon form.

        Forward pass: at every diagonal step the remaining row with the shortest
        run of leading zeros becomes the pivot row, and the pivot column is
        cleared below it. Backward pass: each pivot column is cleared above its
        pivot, starting from the last pivot.

        :param progress: Show a tqdm progress bar.
        :return: (RREF matrix, pivot column of each nonzero row). Zero rows are kept at the bottom.
        """
        m = self._data.copy()
        n_rows, n_cols = m.shape
        pivot_cols = []

        for diag in tqdm.tqdm(range(n_rows), desc="RREF            ", disable=not progress):
            remaining = m[diag:]
            nonzero = remaining.any(axis=1)
            if not nonzero.any():
                break
            leading = np.where(nonzero, remaining.argmax(axis=1), n_cols)
            pivot_row = diag + int(leading.argmin())
            col = int(leading.min())

            m[[diag, pivot_row]] = m[[pivot_row, diag]]
            below = np.nonzero(m[diag + 1:, col])[0] + diag + 1
            m[below] ^= m[diag]
            pivot_cols.append(col)

        for row in range(len(pivot_cols) - 1, 0, -1):
            col = pivot_cols[row]
            above = np.nonzero(m[:row, col])[0]
            m[above] ^= m[row]

        return self._wrap(m), pivot_cols

    def nullspace(self, progress: bool=False) -> "MatrixGF2":
        """
        Right nullspace: vectors v with (self * v) mod 2 = 0.

        Each free (non-pivot) column f of the echelon form gives one vector:
        v[f] = 1, every other free column 0, and each pivot column set to the
        echelon coefficient of f in the pivot's row.

        :return: Matrix whose columns span the nullspace.
        :raises NoKernelVector: if every column is a pivot column.
        """
        reduced, pivot_cols = self.reduced_echelon_form(progress=progress)
        pivots = set(pivot_cols)
        free_cols = [j for j in range(self.cols) if j not in pivots]
        if not free_cols:
            raise NoKernelVector(f"{self.rows}x{self.cols} matrix has full column rank")

        basis = np.zeros((self.cols, len(free_cols)), dtype=np.uint8)
        for k, free in enumerate(tqdm.tqdm(free_cols, desc="Basis vectors   ", disable=not progress)):
            basis[free, k] = 1
            for i, pivot in enumerate(pivot_cols):
                if reduced._data[i, free] == 1:
                    basis[pivot, k] = 1
        return self._wrap(basis)

    def kernel_vectors(self, progress: bool=False):
        """Iterate over the nullspace basis vectors as numpy arrays."""
        space = self.nullspace(progress=progress)
        for k in range(space.cols):
            yield space.column(k)
