"""Matrix engines over GF(2) and over Z/MZ for composite M."""

from cryptengine.linalg.gf2 import MatrixGF2
from cryptengine.linalg.gfn import MatrixGFn

__all__ = ["MatrixGF2", "MatrixGFn"]
