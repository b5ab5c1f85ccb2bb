"""
Error kinds raised by the factorization and discrete logarithm methods.

Every error derives from ValueError, so callers that only care about
"no result" can keep catching ValueError.
"""


class CryptanalysisError(ValueError):
    """Base class of every failure reported by the engine."""


class NotSmooth(CryptanalysisError):
    """A value does not factor completely over the factor base."""


class NoKernelVector(CryptanalysisError):
    """The parity matrix has no usable nullspace vector."""


class IterationCapExceeded(CryptanalysisError):
    """A bounded search ran out of iterations."""


class NoApplicableMethod(CryptanalysisError):
    """The problem size is outside of every internal method."""


class Unsupported(CryptanalysisError):
    """The method exists only as an incomplete implementation."""


class InvalidInverse(CryptanalysisError):
    """A required modular inverse does not exist (gcd != 1)."""


class NotFound(CryptanalysisError):
    """The search finished without finding a solution."""


class SingularSystem(CryptanalysisError):
    """Gaussian elimination mod a prime power found no invertible pivot."""


class InvalidProblem(CryptanalysisError):
    """The problem parameters violate a precondition of the method."""


class SearchCancelled(CryptanalysisError):
    """The search was stopped through its cancellation token."""
