"""Common interface of the factorization methods."""

from abc import ABC, abstractmethod

from cryptengine.cancellation import ensure_token
from cryptengine.config import DEFAULT_CONFIG, EngineConfig


class FactorizationMethod(ABC):
    """
    One strategy for splitting an integer n.

    An instance is bound to a single n and owns its factor base, matrices and
    relation lists; it is not reused for another problem.
    """

    name = "abstract"

    def __init__(self, n: int, config: EngineConfig|None=None, cancel_token=None):
        self.n = n
        self.config = config if config is not None else DEFAULT_CONFIG
        self.cancel_token = ensure_token(cancel_token)

    @abstractmethod
    def commit(self) -> list[int]:
        """
        Run the method.

        :return: Factors of n (at least two, product equal to n). Not necessarily prime.
        """

    def __repr__(self):
        return f"{type(self).__name__}(n={self.n})"
