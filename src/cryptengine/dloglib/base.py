"""Common interface of the discrete logarithm methods."""

from abc import ABC, abstractmethod

from cryptengine.cancellation import ensure_token
from cryptengine.config import DEFAULT_CONFIG, EngineConfig


class DiscreteLogMethod(ABC):
    """
    One strategy for finding x with g^x = a (mod n).

    The modulus n is assumed prime unless the method says otherwise.
    """

    name = "abstract"

    def __init__(self, g: int, a: int, n: int, config: EngineConfig|None=None, cancel_token=None):
        self.g = g % n
        self.a = a % n
        self.n = n
        self.config = config if config is not None else DEFAULT_CONFIG
        self.cancel_token = ensure_token(cancel_token)

    @abstractmethod
    def commit(self) -> int:
        """:return: x with pow(g, x, n) == a % n."""

    def __repr__(self):
        return f"{type(self).__name__}(g={self.g}, a={self.a}, n={self.n})"
