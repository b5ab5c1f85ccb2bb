"""
Cryptanalysis engine: integer factorization and discrete logarithms.

>>> from cryptengine import factorize, discrete_log
>>> sorted(factorize(8051))
[83, 97]
>>> discrete_log(5, 8, 23)
6
"""

from cryptengine.cancellation import CancellationToken
from cryptengine.config import DEFAULT_CONFIG, EngineConfig
from cryptengine.engine import discrete_log, factorize
from cryptengine.errors import *  # noqa: F401,F403

__version__ = "0.1.0"
