"""
Secure Random Sources
======================

The engine never imports a random module directly; every generator draws
through a :class:`SecureRandomSource` handed in by the caller.

* :class:`SystemRandomSource` -- the operating system CSPRNG via
  :mod:`secrets`. ``secrets.randbelow`` uses rejection sampling on fresh
  random bits, so each pick is exactly uniform. If the OS entropy source is
  missing the call fails with :class:`RngUnavailableError`; there is no
  fallback.
* :class:`SeededRandomSource` -- deterministic Mersenne Twister for unit
  tests and reproducible demos. Not suitable for real secrets.

References:
    - Python ``secrets`` module. https://docs.python.org/3/library/secrets.html
    - NIST SP 800-90A Rev. 1 (2015). Recommendation for Random Number
      Generation Using Deterministic Random Bit Generators.
"""

from __future__ import annotations

import random
import secrets
import threading
from typing import Protocol, Sequence, TypeVar, runtime_checkable

from keyforge.core.errors import RngUnavailableError

T = TypeVar("T")


@runtime_checkable
class SecureRandomSource(Protocol):
    """Capability that yields uniform integers.

    Implementations must be safe to call from several threads and must
    never block indefinitely.
    """

    def randbelow(self, n: int) -> int:
        """Return a uniform integer in ``[0, n)``; ``n`` must be positive."""
        ...


def choice(rng: SecureRandomSource, pool: Sequence[T]) -> T:
    """Pick one element of *pool* uniformly using *rng*."""
    if not pool:
        raise ValueError("Cannot choose from an empty pool")
    return pool[rng.randbelow(len(pool))]


def randint(rng: SecureRandomSource, low: int, high: int) -> int:
    """Uniform integer in the closed range ``[low, high]``."""
    if high < low:
        raise ValueError("high must be >= low")
    return low + rng.randbelow(high - low + 1)


class SystemRandomSource:
    """Operating-system CSPRNG (``os.urandom`` through :mod:`secrets`)."""

    def randbelow(self, n: int) -> int:
        if n <= 0:
            raise ValueError("n must be positive")
        try:
            return secrets.randbelow(n)
        except (NotImplementedError, OSError) as exc:
            raise RngUnavailableError(
                f"Operating system randomness source unavailable: {exc}"
            ) from exc

    def __repr__(self) -> str:
        return "SystemRandomSource()"


class SeededRandomSource:
    """Deterministic source for tests. Never use it for real credentials."""

    def __init__(self, seed: int | str | bytes = 0) -> None:
        self._random = random.Random(seed)
        self._lock = threading.Lock()
        self._seed = seed

    def randbelow(self, n: int) -> int:
        if n <= 0:
            raise ValueError("n must be positive")
        with self._lock:
            return self._random.randrange(n)

    def __repr__(self) -> str:
        return f"SeededRandomSource(seed={self._seed!r})"


_default_source: SecureRandomSource = SystemRandomSource()


def default_source() -> SecureRandomSource:
    """Shared production source; stateless, so sharing is safe."""
    return _default_source
