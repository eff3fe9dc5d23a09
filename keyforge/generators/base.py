"""
Generator Base Class
=====================

Every strategy implements :meth:`BaseGenerator.generate`, mapping a policy
(and, for symbol-based strategies, its :class:`Alphabet`) to a
:class:`Candidate`. Generators are stateless; all randomness comes from the
:class:`SecureRandomSource` passed to each call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Optional

from keyforge.core.models import Alphabet, Candidate, GenerationPolicy, Strategy
from keyforge.core.random_source import SecureRandomSource


class BaseGenerator(ABC):
    """Common interface of all generation strategies."""

    strategy: ClassVar[Strategy]

    @abstractmethod
    def generate(
        self,
        policy: GenerationPolicy,
        alphabet: Optional[Alphabet],
        rng: SecureRandomSource,
    ) -> Candidate:
        """Produce one candidate.

        Args:
            policy: Generation policy.
            alphabet: Built alphabet; required by symbol-based strategies,
                ``None`` allowed for structured ones when the policy selects
                no classes.
            rng: Secure random source.
        """

    def symbol_space(self, policy: GenerationPolicy) -> str:
        """Every symbol this strategy can emit under *policy*.

        Used as the nominal alphabet when the policy itself yields no
        alphabet.
        """
        return ""

    def nominal_alphabet_size(
        self, policy: GenerationPolicy, alphabet: Optional[Alphabet]
    ) -> int:
        """Alphabet size a candidate is rated against (nominal convention)."""
        if alphabet is not None:
            return alphabet.size
        return len(set(self.symbol_space(policy)))

    @staticmethod
    def _require_alphabet(alphabet: Optional[Alphabet]) -> Alphabet:
        if alphabet is None:
            raise ValueError("This strategy requires a built alphabet")
        return alphabet
