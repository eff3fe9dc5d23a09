"""Shared fixtures for the KeyForge test suite."""

import pytest

from keyforge.core.models import CharacterClasses, GenerationPolicy
from keyforge.core.random_source import SeededRandomSource


@pytest.fixture
def rng():
    """Deterministic source; every test gets a fresh stream."""
    return SeededRandomSource(20240611)


@pytest.fixture
def default_policy():
    return GenerationPolicy()


@pytest.fixture
def digits_policy():
    return GenerationPolicy(
        length=8,
        classes=CharacterClasses(upper=False, lower=False, digits=True, symbols=False),
    )


@pytest.fixture
def no_upper_policy():
    return GenerationPolicy(
        length=16,
        classes=CharacterClasses(upper=False, lower=True, digits=True, symbols=True),
    )
