"""Shared test fixtures.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from fakes import FakeTripleStore, literal

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Fake stores
# =============================================================================


@pytest.fixture
def repository_store() -> FakeTripleStore:
    """Store holding two repositories, "a" and "b"."""
    return FakeTripleStore(
        columns=["repositoryID"],
        bindings=[
            {"repositoryID": literal("a")},
            {"repositoryID": literal("b")},
        ],
    )


@pytest.fixture
def empty_store() -> FakeTripleStore:
    """Store whose queries match nothing."""
    return FakeTripleStore(columns=["s", "p", "o"], bindings=[])


@pytest.fixture
def unreachable_store() -> FakeTripleStore:
    """Store that refuses every connection."""
    return FakeTripleStore(unreachable=True)
