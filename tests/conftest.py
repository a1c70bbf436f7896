"""Shared pytest setup: Hypothesis profiles and the fuzz marker.

Profiles differ in example count and determinism:
- dev (default): 500 examples, random seeds
- ci: 50 examples, derandomized, failure blobs printed
- verbose: 100 examples with Hypothesis progress output

HYPOTHESIS_PROFILE selects a profile by name. Without it, CI=true selects
"ci". Example: HYPOTHESIS_PROFILE=verbose pytest tests/

Classes marked @pytest.mark.fuzz run thousands of examples and are skipped
unless the run selects them with -m fuzz.
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

_PHASES = [Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink]

_PROFILES = {
    "dev": {"max_examples": 500},
    "ci": {"max_examples": 50, "derandomize": True, "print_blob": True},
    "verbose": {"max_examples": 100, "verbosity": Verbosity.verbose},
}

for _name, _options in _PROFILES.items():
    settings.register_profile(_name, phases=_PHASES, **_options)


def _select_profile() -> str:
    requested = os.environ.get("HYPOTHESIS_PROFILE")
    if requested in _PROFILES:
        return requested
    return "ci" if os.environ.get("CI") == "true" else "dev"


settings.load_profile(_select_profile())


# =============================================================================
# FUZZ MARKER
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Declare the fuzz marker so --strict-markers accepts it."""
    config.addinivalue_line("markers", "fuzz: long-running template fuzzing, opt in with -m fuzz")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip fuzz tests when the marker expression does not name them."""
    if "fuzz" in str(config.getoption("-m", default="")):
        return

    skip = pytest.mark.skip(reason="fuzz test, run with: pytest -m fuzz")
    for item in items:
        if item.get_closest_marker("fuzz") is not None:
            item.add_marker(skip)
