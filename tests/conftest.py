"""
pytest configuration and fixtures for the point code tools.

Provides reusable fixtures for:
- The built-in schema catalog and a facade over it
- Individual schemas (PC77, ANSI, Japanese)
- The YAML catalog shipped in schemas/
- Hypothesis property-based testing configuration
"""

import os
import sys
from pathlib import Path

import pytest
from hypothesis import settings, Verbosity, Phase

# Add project paths
sys.path.insert(0, str(Path(__file__).parent.parent / "tools"))

from bitfield_schema import default_registry
from point_code_converter import ConversionFacade


CATALOG_PATH = Path(__file__).parent.parent / "schemas" / "point_codes.yaml"


# Default profile: balanced speed and coverage
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
)

# CI profile: more thorough testing
settings.register_profile(
    "ci",
    max_examples=500,
    deadline=None,
    suppress_health_check=[],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)

# Dev profile: fast iteration
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
)

# Debug profile: verbose output
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)

settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))


@pytest.fixture
def registry():
    """The built-in catalog."""
    return default_registry()


@pytest.fixture
def facade(registry):
    return ConversionFacade(registry)


@pytest.fixture
def pc77(registry):
    """The 7-7 (PC77) schema."""
    return registry.lookup('7-7')


@pytest.fixture
def ansi(registry):
    return registry.lookup('ANSI 8-8-8')


@pytest.fixture
def japanese(registry):
    return registry.lookup('Japanese 7-4-5')


@pytest.fixture
def catalog_path():
    """Path to the YAML catalog shipped with the tools."""
    return CATALOG_PATH


# Markers for test categorization
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
