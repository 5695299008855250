"""
Shared fixtures.

The environment is pinned before any project module is imported, so the
module-level `config.settings` singleton is built from test values.
"""

import os

os.environ.setdefault("ALGOVIZ_ENV", "test")
os.environ.setdefault("ALGOVIZ_LOG_LEVEL", "WARNING")

import pytest

from config import load_settings
from structures import Graph


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test sees settings rebuilt from the current environment."""
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


@pytest.fixture
def sample_graph() -> Graph:
    return Graph.sample()


@pytest.fixture
def square_graph() -> Graph:
    """A-B 1, A-C 4, A-D 3, B-C 2, B-D 5, C-D 6."""
    return Graph.from_edge_list(
        [("A", "B", 1), ("A", "C", 4), ("A", "D", 3), ("B", "C", 2), ("B", "D", 5), ("C", "D", 6)],
        nodes=["A", "B", "C", "D"],
    )


@pytest.fixture
def split_graph() -> Graph:
    """Two components: A-B-C and D-E."""
    return Graph.from_edge_list(
        [("A", "B", 1), ("B", "C", 2), ("D", "E", 1)],
        nodes=["A", "B", "C", "D", "E"],
    )
