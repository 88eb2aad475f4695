import os
import random
import sys

import pytest

# Ensure src and the repo root are on path for test imports
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC = os.path.join(ROOT, 'src')
for path in (SRC, ROOT):
    if path not in sys.path:
        sys.path.insert(0, path)

from match3.world import create_world
from tests.helpers import TEST_WORLD, build_grid


@pytest.fixture(autouse=True)
def fresh_world():
    """Every test starts from an empty esper world with a default 8x8 grid."""
    return create_world(TEST_WORLD)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def layout():
    return build_grid

