import logging
import random

import matplotlib

matplotlib.use("Agg")

import pytest

from lynn.network import Network


@pytest.fixture(autouse=True)
def setup_logging():
    """Keep engine logging quiet during tests."""
    logging.getLogger("LyNN").setLevel(logging.CRITICAL)

    yield

    logging.getLogger("LyNN").setLevel(logging.NOTSET)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def small_net():
    """A zeroed 2-3-1 network."""
    return Network.build(2, [3], 1)


@pytest.fixture
def random_net(rng):
    """A randomized 3-4-2-2 network."""
    net = Network.build(3, [4, 2], 2)
    net.randomize(rng)
    return net
