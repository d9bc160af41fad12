from __future__ import annotations

import os
import random

import numpy as np
import pytest

from hierograph.utils import set_debug

DEFAULT_SEED = int(os.getenv("HIEROGRAPH_SEED", "1234"))


def pytest_configure(config) -> None:  # pylint: disable=unused-argument
    random.seed(DEFAULT_SEED)
    np.random.seed(DEFAULT_SEED)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(DEFAULT_SEED)


@pytest.fixture
def debug_mode():
    set_debug(True)
    yield
    set_debug(False)
