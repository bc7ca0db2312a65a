# Copyright 2025 Thousand Brains Project
#
# Copyright may exist in Contributors' modifications
# and/or contributions to the work.
#
# Use of this source code is governed by the MIT
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.
from __future__ import annotations

import numpy as np
import pytest

from tests.unit.image_helpers import make_argb


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def stripes_argb() -> np.ndarray:
    """Vertical dark lines on a bright background."""
    rgb = np.full((32, 32, 3), 200, dtype=np.uint8)
    rgb[:, 8::8] = 40
    return make_argb(rgb)
