# Copyright 2025 Thousand Brains Project
#
# Copyright may exist in Contributors' modifications
# and/or contributions to the work.
#
# Use of this source code is governed by the MIT
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.
from __future__ import annotations

from enum import Enum

import cv2
import numpy as np
from numba import njit

from wrinkles.errors import InvalidParameterError


class CorrelationBackend(Enum):
    """Implementations of same-size 2D correlation with replicated borders."""

    OPENCV = "opencv"  # cv2.filter2D, DFT-based for large kernels
    NUMBA = "numba"  # Direct summation, slow but exact up to float32 rounding

    @classmethod
    def parse(cls, value: CorrelationBackend | str) -> CorrelationBackend:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidParameterError(
                f"Unsupported correlation backend: {value!r}"
            ) from None


@njit
def correlate_replicate(image: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Correlate a 2D image with an odd-sized kernel using border replication.

    Samples that fall outside the image are read from the nearest edge pixel.
    The kernel is not flipped.

    Args:
        image: (height, width) float32 image.
        kernel: (kh, kw) float32 kernel with odd sides.

    Returns:
        (height, width) float32 response.
    """
    height, width = image.shape
    kh, kw = kernel.shape
    ay = kh // 2
    ax = kw // 2
    out = np.empty((height, width), dtype=np.float32)
    for r in range(height):
        for c in range(width):
            acc = 0.0
            for i in range(kh):
                rr = min(max(r + i - ay, 0), height - 1)
                for j in range(kw):
                    cc = min(max(c + j - ax, 0), width - 1)
                    acc += image[rr, cc] * kernel[i, j]
            out[r, c] = acc
    return out


def correlate(
    image: np.ndarray,
    kernel: np.ndarray,
    backend: CorrelationBackend | str = CorrelationBackend.OPENCV,
) -> np.ndarray:
    """Same-size correlation of `image` with `kernel`, replicating borders.

    Args:
        image: (height, width) float32 image.
        kernel: Odd-sized float32 kernel, anchored at its center.
        backend: Which implementation to use.

    Returns:
        (height, width) float32 response.
    """
    backend = CorrelationBackend.parse(backend)
    image = np.ascontiguousarray(image, dtype=np.float32)
    kernel = np.ascontiguousarray(kernel, dtype=np.float32)
    if backend == CorrelationBackend.OPENCV:
        return cv2.filter2D(
            image, cv2.CV_32F, kernel, borderType=cv2.BORDER_REPLICATE
        )
    return correlate_replicate(image, kernel)
