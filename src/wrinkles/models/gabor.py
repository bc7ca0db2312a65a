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

from wrinkles.errors import InvalidParameterError

from .validation import is_integral

DEFAULT_HALF_SIZE = 10  # 21x21 kernels


def make_gabor_kernel(
    sigma: float,
    theta: float,
    lambd: float,
    psi: float,
    half_size: int = DEFAULT_HALF_SIZE,
) -> np.ndarray:
    """Sample a 2D Gabor function on a (2 * half_size + 1) square grid.

    The grid spans [-1, 1] along both axes, so `sigma` is given relative to the
    kernel footprint rather than in pixels. Unlike cv2.getGaborKernel, no aspect
    ratio is applied and the raw weights are returned without normalization.

    Args:
        sigma: Spread of the Gaussian envelope, in units of the kernel size.
        theta: Orientation of the normal to the stripes, in degrees.
        lambd: Wavelength of the sinusoidal carrier, in grid units.
        psi: Phase offset of the carrier, in degrees.
        half_size: Half of the kernel side length, excluding the center.

    Returns:
        float32 kernel of shape (2 * half_size + 1, 2 * half_size + 1), indexed
        [y + half_size, x + half_size].
    """
    ks = 2 * half_size + 1
    theta = np.deg2rad(theta)
    psi = np.deg2rad(psi)
    delta = 1.0 / half_size
    sigma = sigma / ks

    offsets = np.arange(-half_size, half_size + 1, dtype=np.float64) * delta
    y, x = np.meshgrid(offsets, offsets, indexing="ij")
    x_theta = x * np.cos(theta) + y * np.sin(theta)
    y_theta = -x * np.sin(theta) + y * np.cos(theta)

    envelope = np.exp(-0.5 * (x_theta**2 + y_theta**2) / sigma**2)
    carrier = np.cos(2 * np.pi * x_theta / lambd + psi)
    return (envelope * carrier).astype(np.float32)


class KernelBuilder:
    """Builds Gabor kernels of a fixed size.

    The half size is configuration, not per-call state: every kernel produced
    by one builder has the same shape.
    """

    def __init__(self, half_size: int = DEFAULT_HALF_SIZE):
        if not is_integral(half_size) or half_size < 1:
            raise InvalidParameterError(
                f"Kernel half size must be a positive integer, got {half_size}"
            )
        self._half_size = int(half_size)

    @property
    def half_size(self) -> int:
        return self._half_size

    @property
    def kernel_size(self) -> int:
        return 2 * self._half_size + 1

    @property
    def center(self) -> tuple[int, int]:
        return self._half_size, self._half_size

    def __call__(
        self, sigma: float, theta: float, lambd: float, psi: float
    ) -> np.ndarray:
        return make_gabor_kernel(sigma, theta, lambd, psi, self._half_size)

    def __repr__(self) -> str:
        return f"KernelBuilder(half_size={self._half_size})"
