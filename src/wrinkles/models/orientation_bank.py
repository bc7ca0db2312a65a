# Copyright 2025 Thousand Brains Project
#
# Copyright may exist in Contributors' modifications
# and/or contributions to the work.
#
# Use of this source code is governed by the MIT
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.
from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from wrinkles.errors import InvalidParameterError

from .filtering import CorrelationBackend, correlate
from .gabor import KernelBuilder
from .validation import is_finite, is_integral

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterBankRequest:
    """Parameters shared by every filter of one bank evaluation."""

    sigma: float
    lambd: float
    psi: float
    num_angles: int

    def validate(self) -> FilterBankRequest:
        """Check the request before any filtering happens.

        Returns:
            The request itself, so calls can be chained.

        Raises:
            InvalidParameterError: If num_angles is not a positive integer, or
                sigma or lambd are not finite positive numbers, or psi is not
                finite.
        """
        if not is_integral(self.num_angles):
            raise InvalidParameterError(
                f"num_angles must be an integer, got {self.num_angles!r}"
            )
        if self.num_angles < 1:
            raise InvalidParameterError(
                f"num_angles must be at least 1, got {self.num_angles}"
            )
        for name in ("sigma", "lambd"):
            value = getattr(self, name)
            if not is_finite(value) or value <= 0:
                raise InvalidParameterError(f"{name} must be positive, got {value}")
        if not is_finite(self.psi):
            raise InvalidParameterError(f"psi must be finite, got {self.psi}")
        return self


def orientation_angles(num_angles: int) -> np.ndarray:
    """Equally spaced orientations in [0, 180) degrees, starting at 0."""
    return np.arange(num_angles, dtype=np.float64) * 180.0 / num_angles


@dataclass
class OrientationBankResult:
    response: np.ndarray | None = None
    angles: np.ndarray | None = None
    kernels: list[np.ndarray] = field(default_factory=list)
    responses: list[np.ndarray] = field(default_factory=list)


class OrientationBank:
    """Gabor filters that differ only in orientation, fused by pointwise max.

    A ridge responds strongly to the filter aligned with it and weakly or
    negatively to the others, so the per-pixel maximum keeps the best aligned
    response without mixing orientations across pixels.
    """

    def __init__(
        self,
        builder: KernelBuilder | None = None,
        backend: CorrelationBackend | str = CorrelationBackend.OPENCV,
        keep_responses: bool = False,
    ):
        """Initialize the bank.

        Args:
            builder: Kernel builder fixing the kernel size. Defaults to a
                builder with the default half size.
            backend: Correlation implementation.
            keep_responses: Whether to keep every per-orientation response in
                the result, e.g. for plotting. Off by default to save memory.
        """
        self._builder = builder or KernelBuilder()
        self._backend = CorrelationBackend.parse(backend)
        self._keep_responses = keep_responses

    @property
    def builder(self) -> KernelBuilder:
        return self._builder

    @property
    def backend(self) -> CorrelationBackend:
        return self._backend

    def kernels(self, request: FilterBankRequest) -> list[np.ndarray]:
        """One kernel per orientation of the request, in angle order."""
        return [
            self._builder(request.sigma, theta, request.lambd, request.psi)
            for theta in orientation_angles(request.num_angles)
        ]

    def call(
        self, luminance: np.ndarray, request: FilterBankRequest
    ) -> OrientationBankResult:
        """Filter `luminance` with every orientation and fuse by maximum.

        The fold starts from the first orientation's response, so a bank with
        a single orientation returns exactly that filter's correlation.

        Args:
            luminance: (height, width) float32 image.
            request: Filter bank parameters.

        Returns:
            Result holding the fused response, angles and kernels.
        """
        request.validate()
        angles = orientation_angles(request.num_angles)
        result = OrientationBankResult(angles=angles)

        fused = None
        for theta in angles:
            kernel = self._builder(request.sigma, theta, request.lambd, request.psi)
            response = correlate(luminance, kernel, self._backend)
            logger.debug(
                f"theta={theta:.2f}: response range "
                f"[{response.min():.3f}, {response.max():.3f}]"
            )
            if fused is None:
                fused = response.copy()
            else:
                np.maximum(fused, response, out=fused)
            result.kernels.append(kernel)
            if self._keep_responses:
                result.responses.append(response)

        result.response = fused
        return result

    def __call__(
        self, luminance: np.ndarray, request: FilterBankRequest
    ) -> np.ndarray:
        return self.call(luminance, request).response
