# Copyright 2025 Thousand Brains Project
#
# Copyright may exist in Contributors' modifications
# and/or contributions to the work.
#
# Use of this source code is governed by the MIT
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.
"""Wrinkle map detection from ARGB frames.

The pipeline reduces an ARGB image to luminance, runs an orientation bank of
Gabor filters over it, keeps the per-pixel maximum response and packs it back
into an opaque gray ARGB image.

Two entry points are provided. `WrinkleDetector` works on numpy arrays and is
configured once. `detect_wrinkles` takes flat host buffers plus their size
and filter parameters, writes the caller's output buffer in place and never
raises for bad input: problems come back as the `error` of the returned
`DetectionResult`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from omegaconf import DictConfig
from omegaconf.errors import OmegaConfBaseException

from wrinkles.config import WrinklesConfig, as_config, clamp_request
from wrinkles.errors import (
    DetectionError,
    ErrorKind,
    InvalidDimensionError,
    InvalidParameterError,
    NullBufferError,
)
from wrinkles.models.color import argb_to_luminance
from wrinkles.models.filtering import CorrelationBackend
from wrinkles.models.gabor import DEFAULT_HALF_SIZE, KernelBuilder
from wrinkles.models.image_view import ARGB, GRAY, ImageView
from wrinkles.models.orientation_bank import FilterBankRequest, OrientationBank
from wrinkles.models.packing import OPAQUE, apply_segmentation, pack_response
from wrinkles.models.validation import is_integral

logger = logging.getLogger(__name__)


@dataclass
class DetectionResult:
    """Outcome of one detection call: the output, or the reason it was rejected."""

    output: ImageView | None = None
    error: DetectionError | None = None
    luminance: np.ndarray | None = None
    response: np.ndarray | None = None
    angles: np.ndarray | None = None
    kernels: list[np.ndarray] = field(default_factory=list)
    responses: list[np.ndarray] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return None if self.error is None else self.error.kind

    def unwrap(self) -> ImageView:
        """Return the output, re-raising the stored error if the call failed."""
        if self.error is not None:
            raise self.error
        return self.output


def _check_dimensions(height, width) -> None:
    for name, value in (("height", height), ("width", width)):
        if not is_integral(value) or value <= 0:
            raise InvalidDimensionError(f"{name} must be a positive integer, got {value}")


def _as_argb(image: ImageView | np.ndarray) -> ImageView:
    if isinstance(image, ImageView):
        if image.layout != ARGB:
            raise InvalidDimensionError(f"Expected an ARGB image, got {image.layout.name}")
        view = image
    else:
        view = ImageView(np.asarray(image), ARGB)
    if view.dtype != np.uint8:
        raise InvalidParameterError(f"Expected uint8 pixels, got {view.dtype}")
    return view


def _as_mask(mask: ImageView | np.ndarray, shape: tuple[int, int]) -> np.ndarray:
    plane = mask.plane if isinstance(mask, ImageView) else np.asarray(mask)
    if plane.ndim == 3 and plane.shape[2] == 1:
        plane = plane[:, :, 0]
    if plane.shape != shape:
        raise InvalidDimensionError(
            f"Segmentation mask shape {plane.shape} does not match image shape {shape}"
        )
    return plane


class WrinkleDetector:
    """Gabor orientation bank wrinkle detector.

    Example:
        >>> detector = WrinkleDetector()
        >>> request = FilterBankRequest(sigma=5.0, lambd=1.0, psi=90.0, num_angles=4)
        >>> argb_out = detector(argb, request)
    """

    def __init__(
        self,
        half_size: int = DEFAULT_HALF_SIZE,
        backend: CorrelationBackend | str = CorrelationBackend.OPENCV,
        apply_segmentation: bool = False,
        alpha: int = OPAQUE,
        clamp_parameters: bool = False,
        max_angles: int = 180,
        keep_responses: bool = False,
    ):
        """Initialize the detector.

        Args:
            half_size: Kernel half size; kernels are (2 * half_size + 1) square.
            backend: Correlation implementation used by the bank.
            apply_segmentation: Whether to weight the response by the
                segmentation mask (scaled to [0, 1]) before packing. When off,
                masks are size-checked and otherwise ignored.
            alpha: Alpha value written into every output pixel.
            clamp_parameters: Whether to clamp sigma and num_angles into range
                instead of rejecting them.
            max_angles: Upper bound for num_angles when clamping.
            keep_responses: Whether results keep every per-orientation response.

        Raises:
            InvalidParameterError: If half_size, backend or alpha are invalid.
        """
        if not is_integral(alpha) or not 0 <= alpha <= 255:
            raise InvalidParameterError(
                f"alpha must be an integer in [0, 255], got {alpha!r}"
            )
        self._bank = OrientationBank(
            KernelBuilder(half_size), backend=backend, keep_responses=keep_responses
        )
        self._apply_segmentation = apply_segmentation
        self._alpha = int(alpha)
        self._clamp_parameters = clamp_parameters
        self._max_angles = max_angles

    @classmethod
    def from_config(cls, cfg: WrinklesConfig | DictConfig | None = None, **kwargs):
        try:
            cfg = as_config(cfg)
        except (OmegaConfBaseException, ValueError) as e:
            raise InvalidParameterError(f"Invalid detector config: {e}") from e
        return cls(
            half_size=cfg.kernel.half_size,
            backend=cfg.backend,
            apply_segmentation=cfg.apply_segmentation,
            alpha=cfg.alpha,
            clamp_parameters=cfg.clamp_parameters,
            max_angles=cfg.max_angles,
            **kwargs,
        )

    @property
    def bank(self) -> OrientationBank:
        return self._bank

    def prepare_request(self, request: FilterBankRequest) -> FilterBankRequest:
        if self._clamp_parameters:
            try:
                request = clamp_request(
                    request, self._bank.builder.kernel_size, self._max_angles
                )
            except (TypeError, ValueError, OverflowError) as e:
                raise InvalidParameterError(f"Cannot clamp {request}: {e}") from e
        return request.validate()

    def _run(
        self,
        argb: ImageView,
        request: FilterBankRequest,
        mask: np.ndarray | None,
        out: ImageView | None,
    ) -> DetectionResult:
        luminance = argb_to_luminance(argb)
        bank_result = self._bank.call(luminance, request)
        response = bank_result.response
        if self._apply_segmentation:
            response = apply_segmentation(response, mask)
        output = pack_response(response, out, self._alpha)
        return DetectionResult(
            output=output,
            luminance=luminance,
            response=response,
            angles=bank_result.angles,
            kernels=bank_result.kernels,
            responses=bank_result.responses,
        )

    def call(
        self,
        argb: ImageView | np.ndarray,
        request: FilterBankRequest,
        segmentation: ImageView | np.ndarray | None = None,
        out: ImageView | None = None,
    ) -> DetectionResult:
        """Compute the wrinkle map of an ARGB image.

        Args:
            argb: (height, width, 4) uint8 image in alpha, red, green, blue order.
            request: Filter bank parameters.
            segmentation: Optional (height, width) uint8 mask.
            out: Optional pre-sized ARGB view to write into.

        Returns:
            The detection result. Rejected inputs are reported in
            `result.error` rather than raised.
        """
        try:
            if argb is None:
                raise NullBufferError("No input image given")
            argb = _as_argb(argb)
            if out is not None and (out.layout != ARGB or out.shape != argb.shape):
                raise InvalidDimensionError(
                    f"Output must be a {argb.shape} ARGB image, got "
                    f"{out.shape} {out.layout.name}"
                )
            mask = None
            if segmentation is not None:
                mask = _as_mask(segmentation, argb.shape)
            elif self._apply_segmentation:
                raise NullBufferError("Segmentation is enabled but no mask was given")
            request = self.prepare_request(request)
        except DetectionError as e:
            logger.warning(f"Rejected wrinkle detection call ({e.kind.name}): {e}")
            return DetectionResult(error=e)

        return self._run(argb, request, mask, out)

    def __call__(
        self,
        argb: ImageView | np.ndarray,
        request: FilterBankRequest,
        segmentation: ImageView | np.ndarray | None = None,
    ) -> np.ndarray:
        """Compute the wrinkle map, raising on rejected input."""
        return self.call(argb, request, segmentation).unwrap().data


def detect_wrinkles(
    image_data,
    output_data,
    segmentation_data,
    height: int,
    width: int,
    sigma: float,
    lambd: float,
    num_angles: int,
    psi: float,
    *,
    config: WrinklesConfig | DictConfig | None = None,
) -> DetectionResult:
    """Run the detector on flat host buffers.

    Args:
        image_data: ``4 * height * width`` bytes, row-major ARGB.
        output_data: Writable buffer of the same size, overwritten with the
            ARGB wrinkle map.
        segmentation_data: ``height * width`` mask bytes, or None.
        height: Image rows, shared by all buffers.
        width: Image columns, shared by all buffers.
        sigma: Envelope spread relative to the kernel size.
        lambd: Carrier wavelength.
        num_angles: Number of orientations sampled over [0, 180) degrees.
        psi: Carrier phase offset in degrees.
        config: Detector configuration. The filter bank parameters of the
            config are ignored in favor of the explicit arguments.

    Returns:
        The detection result; `result.output` views `output_data`.
    """
    try:
        if image_data is None:
            raise NullBufferError("image_data is missing")
        if output_data is None:
            raise NullBufferError("output_data is missing")
        _check_dimensions(height, width)
        height, width = int(height), int(width)
        image = ImageView.from_buffer(image_data, height, width, ARGB)
        output = ImageView.from_buffer(output_data, height, width, ARGB)
        if not output.data.flags.writeable:
            raise NullBufferError("output_data is read-only")
        mask = None
        if segmentation_data is not None:
            mask = ImageView.from_buffer(segmentation_data, height, width, GRAY)
        detector = WrinkleDetector.from_config(config)
    except DetectionError as e:
        logger.warning(f"Rejected wrinkle detection call ({e.kind.name}): {e}")
        return DetectionResult(error=e)

    request = FilterBankRequest(
        sigma=sigma, lambd=lambd, psi=psi, num_angles=num_angles
    )
    return detector.call(image, request, segmentation=mask, out=output)
