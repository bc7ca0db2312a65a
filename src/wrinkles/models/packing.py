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

from wrinkles.errors import InvalidDimensionError

from .image_view import ARGB, GRAY_TO_ARGB, Channel, ImageView

OPAQUE = 255


def saturate_cast_u8(values: np.ndarray) -> np.ndarray:
    """Round to nearest (ties to even) and clamp into [0, 255].

    NaN maps to 0.
    """
    values = np.nan_to_num(values, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def set_alpha_channel(image: ImageView, value: int = OPAQUE) -> ImageView:
    """Overwrite the alpha channel of every pixel in place."""
    image.channel(Channel.ALPHA)[...] = value
    return image


def apply_segmentation(response: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """Weight the response by an 8-bit mask scaled to [0, 1]."""
    if mask.shape != response.shape:
        raise InvalidDimensionError(
            f"Mask shape {mask.shape} does not match response shape {response.shape}"
        )
    return response * (mask.astype(np.float32) / 255.0)


def pack_response(
    response: np.ndarray,
    out: ImageView | None = None,
    alpha: int = OPAQUE,
) -> ImageView:
    """Write a scalar response map into an ARGB image.

    The response is cast to 8 bits and copied into red, green and blue;
    alpha is then set to a constant regardless of the response.

    Args:
        response: (height, width) float response.
        out: Pre-sized ARGB output to write into. Allocated when omitted.
        alpha: Value written to every alpha sample.

    Returns:
        The ARGB output.

    Raises:
        InvalidDimensionError: If `out` does not match the response size.
    """
    if out is None:
        out = ImageView.empty(response.shape[0], response.shape[1], ARGB)
    if out.layout != ARGB or out.shape != response.shape:
        raise InvalidDimensionError(
            f"Output must be a {response.shape} ARGB image, got "
            f"{out.shape} {out.layout.name}"
        )
    gray = ImageView.from_plane(saturate_cast_u8(response))
    GRAY_TO_ARGB.apply(gray, out)
    return set_alpha_channel(out, alpha)
