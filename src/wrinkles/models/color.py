# Copyright 2025 Thousand Brains Project
#
# Copyright may exist in Contributors' modifications
# and/or contributions to the work.
#
# Use of this source code is governed by the MIT
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.
from __future__ import annotations

import cv2
import numpy as np

from .image_view import ARGB, ARGB_TO_RGB, BGR, BGR_TO_ARGB, RGB, ImageView


def argb_to_rgb(image: ImageView) -> ImageView:
    rgb = ImageView.empty(image.height, image.width, RGB, dtype=image.dtype)
    return ARGB_TO_RGB.apply(image, rgb)


def bgr_to_argb(image: np.ndarray, alpha: int = 255) -> ImageView:
    """Convert an OpenCV BGR image into an ARGB view with constant alpha."""
    argb = ImageView.empty(image.shape[0], image.shape[1], ARGB, dtype=np.uint8)
    argb.data[:, :, 0] = alpha
    return BGR_TO_ARGB.apply(ImageView(image, BGR), argb)


def rgb_to_gray(image: ImageView) -> np.ndarray:
    return cv2.cvtColor(np.ascontiguousarray(image.data), cv2.COLOR_RGB2GRAY)


def argb_to_luminance(image: ImageView) -> np.ndarray:
    """Reduce an ARGB image to single-channel float32 luminance.

    Alpha is discarded, the RGB planes are combined by `cv2.COLOR_RGB2GRAY`
    (BT.601 weights, fixed point) and rounded to 8 bits, then widened to float32 without rescaling, so values
    stay in [0, 255].

    Args:
        image: 8-bit ARGB image. Not modified.

    Returns:
        (height, width) float32 luminance array.
    """
    return rgb_to_gray(argb_to_rgb(image)).astype(np.float32)
