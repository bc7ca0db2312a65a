# Copyright 2025 Thousand Brains Project
#
# Copyright may exist in Contributors' modifications
# and/or contributions to the work.
#
# Use of this source code is governed by the MIT
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

from .color import argb_to_luminance
from .filtering import CorrelationBackend, correlate
from .gabor import DEFAULT_HALF_SIZE, KernelBuilder, make_gabor_kernel
from .image_view import ARGB, GRAY, RGB, Channel, ChannelMapping, ImageView
from .orientation_bank import (
    FilterBankRequest,
    OrientationBank,
    OrientationBankResult,
    orientation_angles,
)
from .packing import apply_segmentation, pack_response, saturate_cast_u8

__all__ = [
    "ARGB",
    "DEFAULT_HALF_SIZE",
    "GRAY",
    "RGB",
    "Channel",
    "ChannelMapping",
    "CorrelationBackend",
    "FilterBankRequest",
    "ImageView",
    "KernelBuilder",
    "OrientationBank",
    "OrientationBankResult",
    "apply_segmentation",
    "argb_to_luminance",
    "correlate",
    "make_gabor_kernel",
    "orientation_angles",
    "pack_response",
    "saturate_cast_u8",
]
