# Copyright 2025 Thousand Brains Project
#
# Copyright may exist in Contributors' modifications
# and/or contributions to the work.
#
# Use of this source code is governed by the MIT
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

from .config import FilterBankConfig, KernelConfig, WrinklesConfig, load_config
from .detector import DetectionResult, WrinkleDetector, detect_wrinkles
from .errors import (
    DetectionError,
    ErrorKind,
    InvalidDimensionError,
    InvalidParameterError,
    NullBufferError,
)
from .models.orientation_bank import FilterBankRequest

__all__ = [
    "DetectionError",
    "DetectionResult",
    "ErrorKind",
    "FilterBankConfig",
    "FilterBankRequest",
    "InvalidDimensionError",
    "InvalidParameterError",
    "KernelConfig",
    "NullBufferError",
    "WrinkleDetector",
    "WrinklesConfig",
    "detect_wrinkles",
    "load_config",
]
