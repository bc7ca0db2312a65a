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


class ErrorKind(Enum):
    """Categories of rejected detection calls."""

    INVALID_DIMENSION = 0  # Non-positive size or buffer/size mismatch
    NULL_BUFFER = 1  # A required buffer is missing
    INVALID_PARAMETER = 2  # Bad filter bank or kernel parameter


class DetectionError(ValueError):
    """Base class for errors that reject a detection call before it runs."""

    kind: ErrorKind


class InvalidDimensionError(DetectionError):
    kind = ErrorKind.INVALID_DIMENSION


class NullBufferError(DetectionError):
    kind = ErrorKind.NULL_BUFFER


class InvalidParameterError(DetectionError):
    kind = ErrorKind.INVALID_PARAMETER
