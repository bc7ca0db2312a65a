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
from pathlib import Path

import cv2
import numpy as np

from wrinkles.models.color import bgr_to_argb
from wrinkles.models.image_view import ARGB_TO_BGR, BGR, ImageView

logger = logging.getLogger(__name__)


def read_argb(path: str | Path) -> ImageView:
    """Read an image file into an opaque ARGB view.

    Raises:
        FileNotFoundError: If OpenCV cannot read the file.
    """
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise FileNotFoundError(f"Could not read image: {path}")
    logger.info(f"Loaded {path}: shape={image.shape}")
    return bgr_to_argb(image)


def read_mask(path: str | Path) -> np.ndarray:
    mask = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
    if mask is None:
        raise FileNotFoundError(f"Could not read mask: {path}")
    return mask


def grab_frame(camera_index: int = 0) -> ImageView:
    """Capture one frame from a camera as an ARGB view.

    Raises:
        RuntimeError: If the camera cannot be opened or returns no frame.
    """
    capture = cv2.VideoCapture(camera_index)
    try:
        if not capture.isOpened():
            raise RuntimeError(f"Could not open camera {camera_index}")
        ok, frame = capture.read()
        if not ok:
            raise RuntimeError(f"Camera {camera_index} returned no frame")
    finally:
        capture.release()
    logger.info(f"Captured frame from camera {camera_index}: shape={frame.shape}")
    return bgr_to_argb(frame)


def argb_to_bgr(image: ImageView) -> np.ndarray:
    bgr = ImageView.empty(image.height, image.width, BGR)
    return ARGB_TO_BGR.apply(image, bgr).data


def write_argb(path: str | Path, image: ImageView) -> Path:
    """Write the color channels of an ARGB view; alpha is dropped."""
    path = Path(path)
    if not cv2.imwrite(str(path), argb_to_bgr(image)):
        raise OSError(f"Could not write image: {path}")
    logger.info(f"Saved {path}")
    return path
