# Copyright 2025 Thousand Brains Project
#
# Copyright may exist in Contributors' modifications
# and/or contributions to the work.
#
# Use of this source code is governed by the MIT
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.
"""Command line wrinkle map generation.

Usage:
    python -m wrinkles.run io.source=face.png filter_bank.num_angles=8
    python -m wrinkles.run io.source=camera io.output=frame_wrinkles.png
"""
from __future__ import annotations

import logging
import timeit

import hydra
from omegaconf import DictConfig

from wrinkles.config import request_from_config, split_config
from wrinkles.detector import DetectionResult, WrinkleDetector
from wrinkles.image_io import grab_frame, read_argb, read_mask, write_argb

logger = logging.getLogger(__name__)


def run_from_config(cfg: DictConfig) -> DetectionResult:
    detector_cfg, io = split_config(cfg)
    detector = WrinkleDetector.from_config(detector_cfg)
    request = request_from_config(detector_cfg)

    if io.source == "camera":
        image = grab_frame(io.get("camera_index", 0))
    else:
        image = read_argb(io.source)
    mask = read_mask(io.mask) if io.get("mask") else None

    start = timeit.default_timer()
    result = detector.call(image, request, segmentation=mask)
    elapsed = timeit.default_timer() - start
    if not result.ok:
        logger.error(f"Wrinkle detection failed: {result.error}")
        return result

    logger.info(
        f"Filtered {image.shape} with {request.num_angles} orientations "
        f"in {elapsed:.3f}s"
    )
    if io.get("output"):
        write_argb(io.output, result.output)
    return result


@hydra.main(config_path="conf", config_name="wrinkles", version_base=None)
def main(cfg: DictConfig):
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
    )
    result = run_from_config(cfg)
    if not result.ok:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
