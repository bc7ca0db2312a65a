# Copyright 2025 Thousand Brains Project
#
# Copyright may exist in Contributors' modifications
# and/or contributions to the work.
#
# Use of this source code is governed by the MIT
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import matplotlib.pyplot as plt

from wrinkles import FilterBankRequest, WrinkleDetector
from wrinkles.image_io import read_argb
from wrinkles.plot import PlotConfig, plot_orientation_bank

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".bmp")


def main():
    parser = argparse.ArgumentParser(description="Plot Gabor wrinkle maps.")
    parser.add_argument("image_dir", type=Path)
    parser.add_argument("--sigma", type=float, default=5.0)
    parser.add_argument("--lambd", type=float, default=1.0)
    parser.add_argument("--psi", type=float, default=90.0)
    parser.add_argument("--num-angles", type=int, default=4)
    parser.add_argument("--show", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
    )

    detector = WrinkleDetector()
    request = FilterBankRequest(
        sigma=args.sigma, lambd=args.lambd, psi=args.psi, num_angles=args.num_angles
    )
    config = PlotConfig()

    for image_path in sorted(args.image_dir.iterdir()):
        if image_path.suffix.lower() not in IMAGE_SUFFIXES:
            continue
        image = read_argb(image_path)
        result = detector.call(image, request)
        if not result.ok:
            logger.error(f"Skipping {image_path}: {result.error}")
            continue
        fig = plot_orientation_bank(
            image,
            result,
            config=config,
            save_path=Path(f"wrinkles_{image_path.stem}.png"),
        )
        if args.show:
            plt.show()
        plt.close(fig)

    logger.info("Wrinkle comparison completed")


if __name__ == "__main__":
    main()
