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
from dataclasses import dataclass
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from wrinkles.detector import DetectionResult
from wrinkles.models.image_view import Channel, ImageView

logger = logging.getLogger(__name__)


@dataclass
class PlotConfig:
    figure_size: tuple[int, int] = (15, 8)
    dpi: int = 150
    kernel_cmap: str = "RdBu_r"
    response_cmap: str = "gray"


def argb_to_display(image: ImageView) -> np.ndarray:
    """(height, width, 3) RGB array for imshow."""
    return np.stack(
        [image.channel(c) for c in (Channel.RED, Channel.GREEN, Channel.BLUE)],
        axis=-1,
    )


def plot_orientation_bank(
    image: ImageView,
    result: DetectionResult,
    config: PlotConfig | None = None,
    save_path: Path | None = None,
) -> Figure:
    """Show the input, its luminance, every kernel and the packed output.

    Args:
        image: The ARGB input of the detection call.
        result: A successful detection result.
        config: Figure settings.
        save_path: If given, the figure is also saved there.

    Returns:
        The matplotlib figure. It is not shown.
    """
    config = config or PlotConfig()
    output = result.unwrap()
    n_kernels = len(result.kernels)
    cols = max(3, n_kernels)

    fig = plt.figure(figsize=config.figure_size)
    gs = fig.add_gridspec(2, cols)

    top = [
        ("Input", argb_to_display(image), None),
        ("Luminance", result.luminance, config.response_cmap),
        ("Wrinkle map", argb_to_display(output), None),
    ]
    for col, (title, data, cmap) in enumerate(top):
        ax = fig.add_subplot(gs[0, col])
        ax.imshow(data, cmap=cmap)
        ax.set_title(title, fontsize=12, fontweight="bold")
        ax.axis("off")

    for col, (theta, kernel) in enumerate(zip(result.angles, result.kernels)):
        ax = fig.add_subplot(gs[1, col])
        vmax = float(np.abs(kernel).max()) or 1.0
        ax.imshow(kernel, cmap=config.kernel_cmap, vmin=-vmax, vmax=vmax)
        ax.set_title(f"theta={theta:.1f}", fontsize=10)
        ax.axis("off")

    fig.tight_layout(pad=2.0)

    if save_path:
        fig.savefig(save_path, dpi=config.dpi, bbox_inches="tight")
        logger.info(f"Saved orientation bank plot to {save_path}")

    return fig
