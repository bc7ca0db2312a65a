# Copyright 2025 Thousand Brains Project
#
# Copyright may exist in Contributors' modifications
# and/or contributions to the work.
#
# Use of this source code is governed by the MIT
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.
from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Sequence

from omegaconf import DictConfig, OmegaConf

from wrinkles.models.gabor import DEFAULT_HALF_SIZE
from wrinkles.models.orientation_bank import FilterBankRequest


@dataclass
class FilterBankConfig:
    sigma: float = 5.0
    lambd: float = 1.0
    psi: float = 90.0  # degrees
    num_angles: int = 4


@dataclass
class KernelConfig:
    half_size: int = DEFAULT_HALF_SIZE


@dataclass
class WrinklesConfig:
    """Top-level detector configuration."""

    filter_bank: FilterBankConfig = field(default_factory=FilterBankConfig)
    kernel: KernelConfig = field(default_factory=KernelConfig)
    backend: str = "opencv"
    apply_segmentation: bool = False
    alpha: int = 255
    # Clamp out-of-range sigma and num_angles instead of rejecting the call.
    clamp_parameters: bool = False
    max_angles: int = 180


def load_config(
    path: str | Path | None = None,
    overrides: Sequence[str] = (),
) -> DictConfig:
    """Load a typed detector config.

    Args:
        path: Optional YAML file merged over the defaults.
        overrides: Dotlist overrides such as ``"filter_bank.num_angles=8"``,
            applied last.

    Returns:
        A DictConfig backed by `WrinklesConfig`, so assignments are type checked.
    """
    cfg = OmegaConf.structured(WrinklesConfig)
    if path is not None:
        cfg = OmegaConf.merge(cfg, OmegaConf.load(path))
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(list(overrides)))
    return cfg


def split_config(cfg: DictConfig) -> tuple[DictConfig, DictConfig]:
    """Separate the detector settings from the input/output settings."""
    container = OmegaConf.to_container(cfg, resolve=True)
    io = container.pop("io", {})
    return OmegaConf.create(container), OmegaConf.create(io)


def as_config(cfg: WrinklesConfig | DictConfig | None) -> WrinklesConfig:
    """Convert any accepted config form into a plain `WrinklesConfig`.

    An `io` node, as found in the run app config, is dropped.
    """
    if cfg is None:
        return WrinklesConfig()
    if isinstance(cfg, WrinklesConfig):
        return cfg
    detector_cfg, _ = split_config(cfg)
    merged = OmegaConf.merge(OmegaConf.structured(WrinklesConfig), detector_cfg)
    return OmegaConf.to_object(merged)


def request_from_config(cfg: WrinklesConfig | DictConfig | None) -> FilterBankRequest:
    fb = as_config(cfg).filter_bank
    return FilterBankRequest(
        sigma=fb.sigma, lambd=fb.lambd, psi=fb.psi, num_angles=fb.num_angles
    )


def clamp_request(
    request: FilterBankRequest,
    kernel_size: int,
    max_angles: int,
) -> FilterBankRequest:
    """Clamp sigma into [0, kernel_size] and num_angles into [1, max_angles]."""
    sigma = min(max(0.0, request.sigma), float(kernel_size))
    num_angles = min(max(1, int(request.num_angles)), max_angles)
    return replace(request, sigma=sigma, num_angles=num_angles)
