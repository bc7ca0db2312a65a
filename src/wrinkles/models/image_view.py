# Copyright 2025 Thousand Brains Project
#
# Copyright may exist in Contributors' modifications
# and/or contributions to the work.
#
# Use of this source code is governed by the MIT
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.
"""Interleaved image buffers with named channels.

Host applications hand over raw, row-major, interleaved byte buffers. This
module wraps them in an `ImageView` so that pixels are addressed by
(row, column, channel) with bounds checking, and expresses channel reordering
as named mapping tables instead of positional index arrays.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from wrinkles.errors import InvalidDimensionError


class Channel(Enum):
    """Semantic meaning of a single image channel."""

    ALPHA = "A"
    RED = "R"
    GREEN = "G"
    BLUE = "B"
    GRAY = "Y"


@dataclass(frozen=True)
class ChannelLayout:
    """Ordered channels of an interleaved pixel."""

    name: str
    channels: tuple[Channel, ...]

    def __len__(self) -> int:
        return len(self.channels)

    def index(self, channel: Channel) -> int:
        try:
            return self.channels.index(channel)
        except ValueError:
            raise KeyError(f"{channel} is not part of the {self.name} layout") from None


ARGB = ChannelLayout("ARGB", (Channel.ALPHA, Channel.RED, Channel.GREEN, Channel.BLUE))
RGB = ChannelLayout("RGB", (Channel.RED, Channel.GREEN, Channel.BLUE))
GRAY = ChannelLayout("GRAY", (Channel.GRAY,))
BGR = ChannelLayout("BGR", (Channel.BLUE, Channel.GREEN, Channel.RED))


@dataclass(frozen=True)
class ImageView:
    """A (height, width, channels) array tagged with its channel layout.

    The view never copies the array it wraps, so writing through it writes
    into the caller's buffer.
    """

    data: np.ndarray
    layout: ChannelLayout

    def __post_init__(self):
        if self.data.ndim != 3:
            raise InvalidDimensionError(
                f"Expected a (height, width, channels) array, got shape {self.data.shape}"
            )
        if self.data.shape[2] != len(self.layout):
            raise InvalidDimensionError(
                f"{self.layout.name} needs {len(self.layout)} channels, "
                f"got {self.data.shape[2]}"
            )

    @classmethod
    def from_buffer(
        cls,
        buffer,
        height: int,
        width: int,
        layout: ChannelLayout,
        dtype: np.dtype = np.uint8,
    ) -> ImageView:
        """Wrap a flat row-major buffer without copying it.

        Args:
            buffer: A bytes-like object or numpy array holding the pixels.
            height: Number of rows.
            width: Number of columns.
            layout: Channel layout of each pixel.
            dtype: Element type of each channel.

        Returns:
            A view sharing memory with `buffer`.

        Raises:
            InvalidDimensionError: If the buffer size does not match
                height * width * channels, or if an array buffer is not
                C-contiguous.
        """
        if isinstance(buffer, np.ndarray):
            if not buffer.flags.c_contiguous:
                raise InvalidDimensionError(
                    f"{layout.name} buffer must be a C-contiguous array, got "
                    f"strides {buffer.strides}"
                )
            flat = buffer.reshape(-1)
            if flat.dtype != dtype:
                flat = flat.view(dtype)
        else:
            flat = np.frombuffer(buffer, dtype=dtype)
        expected = height * width * len(layout)
        if flat.size != expected:
            raise InvalidDimensionError(
                f"{layout.name} buffer holds {flat.size} values, expected "
                f"{expected} for {height}x{width}"
            )
        return cls(flat.reshape(height, width, len(layout)), layout)

    @classmethod
    def empty(
        cls,
        height: int,
        width: int,
        layout: ChannelLayout,
        dtype: np.dtype = np.uint8,
    ) -> ImageView:
        return cls(np.zeros((height, width, len(layout)), dtype=dtype), layout)

    @classmethod
    def from_plane(cls, plane: np.ndarray) -> ImageView:
        """Wrap a 2D single-channel array as a GRAY view."""
        return cls(plane[:, :, np.newaxis], GRAY)

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self.data.shape[:2]

    @property
    def dtype(self) -> np.dtype:
        return self.data.dtype

    def _check(self, row: int, col: int) -> None:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(
                f"Pixel ({row}, {col}) outside {self.height}x{self.width} image"
            )

    def get(self, row: int, col: int, channel: Channel):
        self._check(row, col)
        return self.data[row, col, self.layout.index(channel)]

    def set(self, row: int, col: int, channel: Channel, value) -> None:
        self._check(row, col)
        self.data[row, col, self.layout.index(channel)] = value

    def channel(self, channel: Channel) -> np.ndarray:
        """Writable 2D view of one channel."""
        return self.data[:, :, self.layout.index(channel)]

    @property
    def plane(self) -> np.ndarray:
        """The 2D array of a single-channel image."""
        if len(self.layout) != 1:
            raise ValueError(f"{self.layout.name} image has more than one plane")
        return self.data[:, :, 0]


@dataclass(frozen=True)
class ChannelMapping:
    """Copy named channels from one layout to another.

    Target channels not listed in `pairs` are left untouched.
    """

    source: ChannelLayout
    target: ChannelLayout
    pairs: tuple[tuple[Channel, Channel], ...]

    def from_to(self) -> list[int]:
        """Flattened (source index, target index) pairs, as cv2.mixChannels takes."""
        indices = []
        for src, dst in self.pairs:
            indices.extend([self.source.index(src), self.target.index(dst)])
        return indices

    def apply(self, src: ImageView, dst: ImageView) -> ImageView:
        if src.layout != self.source or dst.layout != self.target:
            raise ValueError(
                f"Mapping {self.source.name}->{self.target.name} cannot be applied "
                f"to {src.layout.name}->{dst.layout.name}"
            )
        if src.shape != dst.shape:
            raise InvalidDimensionError(
                f"Source shape {src.shape} does not match target shape {dst.shape}"
            )
        for src_channel, dst_channel in self.pairs:
            dst.channel(dst_channel)[...] = src.channel(src_channel)
        return dst


ARGB_TO_RGB = ChannelMapping(
    ARGB,
    RGB,
    (
        (Channel.RED, Channel.RED),
        (Channel.GREEN, Channel.GREEN),
        (Channel.BLUE, Channel.BLUE),
    ),
)

GRAY_TO_ARGB = ChannelMapping(
    GRAY,
    ARGB,
    (
        (Channel.GRAY, Channel.RED),
        (Channel.GRAY, Channel.GREEN),
        (Channel.GRAY, Channel.BLUE),
    ),
)

BGR_TO_ARGB = ChannelMapping(
    BGR,
    ARGB,
    (
        (Channel.RED, Channel.RED),
        (Channel.GREEN, Channel.GREEN),
        (Channel.BLUE, Channel.BLUE),
    ),
)

ARGB_TO_BGR = ChannelMapping(
    ARGB,
    BGR,
    (
        (Channel.RED, Channel.RED),
        (Channel.GREEN, Channel.GREEN),
        (Channel.BLUE, Channel.BLUE),
    ),
)
