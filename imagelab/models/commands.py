"""
Typed commands.

One frozen dataclass per operation family. Range checks live in
``__post_init__`` so a command that exists is a command that is valid;
checks that need the source image (e.g. downscale bounds) are done by the
dispatcher before any pixel work.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Union, get_args

from ..exceptions import InvalidArgumentError

FULL_SPLIT = 100

COMPONENTS = ("red", "green", "blue", "luma", "intensity", "value")
FLIP_DIRECTIONS = ("horizontal", "vertical")
KERNELS = ("blur", "sharpen")


def check_split_percent(split_percent: int) -> None:
    if not 0 <= split_percent <= 100:
        raise InvalidArgumentError("Split percent must be between 0 and 100")


def _check_choice(value: str, choices, what: str) -> None:
    if value not in choices:
        raise InvalidArgumentError(f"Unknown {what}: {value}")


# ─── Filter commands ──────────────────────────────────────────────────
@dataclass(frozen=True)
class ComponentCommand:
    component: str  # one of COMPONENTS
    source: str
    destination: str
    split_percent: int = FULL_SPLIT

    def __post_init__(self):
        _check_choice(self.component, COMPONENTS, "component")
        check_split_percent(self.split_percent)


@dataclass(frozen=True)
class FlipCommand:
    direction: str  # one of FLIP_DIRECTIONS
    source: str
    destination: str

    def __post_init__(self):
        _check_choice(self.direction, FLIP_DIRECTIONS, "flip direction")


@dataclass(frozen=True)
class BrightenCommand:
    increment: int
    source: str
    destination: str
    split_percent: int = FULL_SPLIT

    def __post_init__(self):
        if not -255 < self.increment < 255:
            raise InvalidArgumentError(
                "Brighten increment must be between -255 and 255 (exclusive)"
            )
        check_split_percent(self.split_percent)


@dataclass(frozen=True)
class ConvolveCommand:
    kernel: str  # one of KERNELS
    source: str
    destination: str
    split_percent: int = FULL_SPLIT

    def __post_init__(self):
        _check_choice(self.kernel, KERNELS, "kernel")
        check_split_percent(self.split_percent)


@dataclass(frozen=True)
class SepiaCommand:
    source: str
    destination: str
    split_percent: int = FULL_SPLIT

    def __post_init__(self):
        check_split_percent(self.split_percent)


@dataclass(frozen=True)
class RGBSplitCommand:
    source: str
    red_destination: str
    green_destination: str
    blue_destination: str


@dataclass(frozen=True)
class RGBCombineCommand:
    destination: str
    red_source: str
    green_source: str
    blue_source: str


@dataclass(frozen=True)
class HistogramCommand:
    source: str
    destination: str


@dataclass(frozen=True)
class ColorCorrectCommand:
    source: str
    destination: str
    split_percent: int = FULL_SPLIT

    def __post_init__(self):
        check_split_percent(self.split_percent)


@dataclass(frozen=True)
class LevelsAdjustCommand:
    black: int
    mid: int
    white: int
    source: str
    destination: str
    split_percent: int = FULL_SPLIT

    def __post_init__(self):
        if not 0 <= self.black < self.mid < self.white <= 255:
            raise InvalidArgumentError(
                "Invalid levels adjustment values. Ensure 0 <= b < m < w <= 255."
            )
        check_split_percent(self.split_percent)


@dataclass(frozen=True)
class CompressCommand:
    percentage: int
    source: str
    destination: str

    def __post_init__(self):
        if not 0 <= self.percentage <= 100:
            raise InvalidArgumentError(
                "Compression percentage must be between 0 and 100"
            )


@dataclass(frozen=True)
class DownscaleCommand:
    width: int
    height: int
    source: str
    destination: str

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidArgumentError("Target width/height must be positive")


@dataclass(frozen=True)
class DitherCommand:
    source: str
    destination: str
    split_percent: int = FULL_SPLIT

    def __post_init__(self):
        check_split_percent(self.split_percent)


# ─── Controller commands (file system / scripting) ────────────────────
@dataclass(frozen=True)
class LoadCommand:
    path: str
    name: str


@dataclass(frozen=True)
class SaveCommand:
    path: str
    name: str


@dataclass(frozen=True)
class RunCommand:
    script_path: str


FilterCommand = Union[
    ComponentCommand, FlipCommand, BrightenCommand, ConvolveCommand,
    SepiaCommand, RGBSplitCommand, RGBCombineCommand, HistogramCommand,
    ColorCorrectCommand, LevelsAdjustCommand, CompressCommand,
    DownscaleCommand, DitherCommand,
]
ControllerCommand = Union[LoadCommand, SaveCommand, RunCommand]
Command = Union[FilterCommand, ControllerCommand]

FILTER_COMMAND_TYPES = get_args(FilterCommand)
