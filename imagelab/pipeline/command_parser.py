"""
Token list -> typed command.

A command line is split on whitespace; token 0 is the command name (case
insensitive), the rest are positional parameters. Split-capable filters
accept an optional trailing ``split <percent>``.
"""
from typing import Callable, Dict, List, Sequence
import logging

from ..models.commands import (
    FULL_SPLIT, Command, ComponentCommand, FlipCommand, BrightenCommand,
    ConvolveCommand, SepiaCommand, RGBSplitCommand, RGBCombineCommand,
    HistogramCommand, ColorCorrectCommand, LevelsAdjustCommand,
    CompressCommand, DownscaleCommand, DitherCommand, LoadCommand,
    SaveCommand, RunCommand,
)
from ..exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

SPLIT_KEYWORD = "split"


def _to_int(token: str, what: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise InvalidArgumentError(f"{what} must be an integer, got '{token}'") from None


def _take(tokens: Sequence[str], count: int, usage: str, allow_split: bool = False):
    """
    Split ``tokens`` (without the command name) into ``count`` positional
    arguments and a split percentage.
    """
    args, rest = list(tokens[:count]), list(tokens[count:])
    if len(args) < count:
        raise InvalidArgumentError(f"Invalid number of arguments. Usage: {usage}")
    if not rest:
        return args, FULL_SPLIT
    if allow_split and len(rest) == 2 and rest[0].lower() == SPLIT_KEYWORD:
        return args, _to_int(rest[1], "Split percent")
    raise InvalidArgumentError(f"Invalid number of arguments. Usage: {usage}")


# ─── Per-family parsers ───────────────────────────────────────────────
def _component(component: str):
    def _parse(tokens):
        (src, dst), split = _take(tokens, 2, f"{component}-component src dst [split p]", True)
        return ComponentCommand(component, src, dst, split)
    return _parse


def _flip(direction: str):
    def _parse(tokens):
        (src, dst), _ = _take(tokens, 2, f"{direction}-flip src dst")
        return FlipCommand(direction, src, dst)
    return _parse


def _convolve(kernel: str):
    def _parse(tokens):
        (src, dst), split = _take(tokens, 2, f"{kernel} src dst [split p]", True)
        return ConvolveCommand(kernel, src, dst, split)
    return _parse


def _brighten(tokens):
    (increment, src, dst), split = _take(tokens, 3, "brighten increment src dst [split p]", True)
    return BrightenCommand(_to_int(increment, "Increment"), src, dst, split)


def _sepia(tokens):
    (src, dst), split = _take(tokens, 2, "sepia src dst [split p]", True)
    return SepiaCommand(src, dst, split)


def _rgb_split(tokens):
    (src, red, green, blue), _ = _take(tokens, 4, "rgb-split src red green blue")
    return RGBSplitCommand(src, red, green, blue)


def _rgb_combine(tokens):
    (dst, red, green, blue), _ = _take(tokens, 4, "rgb-combine dst red green blue")
    return RGBCombineCommand(dst, red, green, blue)


def _histogram(tokens):
    (src, dst), _ = _take(tokens, 2, "histogram src dst")
    return HistogramCommand(src, dst)


def _color_correct(tokens):
    (src, dst), split = _take(tokens, 2, "color-correct src dst [split p]", True)
    return ColorCorrectCommand(src, dst, split)


def _levels_adjust(tokens):
    (b, m, w, src, dst), split = _take(tokens, 5, "levels-adjust b m w src dst [split p]", True)
    return LevelsAdjustCommand(
        _to_int(b, "Black point"), _to_int(m, "Mid point"), _to_int(w, "White point"),
        src, dst, split,
    )


def _compress(tokens):
    (percentage, src, dst), _ = _take(tokens, 3, "compress percentage src dst")
    return CompressCommand(_to_int(percentage, "Compression percentage"), src, dst)


def _downscale(tokens):
    (width, height, src, dst), _ = _take(tokens, 4, "downscale width height src dst")
    return DownscaleCommand(_to_int(width, "Target width"), _to_int(height, "Target height"),
                            src, dst)


def _dither(tokens):
    (src, dst), split = _take(tokens, 2, "dither src dst [split p]", True)
    return DitherCommand(src, dst, split)


def _load(tokens):
    (path, name), _ = _take(tokens, 2, "load path name")
    return LoadCommand(path, name)


def _save(tokens):
    (path, name), _ = _take(tokens, 2, "save path name")
    return SaveCommand(path, name)


def _run(tokens):
    (script_path,), _ = _take(tokens, 1, "run script-file")
    return RunCommand(script_path)


class CommandParser:
    """
    Registry of command names.  ``parse`` is the only place string tokens
    are interpreted; everything downstream works on typed commands.
    """

    FILTER_PARSERS: Dict[str, Callable[[List[str]], Command]] = {
        "red-component": _component("red"),
        "green-component": _component("green"),
        "blue-component": _component("blue"),
        "luma-component": _component("luma"),
        "intensity-component": _component("intensity"),
        "value-component": _component("value"),
        "horizontal-flip": _flip("horizontal"),
        "vertical-flip": _flip("vertical"),
        "brighten": _brighten,
        "blur": _convolve("blur"),
        "sharpen": _convolve("sharpen"),
        "sepia": _sepia,
        "rgb-split": _rgb_split,
        "rgb-combine": _rgb_combine,
        "histogram": _histogram,
        "color-correct": _color_correct,
        "levels-adjust": _levels_adjust,
        "compress": _compress,
        "downscale": _downscale,
        "dither": _dither,
    }

    CONTROLLER_PARSERS: Dict[str, Callable[[List[str]], Command]] = {
        "load": _load,
        "save": _save,
        "run": _run,
    }

    def __init__(self):
        self._parsers = {**self.FILTER_PARSERS, **self.CONTROLLER_PARSERS}

    def supports(self, name: str) -> bool:
        return name.lower() in self._parsers

    def is_filter(self, name: str) -> bool:
        return name.lower() in self.FILTER_PARSERS

    def command_names(self) -> List[str]:
        return sorted(self._parsers)

    def parse(self, tokens: Sequence[str]) -> Command:
        """
        Args:
            tokens: command name followed by its positional parameters.

        Returns:
            The typed command; range checks have already run.
        """
        if not tokens:
            raise InvalidArgumentError("Empty command")
        name = tokens[0].lower()
        parser = self._parsers.get(name)
        if parser is None:
            raise InvalidArgumentError(f"Invalid command: {tokens[0]}")
        command = parser(list(tokens[1:]))
        logger.debug(f"Parsed {name} -> {command}")
        return command
