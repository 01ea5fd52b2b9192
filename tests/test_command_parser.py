import pytest

from imagelab.pipeline.command_parser import CommandParser
from imagelab.models.commands import (
    FULL_SPLIT, BrightenCommand, ComponentCommand, ConvolveCommand,
    DownscaleCommand, FlipCommand, LevelsAdjustCommand, LoadCommand,
    RGBSplitCommand, RGBCombineCommand, RunCommand, CompressCommand,
    DitherCommand,
)
from imagelab.exceptions import InvalidArgumentError

parser = CommandParser()


def parse(line):
    return parser.parse(line.split())


def test_component_commands():
    assert parse("luma-component koala koala-luma") == ComponentCommand("luma", "koala", "koala-luma")
    assert parse("value-component a b split 30") == ComponentCommand("value", "a", "b", 30)


def test_command_name_is_case_insensitive():
    assert parse("BLUR a b") == ConvolveCommand("blur", "a", "b", FULL_SPLIT)
    assert parse("sharpen a b SPLIT 10") == ConvolveCommand("sharpen", "a", "b", 10)


def test_numeric_parameters():
    assert parse("brighten -20 a b") == BrightenCommand(-20, "a", "b")
    assert parse("levels-adjust 20 100 255 a b split 50") == LevelsAdjustCommand(20, 100, 255, "a", "b", 50)
    assert parse("compress 40 a b") == CompressCommand(40, "a", "b")
    assert parse("downscale 10 5 a b") == DownscaleCommand(10, 5, "a", "b")


def test_multi_image_commands():
    assert parse("rgb-split src r g b") == RGBSplitCommand("src", "r", "g", "b")
    assert parse("rgb-combine dst r g b") == RGBCombineCommand("dst", "r", "g", "b")
    assert parse("horizontal-flip a b") == FlipCommand("horizontal", "a", "b")
    assert parse("dither a b") == DitherCommand("a", "b")


def test_controller_commands():
    assert parse("load images/koala.ppm koala") == LoadCommand("images/koala.ppm", "koala")
    assert parse("run script.txt") == RunCommand("script.txt")


@pytest.mark.parametrize("line", [
    "unknown a b",
    "blur a",
    "blur a b split",
    "blur a b split x",
    "blur a b extra 10",
    "horizontal-flip a b split 50",
    "brighten ten a b",
    "brighten 300 a b",
    "compress 101 a b",
    "downscale 0 5 a b",
    "levels-adjust 100 50 200 a b",
    "red-component a b split 150",
    "rgb-split a r g",
    "load a",
])
def test_invalid_commands(line):
    with pytest.raises(InvalidArgumentError):
        parse(line)


def test_empty_command():
    with pytest.raises(InvalidArgumentError):
        parser.parse([])


def test_registry():
    assert parser.supports("dither")
    assert parser.supports("LOAD")
    assert not parser.supports("exit")
    assert parser.is_filter("blur")
    assert not parser.is_filter("save")
    assert len(parser.command_names()) == 23
    assert "levels-adjust" in parser.command_names()
