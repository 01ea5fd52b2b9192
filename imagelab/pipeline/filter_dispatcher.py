from functools import singledispatchmethod
from typing import Dict, Sequence
import logging

from ..models.image import Image
from ..models.commands import (
    ComponentCommand, FlipCommand, BrightenCommand, ConvolveCommand,
    SepiaCommand, RGBSplitCommand, RGBCombineCommand, HistogramCommand,
    ColorCorrectCommand, LevelsAdjustCommand, CompressCommand,
    DownscaleCommand, DitherCommand,
)
from ..repositories.image_store_repository import ImageStoreRepository
from ..services.transformation_service import (
    TransformationService, COMPONENT_FUNCTIONS, KERNELS, SEPIA_MATRIX,
    brighten, matrix_transformation,
)
from ..services.histogram_service import HistogramService
from ..services.levels_service import LevelsService
from ..services.compression_service import CompressionService
from ..services.downscaling_service import DownscalingService
from ..services.dithering_service import DitheringService
from ..exceptions import InvalidArgumentError
from .command_parser import CommandParser

logger = logging.getLogger(__name__)


class FilterDispatcher:
    """
    Runs filter commands against a named-image store.

    Every handler only reads from the store and returns the images it
    produced; ``execute`` writes them back once all of them exist, so a
    failing command never leaves a partial result behind.
    """

    def __init__(self, store: ImageStoreRepository = None, parser: CommandParser = None):
        self.store = store if store is not None else ImageStoreRepository()
        self.parser = parser or CommandParser()
        self.transformation_service = TransformationService()
        self.histogram_service = HistogramService(self.transformation_service)
        self.levels_service = LevelsService(self.transformation_service)
        self.compression_service = CompressionService()
        self.downscaling_service = DownscalingService()
        self.dithering_service = DitheringService()

    def execute(self, tokens: Sequence[str]) -> Dict[str, Image]:
        """Parse ``tokens``, run the filter and store its output(s)."""
        command = self.parser.parse(tokens)
        return self.run(command)

    def run(self, command) -> Dict[str, Image]:
        results = self.apply(command)
        for name, image in results.items():
            self.store.store(name, image)
        logger.debug(f"{type(command).__name__} stored {list(results)}")
        return results

    @classmethod
    def handles(cls, command_type: type) -> bool:
        dispatch = cls.__dict__["apply"].dispatcher.dispatch
        return dispatch(command_type) is not dispatch(object)

    # ─── Handlers ─────────────────────────────────────────────────────
    @singledispatchmethod
    def apply(self, command) -> Dict[str, Image]:
        raise InvalidArgumentError(f"Not a filter command: {type(command).__name__}")

    @apply.register
    def _(self, command: ComponentCommand) -> Dict[str, Image]:
        source = self.store.fetch(command.source)
        result = self.transformation_service.apply_transformation(
            source, COMPONENT_FUNCTIONS[command.component], command.split_percent
        )
        return {command.destination: result}

    @apply.register
    def _(self, command: FlipCommand) -> Dict[str, Image]:
        source = self.store.fetch(command.source)
        if command.direction == "horizontal":
            result = self.transformation_service.flip_horizontal(source)
        else:
            result = self.transformation_service.flip_vertical(source)
        return {command.destination: result}

    @apply.register
    def _(self, command: BrightenCommand) -> Dict[str, Image]:
        source = self.store.fetch(command.source)
        result = self.transformation_service.apply_transformation(
            source, brighten(command.increment), command.split_percent
        )
        return {command.destination: result}

    @apply.register
    def _(self, command: ConvolveCommand) -> Dict[str, Image]:
        source = self.store.fetch(command.source)
        result = self.transformation_service.apply_kernel(
            source, KERNELS[command.kernel], command.split_percent
        )
        return {command.destination: result}

    @apply.register
    def _(self, command: SepiaCommand) -> Dict[str, Image]:
        source = self.store.fetch(command.source)
        result = self.transformation_service.apply_transformation(
            source, matrix_transformation(SEPIA_MATRIX), command.split_percent
        )
        return {command.destination: result}

    @apply.register
    def _(self, command: RGBSplitCommand) -> Dict[str, Image]:
        source = self.store.fetch(command.source)
        red, green, blue = self.transformation_service.split_channels(source)
        return {
            command.red_destination: red,
            command.green_destination: green,
            command.blue_destination: blue,
        }

    @apply.register
    def _(self, command: RGBCombineCommand) -> Dict[str, Image]:
        red = self.store.fetch(command.red_source)
        green = self.store.fetch(command.green_source)
        blue = self.store.fetch(command.blue_source)
        return {command.destination: self.transformation_service.combine_channels(red, green, blue)}

    @apply.register
    def _(self, command: HistogramCommand) -> Dict[str, Image]:
        source = self.store.fetch(command.source)
        return {command.destination: self.histogram_service.render_histogram(source)}

    @apply.register
    def _(self, command: ColorCorrectCommand) -> Dict[str, Image]:
        source = self.store.fetch(command.source)
        result = self.histogram_service.color_correct(source, command.split_percent)
        return {command.destination: result}

    @apply.register
    def _(self, command: LevelsAdjustCommand) -> Dict[str, Image]:
        source = self.store.fetch(command.source)
        result = self.levels_service.levels_adjust(
            source, command.black, command.mid, command.white, command.split_percent
        )
        return {command.destination: result}

    @apply.register
    def _(self, command: CompressCommand) -> Dict[str, Image]:
        source = self.store.fetch(command.source)
        result = self.compression_service.compress(source, command.percentage)
        return {command.destination: result}

    @apply.register
    def _(self, command: DownscaleCommand) -> Dict[str, Image]:
        source = self.store.fetch(command.source)
        result = self.downscaling_service.downscale(source, command.width, command.height)
        return {command.destination: result}

    @apply.register
    def _(self, command: DitherCommand) -> Dict[str, Image]:
        source = self.store.fetch(command.source)
        result = self.dithering_service.dither(source, command.split_percent)
        return {command.destination: result}
