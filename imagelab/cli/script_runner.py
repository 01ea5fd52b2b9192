import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from dotenv import load_dotenv

from ..models.commands import LoadCommand, SaveCommand, RunCommand
from ..repositories.image_store_repository import ImageStoreRepository
from ..services.image_service import ImageService
from ..pipeline.command_parser import CommandParser
from ..pipeline.filter_dispatcher import FilterDispatcher
from ..exceptions import ImagelabError, InvalidArgumentError

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"
COMMENT_PREFIX = "#"

INITIAL_PROMPT = "Enter commands (type 'exit' to quit):"
PROCESSING_COMMAND = "Processing Command = "
EXECUTED_COMMAND = "Executed command = "
EXIT_MESSAGE = "Exiting..."


class ScriptRunner:
    """
    Line-oriented controller: reads commands, runs them against one shared
    store and reports each outcome. A failing line is reported and skipped;
    the next line still runs.
    """

    def __init__(self, store: ImageStoreRepository = None, out: TextIO = None):
        self.store = store if store is not None else ImageStoreRepository()
        self.out = out or sys.stdout
        self.parser = CommandParser()
        self.image_service = ImageService(self.store)
        self.dispatcher = FilterDispatcher(self.store, self.parser)
        self._active_scripts: List[Path] = []

    def _print(self, message: str) -> None:
        print(message, file=self.out)

    def run(self, stream: TextIO, prompt: bool = False) -> None:
        """Execute lines from ``stream`` until EOF or ``exit``."""
        if prompt:
            self._print(INITIAL_PROMPT)
        for line in stream:
            line = line.strip()
            if line.lower() == EXIT_COMMAND:
                self._print(EXIT_MESSAGE)
                break
            self.execute_line(line)

    def run_script(self, script_path) -> None:
        path = Path(script_path).resolve()
        if path in self._active_scripts:
            raise InvalidArgumentError(f"Script is already running: {script_path}")
        self._active_scripts.append(path)
        try:
            with path.open("r", encoding="utf-8") as fh:
                for line in fh:
                    line = line.strip()
                    if line.lower() == EXIT_COMMAND:
                        break
                    self.execute_line(line)
        except UnicodeDecodeError:
            raise InvalidArgumentError(f"Script is not a UTF-8 text file: {script_path}") from None
        finally:
            self._active_scripts.pop()

    def execute_line(self, line: str) -> Optional[bool]:
        """
        Returns:
            None for blank/comment lines, otherwise whether the command ran.
        """
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            return None

        self._print(PROCESSING_COMMAND + line)
        try:
            self.execute(line.split())
            executed = True
        except (ImagelabError, OSError) as e:
            self._print(f"Error: {e}")
            logger.error(f"Command failed: '{line}': {e}")
            executed = False
        self._print(EXECUTED_COMMAND + str(executed).lower())
        return executed

    def execute(self, tokens: List[str]) -> None:
        command = self.parser.parse(tokens)
        if isinstance(command, LoadCommand):
            self.image_service.load(command.path, command.name)
        elif isinstance(command, SaveCommand):
            self.image_service.save(command.path, command.name)
        elif isinstance(command, RunCommand):
            self.run_script(command.script_path)
        else:
            self.dispatcher.run(command)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    arg_parser = argparse.ArgumentParser(prog="imagelab", description="Raster image editing engine")
    mode = arg_parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("-file", metavar="SCRIPT", help="run the commands in SCRIPT")
    mode.add_argument("-text", action="store_true", help="read commands interactively from stdin")
    args = arg_parser.parse_args(argv)

    runner = ScriptRunner()
    if args.file:
        try:
            runner.run_script(args.file)
        except OSError as e:
            print(f"Script not found: {args.file} ({e})", file=sys.stderr)
            return 1
        except ImagelabError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    else:
        runner.run(sys.stdin, prompt=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
