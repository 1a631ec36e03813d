"""
Wayline - Main Entry Point

A terminal companion for rolling on random encounter tables.

This module provides the command-line front end: configuration, logging
setup, the on-start hook that loads table files, and the interactive
prompt that feeds lines to the session controller.
"""

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from wayline.data_models import DiceRoller, GameClock
from wayline.game_state import SessionController
from wayline.observability.run_log import get_run_log
from wayline.tables.table_loader import FormatError, load_file


# Configure logging
def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


logger = logging.getLogger(__name__)


DEFAULT_TABLE_PATH = Path("tables.toml")
QUIT_COMMANDS = ("quit", "exit")


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class WaylineConfig:
    """Configuration for a Wayline session."""

    table_paths: list[Path] = field(default_factory=lambda: [DEFAULT_TABLE_PATH])
    start_time: str = "00:00"
    seed: Optional[int] = None
    run_log_path: Optional[Path] = None

    # Commands to run instead of the interactive prompt
    commands: list[str] = field(default_factory=list)

    verbose: bool = False

    def __post_init__(self):
        """Ensure paths are Path objects."""
        self.table_paths = [Path(p) for p in self.table_paths]
        if isinstance(self.run_log_path, str):
            self.run_log_path = Path(self.run_log_path)


# =============================================================================
# CLI INTERFACE
# =============================================================================

class WaylineCLI:
    """Line-oriented command interface for a session."""

    def __init__(self, config: WaylineConfig, controller: Optional[SessionController] = None):
        self.config = config
        self.controller = controller or SessionController(
            clock=GameClock.from_string(config.start_time),
        )
        self.running = False

    def show(self, lines: list[str]) -> None:
        for line in lines:
            print(line)

    def on_start(self) -> None:
        """Load every configured table file. Runs once, before any command."""
        self.show(self.controller.note("Wayline session started."))
        for path in self.config.table_paths:
            self.show(self._load_path(path))

    def _load_path(self, path: Path) -> list[str]:
        if not path.exists():
            logger.warning(f"Table file not found: {path}")
            return self.controller.note(f"No table file found at {path}.")

        try:
            loaded = load_file(path)
        except FormatError as e:
            return self.controller.load_failed(e, source=str(path))

        return self.controller.add_tables(loaded, source=str(path))

    def process_command(self, user_input: str) -> None:
        """Process one line of input."""
        if user_input.strip().lower() in QUIT_COMMANDS:
            self.running = False
            return
        self.show(self.controller.handle_input(user_input))

    def run_script(self, commands: list[str]) -> None:
        """Run a fixed list of commands without prompting."""
        self.running = True
        for command in commands:
            if not self.running:
                break
            self.process_command(command)
        self.running = False

    def run(self) -> None:
        """Run the interactive CLI loop."""
        self.running = True
        print("Type 'help' for available commands, 'quit' to exit.")

        while self.running:
            try:
                user_input = input("wayline> ")
                if not user_input.strip():
                    continue

                self.process_command(user_input)

            except KeyboardInterrupt:
                print("\nInterrupted. Type 'quit' to exit.")
            except EOFError:
                self.running = False

        print()


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="wayline",
        description="Wayline - roll on random encounter tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  wayline                                   # Load tables.toml and prompt
  wayline -t caves.toml -t roads.toml       # Load several table files
  wayline -c "roll" -c "add 10" -c "time"   # Run commands and exit
  wayline --start-time 08:00 --seed 42      # Start the clock at 08:00
        """
    )

    parser.add_argument(
        "-t", "--tables",
        type=Path,
        action="append",
        dest="table_paths",
        metavar="PATH",
        help=f"Table file to load; may be repeated (default: {DEFAULT_TABLE_PATH})",
    )
    parser.add_argument(
        "-c", "--command",
        action="append",
        dest="commands",
        default=[],
        metavar="TEXT",
        help="Command to run instead of prompting; may be repeated",
    )
    parser.add_argument(
        "--start-time",
        type=str,
        default="00:00",
        help="Initial in-game time as HH:MM (default: 00:00)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed the dice for a reproducible session",
    )
    parser.add_argument(
        "--run-log",
        type=Path,
        dest="run_log_path",
        metavar="PATH",
        help="Write the session's run log to PATH as JSON on exit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> WaylineConfig:
    """Create WaylineConfig from parsed arguments."""
    return WaylineConfig(
        table_paths=args.table_paths or [DEFAULT_TABLE_PATH],
        start_time=args.start_time,
        seed=args.seed,
        run_log_path=args.run_log_path,
        commands=args.commands,
        verbose=args.verbose,
    )


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI usage."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)
    config = create_config_from_args(args)

    try:
        clock = GameClock.from_string(config.start_time)
    except ValueError as e:
        print(f"Invalid --start-time: {e}", file=sys.stderr)
        return 2

    if config.seed is not None:
        DiceRoller.set_seed(config.seed)
        get_run_log().set_seed(config.seed)

    cli = WaylineCLI(config, SessionController(clock=clock))
    cli.on_start()

    if config.commands:
        cli.run_script(config.commands)
    else:
        cli.run()

    logger.debug(f"Session run log:\n{get_run_log().format_log()}")

    if config.run_log_path is not None:
        try:
            get_run_log().save(str(config.run_log_path))
        except OSError as e:
            logger.error(f"Could not write run log to {config.run_log_path}: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
