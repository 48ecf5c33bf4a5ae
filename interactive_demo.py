"""
Interactive terminal demo for pipe puzzles.
Move a cursor over the board and rotate tiles until every tile is powered.
"""

from __future__ import annotations

import argparse
import logging
import random

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render
from builder import Builder
from grid_types import Coord, Direction
from puzzle import Difficulty, Options, Puzzle

logger = logging.getLogger(__name__)


class MoveCounter:
    """Count moves, where a move is any number of rotations of one tile.

    Rotating tile A, then B, then A again counts as three moves.
    """

    def __init__(self) -> None:
        self.count = 0
        self.last_rotated: Coord | None = None

    def update(self, coord: Coord) -> None:
        if self.last_rotated == coord:
            return
        self.count += 1
        self.last_rotated = coord


class InteractiveDemo:
    """Interactive demo: rotate tiles with the keyboard."""

    def __init__(self, builder: Builder) -> None:
        self.builder = builder
        self.console = Console()
        self.new_game()

    def new_game(self) -> None:
        """Generate a fresh puzzle."""
        self.starting_position: Puzzle = self.builder.build()
        logger.debug(
            "new_game: %d walls, %d expected moves",
            len(self.starting_position.walls),
            self.starting_position.expected_moves,
        )
        self.restart()
        self.status_message = "New puzzle generated"

    def restart(self) -> None:
        """Restart the current puzzle from its starting position."""
        self.puzzle = self.starting_position.copy()
        self.cursor = self.puzzle.source
        self.moves = MoveCounter()
        self.status_message = "Puzzle restarted"

    def move_cursor(self, direction: Direction) -> None:
        """Move the cursor, wrapping around the board edges."""
        self.cursor = self.puzzle.grid.normalized_coord(self.cursor + direction.to_coord())

    def rotate_selected(self) -> None:
        """Rotate the tile under the cursor and recompute energy."""
        if self.puzzle.solved():
            self.status_message = "Already solved - press N for a new game"
            return

        self.puzzle.rotate_tile(self.cursor)
        self.puzzle.calc_energy()
        self.moves.update(self.cursor)

        if self.puzzle.solved():
            self.status_message = f"✓ Solved in {self.moves.count} moves!"
        else:
            self.status_message = f"Rotated tile ({self.cursor.x}, {self.cursor.y})"

    def generate_display(self) -> Panel:
        """Generate the current display with board and status."""
        options = self.puzzle.options

        status = Text()
        status.append("Board: ", style="bold")
        status.append(
            f"{options.board_size}x{options.board_size}, {options.difficulty.value}"
            f"{', wrapping' if options.wrapping else ''}\n"
        )
        status.append("Moves: ", style="bold")
        status.append(f"{self.moves.count}/{self.puzzle.expected_moves}\n\n")

        status.append(Text.from_ansi(render(self.puzzle, highlight_pos=self.cursor)))
        status.append("\n\n")
        if self.puzzle.solved():
            status.append("SOLVED\n\n", style="bold green")

        status.append("Keys:\n", style="bold cyan")
        status.append("  WASD  - Move cursor\n")
        status.append("  Space - Rotate tile\n")
        status.append("  R     - Restart puzzle\n")
        status.append("  N     - New puzzle\n")
        status.append("  Q     - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        border = "green" if self.puzzle.solved() else "blue"
        return Panel(status, title="Pipegrid", border_style=border, width=60)

    def handle_key(self, key: str) -> bool:
        """Apply one key press. Returns False when the demo should quit."""
        match key.lower():
            case "q":
                self.status_message = "Quitting..."
                return False
            case "w":
                self.move_cursor(Direction.N)
            case "a":
                self.move_cursor(Direction.W)
            case "s":
                self.move_cursor(Direction.S)
            case "d":
                self.move_cursor(Direction.E)
            case " " | "e":
                self.rotate_selected()
            case "r":
                self.restart()
            case "n":
                self.new_game()
            case _:
                self.status_message = f"Unknown key: {key!r}"
        return True

    def run(self) -> None:
        """Run the interactive demo until the user quits."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                running = True
                while running:
                    live.update(self.generate_display())
                    running = self.handle_key(readchar.readkey())
                live.update(self.generate_display())
            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rotate pipes until every tile is powered.")
    parser.add_argument("--size", type=int, default=5, help="rows and columns of the board (3-20)")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.EASY.value,
    )
    parser.add_argument("--wrapping", action="store_true", help="opposite board edges are adjacent")
    parser.add_argument("--seed", type=int, default=None, help="seed for a reproducible puzzle")
    parser.add_argument("--verbose", action="store_true", help="log generation details")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        options = Options(args.size, Difficulty(args.difficulty), args.wrapping)
    except ValueError as e:
        raise SystemExit(f"error: {e}")

    builder = Builder(options, random.Random(args.seed))
    InteractiveDemo(builder).run()


if __name__ == "__main__":
    main()
