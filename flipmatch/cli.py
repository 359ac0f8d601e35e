"""
Flipmatch CLI - Command-line interface for the engine.

Usage:
    flipmatch play [--size N] [--seed S] [--delay D]   Play in the terminal
    flipmatch serve [--host H] [--port P]              Run the HTTP API

In-game commands:
    <card id>   flip a card
    r           reset (same size)
    s <n>       new board of size n x n
    h           show or hide How to Play
    q           quit
"""

import argparse
import logging
import random
import sys
import time

from .config import DEFAULT_GRID_SIZE, LOG_LEVEL, REVEAL_DELAY_SECONDS
from .session import ManualScheduler, MemoryGame
from .session.game import INSTRUCTIONS_TITLE


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Flipmatch - single-player memory game",
        prog="flipmatch",
    )
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--size", type=int, default=DEFAULT_GRID_SIZE, help="Grid size (2-10)")
    play_parser.add_argument("--seed", type=int, default=None, help="Shuffle seed")
    play_parser.add_argument("--delay", type=float, default=REVEAL_DELAY_SECONDS, help="Reveal delay in seconds")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def render_board(game: MemoryGame) -> str:
    """Text grid: card ids for face-down cards, values for face-up ones."""
    width = len(str(game.total_cards - 1)) + 2
    lines = []
    for row in range(game.grid_size):
        cells = []
        for col in range(game.grid_size):
            card_id = row * game.grid_size + col
            view = game.card_view(card_id)
            if view.solved:
                cells.append(f"*{view.value}*".rjust(width))
            elif view.visible:
                cells.append(f"[{view.value}]".rjust(width))
            else:
                cells.append(f"{card_id}".rjust(width))
        lines.append(" ".join(cells))
    lines.append(f"Moves left: {game.remaining_moves}")
    if game.status_message:
        lines.append(game.status_message)
    if game.instructions_visible:
        lines.append(INSTRUCTIONS_TITLE)
        lines.extend(f"  - {rule}" for rule in game.instructions)
    return "\n".join(lines)


def cmd_play(args):
    """Interactive terminal game."""
    scheduler = ManualScheduler()
    try:
        game = MemoryGame(
            grid_size=args.size,
            scheduler=scheduler,
            reveal_delay=args.delay,
            rng=random.Random(args.seed),
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    game.add_win_listener(lambda g: print("\n*** Congratulations! Every pair found. ***\n"))

    print(render_board(game))
    while True:
        prompt = f"[{game.reset_label.lower()}: r, size: s N, help: h, quit: q] card> "
        try:
            line = input(prompt).strip()
        except EOFError:
            break

        if not line:
            continue
        if line == "q":
            break
        if line == "r":
            game.reset()
        elif line == "h":
            game.toggle_instructions()
        elif line.startswith("s"):
            parts = line.split()
            if len(parts) != 2 or not parts[1].isdigit() or not game.configure(int(parts[1])):
                print("Grid size must be a number from 2 to 10")
                continue
        elif line.lstrip("-").isdigit():
            result = game.flip(int(line))
            if not result.success:
                print(f"Ignored: {result.error}")
                continue
            if result.reveal_pending:
                print(render_board(game))
                time.sleep(args.delay)
                scheduler.advance(args.delay)
        else:
            print(f"Unknown command: {line}")
            continue

        print(render_board(game))

    game.close()


def cmd_serve(args):
    """Run the HTTP API under uvicorn."""
    import uvicorn

    uvicorn.run("flipmatch.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
