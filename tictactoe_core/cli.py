from __future__ import annotations

import argparse
import time
from typing import Callable, List, Optional

from .ai import best_move, score_moves
from .board import Mark, classify, pretty, validate_cells
from .config import FIRST_PLAYER_POLICIES, Settings, configure_logging
from .errors import GameError
from .events import GAME_ENDED
from .match import FirstPlayerPolicy, Match

_MESSAGES = {
    "human_win": "You win!",
    "computer_win": "Computer wins!",
    "draw": "It's a draw!",
}


def analyze(cells_text: str) -> str:
    """Describes an arbitrary board: status, per-move scores and the computer's choice."""
    cells = validate_cells(cells_text)
    status = classify(cells)
    lines = [pretty(cells), "", f"Status: {status.kind}"]
    if status.winner is not None:
        lines.append(f"Winner: {status.winner.name} on {list(status.line)}")
    if not status.is_terminal:
        scores = score_moves(cells)
        lines.append("Scores for O: " + ", ".join(f"{i}={s:+d}" for i, s in scores.items()))
        lines.append(f"Best move for O: {best_move(cells)}")
    return "\n".join(lines)


def play(match: Match, games: int, read: Callable[[str], str] = input, sleep: Callable[[float], None] = time.sleep) -> None:
    """Interactive loop: cells 0-8, 'u' to undo, 'q' to quit."""
    match.events.subscribe(GAME_ENDED, lambda outcome, line: print(_MESSAGES[outcome.value]))

    played = 0
    moves = match.start()
    while True:
        for mv in moves:
            if mv.player is Mark.COMPUTER:
                print(f"Computer plays {mv.index}")
        print(pretty(match.session.cells))

        if not match.session.active:
            played += 1
            sb = match.scoreboard
            print(f"Score - you: {sb.human}, computer: {sb.computer}, draws: {sb.draws}")
            if played >= games:
                return
            moves = match.restart()
            print(f"\nNew game, {match.session.first_player.name.lower()} starts.")
            continue

        text = read("Your move (0-8, u=undo, q=quit): ").strip().lower()
        if text == "q":
            return
        if text == "u":
            try:
                undone = match.undo()
            except GameError as e:
                print(f"Cannot undo: {e}")
            else:
                print("Undid " + ", ".join(str(m.index) for m in undone))
            moves = []
            continue
        try:
            index = int(text)
        except ValueError:
            print("Could not parse. Try again.")
            moves = []
            continue
        try:
            human = match.human_move(index)
        except GameError as e:
            print(f"Illegal move: {e}")
            moves = []
            continue
        moves = [human]
        if match.session.active:
            if match.think_delay_ms:
                sleep(match.think_delay_ms / 1000.0)
            moves.append(match.computer_move())


def main(argv: Optional[List[str]] = None) -> None:
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description='Tic-tac-toe against a minimax computer')
    parser.add_argument('--first', choices=list(FIRST_PLAYER_POLICIES), default=settings.first_player,
                        help='Who opens: alternate between games, or always human / computer')
    parser.add_argument('--delay-ms', type=int, default=settings.think_delay_ms,
                        help='Pause before the computer answers')
    parser.add_argument('--games', type=int, default=1, help='Number of games to play')
    parser.add_argument('--log-level', default=settings.log_level, help='Logging level')
    parser.add_argument('--analyze', metavar='CELLS', default=None,
                        help="Analyze a board given as 9 characters, e.g. 'x-o-x----', and exit")
    args = parser.parse_args(argv)

    configure_logging(args.log_level.upper())

    if args.analyze is not None:
        try:
            print(analyze(args.analyze))
        except ValueError as e:
            parser.error(str(e))
        return

    match = Match(policy=FirstPlayerPolicy(args.first), think_delay_ms=max(0, args.delay_ms))
    print("You are X, the computer is O.")
    play(match, games=max(1, args.games))


if __name__ == '__main__':
    main()
