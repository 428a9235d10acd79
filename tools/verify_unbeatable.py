import argparse
import sys
import time
from typing import Dict, Tuple
sys.path.append('.')
import game  # type: ignore


def explore(session: game.GameSession, tally: Dict[str, int], cache: Dict[Tuple, int]) -> None:
    """Plays every human reply against the engine from `session`, counting outcomes."""
    if not session.active:
        tally[session.classify().outcome.value] += 1
        return
    if session.current is game.Mark.COMPUTER:
        key = session.cells
        if key not in cache:
            cache[key] = game.best_move(session.cells)
        branch = game.GameSession.replay(session.history, session.first_player)
        branch.apply_move(cache[key], game.Mark.COMPUTER)
        if branch.active:
            branch.swap_turn()
        explore(branch, tally, cache)
        return
    for idx in session.legal_moves():
        branch = game.GameSession.replay(session.history, session.first_player)
        branch.apply_move(idx, game.Mark.HUMAN)
        if branch.active:
            branch.swap_turn()
        explore(branch, tally, cache)


def main():
    parser = argparse.ArgumentParser(description='Play the engine against every human line')
    parser.add_argument('--first', choices=['human', 'computer', 'both'], default='both')
    args = parser.parse_args()

    firsts = {'human': [game.Mark.HUMAN], 'computer': [game.Mark.COMPUTER],
              'both': [game.Mark.HUMAN, game.Mark.COMPUTER]}[args.first]
    losses = 0
    for first in firsts:
        tally = {o.value: 0 for o in game.Outcome}
        t0 = time.time()
        explore(game.GameSession(first_player=first), tally, {})
        took = int((time.time() - t0) * 1000)
        print(f"first={first.name.lower()} games={sum(tally.values())} {tally} ({took}ms)")
        losses += tally[game.Outcome.HUMAN_WIN.value]
    print(f"computer losses={losses}")
    sys.exit(1 if losses else 0)


if __name__ == '__main__':
    main()
