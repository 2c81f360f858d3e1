#!/usr/bin/env python3
"""Interactive hot-seat CLI for Creative Chess.

Usage:
    python scripts/play.py                        # default rules
    python scripts/play.py --seed 7               # reproducible dice
    python scripts/play.py --config configs/creative.yaml --log-level DEBUG
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from creativechess.config import load_config
from creativechess.game.actions import ACTIONS
from creativechess.game.board import render_board
from creativechess.game.controller import TurnController
from creativechess.game.notation import game_to_text, parse_command
from creativechess.game.pieces import COLOR_NAMES
from creativechess.game.rules import available_actions
from creativechess.game.state import GameState

HELP = """Commands:
  e2-e4 / e7-e8=N           move (promotion defaults to queen)
  <action> [targets...]     use an action, e.g. 'snip d7', 'nuke c6',
                            'job_application b1 nuke', 'rocket_barrage a7 b7'
  actions                   list actions you can use now
  undo                      take back the last turn
  record                    print the game record
  help                      show this text
  q                         quit
"""


def display_state(state: GameState):
    """Print the current board state."""
    print(render_board(state.to_display_board(),
                       markers=state.markers(),
                       half_moves=state.half_moves,
                       to_move=COLOR_NAMES[state.active_color],
                       phase=state.phase.value))
    print("  * frozen   # shielded   ^ trap")
    if state.half_moves_to_creative():
        print(f"  Creative phase in {state.half_moves_to_creative()} half-move(s)")
    print()


def list_actions(state: GameState):
    """Print the actions the side to move may spend, with remaining uses."""
    usable = available_actions(state)
    if not usable:
        print("No actions available right now.")
        return
    for action_id in usable:
        spec = ACTIONS[action_id]
        uses = state.registry.remaining_uses(action_id)
        print(f"  {action_id.value:<16} x{uses}  {spec.name}: {spec.description}")


def play_game(ctrl: TurnController):
    """Read and apply commands until the game ends or the players quit."""
    print("=" * 60)
    print("  Creative Chess")
    print("=" * 60)
    print(HELP)

    while not ctrl.state.done:
        display_state(ctrl.state)
        player_name = COLOR_NAMES[ctrl.state.active_color]
        if not ctrl.state.adapter.has_moves() and not available_actions(ctrl.state):
            print(f"{player_name} has no moves and no actions.")
            break

        inp = input(f"{player_name}> ").strip()
        if not inp:
            continue
        if inp.lower() == "q":
            print("Game aborted.")
            return
        if inp.lower() == "help":
            print(HELP)
            continue
        if inp.lower() == "actions":
            list_actions(ctrl.state)
            continue
        if inp.lower() == "record":
            print(game_to_text(ctrl.state))
            continue
        if inp.lower() == "undo":
            if not ctrl.undo():
                print("Nothing to undo.")
            continue

        try:
            command = parse_command(inp)
        except ValueError as e:
            print(f"{e}. Type 'help' for the command list.")
            continue

        result = ctrl.play(command)
        if not result.ok:
            detail = f" ({result.detail})" if result.detail else ""
            print(f"Rejected: {result.error.value}{detail}")

    # Game over
    display_state(ctrl.state)
    winner = ctrl.state.winner
    if not ctrl.state.done:
        print("Game stopped.")
    elif winner is None:
        print("Draw!")
    else:
        print(f"{COLOR_NAMES[winner]} wins!")
    print(f"Game ended after {ctrl.state.half_moves} half-moves")


def main():
    parser = argparse.ArgumentParser(description="Play Creative Chess")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for dice and loot")
    parser.add_argument("--config", default=None,
                        help="Path to game config YAML (default: configs/creative.yaml)")
    parser.add_argument("--log-level", default=None, help="Override the config log level")
    args = parser.parse_args()

    config = load_config(args.config)
    logging.basicConfig(
        level=(args.log_level or config.log_level).upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    play_game(TurnController(seed=args.seed, config=config))


if __name__ == "__main__":
    main()
