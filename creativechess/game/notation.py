"""Creative Chess command notation: parser, emitter and game records.

Command formats:
  e2-e4                     Standard move
  e7-e8=N                   Move with promotion (Q, R, B or N)
  snip e7                   Action with one target
  job_application b1 nuke   Job Application: sacrifice b1, boost Nuke
  rocket_barrage a7 b7 c7   Action with several targets
  emp_blast                 Action without targets

Game format (one command per numbered half-move):
  [Seed "42"]
  [Result "1-0"]

  1. e2-e4
  2. e7-e5
  ...
  21. snip d7
  1-0
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from creativechess.config import GameConfig
from creativechess.game.board import Square, notation_to_square, square_to_notation
from creativechess.game.pieces import PIECE_CHARS, PIECE_NAMES, Color, PieceType
from creativechess.game.registry import ActionId
from creativechess.game.rules import apply_action, apply_move, new_game
from creativechess.game.state import GameState


@dataclass(frozen=True)
class MoveCommand:
    from_sq: Square
    to_sq: Square
    promotion: Optional[PieceType] = None


@dataclass(frozen=True)
class ActionCommand:
    action_id: ActionId
    targets: tuple = ()


Command = Union[MoveCommand, ActionCommand]

_MOVE_RE = re.compile(r"^([a-h][1-8])-([a-h][1-8])(?:=([QRBN]))?$")
_RESULTS = ("1-0", "0-1", "1/2-1/2", "*")


def command_to_text(command: Command) -> str:
    """Convert a command to its text form."""
    if isinstance(command, MoveCommand):
        text = f"{square_to_notation(command.from_sq)}-{square_to_notation(command.to_sq)}"
        if command.promotion is not None:
            text += f"={PIECE_NAMES[command.promotion]}"
        return text

    elif isinstance(command, ActionCommand):
        parts = [command.action_id.value]
        for target in command.targets:
            parts.append(target.value if isinstance(target, ActionId)
                         else square_to_notation(target))
        return " ".join(parts)

    raise ValueError(f"Unknown command type: {type(command)}")


def parse_command(text: str) -> Command:
    """Parse a command string.

    Raises:
        ValueError: If the text is not a valid command.
    """
    text = text.strip()

    m = _MOVE_RE.match(text)
    if m:
        promotion = PIECE_CHARS[m.group(3)] if m.group(3) else None
        return MoveCommand(notation_to_square(m.group(1)),
                           notation_to_square(m.group(2)), promotion)

    tokens = text.split()
    if not tokens:
        raise ValueError("Empty command")
    try:
        action_id = ActionId(tokens[0].lower())
    except ValueError:
        raise ValueError(f"Invalid command: {text!r}") from None

    targets = []
    for i, token in enumerate(tokens[1:]):
        if action_id == ActionId.JOB_APPLICATION and i == 1:
            try:
                targets.append(ActionId(token.lower()))
            except ValueError:
                raise ValueError(f"Unknown action to boost: {token!r}") from None
        else:
            targets.append(notation_to_square(token))
    return ActionCommand(action_id, tuple(targets))


def apply_command(state: GameState, command: Command):
    """Apply a parsed command. Returns the TurnResult."""
    if isinstance(command, MoveCommand):
        return apply_move(state, command.from_sq, command.to_sq, command.promotion)
    return apply_action(state, command.action_id, *command.targets)


def result_string(state: GameState) -> str:
    if not state.done:
        return "*"
    if state.winner is None:
        return "1/2-1/2"
    return "1-0" if state.winner == Color.WHITE else "0-1"


def game_to_text(state: GameState, headers: Optional[dict[str, str]] = None) -> str:
    """Write the game that led to ``state`` as a numbered record.

    The seed is recorded so a replay rolls the same dice.
    """
    lines = []

    all_headers = {"Seed": str(state.seed)}
    if headers:
        all_headers.update(headers)
    result = result_string(state)
    all_headers["Result"] = result
    for key, value in all_headers.items():
        lines.append(f'[{key} "{value}"]')
    lines.append("")

    for num, text in enumerate(state.history, start=1):
        lines.append(f"{num}. {text}")

    lines.append(result)
    return "\n".join(lines)


def text_to_game(text: str, config: Optional[GameConfig] = None) -> tuple[dict[str, str], GameState]:
    """Replay a game record.

    Returns:
        (headers, final state)

    Raises:
        ValueError: If a line cannot be parsed or a recorded turn is rejected.
    """
    headers: dict[str, str] = {}
    commands: list[Command] = []

    for line in text.strip().split("\n"):
        line = line.strip()
        if not line or line in _RESULTS:
            continue

        # Header
        if line.startswith("[") and line.endswith("]"):
            m = re.match(r'(\w+)\s+"([^"]*)"', line[1:-1])
            if m:
                headers[m.group(1)] = m.group(2)
            continue

        # Strip move number prefix
        line = re.sub(r"^\d+\.\s*", "", line)
        if line:
            commands.append(parse_command(line))

    seed_text = headers.get("Seed", "")
    seed = int(seed_text) if seed_text else None
    state = new_game(seed=seed, config=config)
    for num, command in enumerate(commands, start=1):
        result = apply_command(state, command)
        if not result.ok:
            raise ValueError(
                f"Turn {num} ({command_to_text(command)}) rejected: {result.error.value}"
            )
        state = result.state
    return headers, state
