"""Win condition: a side with no pieces left has lost."""

from __future__ import annotations

from typing import Optional

from creativechess.game.adapter import MoveEngineAdapter
from creativechess.game.pieces import Color


def evaluate(adapter: MoveEngineAdapter) -> tuple[bool, Optional[Color]]:
    """Check if the game is over.

    Returns (is_done, winner) where winner is None for a draw. The king has
    no special status, so checkmate is not a win; only elimination is.
    Both sides at zero cannot arise from legal play but is reported as a
    draw.
    """
    white = adapter.count(Color.WHITE)
    black = adapter.count(Color.BLACK)
    if white == 0 and black == 0:
        return True, None
    if white == 0:
        return True, Color.BLACK
    if black == 0:
        return True, Color.WHITE
    return False, None
