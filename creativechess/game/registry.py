"""Action ids and the shared pool of remaining uses.

Both colors draw from the same counters: once either side spends the last
use of an action, it is gone for both. Spy Drone adds per-color flags on
top of the shared counters ("barred" actions a color may no longer use).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional

from creativechess.game.errors import ActionError, RuleViolation
from creativechess.game.pieces import Color

logger = logging.getLogger("creativechess.registry")


class ActionId(str, Enum):
    SNIP = "snip"
    RUBBER_BAND = "rubber_band"
    NUKE = "nuke"
    JOB_APPLICATION = "job_application"
    ROBOT_PROXY = "robot_proxy"
    SWAP_PLACES = "swap_places"
    SHIELD = "shield"
    EMP_BLAST = "emp_blast"
    LOOT_DROP = "loot_drop"
    TIME_FREEZE = "time_freeze"
    CLONE_RAY = "clone_ray"
    SPY_DRONE = "spy_drone"
    SNIPER_SHOT = "sniper_shot"
    PUZZLE_TRAP = "puzzle_trap"
    ROCKET_BARRAGE = "rocket_barrage"


def parse_action_id(value) -> Optional[ActionId]:
    """ActionId for an enum member or its string value, else None."""
    if isinstance(value, ActionId):
        return value
    try:
        return ActionId(value)
    except (ValueError, TypeError):
        return None


class ActionRegistry:
    """Remaining uses per action plus Spy Drone usability flags."""

    def __init__(self, action_ids: Iterable[ActionId] = tuple(ActionId),
                 initial_uses: int = 1):
        if initial_uses < 0:
            raise ValueError(f"initial_uses must be >= 0, got {initial_uses}")
        self._uses: dict[ActionId, int] = {a: initial_uses for a in action_ids}
        self._barred: dict[Color, set[ActionId]] = {c: set() for c in Color}
        self._used_by: dict[Color, set[ActionId]] = {c: set() for c in Color}

    def clone(self) -> ActionRegistry:
        new = ActionRegistry.__new__(ActionRegistry)
        new._uses = dict(self._uses)
        new._barred = {c: set(s) for c, s in self._barred.items()}
        new._used_by = {c: set(s) for c, s in self._used_by.items()}
        return new

    def __contains__(self, action_id) -> bool:
        return action_id in self._uses

    @property
    def uses(self) -> dict[ActionId, int]:
        """Copy of the remaining-uses table, in catalog order."""
        return dict(self._uses)

    def remaining_uses(self, action_id: ActionId) -> int:
        return self._uses[action_id]

    def grant_uses(self, action_id: ActionId, n: int) -> None:
        self._uses[action_id] = max(0, self._uses[action_id] + n)
        logger.debug("%s now has %d use(s)", action_id.value, self._uses[action_id])

    def consume(self, action_id: ActionId, color: Optional[Color] = None) -> None:
        """Spend one use. Raises RuleViolation if none are left."""
        if self._uses[action_id] <= 0:
            raise RuleViolation(ActionError.ACTION_EXHAUSTED, action_id.value)
        self._uses[action_id] -= 1
        if color is not None:
            self._used_by[color].add(action_id)

    def list_available(self) -> set[ActionId]:
        return {a for a, n in self._uses.items() if n > 0}

    # ------------------------------------------------------------------
    # Per-color usability
    # ------------------------------------------------------------------

    def bar(self, action_id: ActionId, color: Color) -> None:
        self._barred[color].add(action_id)

    def unbar(self, action_id: ActionId, color: Color) -> None:
        self._barred[color].discard(action_id)

    def is_barred(self, action_id: ActionId, color: Color) -> bool:
        return action_id in self._barred[color]

    def used_by(self, color: Color) -> frozenset[ActionId]:
        return frozenset(self._used_by[color])

    def is_usable_by(self, action_id: ActionId, color: Color) -> bool:
        return self._uses[action_id] > 0 and action_id not in self._barred[color]

    def usable_by(self, color: Color) -> list[ActionId]:
        """Actions ``color`` may spend right now, in catalog order."""
        return [a for a in self._uses if self.is_usable_by(a, color)]
