"""Game configuration loaded from YAML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Union

import chess
import yaml

logger = logging.getLogger("creativechess.config")

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "creative.yaml"


@dataclass(frozen=True)
class GameConfig:
    """Tunable rules of a game."""
    creative_threshold: int = 20  # Half-moves before the creative phase opens
    initial_uses: int = 1  # Starting uses of every action (shared by both sides)
    king_capture: bool = True  # Kings are ordinary pieces: may be captured
    start_fen: str = chess.STARTING_FEN
    log_level: str = "INFO"

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            expected = type(getattr(GameConfig, f.name))
            # bool is an int subclass; keep the two apart
            if type(value) is not expected:
                raise ValueError(
                    f"Config field {f.name!r} must be {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
        if self.creative_threshold < 0:
            raise ValueError("creative_threshold must be >= 0")
        if self.initial_uses < 0:
            raise ValueError("initial_uses must be >= 0")

    @classmethod
    def from_dict(cls, data: dict) -> GameConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**data)


def load_config(path: Union[str, Path, None] = None) -> GameConfig:
    """Load a GameConfig from YAML. The ``game:`` section is used if present.

    Raises:
        ValueError: On unknown keys or values of the wrong type.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return GameConfig()
        path = DEFAULT_CONFIG_PATH
    path = Path(path)
    with open(path) as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    section = config.get("game", config)
    logger.debug("Loaded config from %s", path)
    return GameConfig.from_dict(section)
