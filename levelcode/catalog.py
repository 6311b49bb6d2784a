"""
Closed catalogs and numeric limits used by the validators.

Both are frozen dataclasses passed into the validators, so callers (and
tests) can substitute their own tables.
"""

from dataclasses import dataclass
from typing import Tuple

from levelcode.config import Config


@dataclass(frozen=True)
class Catalog:
    """Enumerations an imported level may draw from."""
    block_types: Tuple[str, ...] = (
        "normal",
        "hard",
        "special",
        "power_up",
        "indestructible",
    )
    power_ups: Tuple[str, ...] = (
        "multiball",
        "laser",
        "sticky",
        "expand",
        "slow",
        "fast",
        "extraLife",
        "shield",
    )
    difficulties: Tuple[str, ...] = ("easy", "medium", "hard")

    def is_block_type(self, value: str) -> bool:
        return value in self.block_types

    def is_power_up(self, value: str) -> bool:
        return value in self.power_ups

    def is_difficulty(self, value: str) -> bool:
        return value in self.difficulties


@dataclass(frozen=True)
class Limits:
    """Inclusive numeric bounds for document fields."""
    min_grid_size: int = Config.MIN_GRID_SIZE
    max_grid_size: int = Config.MAX_GRID_SIZE
    max_id_length: int = Config.MAX_ID_LENGTH
    max_name_length: int = Config.MAX_NAME_LENGTH
    max_author_length: int = Config.MAX_AUTHOR_LENGTH
    max_description_length: int = Config.MAX_DESCRIPTION_LENGTH
    min_health: int = Config.MIN_HEALTH
    max_health: int = Config.MAX_HEALTH
    min_ball_speed: float = Config.MIN_BALL_SPEED
    max_ball_speed: float = Config.MAX_BALL_SPEED
    min_paddle_size: float = Config.MIN_PADDLE_SIZE
    max_paddle_size: float = Config.MAX_PADDLE_SIZE


DEFAULT_CATALOG = Catalog()
DEFAULT_LIMITS = Limits()
