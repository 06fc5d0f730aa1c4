#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# strategy.py - Objective policy for Dungeon of Doom bots
# Pure functions only: no side effects, no I/O. Returns verdicts; callers decide how to act.

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable

if TYPE_CHECKING:
    from dungeon import Tile


class Objective(str, Enum):
    """What a bot intends to do once it reaches the tile it is heading for."""
    CHASE = "chase-opponent"
    GOLD = "collect-gold"
    EXIT = "reach-exit"


# ---------------------------------------------------------------------------
# Gold thresholds
# ---------------------------------------------------------------------------

def has_enough_gold(gold: int, win_threshold: int) -> bool:
    """Return True when gold is enough to win by quitting on the exit."""
    return gold >= win_threshold


def exists_enough_gold_to_win(map_gold: int, bot_gold: int, human_gold: int, win_threshold: int) -> bool:
    """Return True when both players could still reach the threshold by looting alone.

    The poorer player is the binding one: the gold left on the map plus the
    smaller purse must cover the threshold.
    """
    return map_gold + min(bot_gold, human_gold) >= win_threshold


# ---------------------------------------------------------------------------
# Objective classification
# ---------------------------------------------------------------------------

def is_objective(tile: Tile, gold: int, win_threshold: int) -> bool:
    """Return True if tile is worth pursuing for a bot holding gold.

    A tile qualifies when any of these hold:
      - the human is standing on it (catching them ends the game),
      - it is the exit and the bot already has enough gold to win,
      - it holds gold and the bot still needs more.
    """
    enough = has_enough_gold(gold, win_threshold)
    return (tile.hasHuman()
            or (enough and tile.isExit())
            or (tile.hasGold() and not enough))


def classify_objective(tile: Tile, gold: int, win_threshold: int) -> Objective | None:
    """Name the kind of objective tile represents, or None if it is not one.

    Priority is exit, then gold, then chase: a tile holding both gold and the
    human is remembered as gold, since the human will probably have moved on by
    the time the bot arrives.
    """
    enough = has_enough_gold(gold, win_threshold)
    if enough and tile.isExit():
        return Objective.EXIT
    if tile.hasGold() and not enough:
        return Objective.GOLD
    if tile.hasHuman():
        return Objective.CHASE
    return None


def first_catchable(tiles: Iterable[Tile], is_opponent: Callable[[Tile], bool]) -> Tile | None:
    """Return the first tile in tiles for which is_opponent holds, or None."""
    for tile in tiles:
        if is_opponent(tile):
            return tile
    return None
