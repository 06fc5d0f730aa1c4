#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# bots.py - Searching bot subclasses for the Dungeon of Doom
#
# Both classes here subclass Bot (defined in dungeon.py) and rely on the search in
# pathfinding.py and the objective policy in strategy.py. The random wanderer stays
# in dungeon.py because it needs neither.

from __future__ import annotations

import random
from dataclasses import dataclass, replace

from dungeon import LOOK_RADIUS, Bot, DungeonMap, Event, Game
from pathfinding import Path, PathCursor, find_objective
from strategy import Objective, classify_objective, first_catchable, has_enough_gold


@dataclass(frozen=True)
class BotState:
    """What a bounded-vision bot remembers between turns.

    cursor and objective are set together or not at all. turns_since_look starts
    at 3 so a fresh bot looks around on its very first turn.
    """
    cursor: PathCursor | None = None
    objective: Objective | None = None
    turns_since_look: int = 3

    def __post_init__(self):
        if (self.cursor is None) != (self.objective is None):
            raise ValueError("A bot state needs both a path cursor and an objective kind, or neither.")

    @property
    def has_objective(self) -> bool:
        return self.cursor is not None


class SmartBot(Bot):
    """Bounded-vision bot: looks at its 5x5 surroundings every few turns and walks
    to the nearest thing worth having. Between looks it wanders at random."""

    LOOK_EVERY = 2  # look again once more than this many turns have passed

    def __init__(self, name: str = "Bot", dungeon_map: DungeonMap | None = None,
                 game: Game | None = None, rng: random.Random | None = None,
                 state: BotState | None = None):
        super().__init__(name, dungeon_map, game, rng)
        self.state = state or BotState()

    def playTurn(self, display=None) -> list[Event]:
        self.state, events = self.step(self.state)
        return [Event(type="turn_start", player=self.name)] + events

    def step(self, state: BotState) -> tuple[BotState, list[Event]]:
        """Play one turn from state and return the state to carry into the next one."""
        state = replace(state, turns_since_look=state.turns_since_look + 1)

        if not state.has_objective:
            if state.turns_since_look > self.LOOK_EVERY:
                return self.observe(state)
            return state, [self.moveRandomly()]

        if state.cursor.path.objective is self.tile:
            if state.objective is Objective.CHASE:
                # The human has probably moved; look again rather than stand here
                return self.observe(state)
            cleared = BotState(turns_since_look=state.turns_since_look)
            if state.objective is Objective.GOLD:
                return cleared, [self.pickup()]
            return cleared, [self.quit()]

        if not state.cursor.has_next():
            raise RuntimeError(
                f"{self.name} is heading for {state.cursor.path.objective} but its path has run out"
            )
        cursor = state.cursor.advance()
        event = self.moveToTile(cursor.tile.row, cursor.tile.col)
        return replace(state, cursor=cursor), [event]

    def observe(self, state: BotState) -> tuple[BotState, list[Event]]:
        """Look at the surrounding window and aim for the nearest objective in it.

        An adjacent human beats anything the search would find, gold underfoot
        included. The look counter resets whether or not anything was found.
        """
        events = [self.look()]
        target = first_catchable(self.map.neighbours(self.tile), self.hasOpponent)
        if target is not None:
            path, kind = Path((self.tile, target)), Objective.CHASE
        else:
            path = find_objective(self.tile, self.map.neighbours, self.isCurrentObjective,
                                  window=LOOK_RADIUS, include_origin=True)
            if path is None:
                return BotState(turns_since_look=0), events
            kind = classify_objective(path.objective, self.gold, self.map.goldWinCondition)
        events.append(Event(type="objective", player=self.name, row=path.objective.row,
                             col=path.objective.col, message=kind.value))
        return BotState(cursor=PathCursor(path), objective=kind, turns_since_look=0), events


class OmniscientBot(Bot):
    """Full-vision bot: sees the whole map and re-plans from scratch every turn."""

    def playTurn(self, display=None) -> list[Event]:
        events = [Event(type="turn_start", player=self.name)]
        tile = self.tile
        enough = has_enough_gold(self.gold, self.map.goldWinCondition)

        if enough and tile.isExit():
            events.append(self.quit())
            return events

        target = first_catchable(self.map.neighbours(tile), self.hasOpponent)
        if target is not None:
            events.append(self.moveToTile(target.row, target.col))
            return events

        if tile.hasGold() and not enough:
            events.append(self.pickup())
            return events

        path = find_objective(tile, self.map.neighbours, self.isCurrentObjective)
        if path is None:
            events.append(Event(type="idle", player=self.name, row=tile.row, col=tile.col))
            return events
        step = path.first_step()
        events.append(self.moveToTile(step.row, step.col))
        return events


# Bot class for each difficulty offered to the human
BOT_TYPES: dict[str, type[Bot]] = {
    "Normal": SmartBot,
    "Impossible": OmniscientBot,
}
