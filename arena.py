#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# arena.py - Headless harness for bot evaluation
#
# Plays each bot family against a scripted explorer on every map given, with
# seeded spawns so runs can be repeated. Per-game records can be exported to JSONL.
#
# Usage:
#   python arena.py maps/small_example.txt             # 20 games per bot on one map
#   python arena.py maps/*.txt --games 100 --seed 7    # more games, fixed seed
#   python arena.py maps/*.txt --records out.jsonl     # also export per-game records

from __future__ import annotations

import argparse
import json
import random
from dataclasses import dataclass, field
from typing import Callable

from bots import OmniscientBot, SmartBot
from dungeon import Bot, DungeonMap, Event, Game, Human, MapError, RecordingDisplay, map_label
from pathfinding import find_objective
from strategy import has_enough_gold


class ScriptedHuman(Human):
    """Stand-in for the keyboard: loots the nearest gold, then heads for the exit and quits.

    It knows where everything is but ignores the bot entirely, which makes it a
    fair yardstick for how quickly each bot family catches or outruns a player.
    """

    def __init__(self, name: str = "Explorer", rng: random.Random | None = None):
        super().__init__(name)
        self.rng = rng or random.Random()

    def wants(self, tile) -> bool:
        if has_enough_gold(self.gold, self.map.goldWinCondition):
            return tile.isExit()
        return tile.hasGold()

    def playTurn(self, display=None) -> list[Event]:
        tile = self.tile
        enough = self.hasEnoughGoldToWin()
        if enough and tile.isExit():
            return [self.quit()]
        if tile.hasGold() and not enough:
            return [self.pickup()]
        path = find_objective(tile, self.map.neighbours, self.wants)
        if path is not None:
            step = path.first_step()
        else:
            options = self.map.neighbours(tile)
            if not options:
                return [Event(type="idle", player=self.name, row=tile.row, col=tile.col)]
            step = self.rng.choice(options)
        return [self.moveToTile(step.row, step.col)]


@dataclass
class MatchResult:
    """How one game between a bot and the explorer ended."""
    map_name: str
    bot_label: str
    seed: int
    outcome: str          # caught | escaped | bot_escaped | quit | timeout
    bot_won: bool
    human_won: bool
    turns: int
    bot_gold: int
    human_gold: int


@dataclass
class ArenaEntry:
    """One bot family in the arena and the results it has piled up."""
    label: str
    bot_factory: Callable[..., Bot]
    results: list[MatchResult] = field(default_factory=list)

    @property
    def wins(self) -> int:
        return sum(1 for r in self.results if r.bot_won)

    @property
    def losses(self) -> int:
        return sum(1 for r in self.results if r.human_won)

    @property
    def draws(self) -> int:
        return len(self.results) - self.wins - self.losses

    @property
    def mean_turns(self) -> float:
        return sum(r.turns for r in self.results) / len(self.results) if self.results else 0.0


def run_match(
    dungeon_map: DungeonMap,
    entry: ArenaEntry,
    seed: int,
    max_turns: int = 500,
) -> tuple[MatchResult, Game, RecordingDisplay]:
    """Play one seeded game of entry's bot against a ScriptedHuman; return the result."""
    rng = random.Random(seed)
    human = ScriptedHuman(rng=random.Random(rng.random()))
    bot = entry.bot_factory(name=entry.label, rng=random.Random(rng.random()))
    game = Game(dungeon_map, difficulty=entry.label, rng=rng, human=human, bot=bot)
    recorder = RecordingDisplay()
    game.run(display=recorder, max_turns=max_turns)
    result = MatchResult(
        map_name=dungeon_map.name,
        bot_label=entry.label,
        seed=seed,
        outcome=game.outcome or "timeout",
        bot_won=game.winner is bot,
        human_won=game.winner is human,
        turns=game.turn_number,
        bot_gold=bot.gold,
        human_gold=human.gold,
    )
    entry.results.append(result)
    return result, game, recorder


def _write_game_record(records_path: str, result: MatchResult, all_events: list[Event]) -> None:
    """Append one JSONL record describing a completed game.

    Besides the result fields, each line counts the bot's looks, pickups and
    failed moves so downstream queries can compare search behaviour.
    """
    counts = {"look": 0, "pickup": 0, "move_failed": 0, "objective": 0}
    for ev in all_events:
        if ev.player == result.bot_label and ev.type in counts:
            counts[ev.type] += 1
    record = {
        "map": result.map_name,
        "bot": result.bot_label,
        "seed": result.seed,
        "outcome": result.outcome,
        "bot_won": result.bot_won,
        "human_won": result.human_won,
        "turns": result.turns,
        "bot_gold": result.bot_gold,
        "human_gold": result.human_gold,
        "bot_events": counts,
    }
    with open(records_path, "a", encoding="utf-8") as f:
        f.write(json.dumps(record, separators=(",", ":")) + "\n")


def run_arena(
    map_paths: list[str],
    entries: list[ArenaEntry],
    n_games: int = 20,
    seed: int | None = None,
    max_turns: int = 500,
    records_path: str | None = None,
) -> list[ArenaEntry]:
    """Play n_games per entry per map; return entries sorted by bot win count.

    Every entry sees the same sequence of game seeds on each map, so spawns
    match across bot families.
    """
    master = random.Random(seed)
    for path in map_paths:
        seeds = [master.randrange(2**32) for _ in range(n_games)]
        for entry in entries:
            for game_seed in seeds:
                # Maps are mutated by play; reload for every game
                dungeon_map = DungeonMap.load(path)
                result, _game, recorder = run_match(dungeon_map, entry, game_seed, max_turns)
                if records_path is not None:
                    _write_game_record(records_path, result, recorder.events)
    return sorted(entries, key=lambda e: -e.wins)


def print_standings(entries: list[ArenaEntry]) -> None:
    """Print standings table sorted by bot wins descending."""
    sorted_entries = sorted(entries, key=lambda e: -e.wins)
    print(f"\n  {'Rank':>4}  {'Bot':<12}  {'W':>5}  {'L':>5}  {'D':>5}  {'Avg turns':>9}")
    print(f"  {'----':>4}  {'-' * 12}  {'-----':>5}  {'-----':>5}  {'-----':>5}  {'---------':>9}")
    for rank, e in enumerate(sorted_entries, 1):
        print(f"  {rank:>4}  {e.label:<12}  {e.wins:>5}  {e.losses:>5}  {e.draws:>5}  {e.mean_turns:>9.1f}")
    print()


def default_entries() -> list[ArenaEntry]:
    """The three bot families: random wanderer, bounded vision, full vision."""
    return [
        ArenaEntry(label="Random", bot_factory=Bot),
        ArenaEntry(label="Normal", bot_factory=SmartBot),
        ArenaEntry(label="Impossible", bot_factory=OmniscientBot),
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description="Bot arena for the Dungeon of Doom")
    parser.add_argument("maps", nargs="+", metavar="MAP",
                        help="map files to play on")
    parser.add_argument("--games", type=int, default=20, metavar="N",
                        help="games per bot per map (default: 20)")
    parser.add_argument("--seed", type=int, default=None, metavar="N",
                        help="master seed for repeatable runs")
    parser.add_argument("--max-turns", type=int, default=500, metavar="N",
                        help="turns before a game is called a draw (default: 500)")
    parser.add_argument("--records", metavar="FILE", default=None,
                        help="append per-game JSONL records to FILE")
    args = parser.parse_args()

    for path in args.maps:
        try:
            DungeonMap.load(path)
        except (OSError, MapError) as e:
            parser.error(f"{map_label(path)}: {e}")

    entries = run_arena(args.maps, default_entries(), n_games=args.games, seed=args.seed,
                        max_turns=args.max_turns, records_path=args.records)
    print_standings(entries)


if __name__ == "__main__":
    main()
