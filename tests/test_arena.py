#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# tests/test_arena.py - Scripted explorer, seeded matches, standings and JSONL records

import io
import json
import os
import random
import tempfile
import unittest
from unittest.mock import MagicMock, patch
from arena import (
    ArenaEntry, MatchResult, ScriptedHuman, default_entries, print_standings, run_arena, run_match,
)
from bots import OmniscientBot, SmartBot
from dungeon import Bot, DungeonMap

MAPS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "maps")
SMALL = os.path.join(MAPS_DIR, "small_example.txt")


def _result(label, bot_won=False, human_won=False, turns=10):
    return MatchResult(map_name="m", bot_label=label, seed=0, outcome="x", bot_won=bot_won,
                       human_won=human_won, turns=turns, bot_gold=0, human_gold=0)


class TestScriptedHuman(unittest.TestCase):
    """The explorer loots, heads for the exit, and quits there."""

    def setUp(self):
        self.map = DungeonMap.fromText("name Line\nwin 1\n#######\n#.G..E#\n#######\n")
        self.human = ScriptedHuman(rng=random.Random(0))
        self.human.map = self.map
        self.human.game = MagicMock()
        self.human.placeOn(self.map.tileAt(1, 1))

    def testLootsThenEscapes(self):
        """Verify the explorer walks to gold, picks it up, walks to the exit and quits."""
        seen = []
        for _ in range(6):
            [event] = self.human.playTurn()
            seen.append(event.type)
        self.assertEqual(seen, ["move", "pickup", "move", "move", "move", "quit"])
        self.assertEqual(self.human.gold, 1)
        self.assertTrue(self.human.tile.isExit())
        self.human.game.quitGame.assert_called_once_with(self.human)

    def testWandersWithoutTarget(self):
        """Verify the explorer still moves when nothing it wants is reachable."""
        m = DungeonMap.fromText("name Bare\nwin 1\n.....\n")
        self.human.placeOn(m.tileAt(0, 2))
        self.human.map = m
        [event] = self.human.playTurn()
        self.assertEqual(event.type, "move")


class TestMatches(unittest.TestCase):
    """run_match and run_arena."""

    def testMatchIsRepeatable(self):
        """Verify the same seed replays the same game."""
        results = []
        for _ in range(2):
            entry = ArenaEntry(label="Normal", bot_factory=SmartBot)
            result, game, _ = run_match(DungeonMap.load(SMALL), entry, seed=1234, max_turns=200)
            results.append(result)
            self.assertEqual(entry.results, [result])
        self.assertEqual(results[0], results[1])

    def testMatchRecordsOutcome(self):
        """Verify a result agrees with the finished game."""
        entry = ArenaEntry(label="Impossible", bot_factory=OmniscientBot)
        result, game, recorder = run_match(DungeonMap.load(SMALL), entry, seed=7, max_turns=300)
        self.assertEqual(result.turns, game.turn_number)
        self.assertEqual(result.bot_won, game.winner is game.bot)
        self.assertFalse(result.bot_won and result.human_won)
        self.assertIn(result.outcome, ("caught", "escaped", "bot_escaped", "quit", "timeout"))
        self.assertGreater(len(recorder.events), 0)

    def testTimeoutWhenTurnsRunOut(self):
        """Verify a game cut short by max_turns is recorded as a timeout draw."""
        entry = ArenaEntry(label="Random", bot_factory=Bot)
        result, game, _ = run_match(DungeonMap.load(SMALL), entry, seed=3, max_turns=1)
        self.assertEqual(result.turns, 1)
        if not game.is_over:
            self.assertEqual(result.outcome, "timeout")
            self.assertFalse(result.bot_won or result.human_won)

    def testArenaWritesRecords(self):
        """Verify every game appends one JSONL line and every entry plays every game."""
        entries = default_entries()
        with tempfile.TemporaryDirectory() as d:
            records = os.path.join(d, "games.jsonl")
            ranked = run_arena([SMALL], entries, n_games=2, seed=5, max_turns=150, records_path=records)
            with open(records, encoding="utf-8") as f:
                lines = [json.loads(line) for line in f]
        self.assertEqual(len(lines), 6)
        self.assertEqual({line["bot"] for line in lines}, {"Random", "Normal", "Impossible"})
        self.assertIn("look", lines[0]["bot_events"])
        for entry in ranked:
            self.assertEqual(len(entry.results), 2)
        wins = [e.wins for e in ranked]
        self.assertEqual(wins, sorted(wins, reverse=True))

    def testEntriesShareSeeds(self):
        """Verify every bot family faces the same spawn seeds."""
        entries = default_entries()
        run_arena([SMALL], entries, n_games=3, seed=8, max_turns=50)
        seeds = [[r.seed for r in e.results] for e in entries]
        self.assertEqual(seeds[0], seeds[1])
        self.assertEqual(seeds[1], seeds[2])


class TestStandings(unittest.TestCase):
    """ArenaEntry tallies and print_standings."""

    def testTallies(self):
        """Verify wins, losses, draws and mean turns."""
        entry = ArenaEntry(label="Normal", bot_factory=SmartBot, results=[
            _result("Normal", bot_won=True, turns=10),
            _result("Normal", human_won=True, turns=20),
            _result("Normal", turns=30),
        ])
        self.assertEqual((entry.wins, entry.losses, entry.draws), (1, 1, 1))
        self.assertAlmostEqual(entry.mean_turns, 20.0)
        self.assertEqual(ArenaEntry(label="Empty", bot_factory=Bot).mean_turns, 0.0)

    def testPrintStandingsOrder(self):
        """Verify the table lists the bot with most wins first."""
        weak = ArenaEntry(label="Random", bot_factory=Bot, results=[_result("Random")])
        strong = ArenaEntry(label="Impossible", bot_factory=OmniscientBot,
                            results=[_result("Impossible", bot_won=True)])
        with patch('sys.stdout', new_callable=io.StringIO) as out:
            print_standings([weak, strong])
        text = out.getvalue()
        self.assertLess(text.index("Impossible"), text.index("Random"))

    def testDefaultEntries(self):
        """Verify the three bot families are entered."""
        labels = [e.label for e in default_entries()]
        self.assertEqual(labels, ["Random", "Normal", "Impossible"])


if __name__ == "__main__":
    unittest.main(buffer=True)
