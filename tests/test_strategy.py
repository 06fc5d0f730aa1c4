#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# tests/test_strategy.py - Objective policy and gold threshold tests

import itertools
import unittest
from dungeon import EmptyTile, ExitTile
from strategy import (
    Objective, classify_objective, exists_enough_gold_to_win, first_catchable,
    has_enough_gold, is_objective,
)


def _tile(exit_tile=False, gold=False, human=False, bot=False):
    tile = ExitTile(0, 0) if exit_tile else EmptyTile(0, 0)
    if gold:
        tile.addGold()
    if human:
        tile.addHuman()
    if bot:
        tile.addBot()
    return tile


class TestThresholds(unittest.TestCase):
    """has_enough_gold and exists_enough_gold_to_win."""

    def testHasEnoughGold(self):
        """Verify the threshold is inclusive."""
        self.assertFalse(has_enough_gold(1, 2))
        self.assertTrue(has_enough_gold(2, 2))
        self.assertTrue(has_enough_gold(3, 2))

    def testExistsEnoughGoldUsesPoorerPlayer(self):
        """Verify map gold plus the smaller purse must cover the threshold."""
        self.assertFalse(exists_enough_gold_to_win(1, 0, 3, 2))
        self.assertTrue(exists_enough_gold_to_win(2, 0, 5, 2))
        self.assertTrue(exists_enough_gold_to_win(0, 2, 2, 2))
        self.assertFalse(exists_enough_gold_to_win(0, 5, 1, 2))


class TestObjectivePolicy(unittest.TestCase):
    """is_objective and classify_objective."""

    def testHumanIsAlwaysAnObjective(self):
        """Verify the human is worth chasing whatever the bot holds."""
        for gold in (0, 5):
            self.assertTrue(is_objective(_tile(human=True), gold, 2))

    def testExitOnlyWithEnoughGold(self):
        """Verify the exit becomes an objective once the threshold is met."""
        self.assertFalse(is_objective(_tile(exit_tile=True), 1, 2))
        self.assertTrue(is_objective(_tile(exit_tile=True), 2, 2))
        self.assertEqual(classify_objective(_tile(exit_tile=True), 2, 2), Objective.EXIT)

    def testGoldOnlyWhileShort(self):
        """Verify gold stops mattering once the threshold is met."""
        self.assertTrue(is_objective(_tile(gold=True), 1, 2))
        self.assertFalse(is_objective(_tile(gold=True), 2, 2))
        self.assertEqual(classify_objective(_tile(gold=True), 1, 2), Objective.GOLD)
        self.assertIsNone(classify_objective(_tile(gold=True), 2, 2))

    def testEmptyTileIsNothing(self):
        """Verify plain floor is never an objective."""
        self.assertFalse(is_objective(_tile(), 0, 2))
        self.assertIsNone(classify_objective(_tile(), 0, 2))

    def testGoldUnderHumanClassifiesAsGold(self):
        """Verify a tile with both gold and the human is remembered as gold."""
        self.assertEqual(classify_objective(_tile(gold=True, human=True), 0, 2), Objective.GOLD)
        self.assertEqual(classify_objective(_tile(gold=True, human=True), 2, 2), Objective.CHASE)
        self.assertEqual(classify_objective(_tile(human=True), 0, 2), Objective.CHASE)

    def testClassificationAgreesWithPredicate(self):
        """Verify every flag combination is classified iff it is an objective, without side effects."""
        for exit_tile, gold, human, bot, purse in itertools.product(
                (False, True), (False, True), (False, True), (False, True), (0, 1, 2, 3)):
            tile = _tile(exit_tile, gold, human, bot)
            before = (tile.hasGold(), tile.hasHuman(), tile.hasBot())
            kind = classify_objective(tile, purse, 2)
            with self.subTest(exit=exit_tile, gold=gold, human=human, bot=bot, purse=purse):
                self.assertEqual(kind is not None, is_objective(tile, purse, 2))
                self.assertEqual(kind, classify_objective(tile, purse, 2))
                self.assertEqual(before, (tile.hasGold(), tile.hasHuman(), tile.hasBot()))

    def testObjectiveValues(self):
        """Verify the objective kinds carry their readable names."""
        self.assertEqual(Objective.CHASE.value, "chase-opponent")
        self.assertEqual(Objective.GOLD.value, "collect-gold")
        self.assertEqual(Objective.EXIT.value, "reach-exit")


def _has_human(tile) -> bool:
    return tile.hasHuman()


class TestFirstCatchable(unittest.TestCase):

    def testFindsHuman(self):
        """Verify the first tile holding the human is returned."""
        tiles = [_tile(), _tile(gold=True), _tile(human=True)]
        self.assertIs(first_catchable(tiles, _has_human), tiles[2])

    def testNoneWhenAbsent(self):
        """Verify None comes back when nobody is in reach."""
        self.assertIsNone(first_catchable([_tile(), _tile(gold=True)], _has_human))
        self.assertIsNone(first_catchable([], _has_human))

    def testUsesPredicate(self):
        """Verify the predicate decides what counts as catchable."""
        tiles = [_tile(human=True), _tile(gold=True)]
        self.assertIs(first_catchable(tiles, lambda t: t.hasGold()), tiles[1])
        self.assertIsNone(first_catchable(tiles, lambda t: False))


if __name__ == "__main__":
    unittest.main(buffer=True)
