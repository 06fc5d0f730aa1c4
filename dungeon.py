#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# dungeon.py - Main game file: tiles, maps, players, displays, and the turn loop

from __future__ import annotations

import argparse
import os
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass

import utility
from strategy import exists_enough_gold_to_win, has_enough_gold, is_objective

# up, down, left, right as (row, col) offsets
DIRECTIONS: list[tuple[int, int]] = [(0, 1), (0, -1), (1, 0), (-1, 0)]
COMPASS: dict[str, tuple[int, int]] = {"n": (-1, 0), "e": (0, 1), "s": (1, 0), "w": (0, -1)}
LOOK_RADIUS: int = 2           # look shows a 5x5 square centred on the player

DIFFICULTIES: dict[str, str] = {
    "Normal": "The bot looks around every few turns and chases what it saw.",
    "Impossible": "The bot sees the whole map every turn. Just for demonstration: it cheats.",
}


class MapError(ValueError):
    """Raised when a map file cannot be turned into a playable grid."""


# ==== Tiles ====

class Tile(object):
    """One square of the grid. Gold, human and bot flags are independent of each other."""
    symbol = "?"

    def __init__(self, row: int, col: int):
        self.row = row
        self.col = col
        self.gold = False
        self.human = False
        self.bot = False

    def __repr__(self):
        return "{}({}, {})".format(type(self).__name__, self.row, self.col)

    @property
    def position(self) -> tuple[int, int]:
        return (self.row, self.col)

    def canEnter(self) -> bool:
        return True

    def isExit(self) -> bool:
        return False

    def hasGold(self) -> bool:
        return self.gold

    def addGold(self):
        self.gold = True

    def removeGold(self):
        self.gold = False

    def hasHuman(self) -> bool:
        return self.human

    def addHuman(self):
        self.human = True

    def removeHuman(self):
        self.human = False

    def hasBot(self) -> bool:
        return self.bot

    def addBot(self):
        self.bot = True

    def removeBot(self):
        self.bot = False

    def isNotPlayerSpawnPoint(self) -> bool:
        # Players may spawn on the exit, but never on gold, walls or another player
        return self.gold or self.human or self.bot or not self.canEnter()

    def isNotGoldSpawnPoint(self) -> bool:
        return self.isNotPlayerSpawnPoint() or self.isExit()

    def glyph(self) -> str:
        """Single character for this tile: players first, then gold, then the tile itself."""
        if self.bot:
            return "B"
        if self.human:
            return "P"
        if self.gold:
            return "G"
        return self.symbol


class EmptyTile(Tile):
    symbol = "."


class ExitTile(Tile):
    symbol = "E"

    def isExit(self) -> bool:
        return True


class WallTile(Tile):
    symbol = "#"

    def canEnter(self) -> bool:
        return False


# ==== Map ====

class DungeonMap(object):
    """The grid plus the rules that come with a map file: its name and how much gold wins."""

    def __init__(self, name: str, goldWinCondition: int, grid: list[list[Tile]]):
        self.name = name
        self.goldWinCondition = goldWinCondition
        self.grid = grid
        self.goldCount = sum(1 for tile in self.tiles() if tile.hasGold())

    @classmethod
    def fromText(cls, text: str) -> DungeonMap:
        """Parse map text: 'name X', then 'win N', then one line per grid row.

        '#' is a wall, '.' empty, 'G' empty with gold on it, 'E' the exit. Anything
        else becomes an empty tile, the least disruptive default.
        """
        lines = text.rstrip("\r\n").splitlines()
        if len(lines) < 2:
            raise MapError("A map needs a 'name' line and a 'win' line before the grid.")
        if not lines[0].startswith("name "):
            raise MapError("The first line of a map must be 'name <map name>'.")
        if not lines[1].startswith("win "):
            raise MapError("The second line of a map must be 'win <gold>'.")
        name = lines[0][5:].strip()
        try:
            goldWinCondition = int(lines[1][4:])
        except ValueError:
            raise MapError("The gold win condition must be a number.") from None

        rows = lines[2:]
        if not rows:
            raise MapError("The map '{}' has no rows.".format(name))
        width = len(rows[0])
        grid: list[list[Tile]] = []
        for r, line in enumerate(rows):
            if len(line) != width:
                raise MapError("Row {} of '{}' is {} tiles wide; expected {}.".format(r, name, len(line), width))
            row: list[Tile] = []
            for c, symbol in enumerate(line):
                if symbol == "#":
                    row.append(WallTile(r, c))
                elif symbol == "E":
                    row.append(ExitTile(r, c))
                else:
                    tile = EmptyTile(r, c)
                    if symbol == "G":
                        tile.addGold()
                    row.append(tile)
            grid.append(row)
        return cls(name, goldWinCondition, grid)

    @classmethod
    def load(cls, path: str) -> DungeonMap:
        with open(path, encoding="utf-8") as f:
            return cls.fromText(f.read())

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def columns(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    def tiles(self):
        for row in self.grid:
            yield from row

    def isOutOfBounds(self, row: int, col: int) -> bool:
        return row < 0 or row >= self.rows or col < 0 or col >= self.columns

    def tileAt(self, row: int, col: int) -> Tile:
        """Return the tile at (row, col). Callers must bounds-check first."""
        if self.isOutOfBounds(row, col):
            raise IndexError("No tile at row {} column {} on '{}'.".format(row, col, self.name))
        return self.grid[row][col]

    def playerCanMoveTo(self, row: int, col: int) -> bool:
        return not self.isOutOfBounds(row, col) and self.tileAt(row, col).canEnter()

    def neighbours(self, tile: Tile) -> list[Tile]:
        """Enterable, in-bounds tiles 4-directionally adjacent to tile."""
        found = []
        for dr, dc in DIRECTIONS:
            r, c = tile.row + dr, tile.col + dc
            if self.playerCanMoveTo(r, c):
                found.append(self.tileAt(r, c))
        return found

    def window(self, row: int, col: int, radius: int = LOOK_RADIUS) -> list[str]:
        """Rows of glyphs for the square centred on (row, col); off-map cells read as walls."""
        lines = []
        for r in range(row - radius, row + radius + 1):
            line = ""
            for c in range(col - radius, col + radius + 1):
                line += "#" if self.isOutOfBounds(r, c) else self.tileAt(r, c).glyph()
            lines.append(line)
        return lines

    def render(self) -> list[str]:
        return ["".join(tile.glyph() for tile in row) for row in self.grid]

    def randomSpawnTile(self, rng: random.Random) -> Tile:
        candidates = [t for t in self.tiles() if not t.isNotPlayerSpawnPoint()]
        if not candidates:
            raise MapError("There is nowhere left on '{}' to place a player.".format(self.name))
        return rng.choice(candidates)

    def spawnRandomGold(self, rng: random.Random) -> Tile | None:
        """Put one gold on a random free tile and return it, or None if the map is full."""
        candidates = [t for t in self.tiles() if not t.isNotGoldSpawnPoint()]
        if not candidates:
            return None
        tile = rng.choice(candidates)
        tile.addGold()
        self.goldCount += 1
        return tile

    def decrementGoldCount(self):
        if self.goldCount == 0:
            raise RuntimeError("Map gold count on '{}' cannot go below zero.".format(self.name))
        self.goldCount -= 1


def list_maps(directory: str = "maps") -> list[str]:
    """Paths of every .txt map in directory, skipping README files."""
    if not os.path.isdir(directory):
        return []
    return sorted(
        os.path.join(directory, name)
        for name in os.listdir(directory)
        if name.endswith(".txt") and not name.startswith("README")
    )


def map_label(path: str) -> str:
    """'./maps/example_map.txt' -> 'example_map'"""
    return os.path.splitext(os.path.basename(path))[0]


# ==== Events & Displays ====

@dataclass
class Event:
    """One observable thing that happened during a turn."""
    type: str
    player: str = ""
    value: int | None = None
    row: int | None = None
    col: int | None = None
    message: str = ""


def event_text(event: Event) -> str | None:  # noqa: C901
    """Render an Event as console text, or None if the event is silent."""
    t = event.type
    if t == "intro":
        return event.message
    if t == "turn_start":
        return f"{event.player}'s turn"
    if t == "move":
        return "Success"
    if t == "move_failed":
        return "Fail"
    if t == "pickup":
        return f"Success. Gold owned: {event.value}"
    if t == "pickup_failed":
        return f"Fail. Gold owned: {event.value}"
    if t == "look":
        return event.message
    if t == "hello":
        return f"Gold to win: {event.value}"
    if t == "gold":
        return f"Gold owned: {event.value}"
    if t == "invalid":
        return "Fail, not a valid command."
    if t in ("win", "lose"):
        return f"{t.upper()}. {event.message}"
    if t in ("quit", "idle", "objective", "spawn_gold"):
        return None
    return None  # unknown event types are silent


class Display(ABC):
    """Where a game's events go, and where the human's commands come from."""

    @abstractmethod
    def show_events(self, events: list[Event]) -> None: ...

    @abstractmethod
    def show_state(self, game: Game) -> None: ...

    @abstractmethod
    def pick_one(self, options: list, prompt: str = "Your selection: ", formatter=str) -> object: ...

    @abstractmethod
    def read_command(self, prompt: str = "Your turn: ") -> str: ...

    @abstractmethod
    def show_info(self, content: str) -> None: ...


class TerminalDisplay(Display):
    """Plain print()/input() console play, as in the original text adventure."""

    def show_events(self, events: list[Event]) -> None:
        for event in events:
            text = event_text(event)
            if text is not None:
                print(text)

    def show_state(self, game: Game) -> None:
        pass  # the human only sees the map by looking

    def pick_one(self, options: list, prompt: str = "Your selection: ", formatter=str) -> object:
        return utility.userChoice(options, prompt, formatter)

    def read_command(self, prompt: str = "Your turn: ") -> str:
        try:
            return input(prompt)
        except EOFError:
            return "quit"

    def show_info(self, content: str) -> None:
        print(content)


class NullDisplay(Display):
    """Swallows output; the human passes every turn and menus take their first option."""

    def show_events(self, events: list[Event]) -> None:
        pass

    def show_state(self, game: Game) -> None:
        pass

    def pick_one(self, options: list, prompt: str = "Your selection: ", formatter=str) -> object:
        return options[0] if options else None

    def read_command(self, prompt: str = "Your turn: ") -> str:
        return ""

    def show_info(self, content: str) -> None:
        pass


class RecordingDisplay(NullDisplay):
    """Keeps every event it is shown and feeds scripted human commands in order."""

    def __init__(self, commands: list[str] | None = None):
        self.events: list[Event] = []
        self.commands = list(commands or [])
        self.states = 0
        self.info: list[str] = []

    def show_events(self, events: list[Event]) -> None:
        self.events.extend(events)

    def show_state(self, game: Game) -> None:
        self.states += 1

    def read_command(self, prompt: str = "Your turn: ") -> str:
        if self.commands:
            return self.commands.pop(0)
        return ""

    def show_info(self, content: str) -> None:
        self.info.append(content)


# ==== Players ====

class Player(object):
    def __init__(self, name: str = "Player", dungeon_map: DungeonMap | None = None, game: Game | None = None):
        self.name = name
        self.map = dungeon_map
        self.game = game
        self.gold = 0                  # Everyone starts with no gold
        self.tile: Tile | None = None

    def enterTile(self, tile: Tile):
        raise NotImplementedError

    def leaveTile(self, tile: Tile):
        raise NotImplementedError

    def placeOn(self, tile: Tile):
        """Put the player on tile, updating occupancy on both the old and new tile."""
        if self.tile is not None:
            self.leaveTile(self.tile)
        self.tile = tile
        self.enterTile(tile)

    def hasEnoughGoldToWin(self) -> bool:
        return has_enough_gold(self.gold, self.map.goldWinCondition)

    def moveToTile(self, row: int, col: int) -> Event:
        if self.map.playerCanMoveTo(row, col):
            self.placeOn(self.map.tileAt(row, col))
            return Event(type="move", player=self.name, row=row, col=col)
        return Event(type="move_failed", player=self.name, row=row, col=col)

    def pickup(self) -> Event:
        tile = self.tile
        if tile.hasGold():
            tile.removeGold()
            self.map.decrementGoldCount()
            self.gold += 1
            return Event(type="pickup", player=self.name, value=self.gold, row=tile.row, col=tile.col)
        return Event(type="pickup_failed", player=self.name, value=self.gold, row=tile.row, col=tile.col)

    def look(self) -> Event:
        lines = self.map.window(self.tile.row, self.tile.col)
        return Event(type="look", player=self.name, row=self.tile.row, col=self.tile.col,
                     message="\n".join(lines))

    def quit(self) -> Event:
        if self.game is not None:
            self.game.quitGame(self)
        return Event(type="quit", player=self.name, row=self.tile.row, col=self.tile.col)

    def playTurn(self, display: Display | None = None) -> list[Event]:
        raise NotImplementedError


class Human(Player):
    """The player at the keyboard. Commands arrive through a Display."""

    def __init__(self, name: str = "Player", dungeon_map: DungeonMap | None = None,
                 game: Game | None = None, display: Display | None = None):
        super().__init__(name, dungeon_map, game)
        self.display = display

    def enterTile(self, tile: Tile):
        tile.addHuman()

    def leaveTile(self, tile: Tile):
        tile.removeHuman()

    def playTurn(self, display: Display | None = None) -> list[Event]:
        display = display or self.display
        verb, arg = utility.parseCommand(display.read_command("Your turn: "))
        if verb == "hello":
            return [Event(type="hello", player=self.name, value=self.map.goldWinCondition)]
        if verb == "gold":
            return [Event(type="gold", player=self.name, value=self.gold)]
        if verb == "pickup":
            return [self.pickup()]
        if verb == "look":
            return [self.look()]
        if verb == "quit":
            return [self.quit()]
        if verb == "move" and arg in COMPASS:
            dr, dc = COMPASS[arg]
            return [self.moveToTile(self.tile.row + dr, self.tile.col + dc)]
        return [Event(type="invalid", player=self.name, message=verb)]


class Bot(Player):
    """Baseline bot: wanders at random. Smarter subclasses live in bots.py."""

    def __init__(self, name: str = "Bot", dungeon_map: DungeonMap | None = None,
                 game: Game | None = None, rng: random.Random | None = None):
        super().__init__(name, dungeon_map, game)
        self.rng = rng or random.Random()

    def enterTile(self, tile: Tile):
        tile.addBot()

    def leaveTile(self, tile: Tile):
        tile.removeBot()

    def hasOpponent(self, tile: Tile) -> bool:
        return tile.hasHuman()

    def isCurrentObjective(self, tile: Tile) -> bool:
        """Is tile something this bot should chase or go to right now?"""
        return is_objective(tile, self.gold, self.map.goldWinCondition)

    def moveRandomly(self) -> Event:
        """Step onto a uniformly random enterable neighbour; never into a wall."""
        options = self.map.neighbours(self.tile)
        if not options:
            return Event(type="idle", player=self.name, row=self.tile.row, col=self.tile.col)
        tile = self.rng.choice(options)
        return self.moveToTile(tile.row, tile.col)

    def playTurn(self, display: Display | None = None) -> list[Event]:
        return [Event(type="turn_start", player=self.name), self.moveRandomly()]


# ==== Game ====

class Game(object):
    """One human against one bot on one map; the human moves first."""

    def __init__(self, dungeon_map: DungeonMap, difficulty: str = "Normal", seed: int | None = None,
                 rng: random.Random | None = None, human: Human | None = None, bot: Bot | None = None):
        from bots import BOT_TYPES  # noqa: PLC0415  (bots imports this module)
        self.map = dungeon_map
        self.difficulty = difficulty
        self.rng = rng or random.Random(seed)
        if bot is None:
            if difficulty not in BOT_TYPES:
                raise ValueError("Unknown difficulty '{}'; choose from {}.".format(difficulty, ", ".join(BOT_TYPES)))
            bot = BOT_TYPES[difficulty](name="Bot", rng=random.Random(self.rng.random()))
        self.human = human or Human(name="Player")
        self.bot = bot
        self.players: list[Player] = [self.human, self.bot]
        for player in self.players:
            player.map = dungeon_map
            player.game = self
            player.placeOn(dungeon_map.randomSpawnTile(self.rng))
        self.current_player_index = 0
        self.turn_number = 0
        self.quitter: Player | None = None
        self.outcome: str | None = None
        self.winner: Player | None = None

    @property
    def is_over(self) -> bool:
        return self.outcome is not None

    def get_current_player(self) -> Player:
        return self.players[self.current_player_index]

    def get_player_state(self, player: Player) -> dict:
        return {
            "name": player.name,
            "gold": player.gold,
            "row": player.tile.row,
            "col": player.tile.col,
            "enough": player.hasEnoughGoldToWin(),
        }

    def quitGame(self, player: Player):
        self.quitter = player

    def isHumanTouchingBot(self) -> bool:
        return self.human.tile is self.bot.tile

    def existsEnoughGoldToWin(self) -> bool:
        return exists_enough_gold_to_win(self.map.goldCount, self.bot.gold, self.human.gold,
                                         self.map.goldWinCondition)

    def intro(self) -> list[Event]:
        return [
            Event(type="intro", message="Welcome to the Dungeon of Doom!"),
            Event(type="intro", message="The chosen difficulty is: {}.".format(self.difficulty)),
            Event(type="intro", message="The name of the map is: {}.".format(self.map.name)),
            Event(type="intro", message="To win this map you must pick up {} gold.".format(self.map.goldWinCondition)),
        ]

    def check_game_over(self) -> list[Event]:
        """Settle the outcome if the game has ended; return the announcing event, if any."""
        if self.isHumanTouchingBot():
            self.outcome = "caught"
            self.winner = self.bot
            return [Event(type="lose", player=self.human.name, message="The bot caught you!")]
        if self.quitter is None:
            return []
        if self.human.tile.isExit() and self.human.hasEnoughGoldToWin():
            self.outcome = "escaped"
            self.winner = self.human
            return [Event(type="win", player=self.human.name, message="You escaped the Dungeon of Doom!")]
        if self.bot.tile.isExit() and self.bot.hasEnoughGoldToWin():
            self.outcome = "bot_escaped"
            self.winner = self.bot
            return [Event(type="lose", player=self.human.name, message="The bot collected enough gold and won!")]
        self.outcome = "quit"
        return [Event(type="lose", player=self.human.name,
                      message="You quit the game early, better luck next time!")]

    def next_turn(self, display: Display | None = None) -> list[Event]:
        """Play the current player's turn, hand over, top up gold, and check for the end."""
        player = self.get_current_player()
        events = player.playTurn(display)
        self.turn_number += 1
        self.current_player_index = (self.current_player_index + 1) % len(self.players)
        if not self.existsEnoughGoldToWin():
            tile = self.map.spawnRandomGold(self.rng)
            if tile is not None:
                events.append(Event(type="spawn_gold", row=tile.row, col=tile.col))
        events.extend(self.check_game_over())
        return events

    def run(self, display: Display | None = None, max_turns: int | None = None) -> Player | None:
        """Alternate turns until the game ends (or max_turns pass); return the winner, if any."""
        display = display or TerminalDisplay()
        self.human.display = display
        display.show_events(self.intro())
        if self.difficulty in DIFFICULTIES:
            display.show_info(DIFFICULTIES[self.difficulty])
        display.show_state(self)
        while not self.is_over:
            if max_turns is not None and self.turn_number >= max_turns:
                break
            events = self.next_turn(display)
            display.show_events(events)
            display.show_state(self)
        return self.winner


# ==== Define top-level game functions ====

def main():
    parser = argparse.ArgumentParser(description='The Dungeon of Doom')
    parser.add_argument('--map', dest='map_path', default=None, metavar='FILE',
                        help='map file to play (default: choose from --maps)')
    parser.add_argument('--maps', dest='maps_dir', default='maps', metavar='DIR',
                        help='directory of .txt map files (default: maps)')
    parser.add_argument('--difficulty', choices=list(DIFFICULTIES), default=None,
                        help='bot difficulty (default: ask)')
    parser.add_argument('--seed', type=int, default=None,
                        help='seed for spawns and bot randomness')
    parser.add_argument('--tui', action='store_true',
                        help='play in the full-screen Textual interface')
    args = parser.parse_args()

    display = TerminalDisplay()
    map_path = args.map_path
    if map_path is None:
        paths = list_maps(args.maps_dir)
        if not paths:
            parser.error("No valid map files found in '{}' (.txt only, excluding README).".format(args.maps_dir))
        map_path = display.pick_one(paths, "Select a map by entering the index: ", formatter=map_label)
    difficulty = args.difficulty
    if difficulty is None:
        difficulty = display.pick_one(list(DIFFICULTIES), "Select a difficulty by entering the index: ",
                                      formatter=lambda d: "{} - {}".format(d, DIFFICULTIES[d]))
    try:
        dungeon_map = DungeonMap.load(map_path)
    except (OSError, MapError) as e:
        parser.error(str(e))

    game = Game(dungeon_map, difficulty=difficulty, seed=args.seed)
    if args.tui:
        from color_tui import ColorTUIDisplay, DungeonApp  # noqa: PLC0415
        DungeonApp(game=game, display=ColorTUIDisplay()).run()
    else:
        game.run(display=display)


if __name__ == "__main__":
    main()
