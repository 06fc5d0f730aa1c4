#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# pathfinding.py - Uniform-cost objective search over the dungeon grid
#
# Every step costs 1, so the frontier is settled in non-decreasing hop count and
# the first tile that satisfies the objective predicate is a nearest one.
# Discovery records (PathNode) live in a per-search arena list and point at their
# predecessor by arena index; the forward Path is built once, from scratch, when
# a search succeeds.

from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Iterator

if TYPE_CHECKING:
    from dungeon import Tile

Neighbours = Callable[["Tile"], Iterable["Tile"]]
Predicate = Callable[["Tile"], bool]


def within_window(origin: Tile, tile: Tile, radius: int) -> bool:
    """Return True if tile lies inside the square of the given radius centred on origin."""
    return abs(origin.row - tile.row) <= radius and abs(origin.col - tile.col) <= radius


def adjacent(a: Tile, b: Tile) -> bool:
    """Return True if a and b are 4-directional neighbours."""
    return abs(a.row - b.row) + abs(a.col - b.col) == 1


@dataclass(frozen=True, eq=False)
class PathNode:
    """A tile discovered during one search, its hop count, and its predecessor's arena slot.

    Nodes compare and hash by tile coordinate only: the same tile may be pushed
    several times by different frontier branches before it is settled.
    """
    tile: Tile
    distance: int
    parent: int | None = None

    @property
    def position(self) -> tuple[int, int]:
        return (self.tile.row, self.tile.col)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathNode):
            return NotImplemented
        return self.position == other.position

    def __hash__(self) -> int:
        return hash(self.position)


@dataclass(frozen=True)
class Path:
    """Forward chain of tiles from the searcher's origin (index 0) to the objective (last)."""
    tiles: tuple[Tile, ...]

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def __getitem__(self, index: int) -> Tile:
        return self.tiles[index]

    @property
    def origin(self) -> Tile:
        return self.tiles[0]

    @property
    def objective(self) -> Tile:
        return self.tiles[-1]

    @property
    def distance(self) -> int:
        """Number of moves needed to walk the whole path."""
        return len(self.tiles) - 1

    def first_step(self) -> Tile:
        """Return the tile to move onto first; the origin itself if the path has no moves."""
        if len(self.tiles) > 1:
            return self.tiles[1]
        return self.tiles[0]

    def positions(self) -> list[tuple[int, int]]:
        return [(t.row, t.col) for t in self.tiles]


@dataclass(frozen=True)
class PathCursor:
    """A position along a Path. advance() returns a new cursor; the old one is untouched."""
    path: Path
    index: int = 0

    @property
    def tile(self) -> Tile:
        return self.path[self.index]

    def has_next(self) -> bool:
        return self.index + 1 < len(self.path)

    def advance(self) -> PathCursor:
        """Return the cursor one link closer to the objective.

        Raises RuntimeError past the objective: callers must check has_next() first.
        """
        if not self.has_next():
            raise RuntimeError(
                f"cannot advance past the objective at {self.tile.row}, {self.tile.col}"
            )
        return PathCursor(self.path, self.index + 1)


def _build_path(arena: list[PathNode], index: int) -> Path:
    """Walk predecessors from arena[index] back to the origin record and return the forward Path."""
    tiles: list[Tile] = []
    slot: int | None = index
    while slot is not None:
        node = arena[slot]
        tiles.append(node.tile)
        slot = node.parent
    tiles.reverse()
    return Path(tuple(tiles))


def find_objective(
    origin: Tile,
    neighbours: Neighbours,
    is_objective: Predicate,
    window: int | None = None,
    include_origin: bool = False,
    trace: list[int] | None = None,
) -> Path | None:
    """Return the path to the nearest tile satisfying is_objective, or None if none is reachable.

    neighbours(tile) must yield the in-bounds, enterable 4-directional neighbours of
    tile. When window is given, tiles further than window rows or columns from the
    origin are never explored. The origin is always marked visited up front; it is
    only tested against is_objective when include_origin is True.

    If trace is a list, the distance of every settled node is appended to it in
    settle order.
    """
    arena: list[PathNode] = [PathNode(origin, 0)]
    visited: set[tuple[int, int]] = {arena[0].position}
    frontier: list[tuple[int, int]] = []

    if include_origin:
        if trace is not None:
            trace.append(0)
        if is_objective(origin):
            return Path((origin,))

    def expand(slot: int) -> None:
        node = arena[slot]
        for tile in neighbours(node.tile):
            if (tile.row, tile.col) in visited:
                continue
            if window is not None and not within_window(origin, tile, window):
                continue
            arena.append(PathNode(tile, node.distance + 1, slot))
            heapq.heappush(frontier, (node.distance + 1, len(arena) - 1))

    expand(0)
    while frontier:
        distance, slot = heapq.heappop(frontier)
        node = arena[slot]
        if node.position in visited:
            continue
        visited.add(node.position)
        if trace is not None:
            trace.append(distance)
        if is_objective(node.tile):
            return _build_path(arena, slot)
        expand(slot)
    return None
