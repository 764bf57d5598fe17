"""Grid-aligned block structure shared by the interaction core and the renderer."""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from typing import Iterator

import numpy as np

Cell = tuple[int, int]


@dataclass
class Block:
    id: int
    x: int
    y: int
    z: float
    is_original: bool = False

    @property
    def cell(self) -> Cell:
        return (self.x, self.y)

    def to_dict(self) -> dict:
        return asdict(self)


class Structure:
    """Ordered blocks on a grid with one rigid yaw about a pivot.

    Cells are unique: every placement goes through the occupancy index and a
    taken cell is refused rather than overwritten. Blocks are only ever added
    or moved; the seed block created at construction is permanent.
    """

    def __init__(
        self,
        *,
        grid_unit: float = 1.0,
        depth: float = 0.0,
        origin: Cell = (0, 0),
        pivot: tuple[float, float, float] = (0.0, 0.0, 0.0),
    ) -> None:
        self.grid_unit = grid_unit
        self.depth = depth
        self.pivot = np.asarray(pivot, dtype=np.float64)
        self.yaw = 0.0
        self._blocks: dict[int, Block] = {}
        self._occupancy: dict[Cell, int] = {}
        self._next_id = 0
        self.original = self._place(origin[0], origin[1], is_original=True)

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks.values())

    def get(self, block_id: int | None) -> Block | None:
        if block_id is None:
            return None
        return self._blocks.get(block_id)

    def block_at(self, x: int, y: int) -> Block | None:
        block_id = self._occupancy.get((x, y))
        return self._blocks.get(block_id) if block_id is not None else None

    def is_occupied(self, x: int, y: int, *, ignore: int | None = None) -> bool:
        block_id = self._occupancy.get((x, y))
        return block_id is not None and block_id != ignore

    def snap(self, value: float) -> int:
        """Round a world coordinate to the nearest grid index."""
        return int(math.floor(value / self.grid_unit + 0.5))

    def add_block(self, x: int, y: int) -> Block | None:
        """Place a new block; returns None when the cell is taken."""
        if self.is_occupied(x, y):
            return None
        return self._place(x, y)

    def move_block(self, block_id: int, x: int, y: int) -> bool:
        """Move a block to a free cell. Returns True when the block ends there."""
        block = self._blocks.get(block_id)
        if block is None:
            return False
        if block.cell == (x, y):
            return True
        if self.is_occupied(x, y, ignore=block_id):
            return False
        del self._occupancy[block.cell]
        block.x, block.y = x, y
        self._occupancy[block.cell] = block_id
        return True

    def rotate(self, delta: float) -> float:
        self.yaw += delta
        return self.yaw

    def local_position(self, block: Block) -> np.ndarray:
        return np.array([block.x * self.grid_unit, block.y * self.grid_unit, block.z], dtype=np.float64)

    def world_position(self, block: Block) -> np.ndarray:
        """Block centre after the structure yaw is applied about the pivot."""
        offset = self.local_position(block) - self.pivot
        cos_yaw, sin_yaw = math.cos(self.yaw), math.sin(self.yaw)
        rotated = np.array(
            [
                cos_yaw * offset[0] + sin_yaw * offset[2],
                offset[1],
                -sin_yaw * offset[0] + cos_yaw * offset[2],
            ],
            dtype=np.float64,
        )
        return rotated + self.pivot

    def snapshot(self) -> dict:
        return {
            "grid_unit": self.grid_unit,
            "depth": self.depth,
            "yaw": self.yaw,
            "pivot": [float(v) for v in self.pivot],
            "blocks": [block.to_dict() for block in self._blocks.values()],
        }

    def _place(self, x: int, y: int, *, is_original: bool = False) -> Block:
        block = Block(id=self._next_id, x=int(x), y=int(y), z=self.depth, is_original=is_original)
        self._next_id += 1
        self._blocks[block.id] = block
        self._occupancy[block.cell] = block.id
        return block
