"""Tests for the block structure and its occupancy index."""

import math

import numpy as np
import pytest

from scene_module.structure import Structure


class TestStructure:
    """Test suite for Structure."""

    def test_seeded_with_original_block(self):
        """Test that a new structure holds exactly one original block at the origin."""
        structure = Structure()

        assert len(structure) == 1
        assert structure.original.is_original
        assert structure.original.cell == (0, 0)
        assert structure.block_at(0, 0) is structure.original

    def test_add_block_refuses_occupied_cell(self):
        """Test that a taken cell is never overwritten."""
        structure = Structure()

        assert structure.add_block(0, 0) is None
        block = structure.add_block(1, 0)
        assert block is not None
        assert structure.add_block(1, 0) is None
        assert len(structure) == 2

    def test_ids_are_sequential(self):
        """Test that blocks get increasing ids in insertion order."""
        structure = Structure()
        first = structure.add_block(1, 0)
        second = structure.add_block(2, 0)

        assert [b.id for b in structure] == [0, first.id, second.id]
        assert second.id == first.id + 1

    def test_move_block_updates_occupancy(self):
        """Test that moving frees the old cell and claims the new one."""
        structure = Structure()
        block = structure.add_block(1, 0)

        assert structure.move_block(block.id, 2, 3)
        assert block.cell == (2, 3)
        assert structure.block_at(1, 0) is None
        assert structure.block_at(2, 3) is block

    def test_move_block_into_occupied_cell_fails(self):
        """Test that a move onto another block is refused."""
        structure = Structure()
        block = structure.add_block(1, 0)

        assert not structure.move_block(block.id, 0, 0)
        assert block.cell == (1, 0)
        assert structure.block_at(0, 0) is structure.original

    def test_move_block_onto_own_cell_is_noop(self):
        """Test that a block can always stay where it is."""
        structure = Structure()

        assert structure.move_block(structure.original.id, 0, 0)

    def test_move_unknown_block(self):
        """Test that moving a missing id reports failure."""
        assert not Structure().move_block(99, 1, 1)

    @pytest.mark.parametrize(
        "value,expected",
        [(0.49, 0), (0.5, 1), (1.49, 1), (-0.49, 0), (-0.5, 0), (-0.51, -1)],
    )
    def test_snap_rounds_half_up(self, value, expected):
        """Test that snapping uses floor(v / unit + 0.5)."""
        assert Structure().snap(value) == expected

    def test_snap_respects_grid_unit(self):
        """Test that a larger grid unit scales the snap."""
        assert Structure(grid_unit=2.0).snap(2.9) == 1

    def test_world_position_applies_yaw(self):
        """Test that yaw rotates blocks about the pivot in the XZ plane."""
        structure = Structure()
        block = structure.add_block(1, 2)
        structure.rotate(math.pi / 2)

        pos = structure.world_position(block)

        assert np.allclose(pos, [0.0, 2.0, -1.0], atol=1e-9)
        assert np.allclose(structure.local_position(block), [1.0, 2.0, 0.0])

    def test_snapshot_lists_blocks(self):
        """Test that the snapshot is JSON-friendly and complete."""
        structure = Structure(depth=0.5)
        structure.add_block(0, 1)
        structure.rotate(0.25)

        snap = structure.snapshot()

        assert snap["yaw"] == pytest.approx(0.25)
        assert snap["blocks"][0] == {"id": 0, "x": 0, "y": 0, "z": 0.5, "is_original": True}
        assert snap["blocks"][1]["y"] == 1
