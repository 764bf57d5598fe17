"""Block structure consumed by the renderer."""

from scene_module.structure import Block, Structure

__all__ = [
    "Block",
    "Structure",
]
