"""Placement of the router cluster blocks."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

from pydantic import BaseModel, ConfigDict

from noc_storage import GridLoc, NocStorage


class BlockLoc(BaseModel):
    """Represents where a cluster block is placed and whether it may move."""

    model_config = ConfigDict(frozen=True)

    loc: GridLoc
    is_fixed: bool = False


class Placement(BaseModel):
    """Represents the current locations of the cluster blocks."""

    block_locs: dict[int, BlockLoc] = {}

    def get_block_loc(self, cluster_id: int) -> BlockLoc:
        """Get the location of a cluster block."""
        assert cluster_id in self.block_locs, f"Block {cluster_id} is not placed!"
        return self.block_locs[cluster_id]

    def get_block_router(self, cluster_id: int, noc: NocStorage) -> int:
        """Get the internal id of the router the cluster block is placed on."""
        return noc.get_router_at_grid_location(self.get_block_loc(cluster_id).loc)

    def place_block(
        self, cluster_id: int, loc: GridLoc, is_fixed: bool = False
    ) -> None:
        """Places a cluster block at the given location."""
        self.block_locs[cluster_id] = BlockLoc(loc=loc, is_fixed=is_fixed)
