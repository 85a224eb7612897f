"""Classifies NoC links by the direction they point in."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

from enum import Enum

from noc_storage import NocStorage


class LinkDirection(Enum):
    """Direction of a link in a mesh; up is increasing y, right increasing x."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    def is_horizontal(self) -> bool:
        """Returns whether the direction lies on the x axis.

        Example:
        >>> LinkDirection.LEFT.is_horizontal(), LinkDirection.UP.is_horizontal()
        (True, False)
        """
        return self in (LinkDirection.LEFT, LinkDirection.RIGHT)


def get_link_direction(noc: NocStorage, link_id: int) -> LinkDirection:
    """Gets the direction of a link from its end routers' locations.

    Links must be axis-aligned: the two routers differ in exactly one of
    x and y, and sit on the same layer.
    """
    link = noc.get_single_noc_link(link_id)
    src_loc = noc.get_single_noc_router(link.src).loc
    dst_loc = noc.get_single_noc_router(link.sink).loc

    assert (src_loc.x == dst_loc.x) != (
        src_loc.y == dst_loc.y
    ), f"Link {link_id} is not axis-aligned! {src_loc} -> {dst_loc}"
    assert src_loc.layer == dst_loc.layer, f"Link {link_id} crosses layers!"

    if src_loc.x == dst_loc.x:
        return LinkDirection.UP if dst_loc.y > src_loc.y else LinkDirection.DOWN
    return LinkDirection.RIGHT if dst_loc.x > src_loc.x else LinkDirection.LEFT


def group_noc_links_based_on_direction(
    noc: NocStorage,
) -> dict[LinkDirection, list[int]]:
    """Groups all links by direction.

    Returns a dictionary of {direction: list of link ids}.
    """
    groups: dict[LinkDirection, list[int]] = {d: [] for d in LinkDirection}
    for link in noc.get_noc_links():
        groups[get_link_direction(noc, link.link_id)].append(link.link_id)
    return groups
