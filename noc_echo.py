"""Helper functions to dump the NoC model and its routes in readable text."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

from noc_context import NocContext
from noc_route_decoder import get_route_routers

SEPARATOR = "-" * 62


def echo_noc(ctx: NocContext) -> list[str]:
    """Dumps the NoC constraints, routers and router connections.

    Return a list of lines.
    """
    noc = ctx.noc
    lines = [SEPARATOR, "NoC", SEPARATOR, ""]

    lines += ["NoC Constraints:", SEPARATOR, ""]
    lines += [f"Maximum NoC Link Bandwidth: {noc.link_bandwidth:f}", ""]
    lines += [f"NoC Link Latency: {noc.link_latency:f}", ""]
    lines += [f"NoC Router Latency: {noc.router_latency:f}", ""]

    lines += ["NoC Router List:", SEPARATOR, ""]
    for router in noc.get_noc_routers():
        # for tiles larger than one grid cell this is the bottom left corner
        connected = [
            noc.get_noc_router_user_id(noc.get_single_noc_link(link_id).sink)
            for link_id in noc.get_noc_router_outgoing_links(router.router_id)
        ]
        lines += [
            f"Router {router.user_id}:",
            "Equivalent Physical Tile Grid Position -> "
            f"({router.loc.x},{router.loc.y})",
            "Router Connections ->" + "".join(f" {c}" for c in connected),
            "",
        ]
    return lines


def echo_routes(ctx: NocContext) -> list[str]:
    """Dumps the route of every traffic flow as a chain of router user ids.

    Return a list of lines.
    """
    noc = ctx.noc
    flows = ctx.traffic_flows
    lines = []
    for flow_id in flows.get_all_traffic_flow_id():
        flow = flows.get_traffic_flow(flow_id)
        route = flows.get_route(flow_id)
        if not route:
            lines.append(f"{flow.name}: not routed")
            continue
        routers = get_route_routers(noc, route)
        chain = " -> ".join(str(noc.get_noc_router_user_id(r)) for r in routers)
        lines.append(f"{flow.name}: {chain}")
    return lines


def write_noc_echo(ctx: NocContext, file_name: str) -> None:
    """Writes the NoC dump followed by the routes to a file."""
    with open(file_name, "w", encoding="utf-8") as file:
        file.write("\n".join(echo_noc(ctx) + ["NoC Routes:", SEPARATOR, ""]))
        file.write("\n".join(echo_routes(ctx)) + "\n")
