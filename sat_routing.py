"""Routes NoC traffic flows with an ILP model.

Paths are not enumerated. For every (traffic flow, NoC link) pair there is a
binary variable that is set when the flow is routed through the link, and
the constraints force the activated links of each flow to form a single
path from its source router to its sink router:

1. continuity: one link leaves the source, one link enters the sink and
   every other router has as many activated incoming as outgoing links
   (at most one each);
2. distance: the activated right links minus left links equal the
   horizontal distance between source and sink, likewise for up and down;
3. turns: consecutive links that form a turn forbidden by the turn model
   are never both activated.

The objective minimizes the number of congested links first, then the
number of links traversed beyond each flow's latency budget, and last the
aggregate bandwidth used on all links.
"""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

import logging
import math

from pulp import LpAffineExpression, LpMinimize, LpProblem, LpVariable, lpSum
from pydantic import BaseModel

from compressed_grid import CompressedGrid, create_compressed_noc_grid
from noc_context import NocContext
from noc_direction import LinkDirection, group_noc_links_based_on_direction
from noc_route_decoder import convert_vars_to_locs, convert_vars_to_routes
from noc_solver import (
    SolverParams,
    add_conditional_ge,
    add_conditional_le,
    add_max_equality,
    get_bool_value,
    get_int_value,
    set_hint,
    solve_model,
)
from noc_storage import GridLoc
from placement import Placement

logger = logging.getLogger(__name__)

FlowLinkVars = dict[tuple[int, int], LpVariable]

# TODO: derive the overrun domain from the NoC diameter
LATENCY_OVERRUN_MAX = 20


class NocRoutingConfig(BaseModel):
    """Represents the settings of a NoC routing pass.

    bandwidth_resolution: integer units a full link bandwidth is split into.
    congestion_weight, latency_overrun_weight, bandwidth_weight: objective
        weights, each much larger than the next.
    hard_congestion: forbid congested links instead of penalizing them.
    minimize_aggregate_bandwidth: after the first solve, keep the congestion
        and latency overrun totals and re-solve for the least bandwidth.
    """

    bandwidth_resolution: int = 128
    congestion_weight: int = 1024 * 16
    latency_overrun_weight: int = 1024
    bandwidth_weight: int = 1
    hard_congestion: bool = False
    minimize_aggregate_bandwidth: bool = False
    solver: SolverParams = SolverParams()


def get_flow_link_vars(
    flow_link_vars: FlowLinkVars, flow_ids: list[int], link_ids: list[int]
) -> list[LpVariable]:
    """Gets the variables of the requested (flow, link) pairs that exist.

    Returns a list of LpVariable.
    """
    return [
        flow_link_vars[(f, link)]
        for f in flow_ids
        for link in link_ids
        if (f, link) in flow_link_vars
    ]


def create_flow_link_vars(
    ctx: NocContext,
) -> tuple[FlowLinkVars, dict[int, LpVariable]]:
    """Creates a binary variable per (flow, link) pair.

    Also creates the latency overrun variable of each latency-constrained
    flow.

    Returns the flow-link variables and the latency overrun variables.
    """
    flow_link_vars: FlowLinkVars = {}
    latency_overrun_vars: dict[int, LpVariable] = {}

    for flow_id in ctx.traffic_flows.get_all_traffic_flow_id():
        flow = ctx.traffic_flows.get_traffic_flow(flow_id)
        if flow.is_latency_constrained():
            latency_overrun_vars[flow_id] = LpVariable(
                name=f"overrun_f{flow_id}",
                lowBound=0,
                upBound=LATENCY_OVERRUN_MAX,
                cat="Integer",
            )

        for link in ctx.noc.get_noc_links():
            flow_link_vars[(flow_id, link.link_id)] = LpVariable(
                name=f"x_f{flow_id}_l{link.link_id}", cat="Binary"
            )
    return flow_link_vars, latency_overrun_vars


def comp_max_number_of_traversed_links(ctx: NocContext, flow_id: int) -> int:
    """Translates the latency bound of a flow into a maximum number of links.

    Each traversed link costs one link latency and one router latency, and
    the sink router adds one more router latency.

    Returns an int.
    """
    flow = ctx.traffic_flows.get_traffic_flow(flow_id)
    assert flow.is_latency_constrained(), f"Flow {flow.name} has no latency bound!"

    link_latency = ctx.noc.link_latency
    router_latency = ctx.noc.router_latency
    assert link_latency + router_latency > 0, "NoC latencies must be positive!"

    return math.floor(
        (flow.max_latency - router_latency) / (link_latency + router_latency)
    )


def constrain_latency_overrun_vars(
    m: LpProblem,
    ctx: NocContext,
    flow_link_vars: FlowLinkVars,
    latency_overrun_vars: dict[int, LpVariable],
) -> None:
    """Makes each overrun variable count the links beyond the flow's budget.

    overrun = max(0, number of activated links - maximum number of links)
    """
    all_links = [link.link_id for link in ctx.noc.get_noc_links()]
    for flow_id, overrun_var in latency_overrun_vars.items():
        n_max_links = comp_max_number_of_traversed_links(ctx, flow_id)
        link_vars = get_flow_link_vars(flow_link_vars, [flow_id], all_links)
        add_max_equality(
            m, overrun_var, lpSum(link_vars) - n_max_links, name=f"overrun_f{flow_id}"
        )


def forbid_illegal_turns(
    m: LpProblem, ctx: NocContext, flow_link_vars: FlowLinkVars
) -> None:
    """Forbids each flow from activating both links of an illegal turn."""
    flow_ids = ctx.traffic_flows.get_all_traffic_flow_id()
    for link1, link2 in ctx.routing_algorithm.get_all_illegal_turns(ctx.noc):
        for flow_id in flow_ids:
            first_var = flow_link_vars[(flow_id, link1)]
            second_var = flow_link_vars[(flow_id, link2)]
            m += first_var + second_var <= 1


def rescale_traffic_flow_bandwidths(
    ctx: NocContext, bandwidth_resolution: int
) -> dict[int, int]:
    """Rescales each flow's bandwidth to integer units of the link bandwidth.

    Returns a dictionary of {flow id: rescaled bandwidth}.
    """
    link_bandwidth = ctx.noc.link_bandwidth
    assert link_bandwidth > 0, "NoC link bandwidth must be positive!"

    rescaled = {}
    for flow_id in ctx.traffic_flows.get_all_traffic_flow_id():
        bandwidth = ctx.traffic_flows.get_traffic_flow(flow_id).bandwidth
        rescaled[flow_id] = math.floor(
            bandwidth / link_bandwidth * bandwidth_resolution
        )
    return rescaled


def get_link_load_expr(
    ctx: NocContext,
    flow_link_vars: FlowLinkVars,
    rescaled_bw: dict[int, int],
    link_id: int,
) -> LpAffineExpression:
    """Gets the rescaled bandwidth of all flows routed through a link."""
    return lpSum(
        rescaled_bw[flow_id] * flow_link_vars[(flow_id, link_id)]
        for flow_id in ctx.traffic_flows.get_all_traffic_flow_id()
    )


def create_congested_link_vars(
    m: LpProblem,
    ctx: NocContext,
    flow_link_vars: FlowLinkVars,
    config: NocRoutingConfig,
) -> list[LpVariable]:
    """Creates a binary per link that is set iff the link is congested.

    A link is congested when the rescaled bandwidth routed through it is
    strictly larger than the bandwidth resolution.

    Returns the congestion variables indexed by link id.
    """
    resolution = config.bandwidth_resolution
    rescaled_bw = rescale_traffic_flow_bandwidths(ctx, resolution)

    congested_link_vars = []
    for link in ctx.noc.get_noc_links():
        load = get_link_load_expr(ctx, flow_link_vars, rescaled_bw, link.link_id)
        congested = LpVariable(name=f"congested_l{link.link_id}", cat="Binary")
        # rescaled bandwidths are integers, so exceeding means reaching resolution + 1
        add_conditional_le(m, load, resolution, congested, enforce_if=False)
        add_conditional_ge(m, load, resolution + 1, congested, enforce_if=True)
        if config.hard_congestion:
            m += load <= resolution
        congested_link_vars.append(congested)
    return congested_link_vars


def get_flow_endpoints(
    ctx: NocContext, placement: Placement
) -> dict[int, tuple[int, int]]:
    """Finds the routers the source and sink blocks of each flow are placed on.

    Returns a dictionary of {flow id: (source router id, sink router id)}.
    """
    endpoints = {}
    for flow_id in ctx.traffic_flows.get_all_traffic_flow_id():
        flow = ctx.traffic_flows.get_traffic_flow(flow_id)
        endpoints[flow_id] = (
            placement.get_block_router(flow.source_cluster, ctx.noc),
            placement.get_block_router(flow.sink_cluster, ctx.noc),
        )
    return endpoints


def disable_flow(
    m: LpProblem, ctx: NocContext, flow_link_vars: FlowLinkVars, flow_id: int
) -> None:
    """Forces a flow whose source and sink coincide to use no link."""
    for link in ctx.noc.get_noc_links():
        m += flow_link_vars[(flow_id, link.link_id)] == 0


def add_continuity_constraints(
    m: LpProblem,
    ctx: NocContext,
    flow_link_vars: FlowLinkVars,
    endpoints: dict[int, tuple[int, int]],
) -> None:
    """Forces the activated links of each flow to be connected."""
    noc = ctx.noc
    for flow_id, (src, dst) in endpoints.items():
        if src == dst:
            disable_flow(m, ctx, flow_link_vars, flow_id)
            continue

        # src has only one outgoing flow
        src_out = get_flow_link_vars(
            flow_link_vars, [flow_id], noc.get_noc_router_outgoing_links(src)
        )
        m += lpSum(src_out) == 1
        src_in = get_flow_link_vars(
            flow_link_vars, [flow_id], noc.get_noc_router_incoming_links(src)
        )
        if src_in:
            m += lpSum(src_in) == 0

        # dest has only one incoming flow
        dst_in = get_flow_link_vars(
            flow_link_vars, [flow_id], noc.get_noc_router_incoming_links(dst)
        )
        m += lpSum(dst_in) == 1
        dst_out = get_flow_link_vars(
            flow_link_vars, [flow_id], noc.get_noc_router_outgoing_links(dst)
        )
        if dst_out:
            m += lpSum(dst_out) == 0

        # intermediate routers have conserved flow and are visited at most once
        for router in noc.get_noc_routers():
            if router.router_id in (src, dst):
                continue
            in_vars = get_flow_link_vars(
                flow_link_vars,
                [flow_id],
                noc.get_noc_router_incoming_links(router.router_id),
            )
            out_vars = get_flow_link_vars(
                flow_link_vars,
                [flow_id],
                noc.get_noc_router_outgoing_links(router.router_id),
            )
            if in_vars:
                m += lpSum(in_vars) <= 1
            if out_vars:
                m += lpSum(out_vars) <= 1
            if in_vars or out_vars:
                m += lpSum(in_vars) == lpSum(out_vars)


def get_direction_sums(
    flow_link_vars: FlowLinkVars,
    flow_id: int,
    groups: dict[LinkDirection, list[int]],
) -> tuple[LpAffineExpression, LpAffineExpression]:
    """Gets the horizontal and vertical displacement of a flow's route.

    Returns (right - left, up - down) expressions.
    """

    def total(direction: LinkDirection) -> LpAffineExpression:
        return lpSum(get_flow_link_vars(flow_link_vars, [flow_id], groups[direction]))

    return (
        total(LinkDirection.RIGHT) - total(LinkDirection.LEFT),
        total(LinkDirection.UP) - total(LinkDirection.DOWN),
    )


def add_distance_constraints(
    m: LpProblem,
    ctx: NocContext,
    flow_link_vars: FlowLinkVars,
    endpoints: dict[int, tuple[int, int]],
    groups: dict[LinkDirection, list[int]],
    compressed_grid: CompressedGrid,
) -> None:
    """Forces each flow's route to cover exactly the source-to-sink distance."""
    for flow_id, (src, dst) in endpoints.items():
        src_x, src_y = compressed_grid.get_compressed_loc(
            ctx.noc.get_single_noc_router(src).loc
        )
        dst_x, dst_y = compressed_grid.get_compressed_loc(
            ctx.noc.get_single_noc_router(dst).loc
        )
        horizontal, vertical = get_direction_sums(flow_link_vars, flow_id, groups)
        m += horizontal == dst_x - src_x
        m += vertical == dst_y - src_y


def add_route_hints(ctx: NocContext, flow_link_vars: FlowLinkVars) -> None:
    """Hints the solver with the routes found by the previous pass."""
    for flow_id in ctx.traffic_flows.get_all_traffic_flow_id():
        for link_id in ctx.traffic_flows.get_route(flow_id):
            if (flow_id, link_id) in flow_link_vars:
                set_hint(flow_link_vars[(flow_id, link_id)], 1)


def get_aggregate_bandwidth_expr(
    ctx: NocContext, flow_link_vars: FlowLinkVars, config: NocRoutingConfig
) -> LpAffineExpression:
    """Gets the rescaled bandwidth summed over all links.

    Every activated link costs at least one unit, so a flow too small to
    register at the bandwidth resolution still has no free detours.
    """
    rescaled_bw = rescale_traffic_flow_bandwidths(ctx, config.bandwidth_resolution)
    return lpSum(
        max(rescaled_bw[flow_id], 1) * var
        for (flow_id, _), var in flow_link_vars.items()
    )


def add_objective(
    m: LpProblem,
    ctx: NocContext,
    flow_link_vars: FlowLinkVars,
    latency_overrun_vars: dict[int, LpVariable],
    congested_link_vars: list[LpVariable],
    config: NocRoutingConfig,
) -> None:
    """Adds the weighted congestion, latency overrun and bandwidth objective."""
    m += (
        config.congestion_weight * lpSum(congested_link_vars)
        + config.latency_overrun_weight * lpSum(latency_overrun_vars.values())
        + config.bandwidth_weight
        * get_aggregate_bandwidth_expr(ctx, flow_link_vars, config)
    )


def minimize_aggregate_bandwidth(
    m: LpProblem,
    ctx: NocContext,
    flow_link_vars: FlowLinkVars,
    latency_overrun_vars: dict[int, LpVariable],
    congested_link_vars: list[LpVariable],
    config: NocRoutingConfig,
) -> bool:
    """Re-solves for the least bandwidth at the solved congestion and overrun.

    Returns whether the second solve found a solution.
    """
    if congested_link_vars:
        num_congested = sum(get_bool_value(v) for v in congested_link_vars)
        m += lpSum(congested_link_vars) == num_congested
    if latency_overrun_vars:
        total_overrun = sum(get_int_value(v) for v in latency_overrun_vars.values())
        m += lpSum(latency_overrun_vars.values()) == total_overrun

    for var in flow_link_vars.values():
        set_hint(var, 1 if get_bool_value(var) else 0)

    m.setObjective(get_aggregate_bandwidth_expr(ctx, flow_link_vars, config))
    return solve_model(m, config.solver).has_solution()


def add_shared_constraints(
    m: LpProblem,
    ctx: NocContext,
    config: NocRoutingConfig,
) -> tuple[FlowLinkVars, dict[int, LpVariable], list[LpVariable]]:
    """Creates the variables and the constraints common to all formulations.

    Returns the flow-link, latency overrun and congestion variables.
    """
    flow_link_vars, latency_overrun_vars = create_flow_link_vars(ctx)
    constrain_latency_overrun_vars(m, ctx, flow_link_vars, latency_overrun_vars)
    forbid_illegal_turns(m, ctx, flow_link_vars)
    congested_link_vars = create_congested_link_vars(m, ctx, flow_link_vars, config)
    return flow_link_vars, latency_overrun_vars, congested_link_vars


def noc_sat_route(
    ctx: NocContext,
    placement: Placement,
    config: NocRoutingConfig | None = None,
) -> dict[int, list[int]]:
    """Routes all traffic flows with the router blocks at their current places.

    Args:
        ctx:        NoC topology, traffic flows and turn model.
        placement:  locations of the router cluster blocks.
        config:     routing pass settings.

    Returns a dict of {flow id: ordered link ids}. The dict is empty when the
    solver finds no solution.
    """
    config = config or NocRoutingConfig()
    if ctx.traffic_flows.get_number_of_traffic_flows() == 0:
        return {}

    m = LpProblem("noc_sat_route", LpMinimize)

    flow_link_vars, latency_overrun_vars, congested_link_vars = add_shared_constraints(
        m, ctx, config
    )

    endpoints = get_flow_endpoints(ctx, placement)
    add_continuity_constraints(m, ctx, flow_link_vars, endpoints)
    add_distance_constraints(
        m,
        ctx,
        flow_link_vars,
        endpoints,
        group_noc_links_based_on_direction(ctx.noc),
        create_compressed_noc_grid(ctx.noc),
    )

    add_route_hints(ctx, flow_link_vars)
    add_objective(
        m, ctx, flow_link_vars, latency_overrun_vars, congested_link_vars, config
    )

    status = solve_model(m, config.solver)
    if not status.has_solution():
        logger.warning("NoC routing found no solution: %s", status.name)
        return {}

    flow_ids = ctx.traffic_flows.get_all_traffic_flow_id()
    routes = convert_vars_to_routes(ctx.noc, flow_ids, flow_link_vars)

    if config.minimize_aggregate_bandwidth:
        if minimize_aggregate_bandwidth(
            m, ctx, flow_link_vars, latency_overrun_vars, congested_link_vars, config
        ):
            routes = convert_vars_to_routes(ctx.noc, flow_ids, flow_link_vars)
        else:
            logger.warning("bandwidth minimization failed, keeping the first routes")

    return routes


def route_traffic_flows(
    ctx: NocContext,
    placement: Placement,
    config: NocRoutingConfig | None = None,
) -> bool:
    """Runs a routing pass and stores the routes in the traffic flow storage.

    Returns whether routing succeeded. The stored routes are left untouched
    on failure.
    """
    routes = noc_sat_route(ctx, placement, config)
    if not routes:
        return ctx.traffic_flows.get_number_of_traffic_flows() == 0
    ctx.traffic_flows.update_routes(routes)
    return True


def create_router_assignment_vars(
    m: LpProblem,
    ctx: NocContext,
    placement: Placement,
    router_blocks: list[int],
) -> dict[tuple[int, int], LpVariable]:
    """Creates a binary per (router block, physical router) pair.

    Each block is assigned to exactly one router and each router holds at
    most one block. Fixed blocks stay at their current router; the current
    placement of the others is hinted.

    Returns a dictionary of {(cluster id, router id): LpVariable}.
    """
    noc = ctx.noc
    assign_vars = {
        (b, r.router_id): LpVariable(name=f"assign_b{b}_r{r.router_id}", cat="Binary")
        for b in router_blocks
        for r in noc.get_noc_routers()
    }

    for b in router_blocks:
        m += lpSum(assign_vars[(b, r.router_id)] for r in noc.get_noc_routers()) == 1
    for r in noc.get_noc_routers():
        m += lpSum(assign_vars[(b, r.router_id)] for b in router_blocks) <= 1

    for b in router_blocks:
        if b not in placement.block_locs:
            continue
        block_loc = placement.get_block_loc(b)
        current = noc.get_router_at_grid_location(block_loc.loc)
        if block_loc.is_fixed:
            m += assign_vars[(b, current)] == 1
        set_hint(assign_vars[(b, current)], 1)
    return assign_vars


def create_loc_vars(
    m: LpProblem,
    ctx: NocContext,
    assign_vars: dict[tuple[int, int], LpVariable],
    router_blocks: list[int],
    compressed_grid: CompressedGrid,
) -> dict[int, tuple[LpVariable, LpVariable]]:
    """Creates the compressed x and y coordinate variables of each router block.

    Returns a dictionary of {cluster id: (x variable, y variable)}.
    """
    router_locs = {
        r.router_id: compressed_grid.get_compressed_loc(r.loc)
        for r in ctx.noc.get_noc_routers()
    }
    max_x = max(x for x, _ in router_locs.values())
    max_y = max(y for _, y in router_locs.values())

    loc_vars = {}
    for b in router_blocks:
        x_var = LpVariable(name=f"x_loc_b{b}", lowBound=0, upBound=max_x, cat="Integer")
        y_var = LpVariable(name=f"y_loc_b{b}", lowBound=0, upBound=max_y, cat="Integer")
        m += x_var == lpSum(
            x * assign_vars[(b, r)] for r, (x, _) in router_locs.items()
        )
        m += y_var == lpSum(
            y * assign_vars[(b, r)] for r, (_, y) in router_locs.items()
        )
        loc_vars[b] = (x_var, y_var)
    return loc_vars


def add_movable_continuity_constraints(
    m: LpProblem,
    ctx: NocContext,
    flow_link_vars: FlowLinkVars,
    assign_vars: dict[tuple[int, int], LpVariable],
) -> None:
    """Forces connected routes whose ends follow the router block assignment."""
    noc = ctx.noc
    for flow_id in ctx.traffic_flows.get_all_traffic_flow_id():
        flow = ctx.traffic_flows.get_traffic_flow(flow_id)
        src_blk, dst_blk = flow.source_cluster, flow.sink_cluster
        if src_blk == dst_blk:
            disable_flow(m, ctx, flow_link_vars, flow_id)
            continue

        for router in noc.get_noc_routers():
            src_is_mapped = assign_vars[(src_blk, router.router_id)]
            dst_is_mapped = assign_vars[(dst_blk, router.router_id)]
            in_expr = lpSum(
                get_flow_link_vars(
                    flow_link_vars,
                    [flow_id],
                    noc.get_noc_router_incoming_links(router.router_id),
                )
            )
            out_expr = lpSum(
                get_flow_link_vars(
                    flow_link_vars,
                    [flow_id],
                    noc.get_noc_router_outgoing_links(router.router_id),
                )
            )
            # source: 0 in, 1 out; sink: 1 in, 0 out; otherwise balanced, at most 1
            m += out_expr - in_expr == src_is_mapped - dst_is_mapped
            m += in_expr <= 1 - src_is_mapped
            m += out_expr <= 1 - dst_is_mapped


def add_movable_distance_constraints(
    m: LpProblem,
    ctx: NocContext,
    flow_link_vars: FlowLinkVars,
    loc_vars: dict[int, tuple[LpVariable, LpVariable]],
    groups: dict[LinkDirection, list[int]],
) -> None:
    """Forces each route to cover the distance between its blocks' locations."""
    for flow_id in ctx.traffic_flows.get_all_traffic_flow_id():
        flow = ctx.traffic_flows.get_traffic_flow(flow_id)
        src_x, src_y = loc_vars[flow.source_cluster]
        dst_x, dst_y = loc_vars[flow.sink_cluster]
        horizontal, vertical = get_direction_sums(flow_link_vars, flow_id, groups)
        m += horizontal == dst_x - src_x
        m += vertical == dst_y - src_y


def noc_sat_place_and_route(
    ctx: NocContext,
    placement: Placement,
    config: NocRoutingConfig | None = None,
) -> tuple[dict[int, list[int]], dict[int, GridLoc]]:
    """Places the movable router blocks and routes all traffic flows jointly.

    Returns a dict of {flow id: ordered link ids} and a dict of
    {cluster id: grid location}. Both are empty when the solver finds no
    solution.
    """
    config = config or NocRoutingConfig()
    router_blocks = ctx.traffic_flows.get_router_clusters_in_netlist()
    if not router_blocks:
        return {}, {}
    assert len(router_blocks) <= ctx.noc.get_number_of_noc_routers(), (
        f"{len(router_blocks)} router blocks do not fit on "
        f"{ctx.noc.get_number_of_noc_routers()} routers!"
    )

    m = LpProblem("noc_sat_place_and_route", LpMinimize)
    compressed_grid = create_compressed_noc_grid(ctx.noc)

    assign_vars = create_router_assignment_vars(m, ctx, placement, router_blocks)
    loc_vars = create_loc_vars(m, ctx, assign_vars, router_blocks, compressed_grid)

    flow_link_vars, latency_overrun_vars, congested_link_vars = add_shared_constraints(
        m, ctx, config
    )
    add_movable_continuity_constraints(m, ctx, flow_link_vars, assign_vars)
    add_movable_distance_constraints(
        m, ctx, flow_link_vars, loc_vars, group_noc_links_based_on_direction(ctx.noc)
    )

    add_route_hints(ctx, flow_link_vars)
    add_objective(
        m, ctx, flow_link_vars, latency_overrun_vars, congested_link_vars, config
    )

    status = solve_model(m, config.solver)
    if not status.has_solution():
        logger.warning("NoC placement and routing found no solution: %s", status.name)
        return {}, {}

    routes = convert_vars_to_routes(
        ctx.noc, ctx.traffic_flows.get_all_traffic_flow_id(), flow_link_vars
    )
    return routes, convert_vars_to_locs(ctx.noc, assign_vars)
