"""The boundary between the NoC router and the ILP solver.

Models are built with PuLP. Constraints that only hold when a boolean guard
takes a given value ("only enforce if") are encoded with big-M terms derived
from the variable bounds of the guarded expression.
"""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

import logging
import time
from enum import Enum, auto
from typing import Any

from pulp import (
    LpAffineExpression,
    LpProblem,
    LpSolutionInfeasible,
    LpSolutionIntegerFeasible,
    LpSolutionOptimal,
    LpStatus,
    LpStatusInfeasible,
    LpVariable,
    getSolver,
)
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class SolverStatus(Enum):
    """Outcome of a solver call."""

    OPTIMAL = auto()
    FEASIBLE = auto()
    INFEASIBLE = auto()
    UNKNOWN = auto()

    def has_solution(self) -> bool:
        """Returns whether the variables carry a usable assignment."""
        return self in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE)


class SolverParams(BaseModel):
    """Represents the solver settings.

    solver: name of a PuLP solver, e.g. PULP_CBC_CMD or GUROBI_CMD.
    seed: random seed passed to the solver.
    time_limit: wall-clock limit in seconds, None for no limit.
    msg: whether the solver prints its log.
    warm_start: whether variable hints are passed to the solver.
    threads: number of solver threads, None for the solver default.
    """

    solver: str = "PULP_CBC_CMD"
    seed: int = 1
    time_limit: float | None = None
    msg: bool = False
    warm_start: bool = True
    threads: int | None = None


def get_seed_options(params: SolverParams) -> list[Any]:
    """Gets the solver-specific options setting the random seed.

    Returns a list of options.

    Example:
    >>> get_seed_options(SolverParams(seed=3))
    ['randomCbcSeed 3']
    >>> get_seed_options(SolverParams(solver="GUROBI_CMD", seed=3))
    [('Seed', 3)]
    """
    if params.solver in ("PULP_CBC_CMD", "COIN_CMD"):
        return [f"randomCbcSeed {params.seed}"]
    if params.solver in ("GUROBI_CMD", "GUROBI"):
        return [("Seed", params.seed)]
    return []


def create_solver(params: SolverParams) -> Any:
    """Creates the PuLP solver object described by params."""
    kwargs: dict[str, Any] = {
        "msg": params.msg,
        "warmStart": params.warm_start,
        "options": get_seed_options(params),
    }
    if params.time_limit is not None:
        kwargs["timeLimit"] = params.time_limit
    if params.threads is not None:
        kwargs["threads"] = params.threads
    return getSolver(params.solver, **kwargs)


def get_expr_bounds(expr: LpAffineExpression) -> tuple[float, float]:
    """Computes the range of a linear expression from its variables' bounds.

    All variables must be bounded.

    Returns a (lower bound, upper bound) tuple.

    Example:
    >>> a = LpVariable("a", cat="Binary")
    >>> b = LpVariable("b", lowBound=0, upBound=20, cat="Integer")
    >>> get_expr_bounds(3 * a - b + 2)
    (-18, 5)
    """
    lower = upper = expr.constant
    for var, coef in expr.items():
        assert (
            var.lowBound is not None and var.upBound is not None
        ), f"Variable {var.name} is unbounded!"
        if coef >= 0:
            lower += coef * var.lowBound
            upper += coef * var.upBound
        else:
            lower += coef * var.upBound
            upper += coef * var.lowBound
    return lower, upper


def add_conditional_le(
    m: LpProblem,
    expr: LpAffineExpression,
    rhs: float,
    guard: LpVariable,
    enforce_if: bool = True,
) -> None:
    """Adds expr <= rhs, enforced only when guard == enforce_if."""
    big_m = get_expr_bounds(expr)[1] - rhs
    if big_m <= 0:
        # holds for every assignment
        return
    relax = (1 - guard) if enforce_if else guard
    m += expr <= rhs + big_m * relax


def add_conditional_ge(
    m: LpProblem,
    expr: LpAffineExpression,
    rhs: float,
    guard: LpVariable,
    enforce_if: bool = True,
) -> None:
    """Adds expr >= rhs, enforced only when guard == enforce_if."""
    big_m = rhs - get_expr_bounds(expr)[0]
    if big_m <= 0:
        return
    relax = (1 - guard) if enforce_if else guard
    m += expr >= rhs - big_m * relax


def add_max_equality(
    m: LpProblem, target: LpVariable, expr: LpAffineExpression, name: str
) -> LpVariable:
    """Constrains target == max(expr, 0).

    A binary selector picks which of the two terms target is equal to.

    Returns the selector variable.
    """
    selector = LpVariable(name=f"{name}_sel", cat="Binary")
    m += target >= expr
    m += target >= 0
    # selector set: target equals expr, otherwise target equals zero
    add_conditional_le(m, target - expr, 0, selector, enforce_if=True)
    add_conditional_le(m, 1 * target, 0, selector, enforce_if=False)
    return selector


def set_hint(var: LpVariable, value: float) -> None:
    """Suggests a starting value for var without constraining it."""
    var.setInitialValue(value)


def get_bool_value(var: LpVariable) -> bool:
    """Returns the solved value of a binary variable."""
    value = var.value()
    return value is not None and value > 0.5


def get_int_value(var: LpVariable) -> int:
    """Returns the solved value of an integer variable."""
    value = var.value()
    return 0 if value is None else round(value)


def get_solver_status(m: LpProblem) -> SolverStatus:
    """Converts the PuLP status of a solved problem into a SolverStatus."""
    if m.sol_status == LpSolutionOptimal:
        return SolverStatus.OPTIMAL
    if m.sol_status == LpSolutionIntegerFeasible:
        return SolverStatus.FEASIBLE
    if m.status == LpStatusInfeasible or m.sol_status == LpSolutionInfeasible:
        return SolverStatus.INFEASIBLE
    return SolverStatus.UNKNOWN


def solve_model(m: LpProblem, params: SolverParams) -> SolverStatus:
    """Solves the problem and blocks until the solver returns.

    Returns the SolverStatus.
    """
    logger.info(
        "solving %s: %d variables, %d constraints",
        m.name,
        len(m.variables()),
        len(m.constraints),
    )
    start = time.perf_counter()
    m.solve(create_solver(params))
    status = get_solver_status(m)
    logger.info(
        "%s finished in %.2f s: %s (%s)",
        m.name,
        time.perf_counter() - start,
        status.name,
        LpStatus[m.status],
    )
    return status
