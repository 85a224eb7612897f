"""Errors raised while building the NoC model from its description."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""


class NocConfigError(Exception):
    """The NoC description does not match the device."""


class NoRouterTilesError(NocConfigError):
    """No physical router tile was found on the device grid."""


class TooFewRouterTilesError(NocConfigError):
    """More logical routers are declared than physical router tiles exist."""


class TooManyRouterTilesError(NocConfigError):
    """Some physical router tiles are left without a logical router."""


class AmbiguousRouterAssignmentError(NocConfigError):
    """A logical router is equally close to two physical router tiles."""


class DuplicateRouterAssignmentError(NocConfigError):
    """Two logical routers are closest to the same physical router tile."""


class UnknownRouterIdError(NocConfigError):
    """A connection refers to a router id that was never declared."""
