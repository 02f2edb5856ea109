from __future__ import annotations


class RoutingError(ValueError):
    """Base class for caller errors raised by the routing core."""


class InvalidCoordinate(RoutingError):
    pass


class InvalidDateRange(RoutingError):
    pass


class InvalidConfiguration(RoutingError):
    pass
