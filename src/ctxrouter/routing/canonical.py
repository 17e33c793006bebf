"""Canonical route strings.

A single, space-delimited format names a route across transports without
clashing with the ``:param`` syntax of patterns::

    <protocol> <operation> [<path>]

    http GET /user/:id
    sqs order.created
    grpc CreateUser
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouteSegments:
    protocol: str
    operation: str
    path: str | None = None


def build_route(protocol: str, operation: str, path: str | None = None) -> str:
    """``build_route("http", "GET", "/user/:id")`` -> ``"http GET /user/:id"``."""
    if path:
        return f"{protocol} {operation} {path}"
    return f"{protocol} {operation}"


def parse_route(route: str) -> RouteSegments:
    """Split a canonical route string.

    Anything that is not two or three non-empty parts is returned whole as
    the operation of protocol ``"unknown"``.
    """
    parts = route.split(" ")
    if len(parts) == 3 and all(parts):
        return RouteSegments(protocol=parts[0], operation=parts[1], path=parts[2])
    if len(parts) == 2 and all(parts):
        return RouteSegments(protocol=parts[0], operation=parts[1])
    return RouteSegments(protocol="unknown", operation=route)


def is_canonical_route(route: str) -> bool:
    """True for ``"http GET /x"`` and ``"sqs order.created"``.

    Rejects legacy forms such as ``"/user/:id"`` and ``"GET /user/:id"``
    (no protocol).
    """
    parts = route.split(" ")
    if not 2 <= len(parts) <= 3 or not all(parts):
        return False
    if parts[0].startswith("/"):
        return False
    return not (len(parts) == 2 and parts[1].startswith("/"))
