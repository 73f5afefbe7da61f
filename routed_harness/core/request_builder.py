"""Build osrm-routed query parameters for route, nearest, table, trip and match."""

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal

import pydantic
from pydantic import BaseModel

from routed_harness.core.errors import ValidationError
from routed_harness.schemas.query import (
    MatchOptions,
    NearestOptions,
    Query,
    RouteOptions,
    ServiceOptions,
    TableOptions,
    TableWaypoint,
    TripOptions,
    Waypoint,
)

logger = logging.getLogger(__name__)

# Range appended to a bearing given without one
DEFAULT_BEARING_RANGE = 10


def overwrite_params(defaults: Mapping, overrides: Mapping | None) -> Query:
    """Overlay overrides on defaults, keeping the defaults' key order.

    e.g. {a: 1, b: 2} + {a: 5, d: 10} -> {a: 5, b: 2, d: 10}
    """
    params = dict(defaults)
    if overrides:
        params.update(overrides)
    return params


def ensure_decimal(value: float) -> str:
    """Render a coordinate as a plain decimal: never exponent notation, no '.0' on integers."""
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


def _validate(model_cls, value):
    if isinstance(value, model_cls):
        return value
    try:
        return model_cls.model_validate(value)
    except pydantic.ValidationError as e:
        raise ValidationError(f"*** malformed waypoint: {value!r}") from e


def _as_waypoint(waypoint) -> Waypoint:
    return _validate(Waypoint, waypoint)


def _encode(waypoint: Waypoint) -> str:
    return f"{ensure_decimal(waypoint.lon)},{ensure_decimal(waypoint.lat)}"


def encode_waypoints(waypoints: Sequence) -> list[str]:
    """Map each waypoint to 'lon,lat'."""
    return [_encode(_as_waypoint(w)) for w in waypoints]


def _service_params(options_cls: type[ServiceOptions], user_params) -> Query:
    if isinstance(user_params, BaseModel):
        user_params = user_params.overrides()
    return overwrite_params(options_cls.defaults(), user_params)


def _normalize_bearing(bearing: str) -> str:
    if len(bearing.split(",")) == 2:
        return bearing
    return f"{bearing},{DEFAULT_BEARING_RANGE}"


def request_route(
    waypoints: Sequence,
    bearings: Sequence[str] = (),
    approaches: Sequence[str] = (),
    user_params: Mapping | RouteOptions | None = None,
) -> Query:
    """Query for the route service.

    Bearings and approaches, when given, must match the waypoints one to one.
    """
    if bearings and len(bearings) != len(waypoints):
        raise ValidationError("*** number of bearings does not equal the number of waypoints")
    if approaches and len(approaches) != len(waypoints):
        raise ValidationError("*** number of approaches does not equal the number of waypoints")

    params = _service_params(RouteOptions, user_params)
    params["coordinates"] = encode_waypoints(waypoints)

    if bearings:
        params["bearings"] = ";".join(_normalize_bearing(b) for b in bearings)
    if approaches:
        params["approaches"] = ";".join(approaches)

    logger.debug("Built route query for %d waypoints", len(waypoints))
    return params


def request_nearest(node, user_params: Mapping | NearestOptions | None = None) -> Query:
    params = _service_params(NearestOptions, user_params)
    params["coordinates"] = [_encode(_as_waypoint(node))]
    return params


def request_table(waypoints: Sequence, user_params: Mapping | TableOptions | None = None) -> Query:
    """Query for the table service; 'src'/'dst' tags pick sources and destinations."""
    params = _service_params(TableOptions, user_params)

    table_waypoints = [_validate(TableWaypoint, w) for w in waypoints]
    params["coordinates"] = [_encode(w.coord) for w in table_waypoints]

    sources = [str(i) for i, w in enumerate(table_waypoints) if w.type == "src"]
    destinations = [str(i) for i, w in enumerate(table_waypoints) if w.type == "dst"]
    if sources:
        params["sources"] = ";".join(sources)
    if destinations:
        params["destinations"] = ";".join(destinations)

    logger.debug(
        "Built table query: %d coordinates, %d sources, %d destinations",
        len(table_waypoints), len(sources), len(destinations),
    )
    return params


def request_trip(waypoints: Sequence, user_params: Mapping | TripOptions | None = None) -> Query:
    params = _service_params(TripOptions, user_params)
    params["coordinates"] = encode_waypoints(waypoints)
    return params


def request_matching(
    waypoints: Sequence,
    timestamps: Sequence = (),
    user_params: Mapping | MatchOptions | None = None,
) -> Query:
    params = _service_params(MatchOptions, user_params)
    params["coordinates"] = encode_waypoints(waypoints)

    if timestamps:
        params["timestamps"] = ";".join(str(t) for t in timestamps)
    return params


def service_path(host: str, service: str, profile: str) -> str:
    """'<host>/timestamp' for the timestamp service, '<host>/<service>/v1/<profile>' otherwise."""
    if service == "timestamp":
        return f"{host}/{service}"
    return f"{host}/{service}/v1/{profile}"
