from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

# Values go through untouched: str "true" stays a str, a list stays a list.
QueryValue = Union[str, list[str], bool, int, float]
Query = dict[str, QueryValue]


class Waypoint(BaseModel):
    lon: float
    lat: float


class TableWaypoint(BaseModel):
    coord: Waypoint
    type: Literal["src", "dst"] | None = None


class ServiceOptions(BaseModel):
    """Recognised query options for one service; unknown keys pass through."""

    model_config = ConfigDict(extra="allow")

    output: QueryValue | None = "json"

    @classmethod
    def defaults(cls) -> Query:
        """Default parameter set, without the options left unset (None)."""
        return cls().model_dump(exclude_none=True)

    def overrides(self) -> Query:
        """Only what the caller set explicitly, plus any extra keys."""
        return self.model_dump(exclude_unset=True)


class RouteOptions(ServiceOptions):
    steps: QueryValue | None = "true"
    alternatives: QueryValue | None = "false"
    overview: QueryValue | None = None
    geometries: QueryValue | None = None
    annotations: QueryValue | None = None
    continue_straight: QueryValue | None = None
    radiuses: QueryValue | None = None
    hints: QueryValue | None = None
    exclude: QueryValue | None = None
    generate_hints: QueryValue | None = None


class NearestOptions(ServiceOptions):
    number: QueryValue | None = None
    radiuses: QueryValue | None = None
    exclude: QueryValue | None = None


class TableOptions(ServiceOptions):
    annotations: QueryValue | None = None
    fallback_speed: QueryValue | None = None
    fallback_coordinate: QueryValue | None = None
    scale_factor: QueryValue | None = None
    exclude: QueryValue | None = None


class TripOptions(ServiceOptions):
    steps: QueryValue | None = None
    roundtrip: QueryValue | None = None
    source: QueryValue | None = None
    destination: QueryValue | None = None
    overview: QueryValue | None = None
    geometries: QueryValue | None = None
    annotations: QueryValue | None = None


class MatchOptions(ServiceOptions):
    steps: QueryValue | None = None
    overview: QueryValue | None = None
    geometries: QueryValue | None = None
    annotations: QueryValue | None = None
    radiuses: QueryValue | None = None
    gaps: QueryValue | None = None
    tidy: QueryValue | None = None
