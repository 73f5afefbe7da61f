"""Shape of a parsed osrm-routed route document, as read by the decoder.

The decoder works on plain JSON (dicts and lists); these TypedDicts only
describe what it expects to find.
"""

from typing import NotRequired, TypedDict


class Maneuver(TypedDict):
    type: str
    modifier: NotRequired[str]
    exit: NotRequired[int]
    location: list[float]  # [lon, lat]


class Lane(TypedDict):
    indications: list[str]
    valid: bool


# "in" is a keyword, hence the functional form.
Intersection = TypedDict(
    "Intersection",
    {
        "entry": list[bool],
        "bearings": list[int],
        "in": NotRequired[int],
        "out": NotRequired[int],
        "location": NotRequired[list[float]],
        "lanes": NotRequired[list[Lane]],
    },
)


class Step(TypedDict):
    name: str
    ref: NotRequired[str]
    pronunciation: NotRequired[str]
    destinations: NotRequired[str]
    rotary_name: NotRequired[str]
    approaches: NotRequired[str]
    mode: str
    duration: float  # in seconds
    distance: float  # in meters
    weight: float
    maneuver: Maneuver
    intersections: list[Intersection]


class Leg(TypedDict):
    steps: list[Step]
    summary: str
    annotation: NotRequired[dict[str, list]]


class Tracepoint(TypedDict):
    alternatives_count: int


class RouteInstructions(TypedDict):
    legs: list[Leg]
    tracepoints: NotRequired[list[Tracepoint]]
    weight_name: NotRequired[str]
