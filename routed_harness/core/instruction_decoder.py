"""Flatten a parsed route document into one-line strings for fixture comparison.

Every list view walks legs in order, then the steps of each leg in order.
Values are rendered the way the JSON fixtures spell them: integral numbers
without a trailing '.0', booleans as 'true'/'false'.
"""

import logging
from collections.abc import Callable, Iterator
from itertools import chain

from routed_harness.core.request_builder import ensure_decimal
from routed_harness.schemas.instructions import RouteInstructions, Step

logger = logging.getLogger(__name__)


def render(value) -> str:
    """String form of a JSON scalar; null renders empty."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return ensure_decimal(value)
    return str(value)


def iter_steps(instructions: RouteInstructions) -> Iterator[Step]:
    return chain.from_iterable(leg["steps"] for leg in instructions["legs"])


def extract_instruction_list(
    instructions: RouteInstructions | None,
    key_fn: Callable[[Step], object],
) -> str | None:
    """Join key_fn(step) over all steps with ','; None when there are no instructions."""
    if instructions is None:
        return None
    return ",".join(render(key_fn(step)) for step in iter_steps(instructions))


def summary(instructions: RouteInstructions | None) -> str | None:
    if instructions is None:
        return None
    return ";".join(leg["summary"] for leg in instructions["legs"])


def way_list(instructions):
    return extract_instruction_list(instructions, lambda s: s["name"])


def ref_list(instructions):
    return extract_instruction_list(instructions, lambda s: s.get("ref") or "")


def pronunciation_list(instructions):
    return extract_instruction_list(instructions, lambda s: s.get("pronunciation") or "")


def destinations_list(instructions):
    return extract_instruction_list(instructions, lambda s: s.get("destinations") or "")


def mode_list(instructions):
    return extract_instruction_list(instructions, lambda s: s["mode"])


def time_list(instructions):
    return extract_instruction_list(instructions, lambda s: render(s["duration"]) + "s")


def distance_list(instructions):
    return extract_instruction_list(instructions, lambda s: render(s["distance"]) + "m")


def weight_list(instructions):
    return extract_instruction_list(instructions, lambda s: s["weight"])


def approach_list(instructions):
    return extract_instruction_list(instructions, lambda s: s.get("approaches") or "")


def reverse_bearing(bearing: float) -> float:
    """Flip a bearing by 180 degrees, staying within [0, 360)."""
    if bearing >= 180:
        return bearing - 180.0
    return bearing + 180.0


def _step_bearings(step: Step) -> str:
    # An incoming bearing is reported as the direction we came from.
    first = step["intersections"][0]
    bearing_in = reverse_bearing(first["bearings"][first["in"]]) if "in" in first else 0
    bearing_out = first["bearings"][first["out"]] if "out" in first else 0
    return f"{render(bearing_in)}->{render(bearing_out)}"


def bearing_list(instructions):
    return extract_instruction_list(instructions, _step_bearings)


def _step_lanes(step: Step) -> str:
    first = step["intersections"][0]
    if "lanes" not in first:
        return ""
    return " ".join(
        ";".join(lane["indications"]) + ":" + render(lane["valid"])
        for lane in first["lanes"]
    )


def lanes_list(instructions):
    return extract_instruction_list(instructions, _step_lanes)


def _turn(step: Step) -> str:
    maneuver = step["maneuver"]
    kind = maneuver["type"]
    # Missing modifier renders as the type alone
    with_modifier = " ".join(filter(None, (kind, maneuver.get("modifier"))))

    if kind in ("depart", "arrive"):
        return kind
    if kind in ("on ramp", "off ramp"):
        return with_modifier
    if kind == "roundabout":
        return f"roundabout-exit-{maneuver['exit']}"
    if kind == "rotary":
        if "rotary_name" in step:
            return f"{step['rotary_name']}-exit-{maneuver['exit']}"
        return f"rotary-exit-{maneuver['exit']}"
    if kind == "roundabout turn":
        return f"{with_modifier} exit-{maneuver['exit']}"
    # TODO: merge and fork share this branch; they need their own tokens
    return with_modifier


def turn_list(instructions: RouteInstructions) -> str:
    """Turn tokens for every maneuver; unlike the other lists, instructions are required."""
    return ",".join(_turn(step) for step in iter_steps(instructions))


def locations(
    instructions: RouteInstructions,
    find_node_by_location: Callable[[list[float]], str],
) -> str:
    """Resolve each maneuver location to a node name through the given lookup."""
    return ",".join(
        find_node_by_location(step["maneuver"]["location"])
        for step in iter_steps(instructions)
    )


def _intersection(intersection) -> str:
    return " ".join(
        f"{render(entry)}:{render(bearing)}"
        for entry, bearing in zip(intersection["entry"], intersection["bearings"])
    )


def intersection_list(instructions: RouteInstructions) -> str:
    """Space between bearings, ',' between a step's intersections, ';' between steps."""
    return ";".join(
        ",".join(_intersection(i) for i in step["intersections"])
        for step in iter_steps(instructions)
    )


def annotation_list(instructions: RouteInstructions) -> dict[str, str] | str:
    """Merge per-leg annotations into one string per annotation key.

    Returns '' when the first leg carries no annotation at all. Legs that
    lack a key simply don't contribute to it.
    """
    legs = instructions["legs"]
    if "annotation" not in legs[0]:
        return ""

    merged: dict[str, list[str]] = {}
    for leg in legs:
        for key, values in (leg.get("annotation") or {}).items():
            if isinstance(values, list):
                value = ":".join(render(v) for v in values)
            else:
                value = render(values)
            merged.setdefault(key, []).append(value)

    return {key: ",".join(parts) for key, parts in merged.items()}


def alternatives_list(instructions: RouteInstructions) -> str:
    # alternatives_count comes from the tracepoints, not the steps
    return ",".join(render(t["alternatives_count"]) for t in instructions["tracepoints"])


def weight_name(instructions: RouteInstructions | None) -> str:
    if instructions is None:
        return ""
    return instructions.get("weight_name", "")
