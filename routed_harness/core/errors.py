"""Error kinds raised by the request builder and the routed client."""


class RoutedError(Exception):
    """Base class for osrm-routed harness errors."""


class ValidationError(RoutedError, ValueError):
    """Caller arguments don't line up (e.g. bearings vs. waypoints)."""


class TransportTimeout(RoutedError):
    status_code = 408


class TransportRefused(RoutedError):
    pass
