"""Async client for an osrm-routed HTTP server."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import httpx

from routed_harness.config import settings
from routed_harness.core import request_builder
from routed_harness.core.errors import TransportRefused, TransportTimeout
from routed_harness.schemas.query import Query

logger = logging.getLogger(__name__)


def _wire_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ";".join(str(v) for v in value)
    return str(value)


def params_to_string(params: Mapping) -> str:
    """Serialize a query into '<coordinates>[.<output>][?k=v&...]'.

    Coordinates go into the path, ';'-joined; the output format becomes a
    suffix unless it is json. Everything else lands in the query string.
    """
    params = dict(params)
    path = ""
    if "coordinates" in params:
        output = params.pop("output", None)
        suffix = f".{output}" if output and output != "json" else ""
        path = _wire_value(params.pop("coordinates")) + suffix

    if params:
        path += "?" + "&".join(f"{key}={_wire_value(value)}" for key, value in params.items())
    return path


@dataclass
class RoutedResponse:
    status_code: int
    body: str
    response: httpx.Response = field(repr=False)

    def json(self):
        return self.response.json()


class RoutedClient:
    """Sends built queries to osrm-routed and classifies transport failures.

    `query` holds the URI of the most recent request only; concurrent
    requests on one client overwrite each other's value.
    """

    def __init__(
        self,
        host: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.host = (host or settings.routed_host).rstrip("/")
        self.profile = profile or settings.routed_profile
        self.timeout = timeout if timeout is not None else settings.routed_timeout_seconds
        # Last URI sent, for failure reports
        self.query: str | None = None
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RoutedClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get(self, uri: str) -> RoutedResponse:
        self.query = uri
        logger.debug("GET %s", uri)
        try:
            resp = await self._client.get(uri)
        except httpx.TimeoutException as e:
            logger.warning("osrm-routed timed out after %.1fs: %s", self.timeout, uri)
            raise TransportTimeout("*** osrm-routed did not respond") from e
        except httpx.ConnectError as e:
            logger.warning("osrm-routed refused connection at %s", self.host)
            raise TransportRefused("*** osrm-routed is not running") from e
        return RoutedResponse(status_code=resp.status_code, body=resp.text, response=resp)

    async def send_request(self, base_uri: str, params: Mapping) -> RoutedResponse:
        wire = params_to_string(params)
        uri = f"{base_uri}/{wire}" if wire else base_uri
        return await self._get(uri)

    async def request_path(self, service: str, params: Mapping) -> RoutedResponse:
        uri = request_builder.service_path(self.host, service, self.profile)
        return await self.send_request(uri, params)

    async def request_url(self, path: str) -> RoutedResponse:
        """GET a raw path below the host, e.g. 'route/v1/car/1,1;2,2?steps=true'."""
        return await self._get(f"{self.host}/{path}")

    async def route(
        self,
        waypoints: Sequence,
        bearings: Sequence[str] = (),
        approaches: Sequence[str] = (),
        user_params=None,
    ) -> RoutedResponse:
        params = request_builder.request_route(waypoints, bearings, approaches, user_params)
        return await self.request_path("route", params)

    async def nearest(self, node, user_params=None) -> RoutedResponse:
        params = request_builder.request_nearest(node, user_params)
        return await self.request_path("nearest", params)

    async def table(self, waypoints: Sequence, user_params=None) -> RoutedResponse:
        params = request_builder.request_table(waypoints, user_params)
        return await self.request_path("table", params)

    async def trip(self, waypoints: Sequence, user_params=None) -> RoutedResponse:
        params = request_builder.request_trip(waypoints, user_params)
        return await self.request_path("trip", params)

    async def match(self, waypoints: Sequence, timestamps: Sequence = (), user_params=None) -> RoutedResponse:
        params = request_builder.request_matching(waypoints, timestamps, user_params)
        return await self.request_path("match", params)

    async def timestamp(self, user_params: Query | None = None) -> RoutedResponse:
        return await self.request_path("timestamp", dict(user_params or {}))
