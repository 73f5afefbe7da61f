"""Tests for RoutedClient against a mocked osrm-routed."""

import asyncio

import httpx
import pytest

from routed_harness.core.errors import TransportRefused, TransportTimeout, ValidationError
from routed_harness.core.routed_client import RoutedClient, params_to_string

HOST = "http://routed.test:5000"


def make_client(handler) -> RoutedClient:
    return RoutedClient(host=HOST, profile="car", timeout=1.0, transport=httpx.MockTransport(handler))


def ok_handler(seen: list):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"code": "Ok"})
    return handler


def test_params_to_string():
    wire = params_to_string({
        "output": "json",
        "steps": "true",
        "coordinates": ["1,1", "2,2"],
        "bearings": "90,10;180,10",
    })
    assert wire == "1,1;2,2?steps=true&bearings=90,10;180,10"


def test_params_to_string_output_suffix():
    wire = params_to_string({"output": "flatbuffers", "coordinates": ["1,1"]})
    assert wire == "1,1.flatbuffers"


def test_params_to_string_without_coordinates():
    assert params_to_string({}) == ""
    assert params_to_string({"alternatives": True, "radiuses": ["5", "10"]}) == (
        "?alternatives=true&radiuses=5;10"
    )


def test_params_to_string_leaves_input_alone():
    params = {"output": "json", "coordinates": ["1,1"]}
    params_to_string(params)
    assert params == {"output": "json", "coordinates": ["1,1"]}


def test_route_request_uri():
    seen = []

    async def run():
        async with make_client(ok_handler(seen)) as client:
            resp = await client.route(
                [{"lon": 1, "lat": 1}, {"lon": 2.5, "lat": 2}], ["90", "180,20"], [], {},
            )
            return client, resp

    client, resp = asyncio.run(run())
    assert resp.status_code == 200
    assert resp.json() == {"code": "Ok"}
    expected = f"{HOST}/route/v1/car/1,1;2.5,2?steps=true&alternatives=false&bearings=90,10;180,20"
    assert client.query == expected
    assert seen[0].url.path == "/route/v1/car/1,1;2.5,2"


def test_table_request_uri():
    seen = []

    async def run():
        async with make_client(ok_handler(seen)) as client:
            await client.table([
                {"coord": {"lon": 1, "lat": 1}, "type": "src"},
                {"coord": {"lon": 2, "lat": 2}, "type": "dst"},
            ])
            return client.query

    assert asyncio.run(run()) == f"{HOST}/table/v1/car/1,1;2,2?sources=0&destinations=1"


def test_timestamp_path():
    seen = []

    async def run():
        async with make_client(ok_handler(seen)) as client:
            await client.timestamp()
            return client.query

    assert asyncio.run(run()) == f"{HOST}/timestamp"


def test_request_url_is_verbatim():
    seen = []

    async def run():
        async with make_client(ok_handler(seen)) as client:
            await client.request_url("nearest/v1/car/1,1?number=2")
            return client.query

    assert asyncio.run(run()) == f"{HOST}/nearest/v1/car/1,1?number=2"


def test_error_status_is_returned():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"code": "InvalidQuery"})

    async def run():
        async with make_client(handler) as client:
            return await client.nearest({"lon": 1, "lat": 1})

    resp = asyncio.run(run())
    assert resp.status_code == 400
    assert resp.json()["code"] == "InvalidQuery"


def test_timeout_raises_transport_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async def run():
        async with make_client(handler) as client:
            await client.trip([{"lon": 1, "lat": 1}])

    with pytest.raises(TransportTimeout, match="did not respond") as excinfo:
        asyncio.run(run())
    assert excinfo.value.status_code == 408


def test_refused_raises_transport_refused():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        async with make_client(handler) as client:
            await client.match([{"lon": 1, "lat": 1}], [1, 2])

    with pytest.raises(TransportRefused, match="not running"):
        asyncio.run(run())


def test_other_transport_errors_propagate():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.RemoteProtocolError("bad response", request=request)

    async def run():
        async with make_client(handler) as client:
            await client.trip([{"lon": 1, "lat": 1}])

    with pytest.raises(httpx.RemoteProtocolError):
        asyncio.run(run())


def test_validation_happens_before_sending():
    seen = []

    async def run():
        async with make_client(ok_handler(seen)) as client:
            await client.route([{"lon": 1, "lat": 1}, {"lon": 2, "lat": 2}], ["90"], [], {})

    with pytest.raises(ValidationError):
        asyncio.run(run())
    assert seen == []


def test_defaults_come_from_settings():
    from routed_harness.config import settings

    client = RoutedClient(transport=httpx.MockTransport(ok_handler([])))
    assert client.host == settings.routed_host.rstrip("/")
    assert client.profile == settings.routed_profile
    assert client.timeout == settings.routed_timeout_seconds
    asyncio.run(client.close())


def test_response_keeps_httpx_response():
    async def run():
        async with make_client(ok_handler([])) as client:
            return await client.trip([{"lon": 1, "lat": 1}])

    resp = asyncio.run(run())
    assert isinstance(resp.response, httpx.Response)
    assert resp.body == resp.response.text
    assert resp.json() == {"code": "Ok"}


def test_query_holds_most_recent_request():
    async def run():
        async with make_client(ok_handler([])) as client:
            await client.trip([{"lon": 1, "lat": 1}])
            await client.request_url("nearest/v1/car/2,2")
            return client.query

    assert asyncio.run(run()) == f"{HOST}/nearest/v1/car/2,2"
