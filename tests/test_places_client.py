from __future__ import annotations

import httpx
import pytest

from core.errors import ErrorCode, UpstreamError
from schemas.hospital import Coordinate
from services import places_client
from services.places_client import GooglePlacesClient

ORIGIN = Coordinate(latitude=35.0, longitude=139.0)


def _client(handler) -> GooglePlacesClient:
    return GooglePlacesClient(
        api_key="test-key",
        language="ja",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_nearby_search_sends_expected_params():
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"status": "OK", "results": [{"place_id": "pid-1"}, "junk"]},
        )

    results = await _client(_handler).nearby_search(origin=ORIGIN, category="hospital", radius_m=1600)

    assert results == [{"place_id": "pid-1"}]
    params = seen[0].url.params
    assert str(seen[0].url).startswith(places_client.GOOGLE_NEARBY_SEARCH_URL)
    assert params["location"] == "35.0,139.0"
    assert params["radius"] == "1600"
    assert params["type"] == "hospital"
    assert params["language"] == "ja"
    assert params["key"] == "test-key"


@pytest.mark.asyncio
async def test_nearby_search_zero_results_returns_empty_list():
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})

    results = await _client(_handler).nearby_search(origin=ORIGIN, category="doctor", radius_m=1600)
    assert results == []


@pytest.mark.asyncio
async def test_nearby_search_denied_raises_upstream_error():
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."},
        )

    with pytest.raises(UpstreamError) as exc_info:
        await _client(_handler).nearby_search(origin=ORIGIN, category="doctor", radius_m=1600)

    exc = exc_info.value
    assert exc.status_code == 500
    assert exc.provider_status == "REQUEST_DENIED"
    assert exc.detail["error"] == ErrorCode.SERVER_ERROR.value


@pytest.mark.asyncio
async def test_http_error_raises_upstream_error():
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(UpstreamError) as exc_info:
        await _client(_handler).nearby_search(origin=ORIGIN, category="doctor", radius_m=1600)

    assert "503" in exc_info.value.detail["detail"]


@pytest.mark.asyncio
async def test_transport_failure_raises_upstream_error():
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(UpstreamError):
        await _client(_handler).place_details("pid-1")


@pytest.mark.asyncio
async def test_invalid_json_raises_upstream_error():
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(UpstreamError):
        await _client(_handler).place_details("pid-1")


@pytest.mark.asyncio
async def test_place_details_requests_field_selector():
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": "OK", "result": {"name": "Clinic"}})

    result = await _client(_handler).place_details("pid-1")

    assert result == {"name": "Clinic"}
    params = seen[0].url.params
    assert params["place_id"] == "pid-1"
    assert params["fields"] == places_client.PLACE_DETAILS_FIELDS
    assert "utc_offset_minutes" not in params["fields"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"status": "NOT_FOUND"},
        {"status": "ZERO_RESULTS"},
        {"status": "OK"},
        {"status": "OK", "result": {}},
    ],
)
async def test_place_details_empty_result_returns_none(payload: dict):
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    assert await _client(_handler).place_details("pid-1") is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status_value",
    ["OVER_QUERY_LIMIT", "REQUEST_DENIED", "INVALID_REQUEST", "UNKNOWN_ERROR"],
)
async def test_place_details_failed_status_without_result_is_skipped(status_value: str):
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": status_value, "error_message": "nope"})

    assert await _client(_handler).place_details("pid-1") is None


@pytest.mark.asyncio
async def test_place_details_returns_result_whatever_the_status():
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "UNKNOWN_ERROR", "result": {"name": "Clinic"}})

    assert await _client(_handler).place_details("pid-1") == {"name": "Clinic"}


@pytest.mark.asyncio
async def test_place_details_http_error_still_raises_upstream_error():
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="oops")

    with pytest.raises(UpstreamError):
        await _client(_handler).place_details("pid-1")
