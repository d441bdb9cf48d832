from __future__ import annotations

from typing import Any, Protocol

import httpx
from structlog import get_logger

from core.errors import UpstreamError
from schemas.hospital import Coordinate

logger = get_logger(__name__)

GOOGLE_NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
GOOGLE_PLACE_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"

PLACE_DETAILS_FIELDS = "name,formatted_address,formatted_phone_number,website,geometry,opening_hours"

_EMPTY_STATUSES = {"ZERO_RESULTS", "NOT_FOUND"}


class PlacesProvider(Protocol):
    async def nearby_search(
        self,
        *,
        origin: Coordinate,
        category: str,
        radius_m: int,
    ) -> list[dict[str, Any]]:
        ...

    async def place_details(self, place_id: str) -> dict[str, Any] | None:
        ...


def _raise_provider_status_error(*, status_value: str, error_message: str | None = None) -> None:
    normalized_status = (status_value or "").upper() or "MISSING_STATUS"
    logger.warning(
        "places_provider_status_error",
        provider_status=normalized_status,
        provider_message=error_message,
    )

    if normalized_status == "OVER_QUERY_LIMIT":
        raise UpstreamError("Places provider quota exceeded", provider_status=normalized_status)
    if normalized_status == "REQUEST_DENIED":
        raise UpstreamError("Places provider denied the request", provider_status=normalized_status)
    if normalized_status == "INVALID_REQUEST":
        raise UpstreamError("Invalid request to places provider", provider_status=normalized_status)

    raise UpstreamError(
        "Places provider returned an unexpected status",
        provider_status=normalized_status,
    )


class GooglePlacesClient:
    def __init__(
        self,
        *,
        api_key: str,
        language: str = "ja",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.language = language
        self.timeout = timeout
        self._transport = transport

    async def _get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        request_params = dict(params)
        request_params["language"] = self.language
        request_params["key"] = self.api_key

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=request_params)
                response.raise_for_status()
        except httpx.HTTPStatusError as err:
            logger.warning(
                "places_provider_http_error",
                url=url,
                status_code=err.response.status_code,
            )
            raise UpstreamError(
                f"Places provider HTTP error {err.response.status_code}"
            ) from err
        except httpx.HTTPError as err:
            logger.warning("places_provider_request_failed", url=url, error=str(err))
            raise UpstreamError("Places provider request failed") from err

        try:
            payload = response.json()
        except ValueError as err:
            raise UpstreamError("Places provider returned invalid JSON") from err

        if not isinstance(payload, dict):
            raise UpstreamError("Places provider response shape is invalid")
        return payload

    async def nearby_search(
        self,
        *,
        origin: Coordinate,
        category: str,
        radius_m: int,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {
            "location": f"{origin.latitude},{origin.longitude}",
            "radius": radius_m,
            "type": category,
        }
        payload = await self._get_json(GOOGLE_NEARBY_SEARCH_URL, params)

        status_value = str(payload.get("status") or "").upper()
        if status_value == "ZERO_RESULTS":
            return []
        if status_value != "OK":
            _raise_provider_status_error(
                status_value=status_value,
                error_message=payload.get("error_message"),
            )

        results = payload.get("results")
        if not isinstance(results, list):
            return []
        return [item for item in results if isinstance(item, dict)]

    async def place_details(self, place_id: str) -> dict[str, Any] | None:
        params: dict[str, Any] = {
            "place_id": place_id,
            "fields": PLACE_DETAILS_FIELDS,
        }
        payload = await self._get_json(GOOGLE_PLACE_DETAILS_URL, params)

        result = payload.get("result")
        if isinstance(result, dict) and result:
            return result

        # A failed lookup drops that place only, not the whole search.
        status_value = str(payload.get("status") or "").upper()
        if status_value != "OK" and status_value not in _EMPTY_STATUSES:
            logger.warning(
                "place_details_skipped",
                place_id=place_id,
                provider_status=status_value or "MISSING_STATUS",
                provider_message=payload.get("error_message"),
            )
        return None
