from __future__ import annotations

import math
from datetime import datetime
from typing import Callable

from structlog import get_logger

from core.errors import (
    AppException,
    ConfigurationError,
    ServerError,
    invalid_coordinates,
    missing_coordinates,
)
from core.opening_hours import resolve_weekday
from core.settings import GOOGLE_MAPS_API_KEY_ENV, Settings
from schemas.hospital import Coordinate, DaySelector, HospitalSearchResponse
from services.place_aggregator import aggregate_places
from services.place_enricher import enrich_places
from services.places_client import GooglePlacesClient, PlacesProvider
from services.result_ranker import rank_results

logger = get_logger(__name__)


def _parse_coordinate_value(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as err:
        raise invalid_coordinates() from err
    if not math.isfinite(parsed):
        raise invalid_coordinates()
    return parsed


def parse_origin(lat: str | None, lng: str | None) -> Coordinate:
    lat_text = (lat or "").strip()
    lng_text = (lng or "").strip()
    if not lat_text or not lng_text:
        raise missing_coordinates()

    latitude = _parse_coordinate_value(lat_text)
    longitude = _parse_coordinate_value(lng_text)
    if latitude < -90 or latitude > 90 or longitude < -180 or longitude > 180:
        raise invalid_coordinates()
    return Coordinate(latitude=latitude, longitude=longitude)


def parse_day(day: str | None) -> DaySelector:
    # Only an exact "tomorrow" moves the target day; anything else means today.
    if day == DaySelector.TOMORROW.value:
        return DaySelector.TOMORROW
    return DaySelector.TODAY


class HospitalSearchService:
    def __init__(
        self,
        settings: Settings,
        places_client: PlacesProvider | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings
        self._places_client = places_client
        self._clock = clock

    def _require_api_key(self) -> str:
        api_key = self.settings.google_maps_api_key
        if not api_key:
            logger.error("places_credential_missing", setting=GOOGLE_MAPS_API_KEY_ENV)
            raise ConfigurationError(GOOGLE_MAPS_API_KEY_ENV)
        return api_key

    def _client(self, api_key: str) -> PlacesProvider:
        if self._places_client is not None:
            return self._places_client
        return GooglePlacesClient(
            api_key=api_key,
            language=self.settings.places_language,
            timeout=self.settings.places_http_timeout_seconds,
        )

    async def search(
        self,
        *,
        lat: str | None,
        lng: str | None,
        day: str | None = None,
    ) -> HospitalSearchResponse:
        origin = parse_origin(lat, lng)
        selector = parse_day(day)
        client = self._client(self._require_api_key())
        weekday_index = resolve_weekday(selector, self._clock())

        try:
            places = await aggregate_places(
                client,
                origin,
                categories=self.settings.places_categories,
                radius_m=self.settings.places_search_radius_m,
            )
            details = await enrich_places(
                client,
                list(places),
                cap=self.settings.places_details_cap,
                concurrency=self.settings.places_details_concurrency,
            )
            items = rank_results(
                origin,
                details,
                weekday_index,
                meters_per_minute=self.settings.walking_meters_per_minute,
            )
        except AppException:
            logger.exception("hospital_search_failed", day=selector.value)
            raise
        except Exception as exc:
            logger.exception("hospital_search_failed", day=selector.value)
            raise ServerError(detail=str(exc) or type(exc).__name__) from exc

        return HospitalSearchResponse(day=selector, count=len(items), items=items)
