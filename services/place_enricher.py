from __future__ import annotations

import asyncio
from typing import Any, Sequence

from structlog import get_logger

from schemas.hospital import Coordinate, PlaceDetail
from services.places_client import PlacesProvider

logger = get_logger(__name__)

# Bounds provider calls per request.
DETAILS_CAP = 20
DETAILS_CONCURRENCY_LIMIT = 5


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _extract_location(result: dict[str, Any]) -> Coordinate | None:
    geometry = result.get("geometry")
    location = geometry.get("location") if isinstance(geometry, dict) else None
    if not isinstance(location, dict):
        return None

    lat = location.get("lat")
    lng = location.get("lng")
    if lat is None or lng is None:
        return None
    try:
        return Coordinate(latitude=float(lat), longitude=float(lng))
    except (TypeError, ValueError):
        return None


def _extract_opening_hours(result: dict[str, Any]) -> list[str] | None:
    opening_hours = result.get("opening_hours")
    if not isinstance(opening_hours, dict):
        return None
    weekday_text = opening_hours.get("weekday_text")
    if not isinstance(weekday_text, list):
        return None
    return [str(line) for line in weekday_text]


def to_place_detail(result: dict[str, Any]) -> PlaceDetail:
    return PlaceDetail(
        name=str(result.get("name") or ""),
        address=_optional_str(result.get("formatted_address")),
        phone=_optional_str(result.get("formatted_phone_number")),
        website=_optional_str(result.get("website")),
        location=_extract_location(result),
        opening_hours=_extract_opening_hours(result),
    )


async def _fetch_detail(
    client: PlacesProvider,
    place_id: str,
    *,
    semaphore: asyncio.Semaphore,
) -> PlaceDetail | None:
    async with semaphore:
        result = await client.place_details(place_id)

    if not result:
        logger.debug("place_details_empty", place_id=place_id)
        return None
    return to_place_detail(result)


async def enrich_places(
    client: PlacesProvider,
    place_ids: Sequence[str],
    cap: int = DETAILS_CAP,
    concurrency: int = DETAILS_CONCURRENCY_LIMIT,
) -> list[PlaceDetail]:
    subset = list(place_ids)[:cap]
    if not subset:
        return []

    semaphore = asyncio.Semaphore(concurrency)
    results = await asyncio.gather(
        *(_fetch_detail(client, place_id, semaphore=semaphore) for place_id in subset)
    )

    details = [detail for detail in results if detail is not None]
    logger.info(
        "places_enriched",
        requested=len(subset),
        skipped=len(subset) - len(details),
        enriched=len(details),
    )
    return details
