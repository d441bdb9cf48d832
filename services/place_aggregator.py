from __future__ import annotations

import asyncio
from typing import Any, Sequence

from structlog import get_logger

from core.settings import DEFAULT_CATEGORIES
from schemas.hospital import Coordinate, RawPlace
from services.places_client import PlacesProvider

logger = get_logger(__name__)

WALK_RADIUS_M = 1600  # ~20 minutes on foot


def _to_raw_place(candidate: dict[str, Any]) -> RawPlace | None:
    place_id = str(candidate.get("place_id") or "").strip()
    if not place_id:
        return None
    return RawPlace(place_id=place_id, raw=candidate)


def merge_candidates(batches: Sequence[Sequence[dict[str, Any]]]) -> dict[str, RawPlace]:
    """Fold category batches into one map keyed by place_id; later batches win."""
    unique: dict[str, RawPlace] = {}
    for batch in batches:
        for candidate in batch:
            place = _to_raw_place(candidate)
            if place is not None:
                unique[place.place_id] = place
    return unique


async def aggregate_places(
    client: PlacesProvider,
    origin: Coordinate,
    categories: Sequence[str] = DEFAULT_CATEGORIES,
    radius_m: int = WALK_RADIUS_M,
) -> dict[str, RawPlace]:
    # A failing category fails the whole gather.
    batches = await asyncio.gather(
        *(
            client.nearby_search(origin=origin, category=category, radius_m=radius_m)
            for category in categories
        )
    )

    for category, batch in zip(categories, batches):
        logger.debug("nearby_search_completed", category=category, candidates=len(batch))

    unique = merge_candidates(batches)
    logger.info(
        "places_aggregated",
        categories=list(categories),
        raw_count=sum(len(batch) for batch in batches),
        unique_count=len(unique),
    )
    return unique
