from __future__ import annotations

from typing import Sequence

from structlog import get_logger

from core.geo import (
    WALKING_METERS_PER_MINUTE,
    distance_meters,
    walk_minutes,
    walking_directions_url,
)
from core.opening_hours import is_open_on
from schemas.hospital import Coordinate, PlaceDetail, ResultItem

logger = get_logger(__name__)


def _walk_sort_key(item: ResultItem) -> tuple[bool, int]:
    # Unknown walk times go last regardless of how far the others are.
    if item.walk_minutes is None:
        return True, 0
    return False, item.walk_minutes


def to_result_item(
    origin: Coordinate,
    detail: PlaceDetail,
    meters_per_minute: float = WALKING_METERS_PER_MINUTE,
) -> ResultItem:
    minutes: int | None = None
    maps_url: str | None = None
    if detail.location is not None:
        minutes = walk_minutes(distance_meters(origin, detail.location), meters_per_minute)
        maps_url = walking_directions_url(origin, detail.location)

    return ResultItem(
        name=detail.name,
        address=detail.address,
        phone=detail.phone,
        website=detail.website,
        opening_hours=detail.opening_hours,
        walk_minutes=minutes,
        maps_url=maps_url,
    )


def sort_by_walk_time(items: Sequence[ResultItem]) -> list[ResultItem]:
    return sorted(items, key=_walk_sort_key)


def rank_results(
    origin: Coordinate,
    details: Sequence[PlaceDetail],
    weekday_index: int,
    meters_per_minute: float = WALKING_METERS_PER_MINUTE,
) -> list[ResultItem]:
    open_details = [detail for detail in details if is_open_on(weekday_index, detail.opening_hours)]
    items = [to_result_item(origin, detail, meters_per_minute) for detail in open_details]

    logger.info(
        "results_ranked",
        weekday_index=weekday_index,
        candidates=len(details),
        closed=len(details) - len(open_details),
        returned=len(items),
    )
    return sort_by_walk_time(items)
