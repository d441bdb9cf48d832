from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from core.response_envelope import document_response
from core.settings import get_settings
from services.hospital_service import HospitalSearchService

router = APIRouter(prefix="/hospitals", tags=["Hospitals"])

_SUCCESS_EXAMPLE = {
    "day": "today",
    "count": 1,
    "items": [
        {
            "name": "Central Clinic",
            "address": "1-2-3 Example, Tokyo",
            "phone": "03-0000-0000",
            "website": "https://clinic.example",
            "opening_hours": ["Monday: 9:00 AM – 5:00 PM"],
            "walk_minutes": 7,
            "maps_url": "https://www.google.com/maps/dir/?api=1&origin=35.0,139.0"
            "&destination=35.004,139.0&travelmode=walking",
        }
    ],
}


def get_hospital_search_service() -> HospitalSearchService:
    return HospitalSearchService(settings=get_settings())


@router.get("")
@document_response(
    summary="Open medical facilities within walking distance",
    success_example=_SUCCESS_EXAMPLE,
    error_examples={
        400: {"error": "lat,lng required"},
        500: {"error": "server_error", "detail": "Places provider request failed"},
    },
)
async def search_hospitals(
    lat: str | None = Query(default=None, description="Latitude of the user."),
    lng: str | None = Query(default=None, description="Longitude of the user."),
    day: str | None = Query(default=None, description="Either 'today' (default) or 'tomorrow'."),
    service: HospitalSearchService = Depends(get_hospital_search_service),
):
    return await service.search(lat=lat, lng=lng, day=day)


@router.options("", include_in_schema=False)
async def hospitals_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK)
