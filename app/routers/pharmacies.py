# =============================================================================
# app/routers/pharmacies.py - Pharmacy Locator Endpoints
# =============================================================================
# Public endpoints behind the pharmacy locator map:
# - /nearby: OpenStreetMap (Overpass), no key needed
# - /places: Google Places nearby search
# - /duty:   Turkish duty pharmacies (CollectAPI)
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query

from app.dependencies import PharmacyServiceDep
from core.models.pharmacy import PharmacySearchResponse
from core.services.pharmacy_service import DEFAULT_RADIUS_METERS

router = APIRouter()

Latitude = Annotated[float, Query(ge=-90, le=90, description="Latitude in decimal degrees")]
Longitude = Annotated[float, Query(ge=-180, le=180, description="Longitude in decimal degrees")]


@router.get("/nearby", response_model=PharmacySearchResponse)
def nearby_pharmacies(
    service: PharmacyServiceDep,
    lat: Latitude,
    lng: Longitude,
    radius: Annotated[int, Query(description="Search radius in meters (clamped to 500-5000)")] = DEFAULT_RADIUS_METERS,
):
    """
    Pharmacies around a point from OpenStreetMap, at most 50.

    Returns 502 when every Overpass endpoint fails.
    """
    return service.find_nearby(lat, lng, radius)


@router.get("/places", response_model=PharmacySearchResponse)
def places_pharmacies(service: PharmacyServiceDep, lat: Latitude, lng: Longitude):
    """Google Places pharmacies within 5km (503 until a key is configured)."""
    return service.find_places(lat, lng)


@router.get("/duty", response_model=PharmacySearchResponse)
def duty_pharmacies(
    service: PharmacyServiceDep,
    city: Annotated[str, Query(min_length=1, description="City (il), e.g. Ankara")],
    district: Annotated[str | None, Query(description="District (ilce)")] = None,
):
    return service.find_duty_pharmacies(city.strip(), district.strip() if district else None)
