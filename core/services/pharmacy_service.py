# =============================================================================
# core/services/pharmacy_service.py - Pharmacy Locator
# =============================================================================
# Looks pharmacies up in three directories:
# - OpenStreetMap via Overpass (no key): pharmacies around a point, trying
#   each configured interpreter until one answers
# - Google Places (GOOGLE_PLACES_API_KEY): nearby search plus per-place
#   details for phone, hours, website and rating
# - CollectAPI (COLLECTAPI_KEY): Turkish duty pharmacies by city/district
#
# All three are normalized to core.models.pharmacy.Pharmacy.
# =============================================================================

import logging
from typing import Any

import httpx

from app.config import settings
from app.exceptions import PharmacyLookupError, ProviderNotConfiguredError
from core.models.pharmacy import Pharmacy, PharmacySearchResponse

logger = logging.getLogger(__name__)

MIN_RADIUS_METERS = 500
MAX_RADIUS_METERS = 5000
DEFAULT_RADIUS_METERS = 2000
OSM_RESULT_LIMIT = 50

PLACES_RADIUS_METERS = 5000
PLACES_DETAIL_LIMIT = 15
PLACES_DETAIL_FIELDS = "formatted_phone_number,opening_hours,website,rating"

USER_AGENT = "medichecker/1.0"


def clamp_radius(radius: int) -> int:
    """Keep an Overpass search radius within 500..5000 meters."""
    return min(max(radius, MIN_RADIUS_METERS), MAX_RADIUS_METERS)


def overpass_query(lat: float, lng: float, radius: int) -> str:
    """Overpass QL for every pharmacy node, way and relation around a point."""
    around = f"around:{radius},{lat},{lng}"
    return (
        "[out:json][timeout:25];\n"
        "(\n"
        f'  node["amenity"="pharmacy"]({around});\n'
        f'  way["amenity"="pharmacy"]({around});\n'
        f'  relation["amenity"="pharmacy"]({around});\n'
        ");\n"
        "out tags center;\n"
    )


def osm_address(tags: dict[str, Any]) -> str:
    """Build a one-line address from OSM addr:* tags."""
    parts = [
        tags.get("addr:housenumber"),
        tags.get("addr:street"),
        tags.get("addr:suburb"),
        tags.get("addr:city"),
        tags.get("addr:province") or tags.get("addr:state"),
    ]
    return ", ".join(p for p in parts if p) or tags.get("addr:full") or "Address not available"


def osm_pharmacy(element: dict[str, Any]) -> Pharmacy | None:
    """
    Normalize one Overpass element.

    Nodes carry lat/lon directly; ways and relations carry a `center`.
    Elements without coordinates are dropped (None).
    """
    tags = element.get("tags") or {}
    position = element if element.get("type") == "node" else element.get("center") or {}
    lat, lng = position.get("lat"), position.get("lon")
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return None

    return Pharmacy(
        id=f"{element.get('type')}/{element.get('id')}",
        name=tags.get("name") or "Pharmacy",
        address=osm_address(tags),
        phone=tags.get("contact:phone") or tags.get("phone") or "Phone not available",
        openingHours=tags.get("opening_hours"),
        lat=lat,
        lng=lng,
        source="osm",
    )


class PharmacyService:
    """
    Pharmacy lookups against OpenStreetMap, Google Places and CollectAPI.

    The HTTP client is injectable so tests can route calls through
    httpx.MockTransport.

    Example:
        service = PharmacyService()
        response = service.find_nearby(14.5995, 120.9842, radius=1500)
        print(response.total)
    """

    def __init__(self, http_client: httpx.Client | None = None):
        self._client = http_client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)

    def close(self) -> None:
        self._client.close()

    # -------------------------------------------------------------------------
    # OpenStreetMap
    # -------------------------------------------------------------------------

    def find_nearby(self, lat: float, lng: float, radius: int = DEFAULT_RADIUS_METERS) -> PharmacySearchResponse:
        """
        Pharmacies within `radius` meters (clamped to 500..5000).

        Raises:
            PharmacyLookupError: If no Overpass endpoint answered
        """
        radius = clamp_radius(radius)
        query = overpass_query(lat, lng, radius)

        data = None
        for endpoint in settings.overpass_endpoints_list:
            try:
                response = self._client.post(
                    endpoint,
                    content=query.encode("utf-8"),
                    headers={"Content-Type": "text/plain; charset=UTF-8", "User-Agent": USER_AGENT},
                )
                response.raise_for_status()
                data = response.json()
                break
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"Overpass endpoint {endpoint} failed: {e}")

        if data is None:
            raise PharmacyLookupError("Overpass", "no endpoint answered")

        elements = data.get("elements") if isinstance(data, dict) else None
        if not isinstance(elements, list):
            elements = []
        pharmacies = [p for p in (osm_pharmacy(e) for e in elements) if p is not None]
        pharmacies = pharmacies[:OSM_RESULT_LIMIT]

        logger.info(f"Overpass ({lat}, {lng}) r={radius}m: {len(pharmacies)} pharmacies")
        return PharmacySearchResponse(
            results=pharmacies,
            total=len(pharmacies),
            source="osm",
            message=None if pharmacies else "No pharmacies found in this area",
        )

    # -------------------------------------------------------------------------
    # Google Places
    # -------------------------------------------------------------------------

    def find_places(self, lat: float, lng: float) -> PharmacySearchResponse:
        """
        Google Places nearby search within 5km, with details for the first 15.

        Raises:
            ProviderNotConfiguredError: If GOOGLE_PLACES_API_KEY is unset
            PharmacyLookupError: On a transport error or a status other than
                OK / ZERO_RESULTS
        """
        key = settings.GOOGLE_PLACES_API_KEY
        if not key:
            raise ProviderNotConfiguredError("Google Places", "GOOGLE_PLACES_API_KEY")

        base = settings.GOOGLE_PLACES_BASE_URL.rstrip("/")
        try:
            response = self._client.get(f"{base}/nearbysearch/json", params={
                "location": f"{lat},{lng}",
                "radius": PLACES_RADIUS_METERS,
                "type": "pharmacy",
                "key": key,
            })
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PharmacyLookupError("Google Places", str(e))

        status = data.get("status")
        if status == "ZERO_RESULTS":
            return PharmacySearchResponse(source="google", message="No pharmacies found in this area")
        if status != "OK":
            raise PharmacyLookupError("Google Places", f"{status} - {data.get('error_message') or 'Unknown error'}")

        places = (data.get("results") or [])[:PLACES_DETAIL_LIMIT]
        pharmacies = [self._google_pharmacy(place, self._place_details(place.get("place_id"))) for place in places]
        logger.info(f"Google Places ({lat}, {lng}): {len(pharmacies)} pharmacies")
        return PharmacySearchResponse(results=pharmacies, total=len(pharmacies), source="google")

    def _place_details(self, place_id: str | None) -> dict[str, Any]:
        """Details for one place; {} when the call fails."""
        if not place_id:
            return {}
        base = settings.GOOGLE_PLACES_BASE_URL.rstrip("/")
        try:
            response = self._client.get(f"{base}/details/json", params={
                "place_id": place_id,
                "fields": PLACES_DETAIL_FIELDS,
                "key": settings.GOOGLE_PLACES_API_KEY,
            })
            response.raise_for_status()
            return response.json().get("result") or {}
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Place details for {place_id} failed: {e}")
            return {}

    @staticmethod
    def _google_pharmacy(place: dict[str, Any], details: dict[str, Any]) -> Pharmacy:
        location = (place.get("geometry") or {}).get("location") or {}
        hours = details.get("opening_hours") or place.get("opening_hours") or {}
        weekday_text = hours.get("weekday_text") or []

        return Pharmacy(
            id=place.get("place_id") or place.get("name", "place"),
            name=place.get("name") or "Pharmacy",
            address=place.get("vicinity") or place.get("formatted_address") or "Address not available",
            phone=details.get("formatted_phone_number") or "Contact pharmacy directly",
            openingHours="; ".join(weekday_text) or None,
            openNow=hours.get("open_now"),
            lat=location.get("lat"),
            lng=location.get("lng"),
            rating=details.get("rating") or place.get("rating"),
            website=details.get("website"),
            source="google",
        )

    # -------------------------------------------------------------------------
    # CollectAPI (Turkey)
    # -------------------------------------------------------------------------

    def find_duty_pharmacies(self, city: str, district: str | None = None) -> PharmacySearchResponse:
        """
        Pharmacies on duty today in a Turkish city (il), optionally one district (ilce).

        Raises:
            ProviderNotConfiguredError: If COLLECTAPI_KEY is unset
            PharmacyLookupError: On a transport error or non-2xx answer
        """
        key = settings.COLLECTAPI_KEY
        if not key:
            raise ProviderNotConfiguredError("CollectAPI", "COLLECTAPI_KEY")

        params = {"il": city}
        if district:
            params["ilce"] = district

        try:
            response = self._client.get(
                f"{settings.COLLECTAPI_BASE_URL.rstrip('/')}/health/dutyPharmacy",
                params=params,
                headers={"Authorization": f"apikey {key}", "Content-Type": "application/json"},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PharmacyLookupError("CollectAPI", str(e))

        rows = (data.get("result") or []) if data.get("success") else []
        if not rows:
            where = f"{city}, {district}" if district else city
            return PharmacySearchResponse(source="collectapi", message=f"No duty pharmacies found for {where}")

        pharmacies = [
            Pharmacy(
                id=f"tr_{index}",
                name=row.get("name") or row.get("pharmacyName") or "Eczane",
                address=row.get("address") or row.get("fullAddress") or f"{district or 'Merkez'}, {city}",
                phone=row.get("phone") or row.get("phoneNumber") or "Phone not available",
                district=row.get("dist") or row.get("district") or row.get("ilce") or district or "Merkez",
                city=city,
                source="collectapi",
            )
            for index, row in enumerate(rows)
        ]
        logger.info(f"CollectAPI {city}/{district or '-'}: {len(pharmacies)} duty pharmacies")
        return PharmacySearchResponse(results=pharmacies, total=len(pharmacies), source="collectapi")
