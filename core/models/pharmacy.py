# =============================================================================
# core/models/pharmacy.py - Pharmacy Locator Schemas
# =============================================================================
# One Pharmacy shape for all three directories (OpenStreetMap, Google
# Places, CollectAPI). Fields a directory doesn't provide stay None.
# =============================================================================

from typing import Literal

from pydantic import BaseModel, Field

PharmacySource = Literal["osm", "google", "collectapi"]


class Pharmacy(BaseModel):
    """
    A pharmacy as shown on the locator map or list.

    Example:
        {
            "id": "node/123456",
            "name": "Mercury Drug",
            "address": "12, Rizal Avenue, Manila",
            "phone": "+63 2 1234 5678",
            "openingHours": "Mo-Su 08:00-22:00",
            "lat": 14.5995,
            "lng": 120.9842,
            "source": "osm"
        }
    """

    id: str
    name: str
    address: str
    phone: str
    openingHours: str | None = None
    openNow: bool | None = None
    lat: float | None = None
    lng: float | None = None
    district: str | None = None
    city: str | None = None
    rating: float | None = None
    website: str | None = None
    source: PharmacySource


class PharmacySearchResponse(BaseModel):
    """Result of one pharmacy lookup."""

    results: list[Pharmacy] = Field(default_factory=list)
    total: int = 0
    source: PharmacySource
    message: str | None = Field(default=None, description="Set when nothing was found")
