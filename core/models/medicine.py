# =============================================================================
# core/models/medicine.py - Medicine Schemas
# =============================================================================
# These models define the API contract for the medicine catalog:
# - MedicineForm: Input for the admin add/edit form
# - MedicineResult: One medicine as returned by search (local or API)
# - SearchResponse: Output of GET /medicines/search
#
# Field names stay camelCase; they are the Firestore document keys the
# web client already reads and writes.
# =============================================================================

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MedicineForm(BaseModel):
    """
    Admin medicine form.

    Everything is optional at the schema level so that an incomplete form
    reaches the service and gets the friendly validation message instead of
    a 422.

    Example:
        {
            "name": "Tylenol",
            "genericName": "Acetaminophen",
            "category": "Pain Relief",
            "dosage": "500mg"
        }
    """

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    genericName: str = ""
    category: str = ""
    manufacturer: str = ""
    dosage: str = ""
    activeIngredient: str = ""
    warnings: str = ""
    price: str = ""
    description: str = ""
    sideEffects: str = ""


class MedicineResult(BaseModel):
    """
    A medicine in a search result.

    Local catalog entries carry only the basic fields; openFDA and RxNav
    entries carry the label sections as well.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    genericName: str = "Unknown"
    manufacturer: str = "Unknown"
    dosage: str = "Not specified"
    description: str = "No description available"
    category: str
    icon: str
    imageUrl: str
    source: Literal["local", "fda", "rxnav"]

    # API-only fields
    indications: str | None = None
    warnings: str | None = None
    adverseReactions: str | None = None
    activeIngredient: str | None = None
    purpose: str | None = None
    routeOfAdministration: str | None = None
    substanceCategory: str | None = None
    rxcui: str | None = None
    tty: str | None = None


class SearchResponse(BaseModel):
    """
    Response for a medicine search.

    Example:
        {
            "query": "tylenol",
            "category": "all",
            "results": [{"id": "pain_1", "name": "Tylenol", "source": "local", ...}],
            "total": 1
        }
    """

    query: str = Field(..., description="The query as submitted")
    category: str = Field(default="all", description="Category restriction for the local catalog")
    results: list[MedicineResult] = Field(default_factory=list)
    total: int = Field(default=0, description="Number of results after deduplication")
    recentSearches: list[str] = Field(
        default_factory=list,
        description="Signed-in caller's recent queries, newest first (empty for guests)",
    )
