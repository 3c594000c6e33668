# =============================================================================
# app/routers/medicines.py - Medicine Search Endpoints
# =============================================================================
# Public endpoints; a signed-in caller's searches are also written to their
# search history.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth import get_current_user_optional, AuthUser
from app.dependencies import SearchServiceDep
from core.catalog import ADMIN_CATEGORIES, MEDICINE_CATEGORIES
from core.medicine_icons import get_medicine_image
from core.models.history import HistoryEntryCreate
from core.models.medicine import SearchResponse
from core.services.history_service import HistoryService
from core.services.search_service import recent_queries
from lib.firestore_client import FirestoreClientError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/search", response_model=SearchResponse)
def search_medicines(
    service: SearchServiceDep,
    q: Annotated[str, Query(description="Medicine name or fragment")] = "",
    category: Annotated[str, Query(description="Restrict catalog matches to one category")] = "all",
    user: AuthUser | None = Depends(get_current_user_optional),
):
    """
    Search the built-in catalog, openFDA and RxNav.

    A blank query returns no results without contacting any API. For a
    signed-in caller the response also lists their recent searches.
    """
    response = service.search(q, category)
    if not user or not response.query:
        return response

    try:
        history = HistoryService.list_history(user.uid)
        response.recentSearches = recent_queries(
            [item.get("searchQuery") for item in history], response.query
        )

        if response.total > 0:
            entry = HistoryEntryCreate(
                searchQuery=response.query,
                medicineName=response.results[0].name,
                resultType="search",
                resultCount=response.total,
            )
            HistoryService.add_entry(user.uid, entry)
    except FirestoreClientError as e:
        logger.warning(f"Could not read or record search history for {user.uid}: {e}")

    return response


@router.get("/catalog")
async def get_catalog():
    """
    The built-in catalog grouped by category, plus the admin form's
    category list.
    """
    categories = {
        name: [
            {**medicine, "source": "local", "imageUrl": get_medicine_image(medicine["name"], "local", name)}
            for medicine in medicines
        ]
        for name, medicines in MEDICINE_CATEGORIES.items()
    }
    return {
        "categories": categories,
        "adminCategories": ADMIN_CATEGORIES,
    }
