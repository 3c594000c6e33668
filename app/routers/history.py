# =============================================================================
# app/routers/history.py - Search History Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth import get_current_user, AuthUser
from core.models.history import HistoryDeleteRequest, HistoryEntryCreate
from core.services.history_service import HistoryService

router = APIRouter()


@router.get("")
def list_history(
    user: AuthUser = Depends(get_current_user),
    search: Annotated[str, Query(description="Match the query or medicine name")] = "",
    type: Annotated[str, Query(description="Result type, or 'all'")] = "all",
):
    """
    The caller's search history, newest first.
    """
    items = HistoryService.list_history(user.uid)
    filtered = HistoryService.filter_history(items, search, type)
    return {"items": filtered, "total": len(items), "showing": len(filtered)}


@router.post("", status_code=201)
def add_history_entry(
    entry: HistoryEntryCreate,
    user: AuthUser = Depends(get_current_user),
):
    return HistoryService.add_entry(user.uid, entry)


@router.post("/delete")
def delete_history_items(
    request: HistoryDeleteRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Delete selected items. All of them must belong to the caller."""
    deleted = HistoryService.delete_items(user.uid, request.ids)
    return {"deleted": deleted, "message": f"{deleted} item(s) deleted successfully!"}


@router.delete("")
def clear_history(user: AuthUser = Depends(get_current_user)):
    deleted = HistoryService.clear_history(user.uid)
    return {"deleted": deleted, "message": "Search history cleared successfully!"}
