# =============================================================================
# core/models/history.py - Search History Schemas
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class HistoryEntryCreate(BaseModel):
    """One search history record, as written after a search."""

    model_config = ConfigDict(extra="ignore")

    searchQuery: str = Field(..., min_length=1)
    medicineName: str = ""
    resultType: str = Field(default="search", description="What the user did (search, view, ...)")
    resultCount: int = Field(default=0, ge=0)


class HistoryDeleteRequest(BaseModel):
    ids: list[str] = Field(..., min_length=1, description="History item IDs to delete")
