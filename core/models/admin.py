# =============================================================================
# core/models/admin.py - Admin Dashboard Schemas
# =============================================================================

from pydantic import BaseModel, Field


class AdminStats(BaseModel):
    """
    Dashboard counters.

    systemHealth starts at 100 and loses points for an empty catalog, no
    admins, many overdue reminders, or no users.
    """

    totalUsers: int = 0
    adminUsers: int = 0
    regularUsers: int = 0
    totalMedicines: int = 0
    totalSearches: int = 0
    dailySearches: int = 0
    activeReminders: int = 0
    systemHealth: int = Field(default=100, ge=0, le=100)


class DailyCount(BaseModel):
    date: str
    count: int


class TopMedicine(BaseModel):
    name: str
    count: int


class AdminAnalytics(BaseModel):
    dailySearches: int = 0
    weeklySearches: int = 0
    searchesByDay: list[DailyCount] = Field(default_factory=list)
    topMedicines: list[TopMedicine] = Field(default_factory=list)
    recentSearches: list[dict] = Field(default_factory=list)
