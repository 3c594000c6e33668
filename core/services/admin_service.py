# =============================================================================
# core/services/admin_service.py - Admin Dashboard and Analytics
# =============================================================================
# Aggregates across collections for the admin dashboard. Search analytics
# are computed with pandas over the whole `searchHistory` collection.
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import pandas as pd

from core.services.reminder_service import ReminderService
from core.services.user_service import UserService
from lib.firestore_client import (
    FirestoreClient,
    MEDICINES_COLLECTION,
    REMINDERS_COLLECTION,
    SEARCH_HISTORY_COLLECTION,
    USERS_COLLECTION,
)
from lib.utils import parse_datetime

logger = logging.getLogger(__name__)

TOP_MEDICINES = 5
RECENT_SEARCHES = 10
OVERDUE_REMINDER_THRESHOLD = 5

# Points removed from systemHealth (which starts at 100)
HEALTH_PENALTIES = {
    "no_medicines": 20,
    "no_admins": 30,
    "overdue_reminders": 15,
    "no_users": 25,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _value(value: Any) -> Any:
    """NaN (a field missing from some documents) becomes None."""
    return None if pd.isna(value) else value


def searches_frame(items: list[dict[str, Any]]) -> pd.DataFrame:
    """
    Search history as a DataFrame with a parsed `ts` column.

    Rows without a usable timestamp are dropped.
    """
    df = pd.DataFrame(items, columns=["id", "searchQuery", "medicineName", "resultType", "timestamp"])
    if df.empty:
        df["ts"] = pd.Series(dtype="datetime64[ns]")
        return df

    df["ts"] = pd.to_datetime(df["timestamp"].map(parse_datetime), errors="coerce")
    return df.dropna(subset=["ts"])


class AdminService:
    """
    Service for the admin dashboard.
    """

    @staticmethod
    def system_health(
        total_users: int,
        admin_users: int,
        total_medicines: int,
        overdue_reminders: int,
    ) -> int:
        health = 100
        if total_medicines == 0:
            health -= HEALTH_PENALTIES["no_medicines"]
        if admin_users == 0:
            health -= HEALTH_PENALTIES["no_admins"]
        if overdue_reminders > OVERDUE_REMINDER_THRESHOLD:
            health -= HEALTH_PENALTIES["overdue_reminders"]
        if total_users == 0:
            health -= HEALTH_PENALTIES["no_users"]
        return max(health, 0)

    @staticmethod
    def load_stats(now: datetime | None = None) -> dict[str, int]:
        """
        Dashboard counters.

        dailySearches counts searches in the last 24 hours.
        """
        now = now or _utcnow()

        users = FirestoreClient.list_documents(USERS_COLLECTION)
        admin_users = sum(1 for user in users if UserService.is_admin(user))
        total_medicines = FirestoreClient.count_documents(MEDICINES_COLLECTION)
        active_reminders = FirestoreClient.list_documents(
            REMINDERS_COLLECTION, filters=[("active", "==", True)]
        )
        searches = searches_frame(FirestoreClient.list_documents(SEARCH_HISTORY_COLLECTION))

        # Reminder times are local wall-clock; compare against local now
        overdue = ReminderService.count_overdue(active_reminders, datetime.now())

        stats = {
            "totalUsers": len(users),
            "adminUsers": admin_users,
            "regularUsers": len(users) - admin_users,
            "totalMedicines": total_medicines,
            "totalSearches": len(searches),
            "dailySearches": int((searches["ts"] > now - timedelta(days=1)).sum()),
            "activeReminders": len(active_reminders),
            "systemHealth": AdminService.system_health(
                len(users), admin_users, total_medicines, overdue
            ),
        }
        logger.debug(f"Admin stats: {stats}")
        return stats

    @staticmethod
    def load_analytics(now: datetime | None = None) -> dict[str, Any]:
        """
        Search analytics.

        Returns:
            dailySearches / weeklySearches (last 24h / 7 days), searchesByDay
            for the last seven calendar days (oldest first), topMedicines and
            the ten most recent searches
        """
        now = now or _utcnow()
        df = searches_frame(FirestoreClient.list_documents(SEARCH_HISTORY_COLLECTION))

        days = [(now - timedelta(days=offset)).date() for offset in range(6, -1, -1)]
        if df.empty:
            return {
                "dailySearches": 0,
                "weeklySearches": 0,
                "searchesByDay": [{"date": day.isoformat(), "count": 0} for day in days],
                "topMedicines": [],
                "recentSearches": [],
            }

        per_day = df["ts"].dt.date.value_counts()
        searches_by_day = [{"date": day.isoformat(), "count": int(per_day.get(day, 0))} for day in days]

        names = df["medicineName"].fillna("").astype(str).str.strip()
        names = names.where(names != "", df["searchQuery"].fillna("").astype(str).str.strip())
        names = names[names != ""].str.lower()
        top = names.value_counts().head(TOP_MEDICINES)

        recent = df.sort_values("ts", ascending=False).head(RECENT_SEARCHES)
        recent_searches = [
            {
                "id": row["id"],
                "searchQuery": _value(row["searchQuery"]),
                "medicineName": _value(row["medicineName"]),
                "resultType": _value(row["resultType"]),
                "timestamp": row["ts"].to_pydatetime().isoformat(),
            }
            for _, row in recent.iterrows()
        ]

        return {
            "dailySearches": int((df["ts"] > now - timedelta(days=1)).sum()),
            "weeklySearches": int((df["ts"] > now - timedelta(days=7)).sum()),
            "searchesByDay": searches_by_day,
            "topMedicines": [{"name": name, "count": int(count)} for name, count in top.items()],
            "recentSearches": recent_searches,
        }
