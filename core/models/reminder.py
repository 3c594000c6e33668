# =============================================================================
# core/models/reminder.py - Reminder Schemas
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class ReminderForm(BaseModel):
    """
    Reminder form.

    Example:
        {
            "medicineName": "Metformin",
            "dosage": "500mg",
            "frequency": "twice_daily",
            "times": ["08:00", "20:00"],
            "startDate": "2024-01-15",
            "active": true
        }
    """

    model_config = ConfigDict(extra="ignore")

    medicineName: str = ""
    dosage: str = ""
    frequency: str = "daily"
    times: list[str] = Field(default_factory=lambda: ["08:00"])
    startDate: str = ""
    endDate: str = ""
    notes: str = ""
    active: bool = True
