# =============================================================================
# core/models/prescription.py - Prescription Schemas
# =============================================================================
# - PrescriptionForm: Add/edit form (medicine, dosage, dates, refill cycle)
# - PrescriptionAnalytics: Summary cards on the prescriptions page
# - DoseLogRequest / DoseLogResponse: Stateless "log a dose" helper
#
# Dates travel as the strings the browser's date inputs produce
# ("2024-01-15"); the service parses them where it needs to compute.
# =============================================================================

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class PrescriptionForm(BaseModel):
    """
    Prescription form.

    medicine, dosage and startDate are required, but that is checked by
    the service so the client gets "Please fill all required fields."
    """

    model_config = ConfigDict(extra="ignore")

    medicine: str = ""
    dosage: str = ""
    startDate: str = ""
    endDate: str = ""
    notes: str = ""
    rxType: Literal["acute", "maintenance"] = "acute"
    refillDays: int = Field(default=30, ge=0, description="Days one refill lasts")


class PrescriptionAnalytics(BaseModel):
    total: int = 0
    active: int = 0
    maintenance: int = 0
    upcomingRefills: int = Field(default=0, description="Maintenance prescriptions due within 7 days")


class DoseLogRequest(BaseModel):
    """
    Log a dose taken now.

    The dose log lives in the browser; it is sent along and returned
    updated.
    """

    medicineName: str = Field(..., min_length=1)
    doseLogs: dict[str, dict[str, Any]] = Field(default_factory=dict)


class DoseLogResponse(BaseModel):
    doseLogs: dict[str, dict[str, Any]]
    message: str
