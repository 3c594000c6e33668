# =============================================================================
# app/routers/prescriptions.py - Prescription Endpoints
# =============================================================================
# The caller's prescriptions. Another user's prescription reads as 404.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.auth import get_current_user, AuthUser
from core.models.prescription import (
    DoseLogRequest,
    DoseLogResponse,
    PrescriptionAnalytics,
    PrescriptionForm,
)
from core.services.prescription_service import PrescriptionService

router = APIRouter()


@router.get("")
def list_prescriptions(user: AuthUser = Depends(get_current_user)):
    """
    The caller's prescriptions, newest start date first, with
    daysRemaining and the analytics summary.
    """
    prescriptions = PrescriptionService.list_prescriptions(user.uid)
    return {
        "prescriptions": prescriptions,
        "analytics": PrescriptionService.get_analytics(prescriptions),
    }


@router.get("/analytics", response_model=PrescriptionAnalytics)
def get_analytics(user: AuthUser = Depends(get_current_user)):
    prescriptions = PrescriptionService.list_prescriptions(user.uid)
    return PrescriptionService.get_analytics(prescriptions)


@router.post("", status_code=201)
def add_prescription(
    form: PrescriptionForm,
    user: AuthUser = Depends(get_current_user),
):
    prescription = PrescriptionService.add_prescription(user.uid, form)
    return {"prescription": prescription, "message": "Prescription added successfully!"}


@router.put("/{prescription_id}")
def update_prescription(
    prescription_id: Annotated[str, Path(description="Prescription document ID")],
    form: PrescriptionForm,
    user: AuthUser = Depends(get_current_user),
):
    prescription = PrescriptionService.update_prescription(user.uid, prescription_id, form)
    return {"prescription": prescription, "message": "Prescription updated successfully!"}


@router.delete("/{prescription_id}")
def delete_prescription(
    prescription_id: Annotated[str, Path(description="Prescription document ID")],
    user: AuthUser = Depends(get_current_user),
):
    PrescriptionService.delete_prescription(user.uid, prescription_id)
    return {"id": prescription_id, "message": "Prescription deleted successfully!"}


@router.post("/dose-log", response_model=DoseLogResponse)
def log_dose(
    request: DoseLogRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Record a dose taken now.

    Nothing is stored server-side; the updated log is returned for the
    client to keep.
    """
    return DoseLogResponse(
        doseLogs=PrescriptionService.log_dose(request.doseLogs, request.medicineName),
        message=f"Logged dose for {request.medicineName}",
    )
