# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# Each provider builds a service with its own HTTP client and closes it when
# the request finishes; tests override them with MockTransport-backed ones.
# =============================================================================

from typing import Annotated, Iterator

from fastapi import Depends

from core.services.assistant_service import AssistantService
from core.services.pharmacy_service import PharmacyService
from core.services.search_service import MedicineSearchService


def get_search_service() -> Iterator[MedicineSearchService]:
    """
    Search service for one request.

    The underlying HTTP client is closed when the request finishes.
    """
    service = MedicineSearchService()
    try:
        yield service
    finally:
        service.close()


def get_pharmacy_service() -> Iterator[PharmacyService]:
    service = PharmacyService()
    try:
        yield service
    finally:
        service.close()


def get_assistant_service() -> Iterator[AssistantService]:
    service = AssistantService()
    try:
        yield service
    finally:
        service.close()


# Type aliases for dependency injection
SearchServiceDep = Annotated[MedicineSearchService, Depends(get_search_service)]
PharmacyServiceDep = Annotated[PharmacyService, Depends(get_pharmacy_service)]
AssistantServiceDep = Annotated[AssistantService, Depends(get_assistant_service)]
