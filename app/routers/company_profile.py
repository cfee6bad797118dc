# =============================================================================
# app/routers/company_profile.py - Company Profile Document Endpoints
# =============================================================================
# The downloadable company profile PDF. The public site asks for the current
# document; admins upload new versions and pick which one is current.
# =============================================================================

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile

from app.auth import AuthUser, get_current_user
from app.dependencies import NotificationsDep, read_upload, report_outcome
from core.models.content import CompanyProfileUpdate
from core.services.company_profile_service import CompanyProfileService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def get_company_profile(
    id: Annotated[str | None, Query(description="Document UUID")] = None,
    all: Annotated[bool, Query(description="List every document")] = False,
):
    """
    Get company profile documents.

    - no parameters: the current document and its download URL
    - id: that document
    - all=true: every document, newest first
    """
    if all:
        return CompanyProfileService.list_documents()
    if id:
        return CompanyProfileService.get_document(id)
    return CompanyProfileService.get_current()


@router.post("", status_code=201)
async def upload_company_profile(
    notifications: NotificationsDep,
    file: Annotated[UploadFile, File(description="PDF document")],
    title: Annotated[str, Form()] = "",
    description: Annotated[str | None, Form()] = None,
    version: Annotated[str | None, Form()] = None,
    is_active: Annotated[bool, Form()] = False,
    is_current: Annotated[bool, Form()] = False,
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload a new company profile PDF (up to 100 MB).
    """
    document = await read_upload(file)

    with report_outcome(notifications, user, "Document uploaded successfully!", "Upload Failed"):
        result = CompanyProfileService.upload_document(
            document,
            title=title,
            description=description,
            version=version,
            is_active=is_active,
            is_current=is_current,
        )

    return {**result, "message": "Document uploaded successfully"}


@router.put("")
async def update_company_profile(
    notifications: NotificationsDep,
    id: Annotated[str, Query(description="Document UUID")],
    action: Annotated[Literal["set_current"] | None, Query()] = None,
    update: CompanyProfileUpdate | None = Body(default=None),
    user: AuthUser = Depends(get_current_user),
):
    """
    Edit a document's metadata, or make it current with action=set_current.
    """
    if action == "set_current":
        with report_outcome(notifications, user, "Current document updated!", "Update Failed"):
            CompanyProfileService.set_current(id)
        return {"message": "Current document updated successfully"}

    with report_outcome(notifications, user, "Document updated successfully!", "Update Failed"):
        document = CompanyProfileService.update_document(id, update or CompanyProfileUpdate())

    return {"document": document, "message": "Document updated successfully"}


@router.delete("")
async def delete_company_profile(
    notifications: NotificationsDep,
    id: Annotated[str, Query(description="Document UUID")],
    user: AuthUser = Depends(get_current_user),
):
    with report_outcome(notifications, user, "Document deleted successfully!", "Delete Failed"):
        CompanyProfileService.delete_document(id)

    return {"message": "Document deleted successfully"}
