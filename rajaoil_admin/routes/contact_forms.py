from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import logging

from rajaoil_admin.dependencies import get_contact_form_repository
from rajaoil_admin.errors import InvalidValueError
from rajaoil_admin.models.contact_form import ContactFormUpdate
from rajaoil_admin.repositories.contact_form_repo import ContactFormRepository

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
def list_contact_forms(
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    repo: ContactFormRepository = Depends(get_contact_form_repository),
):
    try:
        forms = repo.list_forms(status=status, search=search)
    except Exception as e:
        logger.error(f"Error fetching contact forms: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch contact forms")
    return {"success": True, "forms": [f.model_dump(mode="json") for f in forms], "count": len(forms)}


@router.get("/stats")
def get_contact_form_statistics(repo: ContactFormRepository = Depends(get_contact_form_repository)):
    try:
        stats = repo.get_statistics()
    except Exception as e:
        logger.error(f"Error computing contact form statistics: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch contact form statistics")
    return {"success": True, "statistics": stats.model_dump(mode="json")}


@router.get("/{form_id}")
def get_contact_form(form_id: str, repo: ContactFormRepository = Depends(get_contact_form_repository)):
    try:
        form = repo.get_form(form_id)
    except Exception as e:
        logger.error(f"Error fetching contact form {form_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch contact form")
    if form is None:
        raise HTTPException(status_code=404, detail="Contact form not found")
    return {"success": True, "form": form.model_dump(mode="json")}


@router.patch("/{form_id}")
def update_contact_form(
    form_id: str,
    payload: ContactFormUpdate,
    repo: ContactFormRepository = Depends(get_contact_form_repository),
):
    """Saves the status and admin notes edited in the details dialog."""
    if payload.status is None and payload.adminNotes is None:
        raise HTTPException(status_code=400, detail="Nothing to update")
    try:
        matched = repo.update_form(form_id, status=payload.status, admin_notes=payload.adminNotes)
    except InvalidValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error saving contact form {form_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save changes")
    if matched == 0:
        raise HTTPException(status_code=404, detail="Contact form not found")
    return {"success": True, "message": "Changes saved successfully"}


@router.post("/{form_id}/archive")
def archive_contact_form(form_id: str, repo: ContactFormRepository = Depends(get_contact_form_repository)):
    try:
        matched = repo.archive_form(form_id)
    except Exception as e:
        logger.error(f"Error archiving contact form {form_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to archive contact form")
    if matched == 0:
        raise HTTPException(status_code=404, detail="Contact form not found")
    return {"success": True, "message": "Contact form archived"}


@router.delete("/{form_id}")
def delete_contact_form(form_id: str, repo: ContactFormRepository = Depends(get_contact_form_repository)):
    try:
        deleted = repo.delete_form(form_id)
    except Exception as e:
        logger.error(f"Error deleting contact form {form_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete contact form")
    if deleted == 0:
        raise HTTPException(status_code=404, detail="Contact form not found")
    return {"success": True, "message": "Contact form deleted successfully"}
