from typing import List, Optional
import logging

from pydantic import ValidationError

from rajaoil_admin.config import CONTACT_FORMS_COLLECTION
from rajaoil_admin.errors import InvalidValueError
from rajaoil_admin.models.contact_form import (
    ContactForm,
    ContactFormStatistics,
    ContactFormStatus,
    STATUS_ALIASES,
    parse_contact_status,
)
from rajaoil_admin.repositories.order_repo import to_document_id
from rajaoil_admin.utils.string_utils import contains_ignore_case
from rajaoil_admin.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("name", "mobile", "email", "product", "message")


class ContactFormRepository:
    """Contact Form Accessor: inquiries submitted from the public site"""

    def __init__(self, database):
        self.collection = database[CONTACT_FORMS_COLLECTION]

    def list_forms(self, status: Optional[str] = None, search: Optional[str] = None) -> List[ContactForm]:
        """
        Lists submissions newest first.
        An unknown status filter only matches documents stored with that exact value.
        """
        query = {}
        key = (status or "").strip().lower()
        if key and key != "all":
            try:
                wanted = parse_contact_status(key)
            except InvalidValueError:
                query["status"] = key
            else:
                aliases = [alias for alias, target in STATUS_ALIASES.items() if target == wanted]
                query["status"] = {"$in": [wanted.value] + aliases}

        forms = []
        for raw in self.collection.find(query):
            try:
                forms.append(ContactForm.from_document(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed contact form {raw.get('_id')}: {e.error_count()} error(s)")

        forms.sort(key=lambda form: form.createdAt.timestamp() if form.createdAt else 0, reverse=True)

        term = (search or "").strip()
        if term:
            forms = [
                form for form in forms
                if any(contains_ignore_case(getattr(form, field), term) for field in SEARCH_FIELDS)
            ]
        return forms

    def get_form(self, form_id: str) -> Optional[ContactForm]:
        raw = self.collection.find_one({"_id": to_document_id(form_id)})
        if raw is None:
            return None
        return ContactForm.from_document(raw)

    def update_form(self, form_id: str, status=None, admin_notes: Optional[str] = None) -> int:
        """
        Updates the status and/or the admin notes.
        The first move to "contacted" also stamps `contacted` and `contactedAt`.

        Returns:
            The number of matched submissions (0 when absent)

        Raises:
            InvalidValueError: unknown status; nothing is written
        """
        update = {}
        new_status = None
        if status is not None:
            new_status = parse_contact_status(status)
            update["status"] = new_status.value
        if admin_notes is not None:
            update["adminNotes"] = admin_notes

        doc_id = to_document_id(form_id)
        existing = self.collection.find_one({"_id": doc_id}, {"contacted": 1})
        if existing is None:
            return 0

        now = utcnow()
        if new_status == ContactFormStatus.CONTACTED and not existing.get("contacted"):
            update["contacted"] = True
            update["contactedAt"] = now
        update["updatedAt"] = now

        result = self.collection.update_one({"_id": doc_id}, {"$set": update})
        logger.info(f"✅ Contact form {form_id} updated: {sorted(update)}")
        return result.matched_count

    def archive_form(self, form_id: str) -> int:
        return self.update_form(form_id, status=ContactFormStatus.ARCHIVED)

    def delete_form(self, form_id: str) -> int:
        result = self.collection.delete_one({"_id": to_document_id(form_id)})
        if result.deleted_count:
            logger.info(f"🗑️ Contact form {form_id} deleted")
        return result.deleted_count

    def get_statistics(self) -> ContactFormStatistics:
        stats = ContactFormStatistics()
        for raw in self.collection.find({}, {"status": 1}):
            stats.totalMessages += 1
            try:
                status = parse_contact_status(raw.get("status") or ContactFormStatus.NEW)
            except ValueError:
                continue
            if status == ContactFormStatus.NEW:
                stats.newMessages += 1
            elif status == ContactFormStatus.CONTACTED:
                stats.contactedMessages += 1
            else:
                stats.archivedMessages += 1
        return stats
