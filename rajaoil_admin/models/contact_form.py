from pydantic import BaseModel, field_serializer, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum

from rajaoil_admin.errors import InvalidValueError
from rajaoil_admin.utils.timestamps import to_iso


class ContactFormStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    ARCHIVED = "archived"


CONTACT_FORM_STATUSES = [s.value for s in ContactFormStatus]

# Older admin builds wrote "replied" for what is now "contacted".
STATUS_ALIASES = {"replied": ContactFormStatus.CONTACTED}


def parse_contact_status(value) -> ContactFormStatus:
    """
    Maps an incoming status to the enum.

    Raises:
        InvalidValueError: if the value is not a known status
    """
    if isinstance(value, ContactFormStatus):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidValueError("Invalid status value")
    key = value.strip().lower()
    if key in STATUS_ALIASES:
        return STATUS_ALIASES[key]
    try:
        return ContactFormStatus(key)
    except ValueError:
        raise InvalidValueError("Invalid status value")


class ContactForm(BaseModel):
    id: str
    name: str = ""
    mobile: str = ""
    email: str = ""
    product: str = ""
    message: str = ""
    status: ContactFormStatus = ContactFormStatus.NEW
    contacted: bool = False
    contactedVia: str = ""
    adminNotes: str = ""
    assignedTo: str = ""
    createdAt: Optional[datetime] = None
    contactedAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @field_validator("name", "mobile", "email", "product", "message",
                     "contactedVia", "adminNotes", "assignedTo", mode="before")
    @classmethod
    def _empty_when_missing(cls, value):
        return value or ""

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value):
        if not value:
            return ContactFormStatus.NEW
        return parse_contact_status(value)

    @field_serializer("createdAt", "contactedAt", "updatedAt")
    def _serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return to_iso(value)

    @classmethod
    def from_document(cls, raw: dict) -> "ContactForm":
        data = dict(raw)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)


class ContactFormUpdate(BaseModel):
    status: Optional[str] = None
    adminNotes: Optional[str] = None


class ContactFormStatistics(BaseModel):
    totalMessages: int = 0
    newMessages: int = 0
    contactedMessages: int = 0
    archivedMessages: int = 0
