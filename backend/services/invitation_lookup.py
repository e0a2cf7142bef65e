"""
Invitation letter lookup by phone number.

Business rules:
- Read-only: one query on the invitation collection (at most 2 documents), exact string match.
- Input is trimmed and separator-stripped (services.phone); empty input never reaches the store.
- phoneNumber is not unique in the store. The first document in natural order wins;
  duplicates are logged, not rejected.
- Only name, email, phoneNumber and letterURL are returned.
"""
import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError
from models import InvitationRecord, INVITATION_FIELDS
from services.phone import normalize_lookup_phone, mask_phone

logger = logging.getLogger(__name__)

MSG_PHONE_REQUIRED = "phone number is required"
MSG_NOT_FOUND = "no record for this phone number"
MSG_SERVER_ERROR = "server error while searching"

_PROJECTION = {"_id": 0, **{field: 1 for field in INVITATION_FIELDS}}


class InvitationLookupError(Exception):
    """Base for lookup failures. message is safe to show to the visitor."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InvitationLookupError):
    status_code = 400


class NotFoundError(InvitationLookupError):
    status_code = 404


class InternalError(InvitationLookupError):
    status_code = 500

    def __init__(self, message: str = MSG_SERVER_ERROR):
        super().__init__(message)


def extract_phone_number(body: Any) -> str:
    """Pull phoneNumber out of a decoded request body, or raise ValidationError."""
    raw = body.get("phoneNumber") if isinstance(body, dict) else None
    phone = normalize_lookup_phone(raw)
    if not phone:
        raise ValidationError(MSG_PHONE_REQUIRED)
    return phone


async def find_invitation_by_phone(collection, phone_number: str) -> InvitationRecord:
    """
    Return the invitation whose phoneNumber equals the normalized input.
    Raises ValidationError, NotFoundError or InternalError.
    """
    phone = normalize_lookup_phone(phone_number)
    if not phone:
        raise ValidationError(MSG_PHONE_REQUIRED)

    query = {"phoneNumber": phone}
    try:
        docs = await collection.find(query, _PROJECTION).limit(2).to_list(length=2)
    except PyMongoError as e:
        logger.exception(f"Invitation lookup failed for {mask_phone(phone)}: {e}")
        raise InternalError() from e

    if not docs:
        logger.info("No invitation for %s", mask_phone(phone))
        raise NotFoundError(MSG_NOT_FOUND)

    if len(docs) > 1:
        logger.warning("Multiple invitations share phone %s, returning the first", mask_phone(phone))

    logger.info("Invitation found for %s", mask_phone(phone))
    try:
        return InvitationRecord.from_document(docs[0])
    except PydanticValidationError as e:
        logger.exception(f"Unreadable invitation stored for {mask_phone(phone)}: {e}")
        raise InternalError() from e
