"""
Public invitation search: POST /api/search.
Unauthenticated, read-only. Errors are rendered as {"error": message} by the
InvitationLookupError handler registered in server.py.
"""
from fastapi import APIRouter, Depends, Request
from database import database
from models import SearchResponse, ErrorResponse
from services.invitation_lookup import (
    InternalError,
    extract_phone_number,
    find_invitation_by_phone,
)
import json
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["search"])


async def get_invitation_collection():
    """Connect on first use (single-flight) and hand out the invitation collection."""
    try:
        await database.connect()
    except Exception as e:
        logger.exception(f"Record store unavailable: {e}")
        raise InternalError() from e
    return database.get_collection()


async def _read_json(request: Request):
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


@router.post(
    "/search",
    response_model=SearchResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 404, 500)},
)
async def search_invitation(request: Request, collection=Depends(get_invitation_collection)):
    """
    Look up an invitation letter by phone number.
    200 {success, data} | 400 missing phone | 404 no match | 500 store failure.
    """
    body = await _read_json(request)
    phone = extract_phone_number(body)
    record = await find_invitation_by_phone(collection, phone)
    return SearchResponse(data=record)
