from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, Dict, Any

# ============================================================================
# INVITATION LETTERS (read-only, populated by an external import)
# ============================================================================

# Fields returned to the visitor, in response order. Nothing else leaves the store.
INVITATION_FIELDS = ("name", "email", "phoneNumber", "letterURL")


class InvitationRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    letterURL: Optional[str] = None

    @field_validator(*INVITATION_FIELDS, mode="before")
    @classmethod
    def cast_scalars_to_str(cls, value: Any) -> Any:
        # Documents come from an external import; numbers and ObjectIds are stored as-is
        if value is None or isinstance(value, (str, dict, list)):
            return value
        return str(value)

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "InvitationRecord":
        return cls(**{field: doc.get(field) for field in INVITATION_FIELDS})


class SearchResponse(BaseModel):
    success: bool = True
    data: InvitationRecord


class ErrorResponse(BaseModel):
    error: str
