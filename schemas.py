"""
Lead form schemas

The landing pages post a flat JSON object keyed by Airtable column names.
LeadSubmission whitelists those columns and sanitizes every value; anything
else in the payload is dropped.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def sanitize(value: Any) -> str:
    """Render a raw form value as a trimmed string; None becomes ""."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


class LeadSubmission(BaseModel):
    """
    A single lead captured from a landing page form.
    Aliases must match the column names of the Airtable table.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = Field(None, alias="Name")
    business_name: Optional[str] = Field(None, alias="Business Name")
    email: Optional[str] = Field(None, alias="Email")
    whatsapp_number: Optional[str] = Field(None, alias="WhatsApp Number")
    role: Optional[str] = Field(None, alias="Your Role")
    business_type: Optional[str] = Field(None, alias="Business Type")
    locations: Optional[str] = Field(None, alias="Number of Locations")
    monthly_revenue: Optional[str] = Field(None, alias="Monthly Revenue")
    interest_level: Optional[str] = Field(None, alias="Which Level Interests You?")
    source: Optional[str] = Field(None, alias="Source")

    @field_validator("*", mode="before")
    @classmethod
    def sanitize_values(cls, value: Any) -> Optional[str]:
        # Empty values are dropped rather than written as blank cells
        return sanitize(value) or None

    def to_fields(self) -> Dict[str, str]:
        """Airtable `fields` payload: column name -> value, blanks omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


RECOGNIZED_FIELDS = tuple(field.alias for field in LeadSubmission.model_fields.values())


class ErrorResponse(BaseModel):
    error: str


class OkResponse(BaseModel):
    ok: bool = True
