"""Invoice templates: reusable business, client and settings blocks."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from core.models.party import PartyInfo
from core.models.settings import InvoiceSettings


class TemplateCreate(BaseModel):
    """Data required to save a template. Saving an existing name overwrites it."""

    name: str = Field(..., min_length=1, max_length=100)
    business_info: PartyInfo = Field(default_factory=PartyInfo)
    client_info: PartyInfo = Field(default_factory=PartyInfo)
    settings: InvoiceSettings = Field(default_factory=InvoiceSettings)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class Template(BaseModel):
    """Full template entity as stored."""

    id: UUID
    user_id: UUID
    name: str
    business_info: PartyInfo
    client_info: PartyInfo
    settings: InvoiceSettings
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
