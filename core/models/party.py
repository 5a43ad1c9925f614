"""Business (issuer) and client (bill-to) contact blocks."""

from pydantic import BaseModel, Field, field_validator

from core.logo import validate_logo


class PartyInfo(BaseModel):
    """Name, contact details and multi-line postal address of one party."""

    name: str = Field("", max_length=200)
    email: str = Field("", max_length=320)
    phone: str = Field("", max_length=50)
    address: str = Field("", max_length=1000)
    logo: str | None = None  # data URI, business only

    model_config = {"frozen": True}

    @field_validator("name", "email", "phone", "address", mode="before")
    @classmethod
    def blank_if_missing(cls, value) -> str:
        return "" if value is None else value

    @field_validator("logo", mode="before")
    @classmethod
    def check_logo(cls, value) -> str | None:
        return validate_logo(value)

    @property
    def address_lines(self) -> list[str]:
        """Address split on newlines, without blank lines."""
        return [line.strip() for line in self.address.splitlines() if line.strip()]
