"""Pydantic models for the customer data sent with a payment settlement"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CustomerAddress(BaseModel):
    """Postal address of the paying customer"""

    model_config = ConfigDict(extra="allow")

    street: str | None = Field(None, description="Street and number")
    pobox: str | None = Field(None, description="PO box")
    zip: str | None = Field(None, description="Postal code")
    city: str | None = Field(None, description="City")
    country: str | None = Field(
        None, min_length=2, max_length=2, description="ISO country code"
    )

    @field_validator("country")
    @classmethod
    def validate_country(cls, v):
        """Normalize the country code to upper case"""
        return v.upper() if v else v


class Customer(BaseModel):
    """Customer who paid the order"""

    model_config = ConfigDict(extra="allow")

    email: str = Field(..., min_length=3, description="Customer e-mail")
    name: str | None = Field(None, description="Full name")
    company: str | None = Field(None, description="Company name")
    address: CustomerAddress | None = Field(None, description="Postal address")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        """Require at least a plausible e-mail address"""
        v = v.strip()
        if "@" not in v:
            raise ValueError("email must contain an @")
        return v
