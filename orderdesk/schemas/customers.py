"""Customer DTOs."""
from typing import Optional

from pydantic import AliasChoices, Field

from orderdesk.models import CustomerType
from orderdesk.schemas.base import RequestModel


class CustomerCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone_number: Optional[str] = Field(
        None, max_length=50, validation_alias=AliasChoices('phoneNumber', 'phone_number')
    )
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    province: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(
        None, max_length=20, validation_alias=AliasChoices('postalCode', 'postal_code')
    )
    customer_type: CustomerType = Field(
        CustomerType.PERSONAL, validation_alias=AliasChoices('type', 'customerType', 'customer_type')
    )
    notes: Optional[str] = None


class CustomerUpdate(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone_number: Optional[str] = Field(
        None, max_length=50, validation_alias=AliasChoices('phoneNumber', 'phone_number')
    )
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    province: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(
        None, max_length=20, validation_alias=AliasChoices('postalCode', 'postal_code')
    )
    customer_type: Optional[CustomerType] = Field(
        None, validation_alias=AliasChoices('type', 'customerType', 'customer_type')
    )
    notes: Optional[str] = None
