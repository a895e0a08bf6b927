"""Order and procurement DTOs."""
from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, Field

from orderdesk.models import PaymentType, PaymentStatus, PackingStatus, ProcurementStatus
from orderdesk.schemas.base import RequestModel


class OrderItemRequest(RequestModel):
    variant_id: int = Field(
        ...,
        gt=0,
        validation_alias=AliasChoices('variantId', 'productVariantId', 'variant_id')
    )
    quantity: Decimal = Field(..., gt=0, max_digits=12, decimal_places=3)


class PlaceOrderRequest(RequestModel):
    """Body of POST /api/orders."""

    customer_id: int = Field(..., gt=0, validation_alias=AliasChoices('customerId', 'customer_id'))
    notes: Optional[str] = None
    delivery_fee_cents: int = Field(0, ge=0, validation_alias=AliasChoices('deliveryFee', 'delivery_fee_cents'))
    discount_cents: int = Field(0, ge=0, validation_alias=AliasChoices('discount', 'discount_cents'))
    payment_type: PaymentType = Field(
        PaymentType.MANUAL_TRANSFER,
        validation_alias=AliasChoices('paymentType', 'payment_type')
    )
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    items: List[OrderItemRequest] = Field(..., min_length=1)


class UpdateOrderRequest(RequestModel):
    """Body of PUT /api/orders/<id>; every field optional."""

    payment_status: Optional[PaymentStatus] = Field(
        None, validation_alias=AliasChoices('paymentStatus', 'payment_status')
    )
    packing_status: Optional[PackingStatus] = Field(
        None, validation_alias=AliasChoices('packingStatus', 'packing_status')
    )
    payment_type: Optional[PaymentType] = Field(
        None, validation_alias=AliasChoices('paymentType', 'payment_type')
    )
    notes: Optional[str] = None
    delivery_fee_cents: Optional[int] = Field(
        None, ge=0, validation_alias=AliasChoices('deliveryFee', 'delivery_fee_cents')
    )
    discount_cents: Optional[int] = Field(
        None, ge=0, validation_alias=AliasChoices('discount', 'discount_cents')
    )


class UpdateProcurementRequest(RequestModel):
    """Body of PUT /api/procurements/<id>."""

    status: ProcurementStatus
    notes: Optional[str] = None
