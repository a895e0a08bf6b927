"""Request DTOs validated at the HTTP boundary."""
from orderdesk.schemas.base import RequestModel, parse_request
from orderdesk.schemas.orders import (
    OrderItemRequest, PlaceOrderRequest, UpdateOrderRequest, UpdateProcurementRequest
)
from orderdesk.schemas.customers import CustomerCreate, CustomerUpdate
from orderdesk.schemas.catalog import (
    BrandCreate, BrandUpdate, ProductCreate, ProductUpdate, AttributeCreate, AttributeUpdate,
    AttributeOptionCreate, AttributeOptionUpdate, OptionSelection, VariantCreate, VariantUpdate
)

__all__ = [
    'RequestModel', 'parse_request',
    'OrderItemRequest', 'PlaceOrderRequest', 'UpdateOrderRequest', 'UpdateProcurementRequest',
    'CustomerCreate', 'CustomerUpdate',
    'BrandCreate', 'BrandUpdate', 'ProductCreate', 'ProductUpdate',
    'AttributeCreate', 'AttributeUpdate', 'AttributeOptionCreate', 'AttributeOptionUpdate',
    'OptionSelection', 'VariantCreate', 'VariantUpdate',
]
