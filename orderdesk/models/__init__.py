"""Models package - exports all SQLAlchemy models."""
# Catalog
from orderdesk.models.brand import Brand
from orderdesk.models.product import Product
from orderdesk.models.product_attribute import ProductAttribute
from orderdesk.models.attribute_option import AttributeOption
from orderdesk.models.variant import Variant
from orderdesk.models.variant_option_value import VariantOptionValue
from orderdesk.models.variant_price import VariantPrice

# Orders
from orderdesk.models.customer import Customer, CustomerType
from orderdesk.models.order import Order, PaymentType, PaymentStatus, PackingStatus
from orderdesk.models.order_item import OrderItem
from orderdesk.models.procurement import Procurement, ProcurementStatus
from orderdesk.models.document_sequence import DocumentSequence

__all__ = [
    # Catalog
    'Brand', 'Product', 'ProductAttribute', 'AttributeOption',
    'Variant', 'VariantOptionValue', 'VariantPrice',
    # Orders
    'Customer', 'CustomerType',
    'Order', 'PaymentType', 'PaymentStatus', 'PackingStatus',
    'OrderItem', 'Procurement', 'ProcurementStatus', 'DocumentSequence',
]
