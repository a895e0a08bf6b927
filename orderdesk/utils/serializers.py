"""
JSON serialization of models for the API.

Quantities are Decimal and go out as strings ("2.5"); money is integer
minor units (cents); timestamps are ISO 8601.
"""
from decimal import Decimal
from datetime import datetime
from typing import Optional, Union


def qty_str(value: Union[Decimal, int, str, None]) -> Optional[str]:
    """
    Format a quantity without trailing zeros and without exponent notation.

    Examples:
        qty_str(Decimal('3.000')) -> "3"
        qty_str(Decimal('2.500')) -> "2.5"
        qty_str(Decimal('100')) -> "100"
    """
    if value is None:
        return None
    text = f"{Decimal(str(value)):f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text or '0'


def iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def enum_value(value):
    return value.value if hasattr(value, 'value') else value


def customer_to_dict(customer) -> dict:
    return {
        'id': customer.id,
        'name': customer.name,
        'phoneNumber': customer.phone_number,
        'address': customer.address,
        'city': customer.city,
        'province': customer.province,
        'postalCode': customer.postal_code,
        'type': enum_value(customer.customer_type),
        'notes': customer.notes,
        'createdAt': iso(customer.created_at),
        'updatedAt': iso(customer.updated_at),
    }


def variant_to_dict(variant) -> dict:
    return {
        'id': variant.id,
        'productId': variant.product_id,
        'sku': variant.sku,
        'name': variant.display_name,
        'variantKey': variant.variant_key,
        'unit': variant.unit,
        'stockOnHand': qty_str(variant.stock_on_hand),
        'allowPreorder': variant.allow_preorder,
        'active': variant.active,
        'prices': {p.currency: p.price_cents for p in variant.prices},
        'selections': [
            {'attributeId': ov.attribute_id, 'optionId': ov.option_id}
            for ov in variant.option_values
        ],
        'updatedAt': iso(variant.updated_at),
    }


def brand_to_dict(brand) -> dict:
    return {'id': brand.id, 'name': brand.name}


def option_to_dict(option) -> dict:
    return {
        'id': option.id,
        'attributeId': option.attribute_id,
        'value': option.value,
        'sortOrder': option.sort_order,
        'isActive': option.is_active,
    }


def attribute_to_dict(attribute, with_options: bool = True) -> dict:
    data = {
        'id': attribute.id,
        'productId': attribute.product_id,
        'name': attribute.name,
        'code': attribute.code,
        'sortOrder': attribute.sort_order,
        'isActive': attribute.is_active,
    }
    if with_options:
        data['options'] = [option_to_dict(o) for o in attribute.options]
    return data


def product_to_dict(product) -> dict:
    return {
        'id': product.id,
        'name': product.name,
        'description': product.description,
        'active': product.active,
        'brand': brand_to_dict(product.brand) if product.brand else None,
        'attributes': [attribute_to_dict(a) for a in product.attributes],
        'variants': [variant_to_dict(v) for v in product.variants],
    }


def order_item_to_dict(item, with_variant: bool = True) -> dict:
    data = {
        'id': item.id,
        'orderId': item.order_id,
        'variantId': item.variant_id,
        'quantity': qty_str(item.quantity),
        'unitPrice': item.unit_price_cents,
        'isPreorder': item.is_preorder,
    }
    if with_variant:
        data['variant'] = variant_to_dict(item.variant)
    return data


def procurement_to_dict(procurement, with_variant: bool = True, with_order: bool = False) -> dict:
    data = {
        'id': procurement.id,
        'orderId': procurement.order_id,
        'variantId': procurement.variant_id,
        'neededQty': qty_str(procurement.needed_qty),
        'status': enum_value(procurement.status),
        'notes': procurement.notes,
        'arrivedAt': iso(procurement.arrived_at),
        'createdAt': iso(procurement.created_at),
        'updatedAt': iso(procurement.updated_at),
    }
    if with_variant:
        data['variant'] = variant_to_dict(procurement.variant)
    if with_order:
        order = procurement.order
        data['order'] = {
            'id': order.id,
            'orderNumber': order.order_number,
            'customer': customer_to_dict(order.customer),
        }
    return data


def order_to_dict(order, totals: Optional[dict] = None, full: bool = True) -> dict:
    """Serialize an order; full=True includes item variants and procurements."""
    data = {
        'id': order.id,
        'orderNumber': order.order_number,
        'customerId': order.customer_id,
        'customer': customer_to_dict(order.customer),
        'paymentType': enum_value(order.payment_type),
        'paymentStatus': enum_value(order.payment_status),
        'packingStatus': enum_value(order.packing_status),
        'currency': order.currency,
        'deliveryFee': order.delivery_fee_cents,
        'discount': order.discount_cents,
        'notes': order.notes,
        'createdAt': iso(order.created_at),
        'updatedAt': iso(order.updated_at),
        'items': [order_item_to_dict(i, with_variant=full) for i in order.items],
    }
    if full:
        data['procurements'] = [procurement_to_dict(p) for p in order.procurements]
    if totals is not None:
        data['totals'] = {
            'subtotal': totals['subtotal_cents'],
            'deliveryFee': totals['delivery_fee_cents'],
            'discount': totals['discount_cents'],
            'total': totals['total_cents'],
        }
    return data
