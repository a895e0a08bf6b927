"""
Catalog service - products, variants, prices and on-hand stock.

Stock is only ever changed through adjust_stock(), which locks the variant
row, optionally compares the stored value with the one the caller read, and
refuses to store a negative quantity.
"""
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload, selectinload
from sqlalchemy.orm.exc import StaleDataError

from orderdesk.models import (
    Brand, Product, ProductAttribute, AttributeOption,
    Variant, VariantOptionValue, VariantPrice, OrderItem
)
from orderdesk.exceptions import (
    OrderDeskError, BusinessLogicError, NotFoundError,
    InsufficientStockError, StockConflictError
)
from orderdesk.utils.variant_key import build_variant_key

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


# =====================================================
# STOCK
# =====================================================

def get_variant(session, variant_id: int) -> Variant:
    """Fetch a variant by id or raise NotFoundError."""
    variant = session.get(Variant, variant_id)
    if not variant:
        raise NotFoundError(f'Variant {variant_id} not found')
    return variant


def lock_variant(session, variant_id: int) -> Optional[Variant]:
    """
    Lock the variant row FOR UPDATE and return it with fresh column values.

    Returns None when the variant does not exist.
    """
    return (
        session.query(Variant)
        .filter(Variant.id == variant_id)
        .with_for_update()
        .populate_existing()
        .one_or_none()
    )


def lock_variants(session, variant_ids: Iterable[int]) -> dict:
    """
    Lock several variant rows in ascending id order.

    A stable lock order keeps two placements touching the same variants
    from deadlocking each other. Missing ids are absent from the result.
    """
    unique_ids = sorted(set(variant_ids))
    if not unique_ids:
        return {}

    variants = (
        session.query(Variant)
        .filter(Variant.id.in_(unique_ids))
        .order_by(Variant.id)
        .with_for_update()
        .populate_existing()
        .all()
    )
    return {v.id: v for v in variants}


def adjust_stock(
    session,
    variant_id: int,
    delta: Decimal,
    expected_current_stock: Optional[Decimal] = None,
    clamp: bool = False
) -> Variant:
    """
    Apply a positive or negative delta to a variant's on-hand stock.

    Args:
        session: SQLAlchemy session (caller commits)
        variant_id: Variant to adjust
        delta: Quantity to add (negative to remove)
        expected_current_stock: When given, the stored stock must still equal
            this value, otherwise StockConflictError is raised
        clamp: When a decrement would go below zero, store zero instead of
            raising InsufficientStockError

    Returns:
        The updated variant (flushed, not committed)

    Raises:
        NotFoundError: variant does not exist
        StockConflictError: stock changed since the caller read it
        InsufficientStockError: decrement below zero without clamp
    """
    delta = Decimal(str(delta))
    variant = lock_variant(session, variant_id)
    if variant is None:
        raise NotFoundError(f'Variant {variant_id} not found')

    current = Decimal(variant.stock_on_hand)
    if expected_current_stock is not None and current != Decimal(str(expected_current_stock)):
        raise StockConflictError(variant_id, expected_current_stock, current)

    new_stock = current + delta
    if new_stock < 0:
        if not clamp:
            raise InsufficientStockError(variant.sku, -delta, current)
        new_stock = ZERO

    variant.stock_on_hand = new_stock
    try:
        session.flush()
    except StaleDataError:
        raise StockConflictError(variant_id)

    logger.debug(f"Stock adjusted: variant={variant_id} {current} -> {new_stock} (delta {delta})")
    return variant


def get_price_cents(variant: Variant, currency: str) -> int:
    """Return the live price of a variant in a currency (minor units)."""
    price = variant.price_for(currency)
    if price is None:
        raise BusinessLogicError(
            f'Variant {variant.sku} has no price in {currency}',
            payload={'variant_id': variant.id, 'currency': currency}
        )
    return price


# =====================================================
# CATALOG MANAGEMENT
# =====================================================

def list_products(session) -> List[Product]:
    """All products with attributes, options, variants and prices."""
    return (
        session.query(Product)
        .options(
            joinedload(Product.brand),
            selectinload(Product.attributes).selectinload(ProductAttribute.options),
            selectinload(Product.variants).selectinload(Variant.prices),
            selectinload(Product.variants)
            .selectinload(Variant.option_values)
            .joinedload(VariantOptionValue.option),
        )
        .order_by(Product.name)
        .all()
    )


def get_product(session, product_id: int) -> Product:
    """Fetch a product or raise NotFoundError."""
    product = session.get(Product, product_id)
    if not product:
        raise NotFoundError(f'Product {product_id} not found')
    return product


def create_brand(session, name: str) -> Brand:
    """Create a brand."""
    name = (name or '').strip()
    if not name:
        raise BusinessLogicError('Brand name is required')
    brand = Brand(name=name)
    session.add(brand)
    return _commit(session, brand, f'Brand "{name}" already exists')


def create_product(session, name: str, brand_id: Optional[int] = None,
                   description: Optional[str] = None) -> Product:
    """Create a product."""
    name = (name or '').strip()
    if not name:
        raise BusinessLogicError('Product name is required')
    if brand_id is not None and not session.get(Brand, brand_id):
        raise BusinessLogicError(f'Brand {brand_id} does not exist')

    product = Product(name=name, brand_id=brand_id, description=description)
    session.add(product)
    return _commit(session, product, f'Product "{name}" already exists')


def create_attribute(session, product_id: int, name: str, code: Optional[str] = None,
                     sort_order: int = 0) -> ProductAttribute:
    """Add an attribute (e.g. size) to a product."""
    get_product(session, product_id)
    attribute = ProductAttribute(product_id=product_id, name=name.strip(), code=code, sort_order=sort_order)
    session.add(attribute)
    return _commit(session, attribute, f'Attribute "{name}" already exists for this product')


def create_attribute_option(session, attribute_id: int, value: str, sort_order: int = 0) -> AttributeOption:
    """Add a selectable option to an attribute."""
    if not session.get(ProductAttribute, attribute_id):
        raise NotFoundError(f'Attribute {attribute_id} not found')
    option = AttributeOption(attribute_id=attribute_id, value=value.strip(), sort_order=sort_order)
    session.add(option)
    return _commit(session, option, f'Option "{value}" already exists for this attribute')


def list_brands(session) -> List[Brand]:
    """All brands by name."""
    return session.query(Brand).order_by(Brand.name).all()


def update_brand(session, brand_id: int, name: str) -> Brand:
    """Rename a brand."""
    brand = session.get(Brand, brand_id)
    if not brand:
        raise NotFoundError(f'Brand {brand_id} not found')
    name = (name or '').strip()
    if not name:
        raise BusinessLogicError('Brand name is required')
    brand.name = name
    return _commit(session, brand, f'Brand "{name}" already exists')


def update_product(session, product_id: int, changes: dict) -> Product:
    """
    Partial product update.

    Accepted keys: name, brand_id, description, active. brand_id and
    description may be cleared with None.
    """
    product = get_product(session, product_id)
    if changes.get('brand_id') is not None and not session.get(Brand, changes['brand_id']):
        raise BusinessLogicError(f"Brand {changes['brand_id']} does not exist")
    _apply_changes(
        product, changes,
        allowed=('name', 'brand_id', 'description', 'active'),
        nullable=('brand_id', 'description')
    )
    return _commit(session, product, f'Product "{product.name}" already exists')


def update_attribute(session, attribute_id: int, changes: dict) -> ProductAttribute:
    """Partial attribute update (name, code, sort_order, is_active)."""
    attribute = session.get(ProductAttribute, attribute_id)
    if not attribute:
        raise NotFoundError(f'Attribute {attribute_id} not found')
    _apply_changes(
        attribute, changes,
        allowed=('name', 'code', 'sort_order', 'is_active'),
        nullable=('code',)
    )
    return _commit(session, attribute, f'Attribute "{attribute.name}" already exists for this product')


def update_attribute_option(session, option_id: int, changes: dict) -> AttributeOption:
    """
    Partial option update (value, sort_order, is_active).

    Variant keys are built from ids, so renaming an option keeps every
    variant signature intact.
    """
    option = session.get(AttributeOption, option_id)
    if not option:
        raise NotFoundError(f'Option {option_id} not found')
    _apply_changes(option, changes, allowed=('value', 'sort_order', 'is_active'))
    return _commit(session, option, f'Option "{option.value}" already exists for this attribute')


def create_variant(
    session,
    product_id: int,
    sku: str,
    selections: List[Tuple[int, int]],
    price_cents: int,
    currency: str,
    unit: str = 'piece',
    stock_on_hand: Decimal = ZERO,
    allow_preorder: bool = False
) -> Variant:
    """
    Create a variant from its attribute option selections.

    The option signature is derived with build_variant_key(); two variants of
    the same product may not resolve to the same combination.
    """
    try:
        product = get_product(session, product_id)
        stock_on_hand = Decimal(str(stock_on_hand))
        if stock_on_hand < 0:
            raise BusinessLogicError('Stock on hand cannot be negative')

        variant_key = _validated_key(session, product, selections)
        _ensure_key_free(session, product.id, variant_key)

        variant = Variant(
            product_id=product.id,
            sku=sku.strip(),
            variant_key=variant_key,
            unit=unit or 'piece',
            stock_on_hand=stock_on_hand,
            allow_preorder=allow_preorder,
        )
        variant.option_values = [
            VariantOptionValue(attribute_id=int(attr_id), option_id=int(opt_id))
            for attr_id, opt_id in _unique_selections(selections)
        ]
        variant.prices = [VariantPrice(currency=currency, price_cents=price_cents)]
        session.add(variant)
        session.commit()

        logger.info(f"Variant created: {variant.sku} (product={product.id}, key={variant_key})")
        return variant

    except IntegrityError:
        session.rollback()
        raise BusinessLogicError(f'SKU "{sku}" is already in use')
    except OrderDeskError:
        session.rollback()
        raise


def update_variant(session, variant_id: int, changes: dict) -> Variant:
    """
    Update variant details.

    Accepted keys: sku, unit, stock_on_hand, allow_preorder, currency,
    price_cents, selections.
    """
    try:
        variant = get_variant(session, variant_id)

        # Stock first: the row lock reloads the variant's columns
        if changes.get('stock_on_hand') is not None:
            stock = Decimal(str(changes['stock_on_hand']))
            if stock < 0:
                raise BusinessLogicError('Stock on hand cannot be negative')
            variant = lock_variant(session, variant.id)
            adjust_stock(session, variant.id, stock - Decimal(variant.stock_on_hand))

        if changes.get('sku') is not None:
            variant.sku = changes['sku'].strip()
        if changes.get('unit') is not None:
            variant.unit = changes['unit']
        if changes.get('allow_preorder') is not None:
            variant.allow_preorder = changes['allow_preorder']
        if changes.get('price_cents') is not None:
            set_variant_price(session, variant, changes.get('currency') or _default_currency(), changes['price_cents'])
        if changes.get('selections') is not None:
            variant_key = _validated_key(session, variant.product, changes['selections'])
            if variant_key != variant.variant_key:
                _ensure_key_free(session, variant.product_id, variant_key, exclude_id=variant.id)
                variant.variant_key = variant_key
                _replace_option_values(variant, changes['selections'])

        session.commit()
        return variant

    except IntegrityError:
        session.rollback()
        raise BusinessLogicError('SKU is already in use')
    except OrderDeskError:
        session.rollback()
        raise


def set_variant_price(session, variant: Variant, currency: str, price_cents: int) -> VariantPrice:
    """Create or replace the price of a variant in a currency (caller commits)."""
    if price_cents < 0:
        raise BusinessLogicError('Price cannot be negative')
    for price in variant.prices:
        if price.currency == currency:
            price.price_cents = price_cents
            return price
    price = VariantPrice(currency=currency, price_cents=price_cents)
    variant.prices.append(price)
    return price


def disable_variant(session, variant_id: int) -> Variant:
    """
    Remove a variant from sale (soft delete).

    Variants are never hard-deleted: order items and procurements keep
    pointing at them.
    """
    variant = get_variant(session, variant_id)
    if not variant.active:
        return variant

    variant.active = False
    session.commit()

    open_lines = session.query(OrderItem.id).filter(OrderItem.variant_id == variant_id).count()
    logger.info(f"Variant {variant.sku} disabled ({open_lines} order lines reference it)")
    return variant


# =====================================================
# PRIVATE HELPERS
# =====================================================

def _unique_selections(selections):
    seen = {}
    for attr_id, opt_id in selections:
        seen[int(attr_id)] = int(opt_id)
    return sorted(seen.items())


def _replace_option_values(variant: Variant, selections):
    """Rows are keyed by (variant, attribute): update in place, drop or add the rest."""
    wanted = dict(_unique_selections(selections))
    for option_value in list(variant.option_values):
        if option_value.attribute_id in wanted:
            option_value.option_id = wanted.pop(option_value.attribute_id)
        else:
            variant.option_values.remove(option_value)
    for attr_id, opt_id in sorted(wanted.items()):
        variant.option_values.append(VariantOptionValue(attribute_id=attr_id, option_id=opt_id))


def _validated_key(session, product: Product, selections) -> str:
    """Check that every selection belongs to the product and build its key."""
    if not selections:
        raise BusinessLogicError('At least one option selection is required')
    try:
        variant_key = build_variant_key(selections)
    except ValueError as e:
        raise BusinessLogicError(str(e))

    for attr_id, opt_id in _unique_selections(selections):
        option = session.get(AttributeOption, opt_id)
        if option is None or option.attribute_id != attr_id:
            raise BusinessLogicError(f'Option {opt_id} does not belong to attribute {attr_id}')
        if option.attribute.product_id != product.id:
            raise BusinessLogicError(f'Attribute {attr_id} does not belong to product {product.id}')
    return variant_key


def _ensure_key_free(session, product_id: int, variant_key: str, exclude_id: Optional[int] = None):
    query = session.query(Variant.id).filter(
        Variant.product_id == product_id,
        Variant.variant_key == variant_key
    )
    if exclude_id is not None:
        query = query.filter(Variant.id != exclude_id)
    if query.first():
        raise BusinessLogicError('A variant with this option combination already exists')


def _apply_changes(instance, changes: dict, allowed, nullable=()):
    """Set the given fields; None clears a nullable field and is ignored otherwise."""
    updates = {}
    for field, value in changes.items():
        if field not in allowed:
            raise BusinessLogicError(f'Field "{field}" cannot be updated')
        if value is None and field not in nullable:
            continue
        if isinstance(value, str):
            value = value.strip()
            if not value and field not in nullable:
                raise BusinessLogicError(f'{field} cannot be empty')
        updates[field] = value

    # Nothing is set until every field has been validated
    for field, value in updates.items():
        setattr(instance, field, value)


def _commit(session, instance, duplicate_message):
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise BusinessLogicError(duplicate_message)
    return instance


def _default_currency() -> str:
    from flask import current_app
    return current_app.config.get('DEFAULT_CURRENCY', 'IDR')
