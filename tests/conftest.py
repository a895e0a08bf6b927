import pytest
from decimal import Decimal
import uuid

from orderdesk import create_app
from orderdesk.database import create_schema, drop_schema, get_session
from orderdesk.models import CustomerType
from orderdesk.services import catalog_service, customer_service


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing (in-memory SQLite)."""
    app = create_app('config.TestConfig')
    return app


@pytest.fixture(scope='function')
def client(app, session):
    """Create test client on top of a fresh schema."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Create a fresh schema and yield the scoped session."""
    with app.app_context():
        create_schema()
        session = get_session()
        yield session
        session.remove()
        drop_schema()


@pytest.fixture(scope='function')
def customer(session):
    """Create test customer."""
    return customer_service.create_customer(session, {
        'name': 'Budi Santoso',
        'phone_number': '081234567890',
        'city': 'Jakarta',
        'customer_type': CustomerType.PERSONAL,
    })


@pytest.fixture(scope='function')
def product(session):
    """Create a product with Size (S, M) and Color (Black) attributes."""
    suffix = str(uuid.uuid4())[:8]
    product = catalog_service.create_product(session, f'Tee {suffix}')
    size = catalog_service.create_attribute(session, product.id, 'Size', sort_order=0)
    color = catalog_service.create_attribute(session, product.id, 'Color', sort_order=1)
    catalog_service.create_attribute_option(session, size.id, 'S', sort_order=0)
    catalog_service.create_attribute_option(session, size.id, 'M', sort_order=1)
    catalog_service.create_attribute_option(session, color.id, 'Black')
    return product


def _selections_for(product, size_value, color_value='Black'):
    """(attribute_id, option_id) pairs for a size/color combination."""
    pairs = []
    for attribute in product.attributes:
        wanted = size_value if attribute.name == 'Size' else color_value
        option = next(o for o in attribute.options if o.value == wanted)
        pairs.append((attribute.id, option.id))
    return pairs


@pytest.fixture(scope='function')
def make_variant(session, product):
    """Factory: create a variant of the test product with stock and an IDR price."""

    def _make(size='S', stock='5', price_cents=10000, sku=None, currency='IDR'):
        return catalog_service.create_variant(
            session,
            product.id,
            sku=sku or f'TEE-{size}-{str(uuid.uuid4())[:6]}',
            selections=_selections_for(product, size),
            price_cents=price_cents,
            currency=currency,
            stock_on_hand=Decimal(stock)
        )

    return _make


@pytest.fixture(scope='function')
def variant(make_variant):
    """Variant with 5 on hand, priced IDR 100.00."""
    return make_variant()


@pytest.fixture(scope='function')
def select_options(product):
    """Factory: option selections of the test product for a size."""

    def _select(size, color='Black'):
        return _selections_for(product, size, color)

    return _select
