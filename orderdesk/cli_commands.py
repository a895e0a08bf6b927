"""
Flask CLI commands for database management.

Commands:
- flask init-db: Create all tables
- flask seed-demo: Load a small demo catalog and customers
"""

import click
from decimal import Decimal

from orderdesk.database import create_schema, get_session
from orderdesk.models import Product, CustomerType
from orderdesk.services import catalog_service, customer_service


DEMO_SIZES = ['S', 'M', 'L']
DEMO_COLORS = ['Black', 'White']
DEMO_PRICE_CENTS = 15000000  # IDR 150.000


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create every table (no-op for tables that already exist)."""
        create_schema()
        click.echo(click.style('✅ Database schema created.', fg='green', bold=True))

    @app.cli.command('seed-demo')
    @click.option('--stock', default=5, show_default=True, help='Initial stock of each variant')
    def seed_demo(stock):
        """Create a demo product with size/color variants and two customers."""
        session = get_session()

        if session.query(Product).filter_by(name='Basic Tee').first():
            click.echo(click.style('❌ Demo data already loaded.', fg='red'))
            return

        currency = app.config['DEFAULT_CURRENCY']
        try:
            brand = catalog_service.create_brand(session, 'Demo Brand')
            product = catalog_service.create_product(
                session, 'Basic Tee', brand_id=brand.id, description='Cotton t-shirt'
            )
            size = catalog_service.create_attribute(session, product.id, 'Size', code='size', sort_order=0)
            color = catalog_service.create_attribute(session, product.id, 'Color', code='color', sort_order=1)
            sizes = [
                catalog_service.create_attribute_option(session, size.id, value, sort_order=i)
                for i, value in enumerate(DEMO_SIZES)
            ]
            colors = [
                catalog_service.create_attribute_option(session, color.id, value, sort_order=i)
                for i, value in enumerate(DEMO_COLORS)
            ]

            count = 0
            for size_option in sizes:
                for color_option in colors:
                    catalog_service.create_variant(
                        session,
                        product.id,
                        sku=f'TEE-{size_option.value}-{color_option.value[:3].upper()}',
                        selections=[(size.id, size_option.id), (color.id, color_option.id)],
                        price_cents=DEMO_PRICE_CENTS,
                        currency=currency,
                        stock_on_hand=Decimal(stock)
                    )
                    count += 1

            customer_service.create_customer(session, {
                'name': 'Budi Santoso',
                'phone_number': '081234567890',
                'city': 'Jakarta',
                'customer_type': CustomerType.PERSONAL,
            })
            customer_service.create_customer(session, {
                'name': 'Toko Maju',
                'phone_number': '082345678901',
                'city': 'Bandung',
                'customer_type': CustomerType.RESELLER,
            })

            click.echo(click.style('\n✅ Demo data loaded!', fg='green', bold=True))
            click.echo(f'   Product: {product.name} ({count} variants, stock {stock} each)')
            click.echo('   Customers: 2')

        except Exception as e:
            session.rollback()
            click.echo(click.style(f'❌ Error loading demo data: {str(e)}', fg='red'))
