"""Catalog blueprint - brands, products, attributes and variants (JSON API)."""
from flask import Blueprint, request, jsonify, current_app

from orderdesk.database import get_session
from orderdesk.schemas import (
    parse_request, BrandCreate, BrandUpdate, ProductCreate, ProductUpdate,
    AttributeCreate, AttributeUpdate, AttributeOptionCreate, AttributeOptionUpdate,
    VariantCreate, VariantUpdate
)
from orderdesk.services import catalog_service
from orderdesk.utils.serializers import (
    brand_to_dict, product_to_dict, attribute_to_dict, option_to_dict, variant_to_dict
)

catalog_bp = Blueprint('catalog', __name__, url_prefix='/api')


@catalog_bp.route('/brands', methods=['GET'])
def list_brands_view():
    brands = catalog_service.list_brands(get_session())
    return jsonify([brand_to_dict(b) for b in brands])


@catalog_bp.route('/brands', methods=['POST'])
def create_brand_view():
    payload = parse_request(BrandCreate, request.get_json(silent=True))
    brand = catalog_service.create_brand(get_session(), payload.name)
    return jsonify(brand_to_dict(brand)), 201


@catalog_bp.route('/brands/<int:brand_id>', methods=['PUT'])
def update_brand_view(brand_id: int):
    payload = parse_request(BrandUpdate, request.get_json(silent=True))
    brand = catalog_service.update_brand(get_session(), brand_id, payload.name)
    return jsonify(brand_to_dict(brand))


@catalog_bp.route('/products', methods=['GET'])
def list_products_view():
    products = catalog_service.list_products(get_session())
    return jsonify([product_to_dict(p) for p in products])


@catalog_bp.route('/products/<int:product_id>', methods=['GET'])
def get_product_view(product_id: int):
    product = catalog_service.get_product(get_session(), product_id)
    return jsonify(product_to_dict(product))


@catalog_bp.route('/products', methods=['POST'])
def create_product_view():
    payload = parse_request(ProductCreate, request.get_json(silent=True))
    product = catalog_service.create_product(
        get_session(), payload.name, brand_id=payload.brand_id, description=payload.description
    )
    return jsonify(product_to_dict(product)), 201


@catalog_bp.route('/products/<int:product_id>', methods=['PUT'])
def update_product_view(product_id: int):
    payload = parse_request(ProductUpdate, request.get_json(silent=True))
    product = catalog_service.update_product(
        get_session(), product_id, payload.model_dump(exclude_unset=True)
    )
    return jsonify(product_to_dict(product))


@catalog_bp.route('/products/<int:product_id>/attributes', methods=['POST'])
def create_attribute_view(product_id: int):
    payload = parse_request(AttributeCreate, request.get_json(silent=True))
    attribute = catalog_service.create_attribute(
        get_session(), product_id, payload.name, code=payload.code, sort_order=payload.sort_order
    )
    return jsonify(attribute_to_dict(attribute, with_options=False)), 201


@catalog_bp.route('/attributes/<int:attribute_id>', methods=['PUT'])
def update_attribute_view(attribute_id: int):
    payload = parse_request(AttributeUpdate, request.get_json(silent=True))
    attribute = catalog_service.update_attribute(
        get_session(), attribute_id, payload.model_dump(exclude_unset=True)
    )
    return jsonify(attribute_to_dict(attribute))


@catalog_bp.route('/attributes/<int:attribute_id>/options', methods=['POST'])
def create_attribute_option_view(attribute_id: int):
    payload = parse_request(AttributeOptionCreate, request.get_json(silent=True))
    option = catalog_service.create_attribute_option(
        get_session(), attribute_id, payload.value, sort_order=payload.sort_order
    )
    return jsonify(option_to_dict(option)), 201


@catalog_bp.route('/attribute-options/<int:option_id>', methods=['PUT'])
def update_attribute_option_view(option_id: int):
    payload = parse_request(AttributeOptionUpdate, request.get_json(silent=True))
    option = catalog_service.update_attribute_option(
        get_session(), option_id, payload.model_dump(exclude_unset=True)
    )
    return jsonify(option_to_dict(option))


@catalog_bp.route('/products/<int:product_id>/variants', methods=['POST'])
def create_variant_view(product_id: int):
    payload = parse_request(VariantCreate, request.get_json(silent=True))
    variant = catalog_service.create_variant(
        get_session(),
        product_id,
        sku=payload.sku,
        selections=payload.selection_pairs(),
        price_cents=payload.price_cents,
        currency=payload.currency or current_app.config['DEFAULT_CURRENCY'],
        unit=payload.unit,
        stock_on_hand=payload.stock_on_hand,
        allow_preorder=payload.allow_preorder
    )
    return jsonify(variant_to_dict(variant)), 201


@catalog_bp.route('/variants/<int:variant_id>', methods=['GET'])
def get_variant_view(variant_id: int):
    variant = catalog_service.get_variant(get_session(), variant_id)
    return jsonify(variant_to_dict(variant))


@catalog_bp.route('/variants/<int:variant_id>', methods=['PUT'])
def update_variant_view(variant_id: int):
    payload = parse_request(VariantUpdate, request.get_json(silent=True))
    variant = catalog_service.update_variant(get_session(), variant_id, payload.changes())
    return jsonify(variant_to_dict(variant))


@catalog_bp.route('/variants/<int:variant_id>', methods=['DELETE'])
def delete_variant_view(variant_id: int):
    """Soft-disable; variants referenced by orders are never hard-deleted."""
    catalog_service.disable_variant(get_session(), variant_id)
    return '', 204
