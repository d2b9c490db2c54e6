from flask import Blueprint, request, jsonify, current_app
from storefront.services.catalog_store import CatalogStore
from storefront.services.security_service import admin_required
from storefront.schemas import (
    CategoryCreateRequest, ProductCreateRequest, ProductUpdateRequest, parse_request
)

bp = Blueprint('catalog', __name__, url_prefix='/api')

@bp.route('/categories')
def list_categories():
    categories = CatalogStore().list_categories()
    return jsonify([category.to_dict() for category in categories])

@bp.route('/categories', methods=['POST'])
@admin_required
def create_category():
    data = parse_request(CategoryCreateRequest)
    category = CatalogStore().create_category(data.name, data.slug, data.description)
    return jsonify(category.to_dict()), 201

@bp.route('/products')
def list_products():
    category = request.args.get('category')

    current_app.logger.info('Products list requested', extra={
        'event_type': 'page_view',
        'page': 'products_list',
        'category': category or 'all'
    })

    products = CatalogStore().list_products(category_slug=category)
    return jsonify([product.to_dict() for product in products])

@bp.route('/products/<int:product_id>')
def product_detail(product_id):
    product = CatalogStore().require_product(product_id)

    current_app.logger.info(f'Product found: {product.name}', extra={
        'event_type': 'product_viewed',
        'product_id': product.id,
        'stock': product.quantity
    })

    return jsonify(product.to_dict())

@bp.route('/products', methods=['POST'])
@admin_required
def create_product():
    data = parse_request(ProductCreateRequest)
    product = CatalogStore().create_product(
        name=data.name,
        price=data.price,
        quantity=data.quantity,
        description=data.description,
        category_id=data.category_id,
        image_url=data.image_url
    )
    return jsonify(product.to_dict()), 201

@bp.route('/products/<int:product_id>', methods=['PUT'])
@admin_required
def update_product(product_id):
    data = parse_request(ProductUpdateRequest)
    changes = data.model_dump(exclude_unset=True)
    product = CatalogStore().update_product(product_id, **changes)

    current_app.logger.info(f'Product updated: {product_id}', extra={
        'event_type': 'product_updated',
        'product_id': product_id,
        'fields': sorted(changes)
    })
    return jsonify(product.to_dict())

@bp.route('/products/<int:product_id>', methods=['DELETE'])
@admin_required
def delete_product(product_id):
    CatalogStore().deactivate_product(product_id)
    return '', 204
