from flask import Blueprint, current_app, jsonify
from storefront.services.catalog_store import CatalogStore

bp = Blueprint('main', __name__)

@bp.route('/')
def index():
    current_app.logger.info('Home page accessed', extra={
        'event_type': 'page_view',
        'page': 'home'
    })

    catalog = CatalogStore()
    products = catalog.list_products()[:12]
    categories = catalog.list_categories()

    current_app.logger.info(f'Displaying {len(products)} products on home page', extra={
        'event_type': 'data_loaded',
        'product_count': len(products)
    })

    return jsonify({
        'products': [product.to_dict() for product in products],
        'categories': [category.to_dict() for category in categories],
    })

@bp.route('/health')
def health():
    current_app.logger.debug('Health check endpoint called')
    return {'status': 'healthy'}, 200
