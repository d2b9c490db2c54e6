from flask import Blueprint, jsonify, current_app
from storefront.errors import ValidationError
from storefront.money import format_money
from storefront.services.cart import CartStore, SessionCartStorage
from storefront.services.catalog_store import CatalogStore
from storefront.services.order_placement import OrderPlacementService
from storefront.schemas import CartChangeRequest, CheckoutRequest, parse_request

bp = Blueprint('cart', __name__, url_prefix='/cart')


def _log_cart_update(cart):
    current_app.logger.info(f'Cart now holds {cart.item_count} items', extra={
        'event_type': 'cart_updated',
        'item_count': cart.item_count,
        'total_amount': format_money(cart.total())
    })


def session_cart():
    cart = CartStore(SessionCartStorage())
    cart.subscribe(_log_cart_update)
    return cart


@bp.route('/')
def view_cart():
    cart = session_cart()

    current_app.logger.info(f'Cart contains {len(cart.lines)} lines', extra={
        'event_type': 'cart_viewed',
        'item_count': cart.item_count
    })

    return jsonify(cart.to_json())

@bp.route('/add/<int:product_id>', methods=['POST'])
def add_to_cart(product_id):
    product = CatalogStore().require_product(product_id)

    if not product.in_stock:
        current_app.logger.warning(f'Out of stock product {product_id} not added to cart', extra={
            'event_type': 'cart_add_rejected',
            'product_id': product_id,
            'stock': product.quantity
        })
        raise ValidationError(f'{product.name} is out of stock')

    cart = session_cart()
    cart.add_item(product)

    current_app.logger.info('Product successfully added to cart', extra={
        'event_type': 'cart_add_success',
        'product_id': product_id
    })
    return jsonify(cart.to_json())

@bp.route('/change/<int:line_id>', methods=['POST'])
def change_quantity(line_id):
    data = parse_request(CartChangeRequest)
    cart = session_cart()
    cart.change_quantity(line_id, data.delta)
    return jsonify(cart.to_json())

@bp.route('/remove/<int:line_id>', methods=['POST'])
def remove_from_cart(line_id):
    cart = session_cart()
    cart.remove_item(line_id)
    return jsonify(cart.to_json())

@bp.route('/clear', methods=['POST'])
def clear_cart():
    cart = session_cart()
    cart.clear()
    return jsonify(cart.to_json())

@bp.route('/checkout', methods=['POST'])
def checkout():
    data = parse_request(CheckoutRequest)
    cart = session_cart()

    if not cart.lines:
        current_app.logger.warning('Checkout attempted with empty cart', extra={
            'event_type': 'checkout_error',
            'error': 'empty_cart'
        })
        raise ValidationError('Cart is empty')

    order = OrderPlacementService().place_order(
        data.customer_name, data.customer_email, cart.to_order_lines(), cart.total()
    )

    # Only a placed order empties the cart
    cart.clear()
    return jsonify(order.to_dict(include_items=True)), 201
