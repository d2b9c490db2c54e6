from flask import Blueprint, jsonify, current_app
from storefront.services.order_placement import OrderLine, OrderPlacementService
from storefront.services.order_status import set_order_status
from storefront.services.order_store import OrderStore
from storefront.services.security_service import admin_required
from storefront.schemas import OrderCreateRequest, OrderStatusRequest, parse_request

bp = Blueprint('orders', __name__, url_prefix='/api/orders')

@bp.route('', methods=['GET'])
@admin_required
def list_orders():
    orders = OrderStore().list_orders()
    return jsonify([order.to_dict() for order in orders])

@bp.route('/<int:order_id>', methods=['GET'])
@admin_required
def order_detail(order_id):
    order = OrderStore().require_order(order_id)
    return jsonify(order.to_dict(include_items=True))

@bp.route('', methods=['POST'])
def create_order():
    data = parse_request(OrderCreateRequest)

    current_app.logger.info('Checkout initiated', extra={
        'event_type': 'checkout_start',
        'item_count': len(data.items),
        'total_amount': str(data.total_amount)
    })

    lines = [
        OrderLine(product_id=item.product_id, quantity=item.quantity, price=item.price)
        for item in data.items
    ]
    order = OrderPlacementService().place_order(
        data.customer_name, data.customer_email, lines, data.total_amount
    )
    return jsonify(order.to_dict()), 201

@bp.route('/<int:order_id>/status', methods=['PUT'])
@admin_required
def update_order_status(order_id):
    data = parse_request(OrderStatusRequest)
    order = set_order_status(order_id, data.status)
    return jsonify(order.to_dict())
