"""
Admin status changes for placed orders
"""
import logging

from storefront.errors import NotFoundError, ValidationError
from storefront.models import OrderStatus
from storefront.services.order_store import OrderStore

logger = logging.getLogger(__name__)


def set_order_status(order_id, new_status, order_store=None):
    """Move an order to ``new_status``.

    Any of the five statuses may follow any other, backwards included.
    Values outside the vocabulary are rejected before the order is looked up.
    """
    try:
        status = OrderStatus(new_status)
    except ValueError:
        raise ValidationError(
            f'Invalid order status: {new_status!r}. '
            f'Expected one of: {", ".join(OrderStatus.values())}'
        ) from None

    store = order_store or OrderStore()
    order = store.get_order(order_id)
    if order is None:
        raise NotFoundError(f'Order not found: {order_id}')

    previous = order.status
    store.update_order_status(order.id, status)

    logger.info(f'Order {order.id} status changed: {previous} -> {status.value}', extra={
        'event_type': 'order_status_changed',
        'order_id': order.id,
        'previous_status': previous,
        'new_status': status.value,
    })
    return order
