"""
Order placement: turn a cart snapshot into an order and adjust stock

Lines are processed one at a time, in submission order. For each line an
order item is written with the price the customer saw, then the product
is re-read and its stock decremented when enough is on hand. A product
that is missing or short on stock does not block the order; the
decrement is skipped and logged.

With ``ORDER_PLACEMENT_ATOMIC`` enabled (the default) every write of one
order shares a single transaction, so a storage failure part way through
leaves nothing behind. With it disabled each write is committed on its
own and a failure leaves a partially populated order.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from flask import current_app

from storefront.errors import StorageError, ValidationError
from storefront.models import MAX_INTEGER, Order, OrderStatus
from storefront.money import parse_amount
from storefront.services.catalog_store import CatalogStore
from storefront.services.order_store import OrderStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderLine:
    """One submitted line: product, quantity and the price snapshot"""
    product_id: int
    quantity: int
    price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


def _validate_lines(lines) -> List[OrderLine]:
    validated = []
    for index, line in enumerate(lines):
        quantity = line.quantity
        if isinstance(quantity, bool) or not isinstance(quantity, int) or not 0 < quantity <= MAX_INTEGER:
            raise ValidationError(f'Line {index}: quantity must be a positive integer up to {MAX_INTEGER}')
        product_id = line.product_id
        if isinstance(product_id, bool) or not isinstance(product_id, int) or not 0 < product_id <= MAX_INTEGER:
            raise ValidationError(f'Line {index}: product id must be a positive integer')
        try:
            price = parse_amount(line.price)
        except ValueError as e:
            raise ValidationError(f'Line {index}: {e}') from e
        validated.append(OrderLine(product_id=product_id, quantity=quantity, price=price))
    return validated


class OrderPlacementService:
    """Places orders against an order store and a catalog store"""

    def __init__(self, order_store: Optional[OrderStore] = None,
                 catalog_store: Optional[CatalogStore] = None,
                 atomic: Optional[bool] = None):
        self.orders = order_store or OrderStore()
        self.catalog = catalog_store or CatalogStore(self.orders.session)
        if atomic is None:
            atomic = current_app.config.get('ORDER_PLACEMENT_ATOMIC', True)
        self.atomic = atomic

    def place_order(self, customer_name: str, customer_email: str,
                    lines: Iterable[OrderLine], total_amount) -> Order:
        customer_name = (customer_name or '').strip()
        customer_email = (customer_email or '').strip()
        lines = list(lines or [])

        if not customer_name:
            raise ValidationError('Customer name is required')
        if not customer_email:
            raise ValidationError('Customer email is required')
        if not lines:
            raise ValidationError('Order must contain at least one item')
        lines = _validate_lines(lines)
        try:
            total_amount = parse_amount(total_amount)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        # The supplied total is what gets stored
        computed_total = sum((line.subtotal for line in lines), Decimal('0.00'))
        if computed_total != total_amount:
            logger.warning(
                f'Order total {total_amount} differs from line sum {computed_total}',
                extra={
                    'event_type': 'order_total_mismatch',
                    'supplied_total': str(total_amount),
                    'computed_total': str(computed_total),
                }
            )

        commit_each = not self.atomic
        try:
            order = self.orders.create_order(
                customer_name, customer_email, total_amount,
                status=OrderStatus.PENDING, commit=commit_each
            )
            for line in lines:
                self.orders.create_order_item(
                    order, line.product_id, line.quantity, line.price, commit=commit_each
                )
                self._decrement_stock(order, line, commit_each)
            if self.atomic:
                self.orders.commit('place_order')
        except StorageError:
            logger.error('Order placement aborted by a storage failure', extra={
                'event_type': 'order_failed',
                'atomic': self.atomic,
                'line_count': len(lines),
            })
            raise

        logger.info(f'Order placed: {order.id}', extra={
            'event_type': 'order_success',
            'order_id': order.id,
            'line_count': len(lines),
            'total_amount': str(total_amount),
        })
        return order

    def _decrement_stock(self, order, line, commit):
        product = self.catalog.get_product(line.product_id)
        if product is None or product.quantity < line.quantity:
            logger.warning(
                f'Stock not decremented for product {line.product_id} on order {order.id}',
                extra={
                    'event_type': 'stock_decrement_skipped',
                    'order_id': order.id,
                    'product_id': line.product_id,
                    'requested': line.quantity,
                    'available': product.quantity if product is not None else None,
                }
            )
            return

        self.catalog.update_product(
            product.id, quantity=product.quantity - line.quantity, commit=commit
        )


def place_order(customer_name, customer_email, lines, total_amount) -> Order:
    return OrderPlacementService().place_order(customer_name, customer_email, lines, total_amount)
