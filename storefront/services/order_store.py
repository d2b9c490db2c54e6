"""
Order store: orders and their line items
"""
from typing import List, Optional

from sqlalchemy import select

from storefront.errors import NotFoundError
from storefront.models import Order, OrderItem, OrderStatus
from storefront.services.base_store import BaseStore


class OrderStore(BaseStore):

    def list_orders(self) -> List[Order]:
        with self._reading('list_orders'):
            return list(self.session.scalars(
                select(Order).order_by(Order.created_at.desc(), Order.id.desc())
            ))

    def get_order(self, order_id) -> Optional[Order]:
        with self._reading('get_order'):
            return self.session.get(Order, order_id)

    def require_order(self, order_id) -> Order:
        order = self.get_order(order_id)
        if order is None:
            raise NotFoundError(f'Order not found: {order_id}')
        return order

    def create_order(self, customer_name, customer_email, total_amount,
                     status=OrderStatus.PENDING, commit=True) -> Order:
        order = Order(
            customer_name=customer_name,
            customer_email=customer_email,
            total_amount=total_amount,
            status=OrderStatus(status).value,
        )
        self.session.add(order)
        self._persist('create_order', commit=commit)
        return order

    def create_order_item(self, order, product_id, quantity, price, commit=True) -> OrderItem:
        order_item = OrderItem(
            order_id=order.id,
            product_id=product_id,
            quantity=quantity,
            price=price,
        )
        self.session.add(order_item)
        self._persist('create_order_item', commit=commit)
        return order_item

    def get_order_items(self, order_id) -> List[OrderItem]:
        with self._reading('get_order_items'):
            return list(self.session.scalars(
                select(OrderItem).filter_by(order_id=order_id).order_by(OrderItem.id)
            ))

    def update_order_status(self, order_id, status, commit=True) -> Optional[Order]:
        """Set the status of an order. Returns None, without writing, if it does not exist."""
        order = self.get_order(order_id)
        if order is None:
            return None
        order.status = OrderStatus(status).value
        self._persist('update_order_status', commit=commit)
        return order
