from storefront import db
from storefront.money import format_money
from datetime import datetime
from enum import Enum

class OrderStatus(str, Enum):
    """Order status vocabulary. Any status may follow any other."""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls):
        return [status.value for status in cls]


class Order(db.Model):
    __tablename__ = 'orders'

    id = db.Column(db.Integer, primary_key=True)
    customer_name = db.Column(db.String(200), nullable=False)
    customer_email = db.Column(db.String(200), nullable=False)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(db.String(50), nullable=False, default=OrderStatus.PENDING.value)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    items = db.relationship(
        'OrderItem', backref='order', lazy=True,
        cascade='all, delete-orphan', order_by='OrderItem.id'
    )

    def to_dict(self, include_items=False):
        data = {
            'id': self.id,
            'customerName': self.customer_name,
            'customerEmail': self.customer_email,
            'totalAmount': format_money(self.total_amount),
            'status': self.status,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
        if include_items:
            data['items'] = [item.to_dict() for item in self.items]
        return data

    def __repr__(self):
        return f'<Order {self.id}>'


class OrderItem(db.Model):
    __tablename__ = 'order_items'

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    # Price at order time; later product price changes do not apply
    price = db.Column(db.Numeric(10, 2), nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'orderId': self.order_id,
            'productId': self.product_id,
            'quantity': self.quantity,
            'price': format_money(self.price),
        }

    def __repr__(self):
        return f'<OrderItem {self.id}>'
