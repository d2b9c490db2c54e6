"""
Cart state management

The cart is a list of line items kept in a storage backend owned by the
client: the signed Flask session cookie in the web app, or a plain
in-memory list. ``CartStore`` is the only thing that mutates it. Every
mutation is a read-modify-write against the backend followed by a
notification to the registered observers, which re-read the cart from
the store. There is no protection against two writers racing on the
same backend.
"""
import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Callable, List, Optional

from flask import session

from storefront.money import format_money, to_decimal
from storefront.services.order_placement import OrderLine

logger = logging.getLogger(__name__)

CART_SESSION_KEY = 'cart'


@dataclass
class CartLine:
    """A product in the cart, with name/price/image captured when it was added"""
    product_id: int
    name: str
    price: str
    quantity: int
    image_url: Optional[str] = None

    @property
    def line_id(self):
        return self.product_id

    @property
    def subtotal(self) -> Decimal:
        return to_decimal(self.price) * self.quantity

    @classmethod
    def from_dict(cls, data):
        return cls(
            product_id=data['product_id'],
            name=data['name'],
            price=data['price'],
            quantity=data['quantity'],
            image_url=data.get('image_url'),
        )

    def to_dict(self):
        return asdict(self)

    def to_json(self):
        return {
            'id': self.line_id,
            'productId': self.product_id,
            'name': self.name,
            'price': self.price,
            'imageUrl': self.image_url,
            'quantity': self.quantity,
        }


class MemoryCartStorage:
    """Keeps the serialized cart in a Python list"""

    def __init__(self, items=None):
        self._items = [dict(item) for item in (items or [])]

    def load(self):
        return [dict(item) for item in self._items]

    def save(self, items):
        self._items = [dict(item) for item in items]


class SessionCartStorage:
    """Keeps the serialized cart in the Flask session under a single key"""

    def __init__(self, key=CART_SESSION_KEY):
        self.key = key

    def load(self):
        return [dict(item) for item in session.get(self.key, [])]

    def save(self, items):
        session[self.key] = [dict(item) for item in items]
        session.modified = True


class CartStore:
    """Owns the cart lines and the observers that watch them"""

    def __init__(self, storage=None):
        self.storage = storage if storage is not None else MemoryCartStorage()
        self._observers: List[Callable[['CartStore'], None]] = []

    # Reads

    @property
    def lines(self) -> List[CartLine]:
        return [CartLine.from_dict(item) for item in self.storage.load()]

    def get_line(self, line_id) -> Optional[CartLine]:
        for line in self.lines:
            if line.line_id == line_id:
                return line
        return None

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def total(self) -> Decimal:
        """Exact sum of price x quantity over all lines"""
        return sum((line.subtotal for line in self.lines), Decimal('0.00'))

    def to_order_lines(self) -> List[OrderLine]:
        return [
            OrderLine(product_id=line.product_id, quantity=line.quantity,
                      price=to_decimal(line.price))
            for line in self.lines
        ]

    def to_json(self):
        return {
            'items': [line.to_json() for line in self.lines],
            'itemCount': self.item_count,
            'total': format_money(self.total()),
        }

    # Observers

    def subscribe(self, observer: Callable[['CartStore'], None]) -> Callable[[], None]:
        """Register ``observer(store)`` to run after every mutation. Returns an unsubscribe function."""
        self._observers.append(observer)

        def unsubscribe():
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _commit(self, lines: List[CartLine], event_type: str):
        self.storage.save([line.to_dict() for line in lines])
        logger.debug(f'Cart updated ({event_type}): {len(lines)} lines', extra={
            'event_type': event_type,
            'line_count': len(lines),
        })
        for observer in list(self._observers):
            observer(self)

    # Mutations

    def add_item(self, product) -> CartLine:
        """Add one unit of ``product``, merging with an existing line for it.

        Stock is not checked here; callers refuse out-of-stock products first.
        """
        lines = self.lines
        for line in lines:
            if line.product_id == product.id:
                line.quantity += 1
                self._commit(lines, 'cart_add')
                return line

        line = CartLine(
            product_id=product.id,
            name=product.name,
            price=format_money(product.price),
            quantity=1,
            image_url=getattr(product, 'image_url', None),
        )
        lines.append(line)
        self._commit(lines, 'cart_add')
        return line

    def change_quantity(self, line_id, delta: int) -> Optional[CartLine]:
        """Shift a line's quantity by ``delta``. Reaching zero removes the line."""
        lines = []
        changed = None
        for line in self.lines:
            if line.line_id == line_id:
                line.quantity = max(0, line.quantity + delta)
                if line.quantity == 0:
                    continue
                changed = line
            lines.append(line)
        self._commit(lines, 'cart_change_quantity')
        return changed

    def remove_item(self, line_id):
        lines = [line for line in self.lines if line.line_id != line_id]
        self._commit(lines, 'cart_remove')

    def clear(self):
        self._commit([], 'cart_clear')
