from storefront.models.user import User
from storefront.models.product import Category, Product
from storefront.models.order import Order, OrderItem, OrderStatus

# Upper bound of the Integer columns (ids, quantities)
MAX_INTEGER = 2 ** 31 - 1

__all__ = ['User', 'Category', 'Product', 'Order', 'OrderItem', 'OrderStatus', 'MAX_INTEGER']
