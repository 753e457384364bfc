from .catalog import Category, Product
from .orders import Order, OrderSequence
from .auth import User, AdminUser, SessionToken

__all__ = [
    'Category', 'Product',
    'Order', 'OrderSequence',
    'User', 'AdminUser', 'SessionToken',
]
