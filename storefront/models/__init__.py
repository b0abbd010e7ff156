from storefront.models.user import User
from storefront.models.product import Product, Category, Review, Testimonial
from storefront.models.order import Order, OrderStatus
from storefront.models.notification import Notification
from storefront.models.wishlist import WishlistItem
from storefront.models.cart import SavedCartItem

__all__ = [
    'User', 'Product', 'Category', 'Review', 'Testimonial', 'Order', 'OrderStatus',
    'Notification', 'WishlistItem', 'SavedCartItem',
]
