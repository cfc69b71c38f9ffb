# livewithdesigns/models/__init__.py
from .user import User
from .category import Category
from .product import Product
from .project import Project
from .order import Order, OrderItem, OrderStatusHistory
from .payment import Payment
from .cart import Cart, CartItem, Wishlist, WishlistItem
from .review import Review
from .blog import Blog
from .service import Service
from .address import Address
from .contact_message import ContactMessage, ContactResponse
from .media import Media
from .site_settings import SiteSettings

__all__ = [
    "User",
    "Category",
    "Product",
    "Project",
    "Order",
    "OrderItem",
    "OrderStatusHistory",
    "Payment",
    "Cart",
    "CartItem",
    "Wishlist",
    "WishlistItem",
    "Review",
    "Blog",
    "Service",
    "Address",
    "ContactMessage",
    "ContactResponse",
    "Media",
    "SiteSettings",
]
