from .enums import UserRole, CustomerType, OrderType, OrderStatus, WarrantyStatus, ModerationStatus
from .auth import User
from .customers import Customer
from .partners import Supplier, Vendor
from .catalog import Category, Product, ProductVariant, ProductRating, ProductReview, product_categories
from .inventory import Inventory
from .orders import Order, OrderItem
from .warranties import Warranty

__all__ = [
    'UserRole', 'CustomerType', 'OrderType', 'OrderStatus', 'WarrantyStatus', 'ModerationStatus',
    'User',
    'Customer',
    'Supplier', 'Vendor',
    'Category', 'Product', 'ProductVariant', 'ProductRating', 'ProductReview', 'product_categories',
    'Inventory',
    'Order', 'OrderItem',
    'Warranty',
]
