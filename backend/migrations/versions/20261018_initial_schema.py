"""Initial schema: staff users, catalog, customers, inventory, orders, warranties, partners

Revision ID: 20261018_initial
Revises:
Create Date: 2026-10-18

This migration creates:
1. users (staff accounts, role enum)
2. customers
3. suppliers, vendors
4. categories, products, product_categories (join table), product_variants
5. product_ratings, product_reviews
6. inventory (available = on_hand - reserved CHECK)
7. orders, order_items
8. warranties
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261018_initial'
down_revision = None
branch_labels = None
depends_on = None


USER_ROLES = (
    'super_admin', 'operations_manager', 'product_manager', 'customer_service',
    'sales_representative', 'warehouse_manager', 'technical_support',
)
CUSTOMER_TYPES = (
    'individual', 'professional_contractor', 'industrial_account',
    'government_municipal', 'educational_institution',
)
ORDER_TYPES = ('retail', 'bulk', 'emergency', 'warranty', 'recurring')
ORDER_STATUSES = ('pending', 'confirmed', 'processing', 'shipped', 'delivered', 'cancelled', 'returned')
WARRANTY_STATUSES = ('active', 'expired', 'claimed', 'voided')
MODERATION_STATUSES = ('pending', 'approved', 'rejected')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade():
    # ==========================================================================
    # 1. USERS
    # ==========================================================================
    op.create_table('users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=False),
        sa.Column('last_name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum(*USER_ROLES, name='user_role', create_constraint=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    # ==========================================================================
    # 2. CUSTOMERS
    # ==========================================================================
    op.create_table('customers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=True),
        sa.Column('contact_first_name', sa.String(length=100), nullable=False),
        sa.Column('contact_last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('customer_type', sa.Enum(*CUSTOMER_TYPES, name='customer_type', create_constraint=True), nullable=False),
        sa.Column('tax_exempt', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('credit_limit', sa.Numeric(10, 2), nullable=True),
        sa.Column('payment_terms', sa.Integer(), nullable=True),
        sa.Column('address', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_customers_is_active', 'customers', ['is_active'])
    op.create_index('ix_customers_type_active', 'customers', ['customer_type', 'is_active'])

    # ==========================================================================
    # 3. PARTNERS
    # ==========================================================================
    op.create_table('suppliers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('contact_phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('vendors',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('contact_phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.JSON(), nullable=True),
        sa.Column('is_authorized_dealer', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('payment_terms', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    # ==========================================================================
    # 4. CATALOG
    # ==========================================================================
    op.create_table('categories',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)

    op.create_table('products',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('sku', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('detailed_specifications', sa.Text(), nullable=False),
        sa.Column('brand', sa.String(length=100), nullable=False),
        sa.Column('cost_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('selling_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('original_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('discount_percentage', sa.Integer(), nullable=True),
        sa.Column('weight', sa.Numeric(8, 3), nullable=True),
        sa.Column('dimensions', sa.JSON(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('supplier_id', sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['supplier_id'], ['suppliers.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_products_sku', 'products', ['sku'], unique=True)
    op.create_index('ix_products_supplier_id', 'products', ['supplier_id'])
    op.create_index('ix_products_active_name', 'products', ['is_active', 'name'])

    op.create_table('product_categories',
        sa.Column('product_id', sa.String(length=36), nullable=False),
        sa.Column('category_id', sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('product_id', 'category_id'),
    )
    op.create_index('ix_product_categories_category_id', 'product_categories', ['category_id'])

    op.create_table('product_variants',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('product_id', sa.String(length=36), nullable=False),
        sa.Column('sku', sa.String(length=100), nullable=False),
        sa.Column('attributes', sa.JSON(), nullable=False),
        sa.Column('stock_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('additional_price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('images', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('sku'),
    )
    op.create_index('ix_product_variants_product_id', 'product_variants', ['product_id'])

    # ==========================================================================
    # 5. RATINGS / REVIEWS
    # ==========================================================================
    op.create_table('product_ratings',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('product_id', sa.String(length=36), nullable=False),
        sa.Column('customer_id', sa.String(length=36), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum(*MODERATION_STATUSES, name='moderation_status', create_constraint=True), nullable=False),
        sa.Column('is_verified_purchase', sa.Boolean(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('product_id', 'customer_id', name='uq_product_ratings_product_customer'),
    )
    op.create_index('ix_product_ratings_product_id', 'product_ratings', ['product_id'])
    op.create_index('ix_product_ratings_customer_id', 'product_ratings', ['customer_id'])

    op.create_table('product_reviews',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('product_id', sa.String(length=36), nullable=False),
        sa.Column('customer_id', sa.String(length=36), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('review_text', sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_product_reviews_product_id', 'product_reviews', ['product_id'])
    op.create_index('ix_product_reviews_customer_id', 'product_reviews', ['customer_id'])

    # ==========================================================================
    # 6. INVENTORY
    # ==========================================================================
    op.create_table('inventory',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('product_id', sa.String(length=36), nullable=False),
        sa.Column('location', sa.String(length=100), nullable=False),
        sa.Column('quantity_on_hand', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('quantity_reserved', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('quantity_available', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reorder_point', sa.Integer(), nullable=True),
        sa.Column('max_stock', sa.Integer(), nullable=True),
        sa.Column('last_stock_check', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('product_id', 'location', name='uq_inventory_product_location'),
        sa.CheckConstraint('quantity_on_hand >= 0', name='ck_inventory_on_hand_nonneg'),
        sa.CheckConstraint('quantity_reserved >= 0', name='ck_inventory_reserved_nonneg'),
        sa.CheckConstraint(
            'quantity_available = quantity_on_hand - quantity_reserved',
            name='ck_inventory_available_consistent',
        ),
    )
    op.create_index('ix_inventory_product_id', 'inventory', ['product_id'])
    op.create_index('ix_inventory_quantity_available', 'inventory', ['quantity_available'])

    # ==========================================================================
    # 7. ORDERS
    # ==========================================================================
    op.create_table('orders',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('order_number', sa.String(length=50), nullable=False),
        sa.Column('customer_id', sa.String(length=36), nullable=False),
        sa.Column('order_type', sa.Enum(*ORDER_TYPES, name='order_type', create_constraint=True), nullable=False),
        sa.Column('status', sa.Enum(*ORDER_STATUSES, name='order_status', create_constraint=True), nullable=False),
        sa.Column('subtotal', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('tax_amount', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('shipping_amount', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('shipping_address', sa.JSON(), nullable=True),
        sa.Column('billing_address', sa.JSON(), nullable=True),
        sa.Column('estimated_delivery', sa.DateTime(), nullable=True),
        sa.Column('actual_delivery', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_number'),
    )
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'])
    op.create_index('ix_orders_status_created', 'orders', ['status', 'created_at'])

    op.create_table('order_items',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('order_id', sa.String(length=36), nullable=False),
        sa.Column('product_id', sa.String(length=36), nullable=True),
        sa.Column('product_sku', sa.String(length=100), nullable=True),
        sa.Column('product_name', sa.String(length=255), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('total_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('quantity > 0', name='ck_order_items_quantity_positive'),
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])
    op.create_index('ix_order_items_product_id', 'order_items', ['product_id'])

    # ==========================================================================
    # 8. WARRANTIES
    # ==========================================================================
    op.create_table('warranties',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('product_id', sa.String(length=36), nullable=True),
        sa.Column('customer_id', sa.String(length=36), nullable=False),
        sa.Column('order_id', sa.String(length=36), nullable=True),
        sa.Column('serial_number', sa.String(length=100), nullable=True),
        sa.Column('purchase_date', sa.DateTime(), nullable=False),
        sa.Column('warranty_start_date', sa.DateTime(), nullable=False),
        sa.Column('warranty_end_date', sa.DateTime(), nullable=False),
        sa.Column('status', sa.Enum(*WARRANTY_STATUSES, name='warranty_status', create_constraint=True), nullable=False),
        sa.Column('claim_date', sa.DateTime(), nullable=True),
        sa.Column('claim_reason', sa.Text(), nullable=True),
        sa.Column('resolution_notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('warranty_end_date >= warranty_start_date', name='ck_warranties_window_order'),
    )
    op.create_index('ix_warranties_product_id', 'warranties', ['product_id'])
    op.create_index('ix_warranties_customer_id', 'warranties', ['customer_id'])
    op.create_index('ix_warranties_order_id', 'warranties', ['order_id'])
    op.create_index('ix_warranties_status_end', 'warranties', ['status', 'warranty_end_date'])


def downgrade():
    op.drop_table('warranties')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('inventory')
    op.drop_table('product_reviews')
    op.drop_table('product_ratings')
    op.drop_table('product_variants')
    op.drop_table('product_categories')
    op.drop_table('products')
    op.drop_table('categories')
    op.drop_table('vendors')
    op.drop_table('suppliers')
    op.drop_table('customers')
    op.drop_table('users')

    for name in ('warranty_status', 'order_status', 'order_type', 'moderation_status', 'customer_type', 'user_role'):
        sa.Enum(name=name).drop(op.get_bind(), checkfirst=True)
