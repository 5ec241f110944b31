"""Create orders table

Revision ID: 0001_create_orders
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001_create_orders'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    json_type = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')

    op.create_table(
        'orders',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('restaurant_id', sa.String(), nullable=False),
        sa.Column('table_id', sa.String(), nullable=False),
        sa.Column('json_data', json_type, nullable=False),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('pos_bill_data', json_type, nullable=True),
        sa.Column('ready_for_review', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('razorpay_order_id', sa.String(), nullable=True),
        sa.Column('invoice_number', sa.String(), nullable=True),
        sa.Column('guest_count', sa.Integer(), nullable=True),
        sa.Column('is_reservation', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('offer_given', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('offer_availed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('offer_partially_availed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('drink_offer_given', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('dessert_offer_given', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('discount_applied', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('discount_value', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('discount_id', sa.String(), nullable=True),
        sa.Column('additional_discount', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('disable_service_charge', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_payment_thirdparty', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('payment_failed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_orders_id'), 'orders', ['id'], unique=False)
    op.create_index(op.f('ix_orders_restaurant_id'), 'orders', ['restaurant_id'], unique=False)
    op.create_index(op.f('ix_orders_table_id'), 'orders', ['table_id'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_orders_table_id'), table_name='orders')
    op.drop_index(op.f('ix_orders_restaurant_id'), table_name='orders')
    op.drop_index(op.f('ix_orders_id'), table_name='orders')
    op.drop_table('orders')
