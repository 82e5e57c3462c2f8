"""create customer and admin account tables

Revision ID: 5a1d7c2e9f40
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '5a1d7c2e9f40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'customer_account',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='ACTIVE'),
        sa.Column('status_reason', sa.String(length=500), nullable=True),
        sa.Column('status_changed_at', sa.DateTime(), nullable=True),
        sa.Column('status_changed_by', sa.String(length=255), nullable=True),
        sa.Column('suspension_until', sa.DateTime(), nullable=True),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('login_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_customer_account_email', 'customer_account', ['email'], unique=True)
    op.create_index('ix_customer_account_status', 'customer_account', ['status'])

    op.create_table(
        'admin_account',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='SUB_ADMIN'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='Active'),
        sa.Column('created_by', sa.BigInteger(), sa.ForeignKey('admin_account.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_admin_account_email', 'admin_account', ['email'], unique=True)


def downgrade():
    op.drop_index('ix_admin_account_email', table_name='admin_account')
    op.drop_table('admin_account')
    op.drop_index('ix_customer_account_status', table_name='customer_account')
    op.drop_index('ix_customer_account_email', table_name='customer_account')
    op.drop_table('customer_account')
