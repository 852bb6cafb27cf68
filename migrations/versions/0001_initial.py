"""create admins, bookings, messages and safari_packages

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade():
    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_admins_id', 'admins', ['id'])
    op.create_index('ix_admins_username', 'admins', ['username'], unique=True)
    op.create_index('ix_admins_created_at', 'admins', ['created_at'])

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=False),
        sa.Column('safari_package', sa.String(length=100), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('guests', sa.Integer(), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_bookings_id', 'bookings', ['id'])
    op.create_index('ix_bookings_date', 'bookings', ['date'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])
    op.create_index('ix_bookings_created_at', 'bookings', ['created_at'])

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('subject', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_messages_id', 'messages', ['id'])
    op.create_index('ix_messages_is_read', 'messages', ['is_read'])
    op.create_index('ix_messages_category', 'messages', ['category'])
    op.create_index('ix_messages_created_at', 'messages', ['created_at'])

    op.create_table(
        'safari_packages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('short_description', sa.String(length=200), nullable=True),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('duration', sa.String(length=20), nullable=False),
        sa.Column('max_guests', sa.Integer(), nullable=False),
        sa.Column('min_guests', sa.Integer(), nullable=False),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('includes', sa.JSON(), nullable=False),
        sa.Column('requirements', sa.JSON(), nullable=False),
        sa.Column('schedule', sa.JSON(), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.Column('is_popular', sa.Boolean(), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_safari_packages_id', 'safari_packages', ['id'])
    op.create_index('ix_safari_packages_name', 'safari_packages', ['name'], unique=True)
    op.create_index('ix_safari_packages_slug', 'safari_packages', ['slug'], unique=True)
    op.create_index('ix_safari_packages_price', 'safari_packages', ['price'])
    op.create_index('ix_safari_packages_is_available', 'safari_packages', ['is_available'])
    op.create_index('ix_safari_packages_is_popular', 'safari_packages', ['is_popular'])
    op.create_index('ix_safari_packages_category', 'safari_packages', ['category'])
    op.create_index('ix_safari_packages_created_at', 'safari_packages', ['created_at'])


def downgrade():
    op.drop_table('safari_packages')
    op.drop_table('messages')
    op.drop_table('bookings')
    op.drop_table('admins')
