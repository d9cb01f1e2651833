"""initial schema

Revision ID: c3d1e8a5b2f0
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the four tables:
- users: login identities (bcrypt password hashes)
- customers: balances to collect, with due date and payment status
- payments: append-only money received, keyed by customerId
- notifications: append-only log of pushed events
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'c3d1e8a5b2f0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('contact', sa.String(length=255), nullable=True),
        sa.Column('outstandingAmount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('dueDate', sa.Date(), nullable=False),
        sa.Column('paymentStatus', sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_customers_dueDate', 'customers', ['dueDate'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('customerId', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('paymentDate', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['customerId'], ['customers.id']),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_payments_customerId', 'payments', ['customerId'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=64), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_notifications_createdAt', 'notifications', ['createdAt'])


def downgrade():
    op.drop_index('ix_notifications_createdAt', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_payments_customerId', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_customers_dueDate', table_name='customers')
    op.drop_table('customers')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
