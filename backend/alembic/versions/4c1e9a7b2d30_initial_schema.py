"""initial schema

Revision ID: 4c1e9a7b2d30
Revises: 
Create Date: 2025-11-02 14:08:51.203117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1e9a7b2d30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('plaid_items',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('item_id', sa.String(), nullable=False),
    sa.Column('access_token', sa.String(), nullable=False),
    sa.Column('institution_id', sa.String(), nullable=True),
    sa.Column('institution_name', sa.String(), nullable=True),
    sa.Column('plaid_account_id', sa.String(), nullable=True),
    sa.Column('persistent_account_id', sa.String(), nullable=True),
    sa.Column('account_name', sa.String(), nullable=True),
    sa.Column('official_name', sa.String(), nullable=True),
    sa.Column('mask', sa.String(), nullable=True),
    sa.Column('account_type', sa.String(), nullable=True),
    sa.Column('account_subtype', sa.String(), nullable=True),
    sa.Column('holder_category', sa.String(), nullable=True),
    sa.Column('custom_name', sa.String(), nullable=True),
    sa.Column('is_hidden', sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column('current_balance', sa.Numeric(precision=18, scale=4), nullable=True),
    sa.Column('available_balance', sa.Numeric(precision=18, scale=4), nullable=True),
    sa.Column('balance_limit', sa.Numeric(precision=18, scale=4), nullable=True),
    sa.Column('balance_currency_code', sa.String(), nullable=True),
    sa.Column('unofficial_currency_code', sa.String(), nullable=True),
    sa.Column('balance_last_updated_datetime', sa.DateTime(), nullable=True),
    sa.Column('verification_status', sa.String(), nullable=True),
    sa.Column('verification_name', sa.String(), nullable=True),
    sa.Column('verification_insights', sa.Text(), nullable=True),
    sa.Column('cursor', sa.Text(), nullable=True),
    sa.Column('last_sync_at', sa.DateTime(), nullable=True),
    sa.Column('sync_status', sa.String(), nullable=False, server_default='active'),
    sa.Column('error_message', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_plaid_items_item_id'), 'plaid_items', ['item_id'], unique=False)
    op.create_index(op.f('ix_plaid_items_plaid_account_id'), 'plaid_items', ['plaid_account_id'], unique=False)
    op.create_index(op.f('ix_plaid_items_sync_status'), 'plaid_items', ['sync_status'], unique=False)
    op.create_index('ix_plaid_items_item_account', 'plaid_items', ['item_id', 'plaid_account_id'], unique=False)

    op.create_table('tags',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('color', sa.String(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )

    op.create_table('categories',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('parent_id', sa.String(length=36), nullable=True),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('color', sa.String(), nullable=True),
    sa.Column('icon', sa.String(), nullable=True),
    sa.Column('is_parent_category', sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column('plaid_detailed_category_id', sa.String(), nullable=True),
    sa.Column('plaid_primary_category', sa.String(), nullable=True),
    sa.Column('plaid_description', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['parent_id'], ['categories.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('plaid_detailed_category_id')
    )

    op.create_table('merchants',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('merchant_entity_id', sa.String(), nullable=True),
    sa.Column('default_category_id', sa.String(length=36), nullable=True),
    sa.Column('default_tag_id', sa.String(length=36), nullable=True),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.Column('is_confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column('merged_into_merchant_id', sa.String(length=36), nullable=True),
    sa.Column('logo_url', sa.String(), nullable=True),
    sa.Column('confidence_level', sa.String(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['default_category_id'], ['categories.id'], ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['default_tag_id'], ['tags.id'], ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['merged_into_merchant_id'], ['merchants.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_merchants_name'), 'merchants', ['name'], unique=True)
    op.create_index(op.f('ix_merchants_merchant_entity_id'), 'merchants', ['merchant_entity_id'], unique=False)

    op.create_table('securities',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('plaid_security_id', sa.String(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('ticker_symbol', sa.String(), nullable=True),
    sa.Column('isin', sa.String(), nullable=True),
    sa.Column('cusip', sa.String(), nullable=True),
    sa.Column('sedol', sa.String(), nullable=True),
    sa.Column('close_price', sa.Numeric(precision=18, scale=4), nullable=True),
    sa.Column('close_price_as_of', sa.Date(), nullable=True),
    sa.Column('type', sa.String(), nullable=True),
    sa.Column('iso_currency_code', sa.String(), nullable=True),
    sa.Column('unofficial_currency_code', sa.String(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_securities_plaid_security_id'), 'securities', ['plaid_security_id'], unique=True)

    op.create_table('transactions',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('plaid_transaction_id', sa.String(), nullable=False),
    sa.Column('plaid_item_id', sa.String(length=36), nullable=False),
    sa.Column('account_id', sa.String(), nullable=True),
    sa.Column('date', sa.Date(), nullable=False),
    sa.Column('amount', sa.Numeric(precision=18, scale=4), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('merchant_name', sa.String(), nullable=True),
    sa.Column('plaid_merchant_name', sa.String(), nullable=True),
    sa.Column('category_id', sa.String(length=36), nullable=True),
    sa.Column('tag_id', sa.String(length=36), nullable=True),
    sa.Column('pending', sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column('is_reviewed', sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column('payment_channel', sa.String(), nullable=True),
    sa.Column('transaction_code', sa.String(), nullable=True),
    sa.Column('iso_currency_code', sa.String(), nullable=True),
    sa.Column('unofficial_currency_code', sa.String(), nullable=True),
    sa.Column('authorized_date', sa.Date(), nullable=True),
    sa.Column('authorized_datetime', sa.DateTime(), nullable=True),
    sa.Column('datetime', sa.DateTime(), nullable=True),
    sa.Column('check_number', sa.String(), nullable=True),
    sa.Column('merchant_entity_id', sa.String(), nullable=True),
    sa.Column('logo_url', sa.String(), nullable=True),
    sa.Column('website', sa.String(), nullable=True),
    sa.Column('account_owner', sa.String(), nullable=True),
    sa.Column('pending_transaction_id', sa.String(), nullable=True),
    sa.Column('original_description', sa.String(), nullable=True),
    sa.Column('personal_finance_category_icon_url', sa.String(), nullable=True),
    sa.Column('personal_finance_category_version', sa.String(), nullable=True),
    sa.Column('location', sa.Text(), nullable=True),
    sa.Column('payment_meta', sa.Text(), nullable=True),
    sa.Column('personal_finance_category_detailed', sa.Text(), nullable=True),
    sa.Column('counterparties', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['plaid_item_id'], ['plaid_items.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_transactions_plaid_transaction_id'), 'transactions', ['plaid_transaction_id'], unique=True)
    op.create_index(op.f('ix_transactions_plaid_item_id'), 'transactions', ['plaid_item_id'], unique=False)
    op.create_index(op.f('ix_transactions_date'), 'transactions', ['date'], unique=False)
    op.create_index(op.f('ix_transactions_merchant_name'), 'transactions', ['merchant_name'], unique=False)
    op.create_index(op.f('ix_transactions_merchant_entity_id'), 'transactions', ['merchant_entity_id'], unique=False)

    op.create_table('investment_transactions',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('plaid_investment_transaction_id', sa.String(), nullable=False),
    sa.Column('plaid_item_id', sa.String(length=36), nullable=False),
    sa.Column('account_id', sa.String(), nullable=True),
    sa.Column('security_id', sa.String(), nullable=True),
    sa.Column('date', sa.Date(), nullable=False),
    sa.Column('name', sa.String(), nullable=True),
    sa.Column('amount', sa.Numeric(precision=18, scale=4), nullable=True),
    sa.Column('quantity', sa.Numeric(precision=18, scale=8), nullable=True),
    sa.Column('price', sa.Numeric(precision=18, scale=4), nullable=True),
    sa.Column('fees', sa.Numeric(precision=18, scale=4), nullable=True),
    sa.Column('type', sa.String(), nullable=True),
    sa.Column('subtype', sa.String(), nullable=True),
    sa.Column('iso_currency_code', sa.String(), nullable=True),
    sa.Column('unofficial_currency_code', sa.String(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['plaid_item_id'], ['plaid_items.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['security_id'], ['securities.plaid_security_id']),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_investment_transactions_plaid_investment_transaction_id'), 'investment_transactions', ['plaid_investment_transaction_id'], unique=True)
    op.create_index(op.f('ix_investment_transactions_plaid_item_id'), 'investment_transactions', ['plaid_item_id'], unique=False)
    op.create_index(op.f('ix_investment_transactions_security_id'), 'investment_transactions', ['security_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_investment_transactions_security_id'), table_name='investment_transactions')
    op.drop_index(op.f('ix_investment_transactions_plaid_item_id'), table_name='investment_transactions')
    op.drop_index(op.f('ix_investment_transactions_plaid_investment_transaction_id'), table_name='investment_transactions')
    op.drop_table('investment_transactions')
    op.drop_index(op.f('ix_transactions_merchant_entity_id'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_merchant_name'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_date'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_plaid_item_id'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_plaid_transaction_id'), table_name='transactions')
    op.drop_table('transactions')
    op.drop_index(op.f('ix_securities_plaid_security_id'), table_name='securities')
    op.drop_table('securities')
    op.drop_index(op.f('ix_merchants_merchant_entity_id'), table_name='merchants')
    op.drop_index(op.f('ix_merchants_name'), table_name='merchants')
    op.drop_table('merchants')
    op.drop_table('categories')
    op.drop_table('tags')
    op.drop_index('ix_plaid_items_item_account', table_name='plaid_items')
    op.drop_index(op.f('ix_plaid_items_sync_status'), table_name='plaid_items')
    op.drop_index(op.f('ix_plaid_items_plaid_account_id'), table_name='plaid_items')
    op.drop_index(op.f('ix_plaid_items_item_id'), table_name='plaid_items')
    op.drop_table('plaid_items')
