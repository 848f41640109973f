"""Create referral ledger tables.

Revision ID: 20261018_000001
Revises:
Create Date: 2026-10-18

Accounts with their commission ledger, join-time referrals, credited
commissions and withdrawal requests.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261018_000001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create accounts, pending_referrals, referral_commissions, withdrawal_requests."""
    op.create_table(
        'accounts',
        sa.Column('id', sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column('username', sa.String(length=255), nullable=True),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column(
            'status',
            sa.String(length=20),
            nullable=False,
            server_default='pending',
            comment='pending, active, blocked'
        ),
        sa.Column(
            'balance',
            sa.DECIMAL(precision=12, scale=2),
            nullable=False,
            server_default='0',
            comment='Withdrawable ETB, total_earned - total_withdrawn'
        ),
        sa.Column(
            'total_earned',
            sa.DECIMAL(precision=12, scale=2),
            nullable=False,
            server_default='0'
        ),
        sa.Column(
            'total_withdrawn',
            sa.DECIMAL(precision=12, scale=2),
            nullable=False,
            server_default='0'
        ),
        sa.Column('paid_referrals', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('unpaid_referrals', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_referrals', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('referral_code', sa.String(length=20), nullable=False),
        sa.Column('referred_by_id', sa.BigInteger(), nullable=True),
        sa.Column('activated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP')
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP')
        ),
        sa.CheckConstraint('balance >= 0', name='check_account_balance_non_negative'),
        sa.CheckConstraint(
            'total_earned >= 0', name='check_account_total_earned_non_negative'
        ),
        sa.CheckConstraint(
            'total_withdrawn >= 0', name='check_account_total_withdrawn_non_negative'
        ),
        sa.CheckConstraint(
            'paid_referrals >= 0 AND unpaid_referrals >= 0',
            name='check_account_referral_counters_non_negative'
        ),
        sa.CheckConstraint(
            'total_referrals >= paid_referrals',
            name='check_account_total_referrals_covers_paid'
        ),
        sa.ForeignKeyConstraint(
            ['referred_by_id'], ['accounts.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_accounts_username', 'accounts', ['username'])
    op.create_index('ix_accounts_status', 'accounts', ['status'])
    op.create_index(
        'ix_accounts_referral_code', 'accounts', ['referral_code'], unique=True
    )
    op.create_index('ix_accounts_referred_by_id', 'accounts', ['referred_by_id'])

    op.create_table(
        'pending_referrals',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('referrer_id', sa.BigInteger(), nullable=False),
        sa.Column('referred_user_id', sa.BigInteger(), nullable=False),
        sa.Column(
            'status',
            sa.String(length=20),
            nullable=False,
            server_default='pending',
            comment='pending, converted'
        ),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP')
        ),
        sa.Column('converted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['referrer_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['referred_user_id'], ['accounts.id'], ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('referred_user_id'),
    )
    op.create_index(
        'ix_pending_referrals_referrer_id', 'pending_referrals', ['referrer_id']
    )

    op.create_table(
        'referral_commissions',
        sa.Column('id', sa.String(length=80), nullable=False),
        sa.Column('referrer_id', sa.BigInteger(), nullable=False),
        sa.Column('referred_user_id', sa.BigInteger(), nullable=False),
        sa.Column(
            'status',
            sa.String(length=20),
            nullable=False,
            server_default='completed'
        ),
        sa.Column(
            'commission_amount',
            sa.DECIMAL(precision=12, scale=2),
            nullable=False,
            comment='Fixed at creation from the program terms of the day'
        ),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP')
        ),
        sa.ForeignKeyConstraint(['referrer_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['referred_user_id'], ['accounts.id'], ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'referrer_id', 'referred_user_id', name='uq_referral_commissions_pair'
        ),
    )
    op.create_index(
        'ix_referral_commissions_referrer_id', 'referral_commissions', ['referrer_id']
    )
    op.create_index(
        'ix_referral_commissions_referred_user_id',
        'referral_commissions',
        ['referred_user_id'],
    )

    op.create_table(
        'withdrawal_requests',
        sa.Column('id', sa.String(length=80), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('amount', sa.DECIMAL(precision=12, scale=2), nullable=False),
        sa.Column(
            'payment_method',
            sa.String(length=20),
            nullable=False,
            comment='telebirr, bankTransfer'
        ),
        sa.Column('payment_details', sa.JSON(), nullable=False),
        sa.Column(
            'status',
            sa.String(length=20),
            nullable=False,
            server_default='pending',
            comment='pending, approved, rejected'
        ),
        sa.Column(
            'requested_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP')
        ),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('processed_by', sa.BigInteger(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.CheckConstraint('amount > 0', name='check_withdrawal_amount_positive'),
        sa.ForeignKeyConstraint(['user_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_withdrawal_requests_user_id', 'withdrawal_requests', ['user_id']
    )
    op.create_index(
        'idx_withdrawal_requests_status_requested',
        'withdrawal_requests',
        ['status', 'requested_at'],
    )


def downgrade() -> None:
    """Drop referral ledger tables."""
    op.drop_index(
        'idx_withdrawal_requests_status_requested', table_name='withdrawal_requests'
    )
    op.drop_index('ix_withdrawal_requests_user_id', table_name='withdrawal_requests')
    op.drop_table('withdrawal_requests')

    op.drop_index(
        'ix_referral_commissions_referred_user_id', table_name='referral_commissions'
    )
    op.drop_index(
        'ix_referral_commissions_referrer_id', table_name='referral_commissions'
    )
    op.drop_table('referral_commissions')

    op.drop_index('ix_pending_referrals_referrer_id', table_name='pending_referrals')
    op.drop_table('pending_referrals')

    op.drop_index('ix_accounts_referred_by_id', table_name='accounts')
    op.drop_index('ix_accounts_referral_code', table_name='accounts')
    op.drop_index('ix_accounts_status', table_name='accounts')
    op.drop_index('ix_accounts_username', table_name='accounts')
    op.drop_table('accounts')
