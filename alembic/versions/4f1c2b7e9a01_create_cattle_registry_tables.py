"""create cattle registry tables

Revision ID: 4f1c2b7e9a01
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '4f1c2b7e9a01'
down_revision = None
branch_labels = None
depends_on = None


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade() -> None:
    # --- accounts (identity store projection) ---
    op.create_table(
        'accounts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('region', sa.String(length=128), nullable=True),
        sa.Column('district', sa.String(length=128), nullable=True),
        sa.Column('pin_code', sa.String(length=16), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('is_approved', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_accounts'),
        sa.UniqueConstraint('email', name='ux_accounts_email'),
    )
    op.create_index('ix_accounts_role_region', 'accounts', ['role', 'region'], unique=False)

    # --- cattle ---
    op.create_table(
        'cattle',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('cattle_id', sa.String(length=32), nullable=False),
        sa.Column('tag_no', sa.String(length=64), nullable=True),
        sa.Column('temporary_id', sa.String(length=40), nullable=True),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('breed', sa.String(length=128), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('color', sa.String(length=64), nullable=True),
        sa.Column('type', sa.String(length=64), nullable=True),
        sa.Column('medical_history', sa.Text(), nullable=False, server_default=''),
        sa.Column('images', _json(), nullable=False),
        sa.Column('state', sa.String(length=128), nullable=False),
        sa.Column('district', sa.String(length=128), nullable=False),
        sa.Column('pin_code', sa.String(length=16), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('verification_status', sa.String(length=32), nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('turnaround_deadline', sa.DateTime(timezone=True), nullable=True),
        sa.Column('regional_reviewed_by', sa.Uuid(), nullable=True),
        sa.Column('regional_reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('forwarded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('regional_denial_reason', sa.Text(), nullable=True),
        sa.Column('verified_by', sa.Uuid(), nullable=True),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('archived_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('archived_by', sa.Uuid(), nullable=True),
        sa.Column('transfer_history', _json(), nullable=False),
        sa.Column('identification_history', _json(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id', name='pk_cattle'),
        sa.ForeignKeyConstraint(['owner_id'], ['accounts.id'], name='fk_cattle_owner_id_accounts'),
        sa.UniqueConstraint('cattle_id', name='uq_cattle_cattle_id'),
    )
    op.create_index(
        'ix_cattle_state_verification', 'cattle', ['state', 'verification_status'], unique=False
    )
    op.create_index('ix_cattle_owner_created', 'cattle', ['owner_id', 'created_at'], unique=False)

    # --- holdings ---
    op.create_table(
        'holdings',
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('cattle_ref', sa.Uuid(), nullable=False),
        sa.Column('added_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('account_id', 'cattle_ref', name='pk_holdings'),
        sa.ForeignKeyConstraint(
            ['account_id'], ['accounts.id'], name='fk_holdings_account_id_accounts'
        ),
        sa.ForeignKeyConstraint(
            ['cattle_ref'], ['cattle.id'], name='fk_holdings_cattle_ref_cattle', ondelete='CASCADE'
        ),
    )

    # --- identification_requests ---
    op.create_table(
        'identification_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('request_id', sa.String(length=32), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('region', sa.String(length=128), nullable=False),
        sa.Column('image', _json(), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('priority', sa.String(length=32), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('address', sa.String(length=512), nullable=True),
        sa.Column('device_info', sa.String(length=512), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('processed_by', sa.Uuid(), nullable=True),
        sa.Column('time_taken_seconds', sa.Integer(), nullable=True),
        sa.Column('result_found', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('result_cattle_ref', sa.Uuid(), nullable=True),
        sa.Column('result_cattle_code', sa.String(length=32), nullable=True),
        sa.Column('result_confidence', sa.Float(), nullable=True),
        sa.Column('result_message', sa.Text(), nullable=True),
        sa.Column('result_identified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('cancelled_by', sa.Uuid(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id', name='pk_identification_requests'),
        sa.ForeignKeyConstraint(
            ['user_id'], ['accounts.id'], name='fk_identification_requests_user_id_accounts'
        ),
        sa.ForeignKeyConstraint(
            ['result_cattle_ref'],
            ['cattle.id'],
            name='fk_identification_requests_result_cattle_ref_cattle',
            ondelete='SET NULL',
        ),
        sa.UniqueConstraint('request_id', name='uq_identification_requests_request_id'),
    )
    op.create_index(
        'ix_identification_requests_user_created',
        'identification_requests',
        ['user_id', 'created_at'],
        unique=False,
    )
    op.create_index(
        'ix_identification_requests_region_status',
        'identification_requests',
        ['region', 'status'],
        unique=False,
    )
    op.create_index(
        'ix_identification_requests_status_expires',
        'identification_requests',
        ['status', 'expires_at'],
        unique=False,
    )

    # --- transfer_requests ---
    op.create_table(
        'transfer_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('cattle_ref', sa.Uuid(), nullable=False),
        sa.Column('from_owner_id', sa.Uuid(), nullable=False),
        sa.Column('to_owner_id', sa.Uuid(), nullable=False),
        sa.Column('transfer_type', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('transfer_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('response_message', sa.Text(), nullable=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_by', sa.Uuid(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id', name='pk_transfer_requests'),
        sa.ForeignKeyConstraint(
            ['cattle_ref'],
            ['cattle.id'],
            name='fk_transfer_requests_cattle_ref_cattle',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['from_owner_id'], ['accounts.id'], name='fk_transfer_requests_from_owner_id_accounts'
        ),
        sa.ForeignKeyConstraint(
            ['to_owner_id'], ['accounts.id'], name='fk_transfer_requests_to_owner_id_accounts'
        ),
    )
    # At most one pending request per cattle
    op.create_index(
        'ux_transfer_requests_pending_cattle',
        'transfer_requests',
        ['cattle_ref'],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
    )
    op.create_index(
        'ix_transfer_requests_to_status',
        'transfer_requests',
        ['to_owner_id', 'status'],
        unique=False,
    )
    op.create_index(
        'ix_transfer_requests_from_status',
        'transfer_requests',
        ['from_owner_id', 'status'],
        unique=False,
    )

    # --- notifications ---
    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('recipient_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('data', _json(), nullable=True),
        sa.Column('priority', sa.String(length=32), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_notifications'),
    )
    op.create_index(
        'ix_notifications_recipient_read', 'notifications', ['recipient_id', 'read'], unique=False
    )
    op.create_index(
        'ix_notifications_recipient_created',
        'notifications',
        ['recipient_id', 'created_at'],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index('ix_notifications_recipient_created', table_name='notifications')
    op.drop_index('ix_notifications_recipient_read', table_name='notifications')
    op.drop_table('notifications')

    op.drop_index('ix_transfer_requests_from_status', table_name='transfer_requests')
    op.drop_index('ix_transfer_requests_to_status', table_name='transfer_requests')
    op.drop_index('ux_transfer_requests_pending_cattle', table_name='transfer_requests')
    op.drop_table('transfer_requests')

    op.drop_index('ix_identification_requests_status_expires', table_name='identification_requests')
    op.drop_index('ix_identification_requests_region_status', table_name='identification_requests')
    op.drop_index('ix_identification_requests_user_created', table_name='identification_requests')
    op.drop_table('identification_requests')

    op.drop_table('holdings')

    op.drop_index('ix_cattle_owner_created', table_name='cattle')
    op.drop_index('ix_cattle_state_verification', table_name='cattle')
    op.drop_table('cattle')

    op.drop_index('ix_accounts_role_region', table_name='accounts')
    op.drop_table('accounts')
