"""initial_schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')

user_role = sa.Enum('USER', 'ADMIN', name='user_role')
device_status = sa.Enum('ACTIVE', 'INACTIVE', 'ERROR', 'MAINTENANCE', name='device_status')
pump_action = sa.Enum('ON', 'OFF', name='pump_action')
alert_severity = sa.Enum('LOW', 'MEDIUM', 'HIGH', 'CRITICAL', name='alert_severity')


def upgrade() -> None:
    # 1. Users & federated accounts
    op.create_table('users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=True),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('hashed_password', sa.String(length=128), nullable=True),
        sa.Column('role', user_role, nullable=False, server_default='USER'),
        sa.Column('email_verified', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('account',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('provider', sa.String(length=50), nullable=False),
        sa.Column('provider_account_id', sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('provider', 'provider_account_id', name='uq_account_provider_account')
    )
    op.create_index('ix_account_user_id', 'account', ['user_id'])

    # 2. Devices
    op.create_table('device',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('status', device_status, nullable=False, server_default='INACTIVE'),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_device_owner_id', 'device', ['owner_id'])

    # 3. Readings & pump log (owned through device)
    op.create_table('water_data',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('device_id', sa.String(length=36), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('temperature', sa.Float(), nullable=False),
        sa.Column('ph', sa.Float(), nullable=False),
        sa.Column('dissolved_oxygen', sa.Float(), nullable=False),
        sa.Column('turbidity', sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(['device_id'], ['device.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_water_data_device_id', 'water_data', ['device_id'])
    op.create_index('ix_water_data_timestamp', 'water_data', ['timestamp'])

    op.create_table('light_data',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('device_id', sa.String(length=36), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('intensity', sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(['device_id'], ['device.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_light_data_device_id', 'light_data', ['device_id'])
    op.create_index('ix_light_data_timestamp', 'light_data', ['timestamp'])

    op.create_table('pump_log',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('device_id', sa.String(length=36), nullable=False),
        sa.Column('action', pump_action, nullable=False),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['device_id'], ['device.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_pump_log_device_id', 'pump_log', ['device_id'])
    op.create_index('ix_pump_log_timestamp', 'pump_log', ['timestamp'])

    # 4. Alert rules
    op.create_table('alert_rule',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('device_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('condition', JSON, nullable=False),
        sa.Column('severity', alert_severity, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['device_id'], ['device.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_alert_rule_owner_id', 'alert_rule', ['owner_id'])
    op.create_index('ix_alert_rule_device_id', 'alert_rule', ['device_id'])

    # 5. Audit trail
    op.create_table('audit_log',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('actor_user_id', sa.String(length=36), nullable=True),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('resource_type', sa.String(length=50), nullable=True),
        sa.Column('resource_id', sa.String(length=100), nullable=True),
        sa.Column('details', JSON, nullable=True),
        sa.ForeignKeyConstraint(['actor_user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_audit_log_time', 'audit_log', ['time'])


def downgrade() -> None:
    op.drop_table('audit_log')
    op.drop_table('alert_rule')
    op.drop_table('pump_log')
    op.drop_table('light_data')
    op.drop_table('water_data')
    op.drop_table('device')
    op.drop_table('account')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (alert_severity, pump_action, device_status, user_role):
        enum_type.drop(bind, checkfirst=True)
