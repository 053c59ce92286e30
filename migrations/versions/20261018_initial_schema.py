"""initial infrastructure schema

Revision ID: initial_20261018
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from infradb.db.types import StringArray


# revision identifiers, used by Alembic.
revision: str = 'initial_20261018'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Array columns get GIN indexes for the overlap filters; PostgreSQL only
_GIN_INDEXES = (
    ('ix_sku_associated_machines', 'sku', 'associated_machines'),
    ('ix_machine_interface_ip_addresses', 'machine_interface', 'ip_addresses'),
    ('ix_interface_ip_addresses', 'interface', 'ip_addresses'),
)

_INDEXES = (
    ('ix_infrastructure_provider_org', 'infrastructure_provider', ['org']),
    ('ix_tenant_org', 'tenant', ['org']),
    ('ix_site_infrastructure_provider_id', 'site', ['infrastructure_provider_id']),
    ('ix_site_org', 'site', ['org']),
    ('ix_site_status', 'site', ['status']),
    ('ix_machine_site_id', 'machine', ['site_id']),
    ('ix_instance_tenant_id', 'instance', ['tenant_id']),
    ('ix_instance_site_id', 'instance', ['site_id']),
    ('ix_ip_block_site_id', 'ip_block', ['site_id']),
    ('ix_ip_block_infrastructure_provider_id', 'ip_block', ['infrastructure_provider_id']),
    ('ix_ip_block_tenant_id', 'ip_block', ['tenant_id']),
    ('ix_fabric_infrastructure_provider_id', 'fabric', ['infrastructure_provider_id']),
    ('ix_machine_interface_machine_id', 'machine_interface', ['machine_id']),
    ('ix_interface_instance_id', 'interface', ['instance_id']),
    ('ix_os_site_association_operating_system_id', 'operating_system_site_association', ['operating_system_id']),
    ('ix_os_site_association_site_id', 'operating_system_site_association', ['site_id']),
    ('ix_sku_site_id', 'sku', ['site_id']),
    ('ix_allocation_constraint_allocation_id', 'allocation_constraint', ['allocation_id']),
    ('ix_allocation_constraint_resource_type_id', 'allocation_constraint', ['resource_type_id']),
    ('ix_tenant_account_infrastructure_provider_id', 'tenant_account', ['infrastructure_provider_id']),
    ('ix_tenant_account_tenant_id', 'tenant_account', ['tenant_id']),
)

# Creation order; downgrade drops in reverse
TABLES = (
    'infrastructure_provider',
    'tenant',
    'user',
    'site',
    'operating_system',
    'machine',
    'instance',
    'subnet',
    'vpc_prefix',
    'ip_block',
    'fabric',
    'machine_interface',
    'interface',
    'operating_system_site_association',
    'sku',
    'allocation',
    'allocation_constraint',
    'tenant_account',
)


def _uuid():
    return postgresql.UUID(as_uuid=True)


def _jsonb():
    return postgresql.JSONB(astext_type=sa.Text())


def _timestamps(soft_delete=True):
    columns = [
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
    ]
    if soft_delete:
        columns.append(sa.Column('deleted', sa.DateTime(timezone=True), nullable=True))
    return columns


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'infrastructure_provider',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('org', sa.String(), nullable=False),
        sa.Column('org_display_name', sa.String(), nullable=True),
        *_timestamps(),
        sa.Column('created_by', _uuid(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'tenant',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('org', sa.String(), nullable=False),
        sa.Column('org_display_name', sa.String(), nullable=True),
        *_timestamps(),
        sa.Column('created_by', _uuid(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'user',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('auxiliary_id', sa.String(), nullable=True),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        *_timestamps(soft_delete=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('auxiliary_id'),
    )
    op.create_table(
        'site',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('org', sa.String(), nullable=False),
        sa.Column('infrastructure_provider_id', _uuid(), nullable=False),
        sa.Column('site_controller_version', sa.String(), nullable=True),
        sa.Column('site_agent_version', sa.String(), nullable=True),
        sa.Column('registration_token', sa.String(), nullable=True),
        sa.Column('registration_token_expiration', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_infinity_enabled', sa.Boolean(), nullable=False),
        sa.Column('serial_console_hostname', sa.String(), nullable=True),
        sa.Column('is_serial_console_enabled', sa.Boolean(), nullable=False),
        sa.Column('serial_console_idle_timeout', sa.Integer(), nullable=True),
        sa.Column('serial_console_max_session_length', sa.Integer(), nullable=True),
        sa.Column('inventory_received', sa.DateTime(timezone=True), nullable=True),
        sa.Column('location', _jsonb(), nullable=True),
        sa.Column('contact', _jsonb(), nullable=True),
        sa.Column('config', _jsonb(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.Column('created_by', _uuid(), nullable=False),
        sa.ForeignKeyConstraint(['infrastructure_provider_id'], ['infrastructure_provider.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'operating_system',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('org', sa.String(), nullable=False),
        sa.Column('infrastructure_provider_id', _uuid(), nullable=True),
        sa.Column('tenant_id', _uuid(), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('image_sha', sa.String(), nullable=True),
        sa.Column('image_auth_type', sa.String(), nullable=True),
        sa.Column('image_auth_token', sa.Text(), nullable=True),
        sa.Column('image_disk', sa.String(), nullable=True),
        sa.Column('root_fs_id', sa.String(), nullable=True),
        sa.Column('root_fs_label', sa.String(), nullable=True),
        sa.Column('enable_block_storage', sa.Boolean(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.Column('created_by', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['infrastructure_provider_id'], ['infrastructure_provider.id']),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenant.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'machine',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('infrastructure_provider_id', _uuid(), nullable=False),
        sa.Column('site_id', _uuid(), nullable=False),
        sa.Column('hostname', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['infrastructure_provider_id'], ['infrastructure_provider.id']),
        sa.ForeignKeyConstraint(['site_id'], ['site.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'instance',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('tenant_id', _uuid(), nullable=False),
        sa.Column('site_id', _uuid(), nullable=False),
        sa.Column('machine_id', sa.String(), nullable=True),
        sa.Column('operating_system_id', _uuid(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.Column('created_by', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenant.id']),
        sa.ForeignKeyConstraint(['site_id'], ['site.id']),
        sa.ForeignKeyConstraint(['machine_id'], ['machine.id']),
        sa.ForeignKeyConstraint(['operating_system_id'], ['operating_system.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'subnet',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('site_id', _uuid(), nullable=False),
        sa.Column('tenant_id', _uuid(), nullable=True),
        sa.Column('ipv4_prefix', sa.String(), nullable=True),
        sa.Column('prefix_length', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['site_id'], ['site.id']),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenant.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'vpc_prefix',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('site_id', _uuid(), nullable=False),
        sa.Column('tenant_id', _uuid(), nullable=True),
        sa.Column('prefix', sa.String(), nullable=False),
        sa.Column('prefix_length', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['site_id'], ['site.id']),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenant.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'ip_block',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('site_id', _uuid(), nullable=False),
        sa.Column('infrastructure_provider_id', _uuid(), nullable=False),
        sa.Column('tenant_id', _uuid(), nullable=True),
        sa.Column('routing_type', sa.String(), nullable=False),
        sa.Column('prefix', sa.String(), nullable=False),
        sa.Column('prefix_length', sa.Integer(), nullable=False),
        sa.Column('protocol_version', sa.String(), nullable=False),
        sa.Column('full_grant', sa.Boolean(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.Column('created_by', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['site_id'], ['site.id']),
        sa.ForeignKeyConstraint(['infrastructure_provider_id'], ['infrastructure_provider.id']),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenant.id']),
        sa.CheckConstraint("routing_type in ('Public','DatacenterOnly')", name='ck_ip_block_routing_type'),
        sa.CheckConstraint("protocol_version in ('IPv4','IPv6')", name='ck_ip_block_protocol_version'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'fabric',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('site_id', _uuid(), nullable=False),
        sa.Column('org', sa.String(), nullable=False),
        sa.Column('infrastructure_provider_id', _uuid(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('is_missing_on_site', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['site_id'], ['site.id']),
        sa.ForeignKeyConstraint(['infrastructure_provider_id'], ['infrastructure_provider.id']),
        sa.PrimaryKeyConstraint('id', 'site_id'),
    )
    op.create_table(
        'machine_interface',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('machine_id', sa.String(), nullable=False),
        sa.Column('controller_interface_id', _uuid(), nullable=True),
        sa.Column('controller_segment_id', _uuid(), nullable=True),
        sa.Column('attached_dpu_machine_id', sa.String(), nullable=True),
        sa.Column('subnet_id', _uuid(), nullable=True),
        sa.Column('hostname', sa.String(), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False),
        sa.Column('mac_address', sa.String(), nullable=True),
        sa.Column('ip_addresses', StringArray(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['machine_id'], ['machine.id']),
        sa.ForeignKeyConstraint(['subnet_id'], ['subnet.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'interface',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('instance_id', _uuid(), nullable=False),
        sa.Column('subnet_id', _uuid(), nullable=True),
        sa.Column('vpc_prefix_id', _uuid(), nullable=True),
        sa.Column('machine_interface_id', _uuid(), nullable=True),
        sa.Column('device', sa.String(), nullable=True),
        sa.Column('device_instance', sa.Integer(), nullable=True),
        sa.Column('is_physical', sa.Boolean(), nullable=False),
        sa.Column('virtual_function_id', sa.Integer(), nullable=True),
        sa.Column('mac_address', sa.String(), nullable=True),
        sa.Column('ip_addresses', StringArray(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.Column('created_by', _uuid(), nullable=False),
        sa.ForeignKeyConstraint(['instance_id'], ['instance.id']),
        sa.ForeignKeyConstraint(['subnet_id'], ['subnet.id']),
        sa.ForeignKeyConstraint(['vpc_prefix_id'], ['vpc_prefix.id']),
        sa.ForeignKeyConstraint(['machine_interface_id'], ['machine_interface.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'operating_system_site_association',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('operating_system_id', _uuid(), nullable=False),
        sa.Column('site_id', _uuid(), nullable=False),
        sa.Column('version', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('is_missing_on_site', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.Column('created_by', _uuid(), nullable=False),
        sa.ForeignKeyConstraint(['operating_system_id'], ['operating_system.id']),
        sa.ForeignKeyConstraint(['site_id'], ['site.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'sku',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('site_id', _uuid(), nullable=False),
        sa.Column('device_type', sa.String(), nullable=True),
        sa.Column('components', _jsonb(), nullable=True),
        sa.Column('associated_machines', StringArray(), nullable=False),
        *_timestamps(soft_delete=False),
        sa.ForeignKeyConstraint(['site_id'], ['site.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'allocation',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('infrastructure_provider_id', _uuid(), nullable=False),
        sa.Column('tenant_id', _uuid(), nullable=False),
        sa.Column('site_id', _uuid(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.Column('created_by', _uuid(), nullable=True),
        sa.ForeignKeyConstraint(['infrastructure_provider_id'], ['infrastructure_provider.id']),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenant.id']),
        sa.ForeignKeyConstraint(['site_id'], ['site.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'allocation_constraint',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('allocation_id', _uuid(), nullable=False),
        sa.Column('resource_type', sa.String(), nullable=False),
        sa.Column('resource_type_id', _uuid(), nullable=False),
        sa.Column('constraint_type', sa.String(), nullable=False),
        sa.Column('constraint_value', sa.Integer(), nullable=False),
        sa.Column('derived_resource_id', _uuid(), nullable=True),
        *_timestamps(),
        sa.Column('created_by', _uuid(), nullable=False),
        sa.ForeignKeyConstraint(['allocation_id'], ['allocation.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'tenant_account',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('account_number', sa.String(), nullable=False),
        sa.Column('tenant_id', _uuid(), nullable=True),
        sa.Column('tenant_org', sa.String(), nullable=False),
        sa.Column('infrastructure_provider_id', _uuid(), nullable=False),
        sa.Column('infrastructure_provider_org', sa.String(), nullable=False),
        sa.Column('subscription_id', sa.String(), nullable=True),
        sa.Column('subscription_tier', sa.String(), nullable=True),
        sa.Column('tenant_contact_id', _uuid(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.Column('created_by', _uuid(), nullable=False),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenant.id']),
        sa.ForeignKeyConstraint(['infrastructure_provider_id'], ['infrastructure_provider.id']),
        sa.ForeignKeyConstraint(['tenant_contact_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('account_number'),
    )

    for name, table, columns in _INDEXES:
        op.create_index(name, table, columns, unique=False)

    if op.get_bind().dialect.name == 'postgresql':
        for name, table, column in _GIN_INDEXES:
            op.create_index(name, table, [column], postgresql_using='gin')


def downgrade() -> None:
    """Downgrade schema."""
    if op.get_bind().dialect.name == 'postgresql':
        for name, table, _column in reversed(_GIN_INDEXES):
            op.drop_index(name, table_name=table)

    for name, table, _columns in reversed(_INDEXES):
        op.drop_index(name, table_name=table)

    for table in reversed(TABLES):
        op.drop_table(table)
