"""create_authorization_schema

Revision ID: 3f9b2c1d7e4a
Revises:
Create Date: 2026-10-18 09:12:44.510231

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9b2c1d7e4a'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """
    Create the authorization schema.

    Creates:
    - organizations, organization_roles
    - platform_admins, organization_owners, organization_delegates, organization_members
    - permissions (global catalog)
    - permission_groups with permission and member link tables
    """
    # 1. Tenants and legacy roles
    op.create_table(
        'organizations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table(
        'organization_roles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('organization_id', sa.Integer(), nullable=False),
        sa.Column('role_name', sa.String(length=100), nullable=False),
        sa.Column('default_permissions', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('organization_id', 'role_name', name='uq_organization_roles_org_name')
    )
    op.create_index('ix_organization_roles_organization_id', 'organization_roles', ['organization_id'])

    # 2. Tier tables
    op.create_table(
        'platform_admins',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_platform_admins_user_id', 'platform_admins', ['user_id'], unique=True)

    for table, extra in (
        ('organization_owners', []),
        ('organization_delegates', [sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true())]),
    ):
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('organization_id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.String(length=255), nullable=False),
            sa.Column('role_id', sa.Integer(), nullable=True),
            *extra,
            *_timestamps(),
            sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['role_id'], ['organization_roles.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('organization_id', 'user_id', name=f'uq_{table}_org_user')
        )
        op.create_index(f'ix_{table}_organization_id', table, ['organization_id'])
        op.create_index(f'ix_{table}_user_id', table, ['user_id'])

    op.create_table(
        'organization_members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('organization_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['role_id'], ['organization_roles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('organization_id', 'user_id', name='uq_organization_members_org_user')
    )
    op.create_index('ix_organization_members_organization_id', 'organization_members', ['organization_id'])
    op.create_index('ix_organization_members_user_id', 'organization_members', ['user_id'])

    # 3. Permission catalog
    op.create_table(
        'permissions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('module', sa.String(length=50), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_permissions_code', 'permissions', ['code'], unique=True)
    op.create_index('ix_permissions_module', 'permissions', ['module'])

    # 4. Permission groups
    op.create_table(
        'permission_groups',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('organization_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_system', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_by', sa.String(length=255), nullable=True),
        sa.Column('updated_by', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('organization_id', 'name', name='uq_permission_groups_org_name')
    )
    op.create_index('ix_permission_groups_organization_id', 'permission_groups', ['organization_id'])

    op.create_table(
        'permission_group_permissions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('permission_group_id', sa.Integer(), nullable=False),
        sa.Column('permission_id', sa.Integer(), nullable=False),
        sa.Column('assigned_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('assigned_by', sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(['permission_group_id'], ['permission_groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['permission_id'], ['permissions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('permission_group_id', 'permission_id', name='uq_permission_group_permissions')
    )
    op.create_index(
        'ix_permission_group_permissions_permission_group_id',
        'permission_group_permissions',
        ['permission_group_id'],
    )
    op.create_index(
        'ix_permission_group_permissions_permission_id', 'permission_group_permissions', ['permission_id']
    )

    op.create_table(
        'permission_group_members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('permission_group_id', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('assigned_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('assigned_by', sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(['permission_group_id'], ['permission_groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['member_id'], ['organization_members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('permission_group_id', 'member_id', name='uq_permission_group_members_group_member')
    )
    op.create_index(
        'ix_permission_group_members_permission_group_id', 'permission_group_members', ['permission_group_id']
    )
    op.create_index('ix_permission_group_members_member_id', 'permission_group_members', ['member_id'])


def downgrade() -> None:
    """Drop the authorization schema in reverse dependency order."""
    op.drop_table('permission_group_members')
    op.drop_table('permission_group_permissions')
    op.drop_table('permission_groups')
    op.drop_table('permissions')
    op.drop_table('organization_members')
    op.drop_table('organization_delegates')
    op.drop_table('organization_owners')
    op.drop_table('platform_admins')
    op.drop_table('organization_roles')
    op.drop_table('organizations')
