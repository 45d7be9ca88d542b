"""initial schema

Revision ID: 4f1c2a9d7e30
Revises:
Create Date: 2026-10-19 09:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4f1c2a9d7e30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def _scoped_columns() -> list[sa.Column]:
    return [
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('organization_id', sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table('organizations',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('name', sa.String(length=200), nullable=False),
    *_timestamps(),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_table('profiles',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('organization_id', sa.UUID(), nullable=False),
    sa.Column('first_name', sa.String(length=100), nullable=False),
    sa.Column('last_name', sa.String(length=100), nullable=False),
    sa.Column('role', sa.String(length=20), nullable=False),
    *_timestamps(),
    sa.CheckConstraint("role IN ('admin', 'coordinator')", name='ck_profiles_role'),
    sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_profiles_organization_id'), 'profiles', ['organization_id'], unique=False)

    op.create_table('clients',
    *_scoped_columns(),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('email', sa.String(length=255), nullable=False),
    sa.Column('phone', sa.String(length=20), nullable=False),
    sa.Column('address', sa.String(length=500), nullable=False),
    sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_clients_organization_id'), 'clients', ['organization_id'], unique=False)
    op.create_index('uq_clients_email', 'clients', ['organization_id', 'email'], unique=True, postgresql_where=sa.text('deleted_at IS NULL'))

    op.create_table('work_locations',
    *_scoped_columns(),
    sa.Column('client_id', sa.UUID(), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('address', sa.String(length=500), nullable=False),
    sa.Column('email', sa.String(length=255), nullable=True),
    sa.Column('phone', sa.String(length=20), nullable=True),
    sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='RESTRICT'),
    sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_work_locations_organization_id'), 'work_locations', ['organization_id'], unique=False)
    op.create_index(op.f('ix_work_locations_client_id'), 'work_locations', ['client_id'], unique=False)

    op.create_table('positions',
    *_scoped_columns(),
    sa.Column('work_location_id', sa.UUID(), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
    sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['work_location_id'], ['work_locations.id'], ondelete='RESTRICT'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_positions_organization_id'), 'positions', ['organization_id'], unique=False)
    op.create_index(op.f('ix_positions_work_location_id'), 'positions', ['work_location_id'], unique=False)

    op.create_table('temporary_workers',
    *_scoped_columns(),
    sa.Column('first_name', sa.String(length=100), nullable=False),
    sa.Column('last_name', sa.String(length=100), nullable=False),
    sa.Column('phone', sa.String(length=20), nullable=False),
    sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_temporary_workers_organization_id'), 'temporary_workers', ['organization_id'], unique=False)
    op.create_index('uq_temporary_workers_phone', 'temporary_workers', ['organization_id', 'phone'], unique=True, postgresql_where=sa.text('deleted_at IS NULL'))

    op.create_table('assignments',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('organization_id', sa.UUID(), nullable=False),
    sa.Column('worker_id', sa.UUID(), nullable=False),
    sa.Column('position_id', sa.UUID(), nullable=False),
    sa.Column('start_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('end_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('created_by', sa.UUID(), nullable=False),
    sa.Column('ended_by', sa.UUID(), nullable=True),
    sa.Column('cancelled_by', sa.UUID(), nullable=True),
    *_timestamps(),
    sa.CheckConstraint("status IN ('scheduled', 'active', 'completed', 'cancelled')", name='ck_assignments_status'),
    sa.CheckConstraint('end_at IS NULL OR end_at > start_at', name='ck_assignments_date_range'),
    sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['worker_id'], ['temporary_workers.id'], ondelete='RESTRICT'),
    sa.ForeignKeyConstraint(['position_id'], ['positions.id'], ondelete='RESTRICT'),
    sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
    sa.ForeignKeyConstraint(['ended_by'], ['profiles.id']),
    sa.ForeignKeyConstraint(['cancelled_by'], ['profiles.id']),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_assignments_organization_id'), 'assignments', ['organization_id'], unique=False)
    op.create_index(op.f('ix_assignments_worker_id'), 'assignments', ['worker_id'], unique=False)
    op.create_index(op.f('ix_assignments_position_id'), 'assignments', ['position_id'], unique=False)
    op.create_index('idx_assignments_worker_time', 'assignments', ['worker_id', 'start_at'], unique=False)

    op.create_table('assignment_audit_log',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('organization_id', sa.UUID(), nullable=False),
    sa.Column('assignment_id', sa.UUID(), nullable=False),
    sa.Column('action', sa.String(length=30), nullable=False),
    sa.Column('old_values', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('new_values', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('performed_by', sa.UUID(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['assignment_id'], ['assignments.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['performed_by'], ['profiles.id']),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_assignment_audit_log_organization_id'), 'assignment_audit_log', ['organization_id'], unique=False)
    op.create_index(op.f('ix_assignment_audit_log_assignment_id'), 'assignment_audit_log', ['assignment_id'], unique=False)


def downgrade() -> None:
    op.drop_table('assignment_audit_log')
    op.drop_table('assignments')
    op.drop_table('temporary_workers')
    op.drop_table('positions')
    op.drop_table('work_locations')
    op.drop_table('clients')
    op.drop_table('profiles')
    op.drop_table('organizations')
