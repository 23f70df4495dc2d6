"""Create department, app_user and case_file tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Directory tables owned by user and case management. The document workflow
reads them but never writes them.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create directory tables."""

    # head_id is a plain column: app_user.department_id already points here
    op.create_table(
        'department',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(191), nullable=False),
        sa.Column('name_key', sa.String(191), nullable=False),
        sa.Column('head_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='uq_department_name'),
        sa.UniqueConstraint('name_key', name='uq_department_name_key'),
    )

    op.create_table(
        'app_user',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(191), nullable=False),
        sa.Column('email', sa.String(191), nullable=False),
        sa.Column('role', sa.String(32), nullable=False),
        sa.Column('department_id', sa.Uuid(), nullable=True),
        sa.Column('status', sa.Text(), server_default='ACTIVE', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['department_id'], ['department.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('email', name='uq_app_user_email'),
        sa.CheckConstraint(
            "role IN ('ADMIN', 'CEO', 'CFO', 'PROCUREMENT', 'ACCOUNTANT', 'AUDITOR', 'IT', 'INVESTOR')",
            name='ck_app_user_role',
        ),
        sa.CheckConstraint("status IN ('ACTIVE', 'DISABLED')", name='ck_app_user_status'),
    )
    op.create_index('idx_app_user_role', 'app_user', ['role'])
    op.create_index('idx_app_user_department', 'app_user', ['department_id'])

    op.create_table(
        'case_file',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(191), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(32), server_default='OPEN', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade():
    """Drop directory tables."""
    op.drop_table('case_file')
    op.drop_index('idx_app_user_department', table_name='app_user')
    op.drop_index('idx_app_user_role', table_name='app_user')
    op.drop_table('app_user')
    op.drop_table('department')
