"""Create document and document_status_history tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 00:00:00.000000

Status and type are stored as VARCHAR with CHECK constraints so the same
schema works on PostgreSQL and SQLite.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None

DOCUMENT_STATUSES = ('DRAFT', 'SUBMITTED', 'UNDER_REVIEW', 'APPROVED', 'REJECTED', 'WITHDRAWN')
DOCUMENT_TYPES = (
    'FINANCIAL_REPORT',
    'PROCUREMENT_BID',
    'LEGAL_DOCUMENT',
    'AUDIT_REPORT',
    'INVESTMENT_REPORT',
    'GENERAL',
)


def _in_list(column, values):
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


def upgrade():
    """Create document tables with the unique receipt index."""

    op.create_table(
        'document',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(191), nullable=False),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),

        # Stored content
        sa.Column('file_path', sa.String(512), nullable=False),
        sa.Column('file_size', sa.BigInteger(), nullable=False),
        sa.Column('original_filename', sa.String(255), nullable=False),

        # Ownership
        sa.Column('case_id', sa.Uuid(), nullable=False),
        sa.Column('uploaded_by_id', sa.Uuid(), nullable=False),

        # Review outcome
        sa.Column('approved_by_id', sa.Uuid(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),

        sa.Column('receipt_number', sa.String(191), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),

        # Optimistic lock counter
        sa.Column('version', sa.Integer(), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['case_id'], ['case_file.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['uploaded_by_id'], ['app_user.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['approved_by_id'], ['app_user.id'], ondelete='SET NULL'),
        sa.CheckConstraint(_in_list('status', DOCUMENT_STATUSES), name='ck_document_status'),
        sa.CheckConstraint(_in_list('type', DOCUMENT_TYPES), name='ck_document_type'),
        sa.CheckConstraint('file_size >= 0', name='ck_document_file_size'),
    )

    op.create_index('uq_document_receipt_number', 'document', ['receipt_number'], unique=True)
    op.create_index('idx_document_case', 'document', ['case_id'])
    op.create_index('idx_document_status', 'document', ['status'])
    op.create_index('idx_document_uploaded_by', 'document', ['uploaded_by_id'])
    op.create_index('idx_document_uploaded_at', 'document', ['uploaded_at'])

    # Append-only audit trail, removed only with its document
    op.create_table(
        'document_status_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('document_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['document_id'], ['document.id'], ondelete='CASCADE'),
        sa.CheckConstraint(_in_list('status', DOCUMENT_STATUSES), name='ck_document_status_history_status'),
    )
    op.create_index(
        'idx_document_history_document_changed',
        'document_status_history',
        ['document_id', 'changed_at', 'id'],
    )


def downgrade():
    """Drop document tables."""
    op.drop_index('idx_document_history_document_changed', table_name='document_status_history')
    op.drop_table('document_status_history')

    op.drop_index('idx_document_uploaded_at', table_name='document')
    op.drop_index('idx_document_uploaded_by', table_name='document')
    op.drop_index('idx_document_status', table_name='document')
    op.drop_index('idx_document_case', table_name='document')
    op.drop_index('uq_document_receipt_number', table_name='document')
    op.drop_table('document')
