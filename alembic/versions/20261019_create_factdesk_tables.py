"""Create claims, fact checkers, verdicts and audit tables

Revision ID: create_factdesk_tables
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'create_factdesk_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'claims',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('submitter_id', sa.String(64), nullable=False),
        sa.Column('video_url', sa.Text()),
        sa.Column('source_url', sa.Text()),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('is_trending', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('assigned_fact_checker_id', sa.String(36)),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('assigned_at', sa.DateTime(timezone=True)),
        sa.Column('verdict_at', sa.DateTime(timezone=True)),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        sa.Column('deleted_at', sa.DateTime(timezone=True)),
        sa.Column('version', sa.Integer(), nullable=False),
    )
    op.create_index('ix_claims_category', 'claims', ['category'])
    op.create_index('ix_claims_submitter_id', 'claims', ['submitter_id'])
    op.create_index('ix_claims_status', 'claims', ['status'])
    op.create_index('ix_claims_assigned_fact_checker_id', 'claims', ['assigned_fact_checker_id'])
    op.create_index('idx_claims_submitted_at', 'claims', ['submitted_at'])
    op.create_index('idx_claims_checker_status', 'claims', ['assigned_fact_checker_id', 'status'])

    op.create_table(
        'fact_checkers',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('expertise_areas', sa.JSON(), nullable=False),
        sa.Column('additional_info', sa.Text()),
        sa.Column('verification_status', sa.String(20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(timezone=True)),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_fact_checkers_user_id', 'fact_checkers', ['user_id'], unique=True)

    op.create_table(
        'verdicts',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('claim_id', sa.String(36), sa.ForeignKey('claims.id'), nullable=False),
        sa.Column('fact_checker_id', sa.String(36), sa.ForeignKey('fact_checkers.id'), nullable=False),
        sa.Column('outcome', sa.String(20), nullable=False),
        sa.Column('reasoning', sa.Text(), nullable=False),
        sa.Column('resolution_seconds', sa.Float()),
        sa.Column('is_current', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('superseded_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_verdicts_claim_id', 'verdicts', ['claim_id'])
    op.create_index('ix_verdicts_fact_checker_id', 'verdicts', ['fact_checker_id'])
    op.create_index('idx_verdicts_checker_created', 'verdicts', ['fact_checker_id', 'created_at'])
    op.create_index(
        'uq_verdicts_current_claim',
        'verdicts',
        ['claim_id'],
        unique=True,
        postgresql_where=sa.text('is_current'),
        sqlite_where=sa.text('is_current = 1'),
    )

    op.create_table(
        'fact_checker_activities',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('fact_checker_id', sa.String(36), nullable=False),
        sa.Column('claim_id', sa.String(36), nullable=False),
        sa.Column('verdict_id', sa.String(36)),
        sa.Column('action', sa.String(30), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_fact_checker_activities_claim_id', 'fact_checker_activities', ['claim_id'])
    op.create_index(
        'idx_activities_checker_timestamp',
        'fact_checker_activities',
        ['fact_checker_id', 'timestamp'],
    )

    op.create_table(
        'moderation_actions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('actor_id', sa.String(64), nullable=False),
        sa.Column('action', sa.String(30), nullable=False),
        sa.Column('claim_id', sa.String(36)),
        sa.Column('fact_checker_id', sa.String(36)),
        sa.Column('note', sa.Text()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_moderation_actions_actor_id', 'moderation_actions', ['actor_id'])
    op.create_index('ix_moderation_actions_claim_id', 'moderation_actions', ['claim_id'])


def downgrade():
    op.drop_table('moderation_actions')
    op.drop_table('fact_checker_activities')
    op.drop_index('uq_verdicts_current_claim', table_name='verdicts')
    op.drop_table('verdicts')
    op.drop_table('fact_checkers')
    op.drop_table('claims')
