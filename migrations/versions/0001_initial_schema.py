"""Initial schema: profiles, team problem submissions, applications, notifications

Revision ID: hackhub_0001
Revises:
Create Date: 2025-05-20

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'hackhub_0001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def upgrade():
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=11), nullable=False, server_default='participant'),
        sa.Column('team_id', sa.String(length=36), nullable=True),
        sa.Column('selected_problem', sa.String(length=64), nullable=True),
        sa.Column('problem_selected_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('problem_submission_locked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)
    op.create_index('ix_profiles_team_id', 'profiles', ['team_id'])

    op.create_table(
        'team_problem_submissions',
        sa.Column('id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.Column('team_id', sa.String(length=36), nullable=False),
        sa.Column('selected_problem', sa.String(length=64), nullable=False),
        sa.Column('submitted_by', sa.String(length=36), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['submitted_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('team_id', name='uq_team_problem_submissions_team_id'),
    )

    op.create_table(
        'applications',
        sa.Column('id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('url', sa.String(length=1000), nullable=False),
        sa.Column('screenshot_url', sa.String(length=1000), nullable=False),
        sa.Column('video_url', sa.String(length=1000), nullable=True),
        sa.Column('github_url', sa.String(length=1000), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('creator_id', sa.String(length=36), nullable=False),
        sa.Column('team_id', sa.String(length=36), nullable=True),
        sa.Column('status', sa.String(length=12), nullable=False, server_default='pending'),
        sa.Column('problem_type', sa.String(length=13), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('comments_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('review_requested_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['creator_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('team_id', name='uq_applications_team_id'),
    )
    op.create_index('ix_applications_creator_id', 'applications', ['creator_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('application_id', sa.String(length=36), nullable=True),
        sa.Column('action_user_id', sa.String(length=36), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['application_id'], ['applications.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['action_user_id'], ['profiles.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade():
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_applications_creator_id', table_name='applications')
    op.drop_table('applications')
    op.drop_table('team_problem_submissions')
    op.drop_index('ix_profiles_team_id', table_name='profiles')
    op.drop_index('ix_profiles_email', table_name='profiles')
    op.drop_table('profiles')
