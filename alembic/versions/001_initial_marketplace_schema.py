"""Initial marketplace schema

Revision ID: 001_initial_marketplace_schema
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial_marketplace_schema'
down_revision = None
branch_labels = None
depends_on = None


def _id() -> sa.Column:
    return sa.Column('id', sa.String(length=36), nullable=False)


def _fk(name: str, target: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.String(length=36),
        sa.ForeignKey(f'{target}.id', ondelete='CASCADE'),
        nullable=nullable,
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create users, profiles, jobs, applications and messaging tables."""
    op.create_table(
        'users',
        _id(),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('image', sa.String(length=1024), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'skills',
        _id(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_skills_name', 'skills', ['name'], unique=True)

    op.create_table(
        'companies',
        _id(),
        _fk('user_id', 'users'),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('website', sa.String(length=1024), nullable=True),
        sa.Column('industry', sa.String(length=255), nullable=True),
        sa.Column('size', sa.String(length=50), nullable=True),
        sa.Column('logo_url', sa.String(length=1024), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'job_seekers',
        _id(),
        _fk('user_id', 'users'),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('website', sa.String(length=1024), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('resume_url', sa.String(length=1024), nullable=True),
        sa.Column('salary_min', sa.Integer(), nullable=True),
        sa.Column('salary_max', sa.Integer(), nullable=True),
        sa.Column('experience_level', sa.String(length=20), nullable=True),
        sa.Column('availability', sa.String(length=30), nullable=False),
        sa.Column('notice_period', sa.String(length=100), nullable=True),
        sa.Column('remote_preference', sa.String(length=20), nullable=True),
        sa.Column('profile_visibility', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )
    op.create_index('idx_job_seeker_search', 'job_seekers', ['profile_visibility', 'availability'])
    op.create_index('idx_job_seeker_updated_at', 'job_seekers', ['updated_at'])

    op.create_table(
        'job_seeker_skills',
        _id(),
        _fk('job_seeker_id', 'job_seekers'),
        _fk('skill_id', 'skills'),
        sa.Column('level', sa.String(length=20), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_seeker_id', 'skill_id', name='uq_job_seeker_skill'),
    )
    op.create_index('ix_job_seeker_skills_job_seeker_id', 'job_seeker_skills', ['job_seeker_id'])

    op.create_table(
        'experiences',
        _id(),
        _fk('job_seeker_id', 'job_seekers'),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('company', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('current', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_experiences_job_seeker_id', 'experiences', ['job_seeker_id'])

    op.create_table(
        'educations',
        _id(),
        _fk('job_seeker_id', 'job_seekers'),
        sa.Column('institution', sa.String(length=255), nullable=False),
        sa.Column('degree', sa.String(length=255), nullable=False),
        sa.Column('field', sa.String(length=255), nullable=True),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('current', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_educations_job_seeker_id', 'educations', ['job_seeker_id'])

    op.create_table(
        'jobs',
        _id(),
        _fk('company_id', 'companies'),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('department', sa.String(length=255), nullable=True),
        sa.Column('employment_type', sa.String(length=20), nullable=True),
        sa.Column('remote_type', sa.String(length=20), nullable=True),
        sa.Column('experience_level', sa.String(length=20), nullable=True),
        sa.Column('salary_min', sa.Integer(), nullable=True),
        sa.Column('salary_max', sa.Integer(), nullable=True),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('benefits', sa.Text(), nullable=True),
        sa.Column('application_deadline', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_jobs_company_id', 'jobs', ['company_id'])
    op.create_index('idx_job_status_created', 'jobs', ['status', 'created_at'])
    op.create_index('idx_job_status_deadline', 'jobs', ['status', 'application_deadline'])

    op.create_table(
        'job_skills',
        _id(),
        _fk('job_id', 'jobs'),
        _fk('skill_id', 'skills'),
        sa.Column('level', sa.String(length=20), nullable=True),
        sa.Column('required', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_id', 'skill_id', name='uq_job_skill'),
    )
    op.create_index('ix_job_skills_job_id', 'job_skills', ['job_id'])

    op.create_table(
        'applications',
        _id(),
        _fk('job_seeker_id', 'job_seekers'),
        _fk('job_id', 'jobs', nullable=True),
        _fk('company_id', 'companies'),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('cover_letter', sa.Text(), nullable=True),
        sa.Column('resume_url', sa.String(length=1024), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_seeker_id', 'job_id', name='uq_application_job_seeker_job'),
    )
    op.create_index('ix_applications_job_seeker_id', 'applications', ['job_seeker_id'])
    op.create_index('ix_applications_job_id', 'applications', ['job_id'])
    op.create_index('ix_applications_company_id', 'applications', ['company_id'])
    op.create_index('idx_application_company_created', 'applications', ['company_id', 'created_at'])

    op.create_table(
        'job_invitations',
        _id(),
        _fk('company_id', 'companies'),
        _fk('job_id', 'jobs'),
        _fk('job_seeker_id', 'job_seekers'),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_seeker_id', 'job_id', name='uq_invitation_job_seeker_job'),
    )
    op.create_index('ix_job_invitations_company_id', 'job_invitations', ['company_id'])
    op.create_index('ix_job_invitations_job_seeker_id', 'job_invitations', ['job_seeker_id'])

    op.create_table(
        'interviews',
        _id(),
        _fk('company_id', 'companies'),
        _fk('job_seeker_id', 'job_seekers'),
        _fk('application_id', 'applications'),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('meeting_url', sa.String(length=1024), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_interviews_company_id', 'interviews', ['company_id'])
    op.create_index('ix_interviews_job_seeker_id', 'interviews', ['job_seeker_id'])
    op.create_index('idx_interview_company_scheduled', 'interviews', ['company_id', 'scheduled_at'])

    op.create_table(
        'messages',
        _id(),
        _fk('sender_id', 'users'),
        _fk('receiver_id', 'users'),
        _fk('application_id', 'applications'),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_message_application_created', 'messages', ['application_id', 'created_at'])
    op.create_index('idx_message_receiver_read', 'messages', ['receiver_id', 'read'])

    op.create_table(
        'notifications',
        _id(),
        _fk('user_id', 'users'),
        sa.Column('type', sa.String(length=40), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('link', sa.String(length=1024), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_notification_user_read', 'notifications', ['user_id', 'read'])


def downgrade() -> None:
    """Drop every marketplace table, children first."""
    for table in (
        'notifications',
        'messages',
        'interviews',
        'job_invitations',
        'applications',
        'job_skills',
        'jobs',
        'educations',
        'experiences',
        'job_seeker_skills',
        'job_seekers',
        'companies',
        'skills',
        'users',
    ):
        op.drop_table(table)
