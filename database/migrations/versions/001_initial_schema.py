"""Create users and referral_events tables.

Revision ID: 001_initial
Revises:
Create Date: 2025-11-03 09:00:00.000000

Waitlist participants with referral counters and contest standing, plus the
append-only referral event log guarded by a unique idempotency key.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


participant_role = sa.Enum('client', 'influencer', 'beautypro', name='participant_role')
referral_event_type = sa.Enum('waitlist_signup', 'launch_validation', name='referral_event_type')
# Created with the users table, only referenced afterwards
existing_participant_role = postgresql.ENUM(
    'client', 'influencer', 'beautypro', name='participant_role', create_type=False
)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(254), nullable=False),
        sa.Column('phone', sa.String(16), nullable=True),
        sa.Column('first_name', sa.String(50), nullable=True),
        sa.Column('last_name', sa.String(50), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('role', participant_role, nullable=False),
        sa.Column('referral_code', sa.String(16), nullable=False),
        sa.Column('referred_by_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('phone_verified', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('skill_answer_correct', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('waitlist_clients', sa.Integer(), server_default='0', nullable=False),
        sa.Column('waitlist_influencers', sa.Integer(), server_default='0', nullable=False),
        sa.Column('waitlist_pros', sa.Integer(), server_default='0', nullable=False),
        sa.Column('app_downloads', sa.Integer(), server_default='0', nullable=False),
        sa.Column('validated_influencers', sa.Integer(), server_default='0', nullable=False),
        sa.Column('validated_pros', sa.Integer(), server_default='0', nullable=False),
        sa.Column('ref_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('last_ref_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('early_bird', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('early_bird_bonus', sa.Integer(), server_default='0', nullable=False),
        sa.Column('provisional_points', sa.Integer(), server_default='0', nullable=False),
        sa.Column('points', sa.Integer(), server_default='0', nullable=False),
        sa.Column('final_points', sa.Integer(), server_default='0', nullable=False),
        sa.Column('rank', sa.Integer(), server_default='0', nullable=False),
        sa.Column('next_milestone', sa.Integer(), server_default='10', nullable=False),
        sa.Column('eligible_for_jackpot', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('is_top_rank', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_referral_code', 'users', ['referral_code'], unique=True)
    op.create_unique_constraint('uq_users_phone', 'users', ['phone'])
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_referred_by_id', 'users', ['referred_by_id'])
    op.create_index('ix_users_early_bird', 'users', ['early_bird'])
    op.create_index('ix_users_leaderboard', 'users', ['provisional_points', 'ref_count', 'created_at'])

    op.create_table(
        'referral_events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('referrer_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('referred_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('event_type', referral_event_type, nullable=False),
        sa.Column('role', existing_participant_role, nullable=False),
        sa.Column('points_awarded', sa.Integer(), server_default='0', nullable=False),
        sa.Column('idempotency_key', sa.String(128), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('idempotency_key', name='uq_referral_events_idempotency_key'),
    )
    op.create_index('ix_referral_events_referrer_id', 'referral_events', ['referrer_id'])
    op.create_index('ix_referral_events_referred_user_id', 'referral_events', ['referred_user_id'])
    op.create_index('ix_referral_events_created_at', 'referral_events', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_referral_events_created_at', table_name='referral_events')
    op.drop_index('ix_referral_events_referred_user_id', table_name='referral_events')
    op.drop_index('ix_referral_events_referrer_id', table_name='referral_events')
    op.drop_table('referral_events')

    op.drop_index('ix_users_leaderboard', table_name='users')
    op.drop_index('ix_users_early_bird', table_name='users')
    op.drop_index('ix_users_referred_by_id', table_name='users')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_constraint('uq_users_phone', 'users', type_='unique')
    op.drop_index('ix_users_referral_code', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    referral_event_type.drop(op.get_bind(), checkfirst=True)
    participant_role.drop(op.get_bind(), checkfirst=True)
