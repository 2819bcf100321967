"""001_initial_schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

Creates the club portal tables: players, verification_codes, matches, results,
player_details, gallery and gallery_likes.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now())


def upgrade() -> None:
    op.create_table(
        'players',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=False, unique=True),
        sa.Column('phone', sa.String(), nullable=False, unique=True),
        sa.Column('email', sa.String(), nullable=True, unique=True),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('specialties', sa.JSON(), nullable=True),
        sa.Column('batting_style', sa.String(), nullable=True),
        sa.Column('bowling_style', sa.String(), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('profile_url', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False, server_default='player'),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('idx_players_phone', 'players', ['phone'])
    op.create_index('idx_players_username', 'players', ['username'])
    op.create_index('idx_players_status', 'players', ['status'])

    op.create_table(
        'verification_codes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('expires_at', sa.String(), nullable=False),
        _timestamp('created_at'),
    )
    op.create_index('idx_verification_codes_email', 'verification_codes', ['email'])
    op.create_index('idx_verification_codes_expires', 'verification_codes', ['expires_at'])

    op.create_table(
        'matches',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('opponent', sa.String(), nullable=False),
        sa.Column('opponent_logo', sa.String(), nullable=True),
        sa.Column('team1', sa.JSON(), nullable=False),
        sa.Column('team2', sa.JSON(), nullable=False),
        sa.Column('overs', sa.Integer(), nullable=True),
        sa.Column('venue', sa.String(), nullable=True),
        sa.Column('date', sa.String(), nullable=True),
        sa.Column('time', sa.String(), nullable=True),
        sa.Column('match_type', sa.String(), nullable=False, server_default='T20'),
        sa.Column('status', sa.String(), nullable=False, server_default='scheduled'),
        sa.Column('selected_players', sa.JSON(), nullable=True),
        sa.Column('result', sa.Text(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('idx_matches_status', 'matches', ['status'])

    op.create_table(
        'results',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'match_id',
            sa.Integer(),
            sa.ForeignKey('matches.id', ondelete='CASCADE'),
            nullable=False,
            unique=True,
        ),
        sa.Column('team1', sa.JSON(), nullable=False),
        sa.Column('team2', sa.JSON(), nullable=False),
        sa.Column('first_batting_team', sa.String(), nullable=False),
        sa.Column('winner', sa.String(), nullable=False),
        sa.Column('result', sa.Text(), nullable=False),
        _timestamp('created_at'),
    )

    op.create_table(
        'player_details',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(), nullable=False, unique=True),
        sa.Column('matches', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('runs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('wickets', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('average', sa.Float(), nullable=False, server_default='0'),
        sa.Column('strike_rate', sa.Float(), nullable=False, server_default='0'),
        sa.Column('best_batting', sa.String(), nullable=False, server_default='0 (0)'),
        sa.Column('economy', sa.Float(), nullable=False, server_default='0'),
        sa.Column('best_bowling', sa.String(), nullable=False, server_default='0/0'),
        sa.Column('half_centuries', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('centuries', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('thirties', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('three_wickets', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('five_wickets', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('maidens', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('recent_performance', sa.JSON(), nullable=True),
        _timestamp('updated_at'),
    )

    op.create_table(
        'gallery',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('image', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('title', sa.String(), nullable=False, server_default='Untitled'),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        _timestamp('created_at'),
        sa.UniqueConstraint('username', 'image', name='uq_gallery_username_image'),
    )
    op.create_index('idx_gallery_created', 'gallery', ['created_at'])

    op.create_table(
        'gallery_likes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'gallery_id',
            sa.Integer(),
            sa.ForeignKey('gallery.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('account_id', sa.Integer(), nullable=False),
        _timestamp('created_at'),
        sa.UniqueConstraint('gallery_id', 'account_id', name='uq_gallery_likes_item_account'),
    )


def downgrade() -> None:
    op.drop_table('gallery_likes')
    op.drop_index('idx_gallery_created', table_name='gallery')
    op.drop_table('gallery')
    op.drop_table('player_details')
    op.drop_table('results')
    op.drop_index('idx_matches_status', table_name='matches')
    op.drop_table('matches')
    op.drop_index('idx_verification_codes_expires', table_name='verification_codes')
    op.drop_index('idx_verification_codes_email', table_name='verification_codes')
    op.drop_table('verification_codes')
    op.drop_index('idx_players_status', table_name='players')
    op.drop_index('idx_players_username', table_name='players')
    op.drop_index('idx_players_phone', table_name='players')
    op.drop_table('players')
