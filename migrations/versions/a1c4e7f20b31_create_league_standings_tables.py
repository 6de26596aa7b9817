"""Create league, standings, qualification and activity log tables

Revision ID: a1c4e7f20b31
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

revision = 'a1c4e7f20b31'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'leagues',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'seasons',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('league_id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['league_id'], ['leagues.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'series',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('season_id', sa.String(length=32), nullable=False),
        sa.Column('league_id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['league_id'], ['leagues.id']),
        sa.ForeignKeyConstraint(['season_id'], ['seasons.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'players',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=200), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('join_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'tournaments',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('series_id', sa.String(length=32), nullable=True),
        sa.Column('season_id', sa.String(length=32), nullable=False),
        sa.Column('league_id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('game_type', sa.String(length=20), nullable=True),
        sa.Column('event_type', sa.String(length=20), nullable=True),
        sa.Column('total_players', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('submission_id', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['league_id'], ['leagues.id']),
        sa.ForeignKeyConstraint(['season_id'], ['seasons.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['series_id'], ['series.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('submission_id'),
    )
    op.create_index('ix_tournaments_season_event_type', 'tournaments', ['season_id', 'event_type'])
    op.create_table(
        'tournament_players',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('tournament_id', sa.String(length=32), nullable=False),
        sa.Column('player_id', sa.String(length=32), nullable=False),
        sa.Column('final_position', sa.Integer(), nullable=True),
        sa.Column('points', sa.Integer(), nullable=True),
        sa.Column('bounty_count', sa.Integer(), nullable=True),
        sa.Column('bounty_points', sa.Integer(), nullable=True),
        sa.Column('consolation_points', sa.Integer(), nullable=True),
        sa.Column('payout', sa.Integer(), nullable=True),
        sa.Column('starting_chips', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['player_id'], ['players.id']),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournaments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tournament_id', 'player_id', name='uq_tournament_player'),
    )
    op.create_index('ix_tournament_players_player', 'tournament_players', ['player_id'])
    op.create_table(
        'scoreboards',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('series_id', sa.String(length=32), nullable=False),
        sa.Column('season_id', sa.String(length=32), nullable=False),
        sa.Column('league_id', sa.String(length=32), nullable=False),
        sa.Column('player_id', sa.String(length=32), nullable=False),
        sa.Column('total_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('tournament_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('position_sum', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('best_finish', sa.Integer(), nullable=True),
        sa.Column('average_finish', sa.Integer(), nullable=True),
        sa.Column('win_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('top_three_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_updated', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['league_id'], ['leagues.id']),
        sa.ForeignKeyConstraint(['player_id'], ['players.id']),
        sa.ForeignKeyConstraint(['season_id'], ['seasons.id']),
        sa.ForeignKeyConstraint(['series_id'], ['series.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('series_id', 'player_id', name='uq_scoreboard_series_player'),
    )
    op.create_index('ix_scoreboards_season', 'scoreboards', ['season_id'])
    op.create_index('ix_scoreboards_player', 'scoreboards', ['player_id'])
    op.create_table(
        'qualifications',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('season_id', sa.String(length=32), nullable=False),
        sa.Column('league_id', sa.String(length=32), nullable=False),
        sa.Column('player_id', sa.String(length=32), nullable=False),
        sa.Column('tournament_id', sa.String(length=32), nullable=False),
        sa.Column('qualification_type', sa.String(length=20), nullable=False),
        sa.Column('qualification_date', sa.DateTime(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.ForeignKeyConstraint(['league_id'], ['leagues.id']),
        sa.ForeignKeyConstraint(['player_id'], ['players.id']),
        sa.ForeignKeyConstraint(['season_id'], ['seasons.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournaments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_qualifications_season_active', 'qualifications', ['season_id', 'is_active'])
    op.create_table(
        'activity_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('action', sa.String(length=80), nullable=False),
        sa.Column('entity_type', sa.String(length=80), nullable=False),
        sa.Column('entity_id', sa.String(length=32), nullable=True),
        sa.Column('details_json', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_activity_logs_created_at', 'activity_logs', ['created_at'])
    op.create_index('ix_activity_logs_action', 'activity_logs', ['action'])
    op.create_index('ix_activity_logs_entity', 'activity_logs', ['entity_type', 'entity_id'])


def downgrade():
    op.drop_index('ix_activity_logs_entity', table_name='activity_logs')
    op.drop_index('ix_activity_logs_action', table_name='activity_logs')
    op.drop_index('ix_activity_logs_created_at', table_name='activity_logs')
    op.drop_table('activity_logs')
    op.drop_index('ix_qualifications_season_active', table_name='qualifications')
    op.drop_table('qualifications')
    op.drop_index('ix_scoreboards_player', table_name='scoreboards')
    op.drop_index('ix_scoreboards_season', table_name='scoreboards')
    op.drop_table('scoreboards')
    op.drop_index('ix_tournament_players_player', table_name='tournament_players')
    op.drop_table('tournament_players')
    op.drop_index('ix_tournaments_season_event_type', table_name='tournaments')
    op.drop_table('tournaments')
    op.drop_table('players')
    op.drop_table('series')
    op.drop_table('seasons')
    op.drop_table('leagues')
