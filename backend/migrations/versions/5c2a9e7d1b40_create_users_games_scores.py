"""create users, games and scores tables

Revision ID: 5c2a9e7d1b40
Revises:
Create Date: 2025-03-14 10:20:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e7d1b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'users' not in existing_tables:
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('password_hash', sa.String(length=256), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=True),
            sa.Column('role', sa.String(length=16), nullable=False, server_default='user'),
            sa.Column('games_played', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('photo_url', sa.String(length=512), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_users_username', 'users', ['username'], unique=True)

    if 'games' not in existing_tables:
        op.create_table(
            'games',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('type', sa.String(length=32), nullable=False),
            sa.Column('name', sa.String(length=64), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_games_type', 'games', ['type'], unique=True)

    if 'scores' not in existing_tables:
        op.create_table(
            'scores',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('game_id', sa.Integer(), sa.ForeignKey('games.id'), nullable=False),
            sa.Column('value', sa.Float(), nullable=False),
            sa.Column('accuracy', sa.Float(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_scores_user_id', 'scores', ['user_id'])
        op.create_index('ix_scores_game_id', 'scores', ['game_id'])


def downgrade():
    op.drop_index('ix_scores_game_id', table_name='scores')
    op.drop_index('ix_scores_user_id', table_name='scores')
    op.drop_table('scores')
    op.drop_index('ix_games_type', table_name='games')
    op.drop_table('games')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
