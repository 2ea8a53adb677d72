"""Add operating hours and table reservation time

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 14:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0002'
down_revision = '0001'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'operating_hours',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('open_time', sa.Time(), nullable=False),
        sa.Column('close_time', sa.Time(), nullable=False),
        sa.Column('last_seating_time', sa.Time(), nullable=False),
        sa.Column('is_closed', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False,
                  server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False,
                  server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id'],
                                ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('restaurant_id', 'day_of_week',
                            name='uix_operating_hours_restaurant_day'),
        sa.CheckConstraint('day_of_week >= 0 AND day_of_week <= 6',
                           name='chk_operating_hours_day')
    )

    op.add_column('tables',
                  sa.Column('reservation_time', sa.DateTime(), nullable=True))


def downgrade():
    with op.batch_alter_table('tables') as batch_op:
        batch_op.drop_column('reservation_time')
    op.drop_table('operating_hours')
