"""Create events, event tags and bookings

Revision ID: 4c1d2e7a9b30
Revises: 
Create Date: 2026-10-19 10:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4c1d2e7a9b30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'events',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('slug', sa.Text, nullable=False, unique=True),
        sa.Column('title', sa.Text, nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('overview', sa.Text, nullable=False),
        sa.Column('image', sa.Text, nullable=False),
        sa.Column('venue', sa.Text, nullable=False),
        sa.Column('location', sa.Text, nullable=False),
        sa.Column('date', sa.String(10), nullable=False),
        sa.Column('time', sa.String(5), nullable=False),
        sa.Column('mode', sa.Text, nullable=False),
        sa.Column('audience', sa.Text, nullable=False),
        sa.Column('organizer', sa.Text, nullable=False),
        sa.Column('agenda', sa.JSON, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_event_date', 'events', ['date'])
    op.create_index('idx_event_mode', 'events', ['mode'])
    op.create_index('idx_event_location', 'events', ['location'])
    op.create_index('idx_event_created_at', 'events', ['created_at'])

    op.create_table(
        'event_tags',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('event_id', sa.Uuid(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer, nullable=False, server_default='0'),
        sa.Column('value', sa.Text, nullable=False),
    )
    op.create_index('idx_event_tag_event', 'event_tags', ['event_id'])
    op.create_index('idx_event_tag_value', 'event_tags', ['value'])

    # No foreign key to events: bookings keep a weak reference
    op.create_table(
        'bookings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('event_id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_booking_event', 'bookings', ['event_id'])
    op.create_index('idx_booking_created_at', 'bookings', ['created_at'])


def downgrade() -> None:
    op.drop_table('bookings')
    op.drop_table('event_tags')
    op.drop_table('events')
