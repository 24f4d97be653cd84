"""Create contact_submissions and ticket_messages tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'contact_submissions',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('organization', sa.Text(), nullable=True),
        sa.Column('subject', sa.Text(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(32), nullable=False, server_default='new'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "status IN ('new', 'in_progress', 'resolved')",
            name='ck_contact_submissions_status'
        )
    )
    op.create_index('ix_contact_submissions_email', 'contact_submissions', ['email'])
    op.create_index('idx_contact_submissions_status', 'contact_submissions', ['status'])

    op.create_table(
        'ticket_messages',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('ticket_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('sender_type', sa.String(16), nullable=False),
        sa.Column('sender_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('sender_name', sa.Text(), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['ticket_id'], ['contact_submissions.id'], ondelete='CASCADE'),
        sa.CheckConstraint("sender_type IN ('user', 'admin')", name='ck_ticket_messages_sender_type'),
        sa.CheckConstraint("length(btrim(message)) > 0", name='ck_ticket_messages_message_not_blank')
    )
    op.create_index(
        'idx_ticket_messages_ticket_created',
        'ticket_messages',
        ['ticket_id', 'created_at']
    )


def downgrade():
    op.drop_index('idx_ticket_messages_ticket_created', table_name='ticket_messages')
    op.drop_table('ticket_messages')
    op.drop_index('idx_contact_submissions_status', table_name='contact_submissions')
    op.drop_index('ix_contact_submissions_email', table_name='contact_submissions')
    op.drop_table('contact_submissions')
