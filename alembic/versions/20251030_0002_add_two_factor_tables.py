"""add two factor tables

Revision ID: 20251030_0002
Revises: 20251026_0001
Create Date: 2025-10-30 14:17:53.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20251030_0002'
down_revision: Union[str, Sequence[str], None] = '20251026_0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Add two_factor_codes (one-time codes) and failed_login_attempts (rate-limit ledger).
    """
    op.create_table(
        'two_factor_codes',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('code', sa.String(length=6), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('used', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('idx_two_factor_codes_user_id', 'two_factor_codes', ['user_id'])
    op.create_index('idx_two_factor_codes_expires_at', 'two_factor_codes', ['expires_at'])

    op.create_table(
        'failed_login_attempts',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('identifier', sa.String(), nullable=False),
        sa.Column('attempt_type', sa.Enum('VERIFY_FAILED', 'CODE_REQUEST', name='attempttype'), nullable=False),
        sa.Column('attempt_time', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_failed_login_attempts_identifier', 'failed_login_attempts', ['identifier'])
    op.create_index('idx_failed_login_attempts_time', 'failed_login_attempts', ['attempt_time'])


def downgrade() -> None:
    op.drop_index('idx_failed_login_attempts_time', table_name='failed_login_attempts')
    op.drop_index('idx_failed_login_attempts_identifier', table_name='failed_login_attempts')
    op.drop_table('failed_login_attempts')
    sa.Enum(name='attempttype').drop(op.get_bind(), checkfirst=True)

    op.drop_index('idx_two_factor_codes_expires_at', table_name='two_factor_codes')
    op.drop_index('idx_two_factor_codes_user_id', table_name='two_factor_codes')
    op.drop_table('two_factor_codes')
