"""Initial schema: accounts, catalogue and activity tables

Revision ID: b7e1c2d3f4a5
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'b7e1c2d3f4a5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('role', sa.Enum('ADMIN', 'MEMBER', name='userrole'), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('previous_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('paused', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('password_setup_token', sa.String(length=64), nullable=True),
        sa.Column('password_setup_expires', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_password_setup_token'), 'users', ['password_setup_token'], unique=True)

    op.create_table(
        'contents',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('thumbnail', sa.Text(), nullable=False),
        sa.Column('drive_link', sa.Text(), nullable=False),
        sa.Column('tipo', sa.String(length=100), nullable=True),
        sa.Column('estrutura', sa.String(length=255), nullable=True),
        sa.Column('idioma', sa.String(length=50), nullable=True),
        sa.Column('nicho', sa.String(length=100), nullable=True),
        sa.Column('trafego', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_contents_id'), 'contents', ['id'], unique=False)
    op.create_index(op.f('ix_contents_created_at'), 'contents', ['created_at'], unique=False)

    op.create_table(
        'criativos',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('oferta_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('drive_link', sa.Text(), nullable=False),
        sa.Column('nicho', sa.String(length=100), nullable=True),
        sa.Column('trafego', sa.String(length=100), nullable=True),
        sa.Column('idioma', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['oferta_id'], ['contents.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_criativos_id'), 'criativos', ['id'], unique=False)
    op.create_index(op.f('ix_criativos_oferta_id'), 'criativos', ['oferta_id'], unique=False)
    op.create_index(op.f('ix_criativos_created_at'), 'criativos', ['created_at'], unique=False)

    op.create_table(
        'landing_pages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('page_url', sa.Text(), nullable=False),
        sa.Column('association_type', sa.Enum('oferta', 'criativo', name='association_type'), nullable=True),
        sa.Column('oferta_id', sa.Integer(), nullable=True),
        sa.Column('criativo_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint(
            "(association_type IS NULL AND oferta_id IS NULL AND criativo_id IS NULL)"
            " OR (association_type = 'oferta' AND oferta_id IS NOT NULL AND criativo_id IS NULL)"
            " OR (association_type = 'criativo' AND criativo_id IS NOT NULL AND oferta_id IS NULL)",
            name='ck_landing_pages_association',
        ),
        sa.ForeignKeyConstraint(['oferta_id'], ['contents.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['criativo_id'], ['criativos.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_landing_pages_id'), 'landing_pages', ['id'], unique=False)
    op.create_index(op.f('ix_landing_pages_oferta_id'), 'landing_pages', ['oferta_id'], unique=False)
    op.create_index(op.f('ix_landing_pages_criativo_id'), 'landing_pages', ['criativo_id'], unique=False)
    op.create_index(op.f('ix_landing_pages_created_at'), 'landing_pages', ['created_at'], unique=False)

    op.create_table(
        'user_logins',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('logged_in_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_logins_id'), 'user_logins', ['id'], unique=False)
    op.create_index(op.f('ix_user_logins_user_id'), 'user_logins', ['user_id'], unique=False)
    op.create_index(op.f('ix_user_logins_logged_in_at'), 'user_logins', ['logged_in_at'], unique=False)

    op.create_table(
        'content_access',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('content_id', sa.Integer(), nullable=False),
        sa.Column('accessed_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['content_id'], ['contents.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_content_access_id'), 'content_access', ['id'], unique=False)
    op.create_index(op.f('ix_content_access_user_id'), 'content_access', ['user_id'], unique=False)
    op.create_index(op.f('ix_content_access_content_id'), 'content_access', ['content_id'], unique=False)


def downgrade() -> None:
    op.drop_table('content_access')
    op.drop_table('user_logins')
    op.drop_table('landing_pages')
    op.drop_table('criativos')
    op.drop_table('contents')
    op.drop_table('users')
    sa.Enum(name='association_type').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
