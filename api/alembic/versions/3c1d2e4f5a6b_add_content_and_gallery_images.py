"""add content and gallery_images tables

Revision ID: 3c1d2e4f5a6b
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '3c1d2e4f5a6b'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'content',
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('locale', sa.String(length=16), nullable=False),
        sa.Column('section', sa.String(), nullable=False),
        sa.Column('data', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('version', sa.Integer(), server_default='1', nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('locale', 'section', name='uq_content_locale_section'),
        sa.CheckConstraint("locale IN ('en', 'ar')", name='ck_content_locale'),
    )
    op.create_index(op.f('ix_content_locale'), 'content', ['locale'], unique=False)
    op.create_index(op.f('ix_content_section'), 'content', ['section'], unique=False)

    op.create_table(
        'gallery_images',
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('case_id', sa.Integer(), nullable=False),
        sa.Column('image_type', sa.String(length=16), nullable=False),
        sa.Column('image_number', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('locale', sa.String(length=16), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('case_id', 'image_type', 'image_number', 'locale', name='uq_gallery_image_slot_locale'),
        sa.CheckConstraint("image_type IN ('before', 'after')", name='ck_gallery_images_image_type'),
        sa.CheckConstraint('image_number >= 1', name='ck_gallery_images_image_number'),
        sa.CheckConstraint("locale IN ('en', 'ar')", name='ck_gallery_images_locale'),
    )
    op.create_index(op.f('ix_gallery_images_case_id'), 'gallery_images', ['case_id'], unique=False)
    op.create_index(op.f('ix_gallery_images_locale'), 'gallery_images', ['locale'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_gallery_images_locale'), table_name='gallery_images')
    op.drop_index(op.f('ix_gallery_images_case_id'), table_name='gallery_images')
    op.drop_table('gallery_images')
    op.drop_index(op.f('ix_content_section'), table_name='content')
    op.drop_index(op.f('ix_content_locale'), table_name='content')
    op.drop_table('content')
