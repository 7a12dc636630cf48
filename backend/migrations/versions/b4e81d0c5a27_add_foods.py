"""add foods

Revision ID: b4e81d0c5a27
Revises: 7f3b1c2d9a10
Create Date: 2026-10-20 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = 'b4e81d0c5a27'
down_revision = '7f3b1c2d9a10'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'foods',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], name='fk_foods_category_id_categories', ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], name='fk_foods_tenant_id_tenants', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_foods'),
        sa.UniqueConstraint('tenant_id', 'name', name='uq_foods_tenant_id_name'),
    )
    op.create_index('ix_foods_tenant_id', 'foods', ['tenant_id'])
    op.create_index('ix_foods_category_id', 'foods', ['category_id'])


def downgrade():
    op.drop_index('ix_foods_category_id', table_name='foods')
    op.drop_index('ix_foods_tenant_id', table_name='foods')
    op.drop_table('foods')
