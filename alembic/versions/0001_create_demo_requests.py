from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_create_demo_requests'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'demo_requests',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String, nullable=True),
        sa.Column('email', sa.String, index=True, nullable=True),
        sa.Column('phone', sa.String, nullable=True),
        sa.Column('hotel_name', sa.String, nullable=True),
        sa.Column('position', sa.String, nullable=True),
        sa.Column('message', sa.Text, nullable=True),
        sa.Column('form_type', sa.String, nullable=True),
        sa.Column('data_processing_consent', sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column('marketing_consent', sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade():
    op.drop_table('demo_requests')
