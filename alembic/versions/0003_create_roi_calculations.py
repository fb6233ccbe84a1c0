"""create roi_calculations

Revision ID: 0003_create_roi_calculations
Revises: 0002_create_contact_forms
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa

revision = "0003_create_roi_calculations"
down_revision = "0002_create_contact_forms"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "roi_calculations",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String, nullable=True),
        sa.Column("email", sa.String, index=True, nullable=True),
        sa.Column("phone", sa.String, nullable=True),
        sa.Column("hotel_name", sa.String, nullable=True),
        sa.Column("hotel_size", sa.Integer, nullable=True),
        # money columns: exact values, cast to float only when shown
        sa.Column("current_revenue", sa.Numeric(14, 2), nullable=True),
        sa.Column("calculated_roi", sa.Numeric(14, 2), nullable=True),
        sa.Column("monthly_savings", sa.Numeric(14, 2), nullable=True),
        sa.Column("annual_revenue", sa.Numeric(14, 2), nullable=True),
        sa.Column("data_processing_consent", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("marketing_consent", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade():
    op.drop_table("roi_calculations")
