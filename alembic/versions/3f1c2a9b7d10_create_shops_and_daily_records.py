"""Create shops and daily_records tables

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2025-10-02 09:12:40.513207

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "3f1c2a9b7d10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "shops",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("email", sa.String, nullable=False, unique=True),
        sa.Column("password_hash", sa.String, nullable=False),
        sa.Column("role", sa.String, nullable=False, server_default="SHOP"),
        sa.Column("timer", sa.String, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "daily_records",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column(
            "shop_id",
            sa.Integer,
            sa.ForeignKey("shops.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("record_date", sa.Date, nullable=False),
        sa.Column("revenue_main_with_margin", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("revenue_main_without_margin", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("revenue_order_with_margin", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("revenue_order_without_margin", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("main_stock_value", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("order_stock_value", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
        sa.UniqueConstraint("shop_id", "record_date", name="uq_daily_records_shop_date"),
    )

    op.create_index(
        "ix_daily_records_record_date", "daily_records", ["record_date"]
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_daily_records_record_date", "daily_records")

    op.drop_table("daily_records")
    op.drop_table("shops")
