# ruff: noqa: I001
"""Transactions table.

Revision ID: 0001_et_transactions
Revises: None
Create Date: 2025-10-04
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_et_transactions"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "et_transactions",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("note", sa.String(500), nullable=False, server_default=sa.text("''")),
    )

    # Filters hit date ranges, categories, and both together (monthly reports).
    op.create_index("ix_et_transactions_date", "et_transactions", ["date"])
    op.create_index("ix_et_transactions_category", "et_transactions", ["category"])
    op.create_index(
        "ix_et_transactions_date_category", "et_transactions", ["date", "category"]
    )


def downgrade() -> None:
    op.drop_index("ix_et_transactions_date_category", table_name="et_transactions")
    op.drop_index("ix_et_transactions_category", table_name="et_transactions")
    op.drop_index("ix_et_transactions_date", table_name="et_transactions")
    op.drop_table("et_transactions")
