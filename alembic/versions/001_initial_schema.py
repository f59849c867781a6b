"""Initial schema — officers, customers, assignment history.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Officers
    op.create_table(
        "officers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), unique=True, nullable=False),
        sa.Column("specialization", sa.String(50), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("max_caseload", sa.Integer, nullable=False, server_default="50"),
        sa.Column("priority_weight", sa.Float, nullable=False, server_default="1.0"),
        sa.Column("external_load", sa.Integer, nullable=False, server_default="0"),
        sa.Column("roster", ARRAY(sa.Integer), nullable=False, server_default="{}"),
        sa.CheckConstraint("max_caseload >= 0", name="ck_officers_max_caseload"),
        sa.CheckConstraint("priority_weight > 0", name="ck_officers_priority_weight"),
        sa.CheckConstraint("external_load >= 0", name="ck_officers_external_load"),
    )
    op.create_index(
        "idx_officers_specialization", "officers", ["specialization", "is_active"]
    )

    # Customers
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("account_number", sa.String(50), unique=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("product_type", sa.String(50), nullable=False),
        sa.Column("outstanding_balance", sa.Float, nullable=False, server_default="0"),
        sa.Column("overdue_amount", sa.Float, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "owner_id", sa.Integer, sa.ForeignKey("officers.id"), nullable=True
        ),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_customers_product_type", "customers", ["product_type"])
    op.create_index("idx_customers_owner", "customers", ["owner_id"])
    op.create_index(
        "idx_customers_priority", "customers", ["overdue_amount", "outstanding_balance"]
    )

    # Assignment history (append-only)
    op.create_table(
        "assignment_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "customer_id",
            sa.Integer,
            sa.ForeignKey("customers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "officer_id", sa.Integer, sa.ForeignKey("officers.id"), nullable=False
        ),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("assigned_by", sa.String(100), nullable=True),
        sa.Column("reason", sa.Text, nullable=False),
    )
    op.create_index("idx_history_customer", "assignment_history", ["customer_id"])
    op.create_index("idx_history_officer", "assignment_history", ["officer_id"])


def downgrade() -> None:
    op.drop_table("assignment_history")
    op.drop_table("customers")
    op.drop_table("officers")
