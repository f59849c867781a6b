"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from caseflow.adapters.persistence.database import Base


class OfficerModel(Base):
    __tablename__ = "officers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    specialization: Mapped[str] = mapped_column(String(50), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    max_caseload: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    priority_weight: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    external_load: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Denormalized copy of customers.owner_id; audited, not authoritative
    roster: Mapped[list[int]] = mapped_column(ARRAY(Integer), nullable=False, default=list)

    customers: Mapped[list["CustomerModel"]] = relationship(back_populates="owner")

    __table_args__ = (
        Index("idx_officers_specialization", "specialization", "is_active"),
    )


class CustomerModel(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    product_type: Mapped[str] = mapped_column(String(50), nullable=False)
    outstanding_balance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    overdue_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    owner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("officers.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    owner: Mapped["OfficerModel | None"] = relationship(back_populates="customers")
    history: Mapped[list["AssignmentHistoryModel"]] = relationship(
        back_populates="customer",
        order_by="AssignmentHistoryModel.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_customers_product_type", "product_type"),
        Index("idx_customers_owner", "owner_id"),
        Index("idx_customers_priority", "overdue_amount", "outstanding_balance"),
    )


class AssignmentHistoryModel(Base):
    __tablename__ = "assignment_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False
    )
    officer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("officers.id"), nullable=False
    )
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    assigned_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)

    customer: Mapped["CustomerModel"] = relationship(back_populates="history")

    __table_args__ = (
        Index("idx_history_customer", "customer_id"),
        Index("idx_history_officer", "officer_id"),
    )
