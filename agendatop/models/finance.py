from __future__ import annotations

import datetime as dt
import enum
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agendatop.db.base_class import Base


class EntryKind(str, enum.Enum):
    INCOME = "receita"
    EXPENSE = "despesa"


_kind_enum = Enum(
    EntryKind,
    name="entry_kind_enum",
    values_callable=lambda e: [m.value for m in e],
)

DEFAULT_CATEGORY_COLOR = "#3B82F6"


class FinancialCategory(Base):
    __tablename__ = "financial_categories"
    __table_args__ = (Index("ix_fin_category_company_id", "company_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    kind: Mapped[EntryKind] = mapped_column(_kind_enum, nullable=False)
    color: Mapped[str] = mapped_column(
        String(16), nullable=False, default=DEFAULT_CATEGORY_COLOR
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(tz=dt.UTC),
        nullable=False,
    )


class LedgerEntry(Base):
    """Lançamento financeiro (receita ou despesa)."""

    __tablename__ = "ledger_entries"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_ledger_amount_positive"),
        Index("ix_ledger_company_date", "company_id", "entry_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[int] = mapped_column(
        ForeignKey("financial_categories.id", ondelete="RESTRICT"), nullable=False
    )
    # preenchido quando o lançamento nasce da finalização de um atendimento
    appointment_id: Mapped[int | None] = mapped_column(
        ForeignKey("appointments.id", ondelete="SET NULL"), index=True
    )
    kind: Mapped[EntryKind] = mapped_column(_kind_enum, nullable=False)
    description: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    entry_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    note: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(tz=dt.UTC),
        nullable=False,
    )

    category = relationship("FinancialCategory")
