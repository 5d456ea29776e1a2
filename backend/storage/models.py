import uuid
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import JSON, CheckConstraint, DateTime, Integer, String, Text, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    type_annotation_map = {
        uuid.UUID: Uuid(),
    }


class FactCheck(Base):
    """A cached verdict keyed by the fingerprint of its input text. Rows are never updated."""

    __tablename__ = "fact_checks"
    __table_args__ = (
        CheckConstraint("status IN ('real', 'fake', 'uncertain')", name="ck_fact_checks_status"),
        CheckConstraint("confidence >= 0 AND confidence <= 100", name="ck_fact_checks_confidence"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    text_hash: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    input_text: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    confidence: Mapped[int] = mapped_column(Integer, nullable=False)
    justification: Mapped[str] = mapped_column(Text, nullable=False)
    sources: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    search_results: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
