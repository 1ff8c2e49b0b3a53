import datetime as dt
from sqlalchemy import String, ForeignKey, Date, Float, Integer, Text, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from capacity_ledger.db.base import Base
from capacity_ledger.db.models._ids import new_id
from capacity_ledger.db.models._mixins import TimestampMixin

class Assignment(Base, TimestampMixin):
    __tablename__ = "assignment"
    __table_args__ = (
        Index("ix_assignment_resource_date", "resource_id", "date"),
        Index("ix_assignment_resource_period", "resource_id", "year", "month"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    project_id: Mapped[str] = mapped_column(ForeignKey("project.id", ondelete="CASCADE"), index=True)
    # NULL while the row is pending a resource
    resource_id: Mapped[str | None] = mapped_column(
        ForeignKey("resource.id", ondelete="SET NULL"), nullable=True, index=True
    )

    title: Mapped[str] = mapped_column(String(512))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    skill_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    team: Mapped[str | None] = mapped_column(String(64), nullable=True)

    date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    month: Mapped[int | None] = mapped_column(Integer, nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    hours: Mapped[float] = mapped_column(Float, default=0.0)

    project = relationship("Project", back_populates="assignments")
    resource = relationship("Resource")
