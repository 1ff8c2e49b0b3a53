from sqlalchemy import String, ForeignKey, Float, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from capacity_ledger.db.base import Base
from capacity_ledger.db.models._ids import new_id
from capacity_ledger.db.models._mixins import TimestampMixin

class Capacity(Base, TimestampMixin):
    __tablename__ = "capacity"
    __table_args__ = (UniqueConstraint("resource_id", "month", "year", name="uq_capacity_resource_period"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    resource_id: Mapped[str] = mapped_column(ForeignKey("resource.id", ondelete="CASCADE"), index=True)
    month: Mapped[int] = mapped_column(Integer)
    year: Mapped[int] = mapped_column(Integer)
    total_hours: Mapped[float] = mapped_column(Float)

    resource = relationship("Resource")
