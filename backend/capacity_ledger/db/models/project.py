from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from capacity_ledger.db.base import Base
from capacity_ledger.db.models._ids import new_id
from capacity_ledger.db.models._mixins import TimestampMixin

class Project(Base, TimestampMixin):
    __tablename__ = "project"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    code: Mapped[str] = mapped_column(String(64), unique=True, index=True)  # ABSENCES-{TEAM} marks absences
    title: Mapped[str] = mapped_column(String(256))
    type: Mapped[str | None] = mapped_column(String(64), nullable=True)

    assignments = relationship("Assignment", back_populates="project")
