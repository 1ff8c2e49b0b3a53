from sqlalchemy import String, Float, Boolean, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from capacity_ledger.db.base import Base
from capacity_ledger.db.models._ids import new_id
from capacity_ledger.db.models._mixins import TimestampMixin

class Resource(Base, TimestampMixin):
    __tablename__ = "resource"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    code: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(256), index=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    team: Mapped[str] = mapped_column(String(64), index=True)
    default_capacity: Mapped[float] = mapped_column(Float, default=160.0)  # monthly hours
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    skills = relationship(
        "ResourceSkill",
        back_populates="resource",
        order_by="ResourceSkill.position",
        cascade="all, delete-orphan",
    )


class ResourceSkill(Base, TimestampMixin):
    __tablename__ = "resource_skill"
    __table_args__ = (UniqueConstraint("resource_id", "skill_name", name="uq_resource_skill"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    resource_id: Mapped[str] = mapped_column(ForeignKey("resource.id", ondelete="CASCADE"), index=True)
    skill_name: Mapped[str] = mapped_column(String(128))
    proficiency: Mapped[str | None] = mapped_column(String(32), nullable=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

    resource = relationship("Resource", back_populates="skills")
