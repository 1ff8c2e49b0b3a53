"""init

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        "resource",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("code", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("email", sa.String(length=256), nullable=True),
        sa.Column("team", sa.String(length=64), nullable=False),
        sa.Column("default_capacity", sa.Float(), nullable=False, server_default=sa.text("160")),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_resource_code", "resource", ["code"], unique=True)
    op.create_index("ix_resource_name", "resource", ["name"])
    op.create_index("ix_resource_team", "resource", ["team"])

    op.create_table(
        "resource_skill",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("resource_id", sa.String(length=36), sa.ForeignKey("resource.id", ondelete="CASCADE"), nullable=False),
        sa.Column("skill_name", sa.String(length=128), nullable=False),
        sa.Column("proficiency", sa.String(length=32), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
        sa.UniqueConstraint("resource_id", "skill_name", name="uq_resource_skill"),
    )
    op.create_index("ix_resource_skill_resource_id", "resource_skill", ["resource_id"])

    op.create_table(
        "project",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("code", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=256), nullable=False),
        sa.Column("type", sa.String(length=64), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_project_code", "project", ["code"], unique=True)

    op.create_table(
        "assignment",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("project_id", sa.String(length=36), sa.ForeignKey("project.id", ondelete="CASCADE"), nullable=False),
        sa.Column("resource_id", sa.String(length=36), sa.ForeignKey("resource.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(length=512), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("skill_name", sa.String(length=128), nullable=True),
        sa.Column("team", sa.String(length=64), nullable=True),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("month", sa.Integer(), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("hours", sa.Float(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
    )
    op.create_index("ix_assignment_project_id", "assignment", ["project_id"])
    op.create_index("ix_assignment_resource_id", "assignment", ["resource_id"])
    op.create_index("ix_assignment_resource_date", "assignment", ["resource_id", "date"])
    op.create_index("ix_assignment_resource_period", "assignment", ["resource_id", "year", "month"])

    op.create_table(
        "capacity",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("resource_id", sa.String(length=36), sa.ForeignKey("resource.id", ondelete="CASCADE"), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("total_hours", sa.Float(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("resource_id", "month", "year", name="uq_capacity_resource_period"),
    )
    op.create_index("ix_capacity_resource_id", "capacity", ["resource_id"])


def downgrade():
    op.drop_table("capacity")
    op.drop_table("assignment")
    op.drop_table("project")
    op.drop_table("resource_skill")
    op.drop_table("resource")
