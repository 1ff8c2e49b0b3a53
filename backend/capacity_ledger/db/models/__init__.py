# import all models for Alembic
from capacity_ledger.db.models.resource import Resource, ResourceSkill
from capacity_ledger.db.models.project import Project
from capacity_ledger.db.models.assignment import Assignment
from capacity_ledger.db.models.capacity import Capacity
