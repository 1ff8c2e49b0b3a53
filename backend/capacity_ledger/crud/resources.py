from collections.abc import Iterable
from sqlalchemy.orm import Session, selectinload

from capacity_ledger.db.models.resource import Resource


def get_resource(db: Session, resource_id: str, for_update: bool = False) -> Resource | None:
    q = db.query(Resource).filter(Resource.id == resource_id)
    if for_update:
        q = q.with_for_update()
    return q.one_or_none()


def get_resources(db: Session, resource_ids: Iterable[str]) -> list[Resource]:
    ids = list(set(resource_ids))
    if not ids:
        return []
    return db.query(Resource).options(selectinload(Resource.skills)).filter(Resource.id.in_(ids)).all()


def list_team_resources(db: Session, team: str, active_only: bool = True) -> list[Resource]:
    q = db.query(Resource).options(selectinload(Resource.skills)).filter(Resource.team == team)
    if active_only:
        q = q.filter(Resource.active.is_(True))
    return q.order_by(Resource.name).all()
