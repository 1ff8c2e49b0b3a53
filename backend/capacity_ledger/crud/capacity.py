from sqlalchemy.orm import Session, joinedload

from capacity_ledger.db.models.capacity import Capacity


def get_capacity(db: Session, capacity_id: str) -> Capacity | None:
    return db.query(Capacity).options(joinedload(Capacity.resource)).filter(Capacity.id == capacity_id).one_or_none()


def list_capacity(
    db: Session,
    resource_id: str | None = None,
    month: int | None = None,
    year: int | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Capacity], int]:
    q = db.query(Capacity)
    if resource_id:
        q = q.filter(Capacity.resource_id == resource_id)
    if month:
        q = q.filter(Capacity.month == month)
    if year:
        q = q.filter(Capacity.year == year)
    total = q.count()
    rows = (
        q.options(joinedload(Capacity.resource))
        .order_by(Capacity.year.desc(), Capacity.month.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, total


def upsert_capacity(db: Session, resource_id: str, month: int, year: int, total_hours: float) -> Capacity:
    c = (
        db.query(Capacity)
        .filter(Capacity.resource_id == resource_id, Capacity.month == month, Capacity.year == year)
        .one_or_none()
    )
    if c is None:
        c = Capacity(resource_id=resource_id, month=month, year=year, total_hours=total_hours)
        db.add(c)
    else:
        c.total_hours = total_hours
    db.commit()
    db.refresh(c)
    return c
