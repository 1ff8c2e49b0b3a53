from sqlalchemy.orm import Session
from capacity_ledger.db.models.project import Project

def get_project(db: Session, project_id: str) -> Project | None:
    return db.query(Project).filter(Project.id == project_id).one_or_none()

def get_project_by_code(db: Session, code: str) -> Project | None:
    return db.query(Project).filter(Project.code == code).one_or_none()

def get_or_create_absence_project(db: Session, code: str, team: str) -> Project:
    p = get_project_by_code(db, code)
    if p:
        return p
    p = Project(code=code, title=f"Absences {team}", type="absence")
    db.add(p)
    db.flush()
    return p
