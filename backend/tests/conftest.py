import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from capacity_ledger.db.base import Base
from capacity_ledger.db.models import Assignment, Project, Resource, ResourceSkill
from capacity_ledger.db.session import make_session_factory
from capacity_ledger.main import create_app
from tests.factories import TEAM


@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client(session_factory):
    return TestClient(create_app(session_factory=session_factory))


@pytest.fixture
def add_resource(db):
    counter = {"n": 0}

    def _add(name="Ana", default_capacity=160.0, active=True, skills=(), team=TEAM):
        counter["n"] += 1
        r = Resource(
            code=f"R-{counter['n']}",
            name=name,
            team=team,
            default_capacity=default_capacity,
            active=active,
        )
        r.skills = [ResourceSkill(skill_name=s, position=i) for i, s in enumerate(skills)]
        db.add(r)
        db.commit()
        return r

    return _add


@pytest.fixture
def add_project(db):
    def _add(code, title=None):
        p = Project(code=code, title=title or code)
        db.add(p)
        db.commit()
        return p

    return _add


@pytest.fixture
def add_assignment(db):
    def _add(project, resource, hours, date=None, month=None, year=None, title="Task"):
        if date is not None:
            month, year = date.month, date.year
        a = Assignment(
            project_id=project.id,
            resource_id=resource.id if resource is not None else None,
            title=title,
            date=date,
            month=month,
            year=year,
            hours=hours,
        )
        db.add(a)
        db.commit()
        return a

    return _add
