import datetime as dt

import pytest

from capacity_ledger.core.errors import BusinessRuleError, ValidationError
from capacity_ledger.db.models import Assignment
from capacity_ledger.schemas.assignments import AllocationIn, AssignmentIn, SaveBatchIn
from capacity_ledger.services.assignments import (
    create_assignment,
    save_assignments,
    set_absence,
    validate_allocations,
)
from capacity_ledger.services.batch import BatchExecutor, BatchOperation
from tests.factories import TEAM

DAY = dt.date(2025, 3, 3)
NEXT = dt.date(2025, 3, 4)


def _fail(exc):
    def run():
        raise exc

    return run


@pytest.mark.parametrize("workers", [1, 3])
def test_executor_collects_partial_failures(workers):
    ops = [
        BatchOperation("a", lambda: 1),
        BatchOperation("b", _fail(BusinessRuleError("full", "CAPACITY_EXCEEDED")), payload={"x": 1}),
        BatchOperation("c", lambda: 3),
        BatchOperation("d", _fail(RuntimeError("boom"))),
    ]
    result = BatchExecutor(max_workers=workers).run(ops)
    assert result.succeeded == 2
    assert result.failed == 2
    assert not result.ok
    assert result.results == [1, 3]
    assert [(e.key, e.code) for e in result.errors] == [("b", "CAPACITY_EXCEEDED"), ("d", "INTERNAL_ERROR")]
    assert result.errors[0].payload == {"x": 1}


@pytest.fixture
def setup(add_resource, add_project, add_assignment):
    r = add_resource()
    other = add_project("PRJ-OTHER")
    target = add_project("PRJ-TARGET")
    add_assignment(other, r, 6, date=DAY)
    return r, target


def _batch(r, project, on_conflict="abort", replace_existing=False):
    return SaveBatchIn(
        project_id=project.id,
        on_conflict=on_conflict,
        replace_existing=replace_existing,
        assignments=[
            AssignmentIn(project_id=project.id, resource_id=r.id, title="Build", date=DAY, hours=3),
            AssignmentIn(project_id=project.id, resource_id=r.id, title="Build", date=NEXT, hours=4),
        ],
    )


def _count(db, project):
    return db.query(Assignment).filter(Assignment.project_id == project.id).count()


def test_validate_allocations(db, setup):
    r, target = setup
    conflicts = validate_allocations(db, [AllocationIn(resource_id=r.id, date=DAY, hours=3)], target.id)
    assert [c.detail for c in conflicts] == ["Available: 2 hours, Requested: 3 hours, Assigned: 6 hours"]
    assert validate_allocations(db, []) == []


def test_batch_aborts_on_conflict(db, setup):
    r, target = setup
    out = save_assignments(db, _batch(r, target))
    assert out["succeeded"] == 0
    assert out["failed"] == 1
    assert out["conflicts"][0]["date"] == "2025-03-03"
    assert _count(db, target) == 0


def test_batch_skips_conflicting_keys(db, setup):
    r, target = setup
    out = save_assignments(db, _batch(r, target, on_conflict="skip"))
    assert out["succeeded"] == 1
    assert out["failed"] == 0
    assert len(out["conflicts"]) == 1
    [row] = db.query(Assignment).filter(Assignment.project_id == target.id).all()
    assert row.date == NEXT
    assert (row.month, row.year) == (3, 2025)


def test_batch_replaces_existing(db, setup, add_assignment):
    r, target = setup
    add_assignment(target, r, 1, date=dt.date(2025, 4, 1))
    out = save_assignments(db, _batch(r, target, on_conflict="skip", replace_existing=True))
    assert out["deleted"] == 1
    assert _count(db, target) == 1


def test_batch_item_failure_does_not_undo_others(db, setup, add_resource):
    r, target = setup
    inactive = add_resource(name="Old", active=False)
    data = SaveBatchIn(
        project_id=target.id,
        assignments=[
            AssignmentIn(project_id=target.id, resource_id=r.id, title="Build", date=NEXT, hours=4),
            AssignmentIn(project_id=target.id, resource_id=inactive.id, title="Build", date=NEXT, hours=4),
        ],
    )
    out = save_assignments(db, data)
    assert out["succeeded"] == 1
    assert out["failed"] == 1
    assert out["errors"][0]["code"] == "INACTIVE_RESOURCE"
    assert _count(db, target) == 1


def test_batch_rejects_invalid_items(db, setup):
    r, target = setup
    data = SaveBatchIn(
        project_id=target.id,
        assignments=[AssignmentIn(project_id=target.id, resource_id=r.id, title="Build", date=NEXT, hours=0)],
    )
    with pytest.raises(ValidationError):
        save_assignments(db, data)


def test_create_assignment_checks_capacity(db, setup):
    r, target = setup
    with pytest.raises(BusinessRuleError) as exc:
        create_assignment(db, AssignmentIn(project_id=target.id, resource_id=r.id, title="x", date=DAY, hours=3))
    assert exc.value.code == "CAPACITY_EXCEEDED"
    assert exc.value.details["available"] == 2
    assert _count(db, target) == 0

    a = create_assignment(db, AssignmentIn(project_id=target.id, resource_id=r.id, title="x", date=DAY, hours=2))
    assert a.hours == 2


def test_create_assignment_counts_own_project_hours(db, setup):
    r, target = setup
    create_assignment(db, AssignmentIn(project_id=target.id, resource_id=r.id, title="x", date=NEXT, hours=8))
    with pytest.raises(BusinessRuleError) as exc:
        create_assignment(db, AssignmentIn(project_id=target.id, resource_id=r.id, title="x", date=NEXT, hours=8))
    assert exc.value.code == "CAPACITY_EXCEEDED"
    assert exc.value.details["assigned"] == 8
    assert _count(db, target) == 1


def test_unassigned_and_monthly_rows_skip_the_daily_check(db, setup):
    r, target = setup
    pending = create_assignment(db, AssignmentIn(project_id=target.id, title="Later", date=DAY, hours=40))
    assert pending.resource_id is None
    monthly = create_assignment(
        db, AssignmentIn(project_id=target.id, resource_id=r.id, title="Bulk", month=3, year=2025, hours=40)
    )
    assert monthly.date is None


def test_set_absence(db, setup):
    r, _ = setup
    with pytest.raises(BusinessRuleError) as exc:
        set_absence(db, r.id, DAY, 4, TEAM)
    assert exc.value.code == "ABSENCE_EXCEEDS_BASE"
    assert exc.value.details["revertTo"] == 2

    out = set_absence(db, r.id, DAY, 2, TEAM)
    assert out["accepted"] is True
    assert out["available_hours"] == 0

    set_absence(db, r.id, DAY, 1, TEAM)
    rows = db.query(Assignment).filter(Assignment.resource_id == r.id, Assignment.hours == 1).all()
    assert len(rows) == 1
    assert rows[0].project.code == f"ABSENCES-{TEAM}"

    set_absence(db, r.id, DAY, 0, TEAM)
    assert db.query(Assignment).filter(Assignment.project_id == rows[0].project_id).count() == 0


def test_set_absence_counts_other_absence_projects(db, setup, add_project, add_assignment):
    r, _ = setup
    add_assignment(add_project("ABSENCES-OPS"), r, 5, date=NEXT)
    with pytest.raises(BusinessRuleError) as exc:
        set_absence(db, r.id, NEXT, 4, TEAM)
    assert exc.value.details["revertTo"] == 3

    out = set_absence(db, r.id, NEXT, 3, TEAM)
    assert out["available_hours"] == 0
    total = sum(a.hours for a in db.query(Assignment).filter(Assignment.resource_id == r.id, Assignment.date == NEXT))
    assert total == 8


def test_uppercase_ids_are_normalized(db, setup):
    r, target = setup
    data = SaveBatchIn(
        project_id=target.id.upper(),
        on_conflict="skip",
        assignments=[
            AssignmentIn(project_id=target.id, resource_id=r.id.upper(), title="Build", date=DAY, hours=3),
            AssignmentIn(project_id=target.id, resource_id=r.id.upper(), title="Build", date=NEXT, hours=2),
        ],
    )
    out = save_assignments(db, data)
    assert out["succeeded"] == 1
    assert out["failed"] == 0
    [row] = db.query(Assignment).filter(Assignment.project_id == target.id).all()
    assert row.resource_id == r.id
    assert row.date == NEXT

    a = create_assignment(
        db, AssignmentIn(project_id=target.id.upper(), resource_id=r.id.upper(), title="x", date=NEXT, hours=1)
    )
    assert a.resource_id == r.id


def test_abort_counts_blocked_items(db, setup):
    r, target = setup
    data = SaveBatchIn(
        project_id=target.id,
        assignments=[
            AssignmentIn(project_id=target.id, resource_id=r.id, title="a", date=DAY, hours=1),
            AssignmentIn(project_id=target.id, resource_id=r.id, title="b", date=DAY, hours=1),
            AssignmentIn(project_id=target.id, resource_id=r.id, title="c", date=DAY, hours=1),
            AssignmentIn(project_id=target.id, resource_id=r.id, title="d", date=NEXT, hours=1),
        ],
    )
    out = save_assignments(db, data)
    assert out["succeeded"] == 0
    assert out["failed"] == 3
    assert len(out["conflicts"]) == 1
    assert _count(db, target) == 0


class _CompetingWriteExecutor(BatchExecutor):
    """Commits a competing row right after the first operation has run."""

    def __init__(self, compete):
        super().__init__()
        self.compete = compete

    def run(self, operations):
        head, *tail = operations

        def run_then_compete():
            out = head.run()
            self.compete()
            return out

        return super().run([BatchOperation(head.key, run_then_compete, head.payload), *tail])


def test_write_rechecks_capacity_after_validation(db, setup, add_project, add_assignment):
    r, target = setup
    third = dt.date(2025, 3, 5)
    rival = add_project("PRJ-RIVAL")
    data = SaveBatchIn(
        project_id=target.id,
        assignments=[
            AssignmentIn(project_id=target.id, resource_id=r.id, title="Build", date=NEXT, hours=4),
            AssignmentIn(project_id=target.id, resource_id=r.id, title="Build", date=third, hours=4),
        ],
    )
    executor = _CompetingWriteExecutor(lambda: add_assignment(rival, r, 6, date=third))
    out = save_assignments(db, data, executor=executor)
    assert out["conflicts"] == []
    assert out["succeeded"] == 1
    assert out["failed"] == 1
    assert out["errors"][0]["code"] == "CAPACITY_EXCEEDED"
    [row] = db.query(Assignment).filter(Assignment.project_id == target.id).all()
    assert row.date == NEXT
