import datetime as dt

import pytest

from capacity_ledger.core.errors import NotFoundError, ValidationError
from capacity_ledger.services.ledger.conflicts import (
    ConflictValidator,
    ProposedAllocation,
    capacity_detail,
    check_absence_edit,
)
from capacity_ledger.services.ledger.ledger import CapacityLedger
from tests.factories import assignment, resource

DAY = dt.date(2025, 3, 3)


def test_daily_capacity_floors():
    v = ConflictValidator()
    assert v.daily_capacity(resource(capacity=160)) == 8
    assert v.daily_capacity(resource(capacity=150)) == 7


def test_conflict_reports_remaining_hours():
    v = ConflictValidator()
    existing = [assignment(6, DAY, project_id="other")]
    [c] = v.validate([ProposedAllocation("r1", DAY, 3)], {"r1": resource()}, existing)
    assert (c.available, c.requested, c.assigned) == (2, 3, 6)
    assert c.detail == "Available: 2 hours, Requested: 3 hours, Assigned: 6 hours"
    assert c.to_dict()["date"] == "2025-03-03"
    assert c.kind == "CAPACITY_EXCEEDED"


def test_exact_fit_is_not_a_conflict():
    v = ConflictValidator()
    existing = [assignment(6, DAY, project_id="other")]
    assert v.validate([ProposedAllocation("r1", DAY, 2)], {"r1": resource()}, existing) == []


def test_own_project_hours_are_excluded():
    v = ConflictValidator()
    existing = [assignment(6, DAY, project_id="p1")]
    proposals = [ProposedAllocation("r1", DAY, 8)]
    assert v.validate(proposals, {"r1": resource()}, existing, exclude_project_id="p1") == []
    assert len(v.validate(proposals, {"r1": resource()}, existing)) == 1


def test_proposals_for_the_same_day_are_summed():
    v = ConflictValidator()
    existing = [assignment(5, DAY, project_id="other")]
    proposals = [ProposedAllocation("r1", DAY, 2), ProposedAllocation("r1", DAY, 2)]
    [c] = v.validate(proposals, {"r1": resource()}, existing)
    assert c.requested == 4
    assert c.available == 3


def test_absences_only_count_when_enabled():
    existing = [assignment(4, DAY, absence=True), assignment(2, DAY, project_id="other")]
    proposals = [ProposedAllocation("r1", DAY, 3)]
    assert ConflictValidator().validate(proposals, {"r1": resource()}, existing) == []
    [c] = ConflictValidator(count_absences=True).validate(proposals, {"r1": resource()}, existing)
    assert c.available == 2


def test_conflicts_are_returned_in_key_order():
    v = ConflictValidator()
    later = DAY + dt.timedelta(days=1)
    proposals = [ProposedAllocation("r1", later, 9), ProposedAllocation("r1", DAY, 9)]
    conflicts = v.validate(proposals, {"r1": resource()}, [])
    assert [c.date for c in conflicts] == [DAY, later]


def test_non_positive_hours_are_rejected():
    with pytest.raises(ValidationError):
        ConflictValidator().validate([ProposedAllocation("r1", DAY, 0)], {"r1": resource()}, [])


def test_unknown_resource():
    with pytest.raises(NotFoundError):
        ConflictValidator().validate([ProposedAllocation("nobody", DAY, 1)], {}, [])


def test_detail_formats_fractions():
    assert capacity_detail(1.5, 2, 6.25) == "Available: 1.5 hours, Requested: 2 hours, Assigned: 6.25 hours"


def test_absence_edit():
    entry = CapacityLedger().entry(resource(), DAY, 0.0, 5.0)
    rejected = check_absence_edit(entry, 4)
    assert not rejected.accepted
    assert rejected.absence_hours == 3
    assert rejected.available_hours == 0
    assert "cannot exceed base hours" in rejected.message

    accepted = check_absence_edit(entry, 2)
    assert accepted.accepted
    assert accepted.available_hours == 1

    with pytest.raises(ValidationError):
        check_absence_edit(entry, -1)


def test_absence_edit_keeps_other_absences_fixed():
    entry = CapacityLedger().entry(resource(), DAY, 3.0, 2.0)
    rejected = check_absence_edit(entry, 4)
    assert not rejected.accepted
    assert rejected.absence_hours == 3
    assert rejected.available_hours == 0

    accepted = check_absence_edit(entry, 1)
    assert accepted.accepted
    assert accepted.available_hours == 2
