from capacity_ledger.services.ledger.records import AssignmentRecord, ResourceRecord

TEAM = "DEV"


def resource(rid="r1", capacity=160.0, skills=()):
    return ResourceRecord(id=rid, code=rid.upper(), name=rid, default_capacity=capacity, skills=tuple(skills))


def assignment(
    hours,
    day=None,
    resource_id="r1",
    project_id="p1",
    absence=False,
    month=None,
    year=None,
    aid=None,
):
    return AssignmentRecord(
        id=aid or f"a-{project_id}-{resource_id}-{day}-{hours}",
        project_id=project_id,
        project_code=f"ABSENCES-{TEAM}" if absence else f"PRJ-{project_id}",
        resource_id=resource_id,
        day=day,
        month=month,
        year=year,
        hours=hours,
        is_absence=absence,
    )
