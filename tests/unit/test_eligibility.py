"""Unit tests for the eligibility predicate and the listings built on it."""

import pytest

from placement_portal.core.errors import NotFoundError
from placement_portal.models.entities import Drive, DriveStatus, Role, StudentProfile
from placement_portal.services.application_service import ApplicationService
from placement_portal.services.drive_service import DriveService
from placement_portal.services.eligibility_service import EligibilityService, is_eligible


def _drive(**overrides):
    values = dict(company_name="Acme", min_cgpa=7.0, max_backlogs=0, allowed_branches=["CS"])
    values.update(overrides)
    return Drive(**values)


def _profile(**overrides):
    values = dict(user_id=1, branch="CS", cgpa=7.5, current_backlogs=0)
    values.update(overrides)
    return StudentProfile(**values)


@pytest.mark.unit
def test_reference_scenario():
    """minCgpa 7.0 / no backlogs / CS only."""
    drive = _drive()
    assert is_eligible(_profile(), drive) is True
    assert is_eligible(_profile(branch="IT"), drive) is False
    assert is_eligible(_profile(current_backlogs=1), drive) is False


@pytest.mark.unit
def test_boundaries_are_inclusive():
    drive = _drive(min_cgpa=7.5, max_backlogs=2)
    assert is_eligible(_profile(cgpa=7.5, current_backlogs=2), drive)
    assert not is_eligible(_profile(cgpa=7.49, current_backlogs=2), drive)
    assert not is_eligible(_profile(cgpa=7.5, current_backlogs=3), drive)


@pytest.mark.unit
def test_empty_branch_list_allows_everyone():
    drive = _drive(allowed_branches=[])
    assert is_eligible(_profile(branch="Mechanical"), drive)


@pytest.mark.unit
def test_branch_match_is_exact():
    drive = _drive(allowed_branches=["Computer Science"])
    assert not is_eligible(_profile(branch="computer science"), drive)
    assert not is_eligible(_profile(branch="Computer"), drive)


@pytest.mark.unit
@pytest.mark.parametrize("cgpa,backlogs,branch,expected", [
    (9.0, 0, "CS", True),
    (6.9, 0, "CS", False),
    (9.0, 1, "CS", False),
    (9.0, 0, "EE", True),
    (9.0, 0, "ME", False),
])
def test_predicate_table(cgpa, backlogs, branch, expected):
    drive = _drive(allowed_branches=["CS", "EE"])
    assert is_eligible(_profile(cgpa=cgpa, current_backlogs=backlogs, branch=branch), drive) is expected


@pytest.mark.unit
def test_eligible_drives_requires_profile(store, make_user):
    user = make_user(store, Role.student, "NoProfile")

    result = EligibilityService(store).eligible_drives_for(user.id)

    assert result == {"drives": [], "message": "Please complete your profile first"}


@pytest.mark.unit
def test_eligible_drives_requires_branch(store, make_student):
    student = make_student(store, branch="")

    result = EligibilityService(store).eligible_drives_for(student.id)

    assert result["drives"] == []
    assert result["message"] == "Please complete your profile first"


@pytest.mark.unit
def test_eligible_drives_lists_active_matches_with_application_state(store, make_student):
    student = make_student(store, branch="CS", cgpa=8.2)
    drives = DriveService(store)
    open_drive = drives.create_drive(tpo_id=99, company_name="Acme", min_cgpa=7.0, allowed_branches=["CS"])
    applied_drive = drives.create_drive(tpo_id=99, company_name="Globex", min_cgpa=8.0)
    drives.create_drive(tpo_id=99, company_name="Initech", min_cgpa=9.0)
    closed = drives.create_drive(tpo_id=99, company_name="Umbrella", min_cgpa=5.0)
    drives.set_status(closed.id, DriveStatus.closed)

    ApplicationService(store).apply(student.id, applied_drive.id)

    entries = EligibilityService(store).eligible_drives_for(student.id)["drives"]

    assert [e["drive"].company_name for e in entries] == ["Acme", "Globex"]
    by_id = {e["drive"].id: e for e in entries}
    assert by_id[open_drive.id]["has_applied"] is False
    assert by_id[open_drive.id]["application_status"] is None
    assert by_id[applied_drive.id]["has_applied"] is True
    assert by_id[applied_drive.id]["application_status"].value == "APPLIED"


@pytest.mark.unit
def test_eligible_students_for_drive(store, make_student):
    ok = make_student(store, name="Ok", branch="CS", cgpa=8.0)
    make_student(store, name="Low", branch="CS", cgpa=6.0)
    make_student(store, name="Backlog", branch="CS", cgpa=9.0, backlogs=2)
    drive = DriveService(store).create_drive(tpo_id=1, company_name="Acme", min_cgpa=7.0, allowed_branches=["CS"])

    result = EligibilityService(store).eligible_students_for(drive.id)

    assert result["drive_id"] == drive.id
    assert result["company_name"] == "Acme"
    assert result["eligible_count"] == 1
    assert result["eligible_students"][0]["user_id"] == ok.id
    assert result["eligible_students"][0]["name"] == "Ok"


@pytest.mark.unit
def test_eligible_students_unknown_drive(store):
    with pytest.raises(NotFoundError):
        EligibilityService(store).eligible_students_for(404)
