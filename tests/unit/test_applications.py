"""Unit tests for ApplicationService."""

import threading

import pytest

from placement_portal.core.errors import ConflictError, NotFoundError, ValidationError
from placement_portal.models.entities import ApplicationStatus
from placement_portal.services.application_service import ApplicationService
from placement_portal.services.drive_service import DriveService


@pytest.fixture
def drive(store):
    return DriveService(store).create_drive(tpo_id=1, company_name="Acme", min_cgpa=7.0, role_title="SDE")


@pytest.mark.unit
def test_apply_creates_applied_application(store, drive, make_student):
    student = make_student(store)

    application = ApplicationService(store).apply(student.id, drive.id)

    assert application.id is not None
    assert application.status == ApplicationStatus.applied
    assert application.applied_at == application.updated_at


@pytest.mark.unit
def test_apply_twice_conflicts_and_keeps_one(store, drive, make_student):
    student = make_student(store)
    service = ApplicationService(store)
    service.apply(student.id, drive.id)

    with pytest.raises(ConflictError) as exc:
        service.apply(student.id, drive.id)

    assert exc.value.message == "You have already applied to this drive"
    assert len(store.applications.list_for_student(student.id)) == 1


@pytest.mark.unit
def test_apply_unknown_drive(store, make_student):
    student = make_student(store)
    with pytest.raises(NotFoundError):
        ApplicationService(store).apply(student.id, 12345)


@pytest.mark.unit
def test_apply_is_not_gated_on_eligibility(store, drive, make_student):
    weak = make_student(store, cgpa=4.0, backlogs=5)
    assert ApplicationService(store).apply(weak.id, drive.id).status == ApplicationStatus.applied


@pytest.mark.unit
def test_applications_for_includes_drive_summary(store, drive, make_student):
    student = make_student(store)
    service = ApplicationService(store)
    service.apply(student.id, drive.id)

    result = service.applications_for(student.id)

    assert len(result["applications"]) == 1
    entry = result["applications"][0]
    assert entry["application"].drive_id == drive.id
    assert entry["drive"].company_name == "Acme"
    assert entry["drive"].role_title == "SDE"


@pytest.mark.unit
def test_set_status_updates_timestamp(store, drive, make_student):
    student = make_student(store)
    service = ApplicationService(store)
    application = service.apply(student.id, drive.id)

    updated = service.set_status(application.id, "SELECTED")

    assert updated.status == ApplicationStatus.selected
    assert updated.updated_at >= application.updated_at
    assert updated.applied_at == application.applied_at


@pytest.mark.unit
def test_set_status_rejects_unknown_status(store, drive, make_student):
    student = make_student(store)
    service = ApplicationService(store)
    application = service.apply(student.id, drive.id)

    with pytest.raises(ValidationError):
        service.set_status(application.id, "HIRED")
    with pytest.raises(ValidationError):
        service.set_status(application.id, None)


@pytest.mark.unit
def test_set_status_unknown_application(store):
    with pytest.raises(NotFoundError):
        ApplicationService(store).set_status(999, "REJECTED")


@pytest.mark.unit
def test_concurrent_apply_creates_single_application(threaded_store, make_student):
    drive = DriveService(threaded_store).create_drive(tpo_id=1, company_name="Acme", min_cgpa=0)
    student = make_student(threaded_store)
    service = ApplicationService(threaded_store)
    outcomes = []
    barrier = threading.Barrier(8)

    def attempt():
        barrier.wait()
        try:
            service.apply(student.id, drive.id)
            outcomes.append("ok")
        except ConflictError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=attempt) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == 7
    assert len(threaded_store.applications.list_all()) == 1
