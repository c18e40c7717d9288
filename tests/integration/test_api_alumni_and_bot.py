"""Integration tests for referrals, mentorship booking and PlacementBot."""

import pytest

SLOT = {
    "slotStart": "2026-11-02T10:00:00Z",
    "slotEnd": "2026-11-02T11:00:00Z",
    "maxStudents": 1,
    "description": "Mock interview",
}


# ============ REFERRALS ============

@pytest.mark.integration
def test_job_referral_lifecycle(client, alumni, student, register):
    created = client.post("/api/alumni/jobs", json={
        "companyName": "Acme", "jobTitle": "Data Engineer", "applyLink": "https://acme.example/apply",
    }, headers=alumni["headers"])
    assert created.status_code == 201
    job = created.json()
    assert job["status"] == "ACTIVE"

    board = client.get("/api/jobs", headers=student["headers"]).json()["jobs"]
    assert board[0]["alumniName"] == "Karan"
    assert board[0]["jobTitle"] == "Data Engineer"

    other = register("ALUMNI", "meera@alumni.edu", name="Meera")
    forbidden = client.patch(f"/api/alumni/jobs/{job['id']}", json={"status": "CLOSED"}, headers=other["headers"])
    assert forbidden.status_code == 403

    invalid = client.patch(f"/api/alumni/jobs/{job['id']}", json={"status": "PAUSED"}, headers=alumni["headers"])
    assert invalid.status_code == 400

    missing = client.patch("/api/alumni/jobs/999", json={"status": "CLOSED"}, headers=alumni["headers"])
    assert missing.status_code == 404

    closed = client.patch(f"/api/alumni/jobs/{job['id']}", json={"status": "CLOSED"}, headers=alumni["headers"])
    assert closed.json()["status"] == "CLOSED"
    assert client.get("/api/jobs", headers=student["headers"]).json()["jobs"] == []
    assert len(client.get("/api/alumni/jobs", headers=alumni["headers"]).json()["jobs"]) == 1


@pytest.mark.integration
def test_post_job_validation(client, alumni):
    response = client.post("/api/alumni/jobs", json={"companyName": "Acme"}, headers=alumni["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Company name and job title are required"


# ============ MENTORSHIP ============

@pytest.mark.integration
def test_mentorship_booking_flow(client, alumni, student, register):
    created = client.post("/api/alumni/mentorship-slots", json=SLOT, headers=alumni["headers"])
    assert created.status_code == 201
    slot = created.json()
    assert slot["currentBookings"] == 0
    assert slot["status"] == "AVAILABLE"

    available = client.get("/api/mentorship/available-slots", headers=student["headers"]).json()["slots"]
    assert [s["id"] for s in available] == [slot["id"]]
    assert available[0]["alumniName"] == "Karan"

    booked = client.post(f"/api/mentorship/slots/{slot['id']}/book", headers=student["headers"])
    assert booked.status_code == 201
    assert booked.json()["status"] == "CONFIRMED"

    again = client.post(f"/api/mentorship/slots/{slot['id']}/book", headers=student["headers"])
    assert again.status_code == 400

    latecomer = register("STUDENT", "late@college.edu")
    full = client.post(f"/api/mentorship/slots/{slot['id']}/book", headers=latecomer["headers"])
    assert full.status_code == 400
    assert full.json()["detail"] == "Slot is no longer available"

    assert client.get("/api/mentorship/available-slots", headers=student["headers"]).json()["slots"] == []

    mine = client.get("/api/alumni/mentorship-slots", headers=alumni["headers"]).json()["slots"]
    assert mine[0]["status"] == "FULL"
    assert mine[0]["currentBookings"] == 1
    assert mine[0]["bookings"][0]["studentName"] == "Riya"
    assert mine[0]["bookings"][0]["studentEmail"] == "riya@college.edu"


@pytest.mark.integration
def test_double_booking_open_slot_is_409(client, alumni, student):
    slot = client.post("/api/alumni/mentorship-slots", json={**SLOT, "maxStudents": 2}, headers=alumni["headers"]).json()

    assert client.post(f"/api/mentorship/slots/{slot['id']}/book", headers=student["headers"]).status_code == 201
    again = client.post(f"/api/mentorship/slots/{slot['id']}/book", headers=student["headers"])
    assert again.status_code == 409
    assert again.json()["detail"] == "You have already booked this slot"


@pytest.mark.integration
def test_slot_validation_and_unknown_slot(client, alumni, student):
    no_end = client.post("/api/alumni/mentorship-slots", json={"slotStart": SLOT["slotStart"]}, headers=alumni["headers"])
    assert no_end.status_code == 400
    assert no_end.json()["detail"] == "Slot start and end times are required"

    inverted = client.post("/api/alumni/mentorship-slots", json={
        "slotStart": SLOT["slotEnd"], "slotEnd": SLOT["slotStart"],
    }, headers=alumni["headers"])
    assert inverted.status_code == 400

    assert client.post("/api/mentorship/slots/999/book", headers=student["headers"]).status_code == 404


# ============ PLACEMENTBOT ============

@pytest.mark.integration
def test_bot_faqs_are_public(client):
    faqs = client.get("/api/bot/faqs").json()["faqs"]
    assert len(faqs) == 5
    assert faqs[0]["tags"] == ["cgpa", "requirement", "eligibility"]


@pytest.mark.integration
def test_bot_answers(client):
    response = client.post("/api/bot/ask", json={"question": "What CGPA do I need for eligibility?"})
    assert response.status_code == 200
    body = response.json()
    assert body["answer"].startswith("The minimum CGPA requirement varies by company.")
    assert "relatedFAQs" in body

    fallback = client.post("/api/bot/ask", json={"question": "zzzz qqqq"}).json()
    assert fallback["answer"].startswith("I couldn't find a specific answer")
    assert len(fallback["relatedFAQs"]) == 3


@pytest.mark.integration
@pytest.mark.parametrize("payload", [{}, {"question": "   "}])
def test_bot_requires_question(client, payload):
    response = client.post("/api/bot/ask", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Question is required"
