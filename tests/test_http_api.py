import io
from dataclasses import replace

import pytest
from werkzeug.security import generate_password_hash

from src.hr_attendance.hr_attendance.attendance.controller import qr_payload_text
from src.hr_attendance.hr_attendance.core.exceptions import ValidationError
from src.hr_attendance.hr_attendance.main import create_app

OFFICE = {"type": "Point", "coordinates": [10.0, 36.8]}
FAR_AWAY = {"type": "Point", "coordinates": [10.05, 36.8]}


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


def _login_as(client, container, employee_id):
    employee = container.employees_repo.get_by_id(employee_id)
    client.set_cookie("token", container.auth_service.issue_token(employee))


def test_login_sets_cookie_and_returns_profile(client, container, employees_repo):
    employee = employees_repo.get_by_id(2)
    employees_repo._by_id[2] = replace(employee, password_hash=generate_password_hash("secret"))

    resp = client.post("/api/auth/login", json={"email": "E2@example.com", "password": "secret"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["id"] == 2
    assert "token=" in resp.headers["Set-Cookie"]
    assert "HttpOnly" in resp.headers["Set-Cookie"]

    bad = client.post("/api/auth/login", json={"email": "e2@example.com", "password": "nope"})
    assert bad.status_code == 401
    assert bad.get_json() == {"success": False, "message": "Invalid email or password"}


def test_requests_without_token_are_unauthorized(client):
    resp = client.post("/api/attendance", json={})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "No token provided"


def test_tampered_token_is_rejected(client):
    client.set_cookie("token", "abc.def.ghi")

    assert client.get("/api/attendance/employee/2").get_json()["message"] == "Invalid token"


def test_manual_entry_and_exit_roundtrip(client, container):
    _login_as(client, container, 2)

    created = client.post("/api/attendance", json={"method": "manual", "employeeId": 2, "location": OFFICE})
    assert created.status_code == 201
    record = created.get_json()["data"]
    assert record["method"] == "manual"
    assert record["location"]["coordinates"] == [10.0, 36.8]
    assert record["exitTime"] is None

    closed = client.post("/api/attendance/exit", json={"employeeId": 2, "location": OFFICE})
    assert closed.status_code == 200
    assert closed.get_json()["data"]["id"] == record["id"]
    assert closed.get_json()["data"]["workingHours"] is not None

    history = client.get("/api/attendance/employee/2?limit=5").get_json()["data"]
    assert [r["id"] for r in history] == [record["id"]]


def test_validation_errors_use_envelope(client, container):
    _login_as(client, container, 2)

    resp = client.post("/api/attendance", json={"method": "manual", "location": {"coordinates": [10.0]}})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert body["message"] == "Validation errors"
    assert {e["field"] for e in body["errors"]} == {"employeeId", "location"}


def test_outside_geofence_returns_400(client, container):
    _login_as(client, container, 2)

    resp = client.post("/api/attendance", json={"employeeId": 2, "location": FAR_AWAY})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Location is outside the allowed area"


def test_recording_for_someone_else_is_forbidden(client, container):
    _login_as(client, container, 3)

    resp = client.post("/api/attendance", json={"employeeId": 2, "location": OFFICE})

    assert resp.status_code == 403


def test_admin_only_routes(client, container):
    _login_as(client, container, 3)

    resp = client.get("/api/attendance/reports")

    assert resp.status_code == 403
    assert resp.get_json()["message"].startswith("Access denied")


def test_qr_issue_then_scan(client, container):
    _login_as(client, container, 1)
    issued = client.get("/api/attendance/qr/2")
    assert issued.status_code == 200
    token = issued.get_json()["data"]["qrData"]

    image = client.get("/api/attendance/qr/2/image")
    assert image.mimetype == "image/png"

    _login_as(client, container, 2)
    scanned = client.post("/api/attendance/scan-qr", json={"qrData": token, "location": OFFICE})
    assert scanned.status_code == 201
    assert scanned.get_json()["data"]["method"] == "qr"

    garbage = client.post("/api/attendance/scan-qr", json={"qrData": "garbage", "location": OFFICE})
    assert garbage.status_code == 400
    assert garbage.get_json()["message"] == "Invalid QR code"


def test_facial_mismatch_returns_401(client, container):
    _login_as(client, container, 2)

    resp = client.post(
        "/api/attendance/facial",
        json={"employeeId": 2, "faceTemplate": [0.1] * 127 + [0.9], "location": OFFICE},
    )

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Face not recognized"


def test_face_template_enrollment(client, container, employees_repo):
    _login_as(client, container, 3)

    resp = client.put("/api/employees/3/face-template", json={"faceTemplate": [0.2] * 128})

    assert resp.status_code == 200
    assert resp.get_json()["data"]["hasFaceTemplate"] is True
    assert employees_repo.get_by_id(3).face_descriptor == [0.2] * 128


def test_report_and_notifications(client, container):
    _login_as(client, container, 2)
    client.post("/api/attendance", json={"employeeId": 2, "location": FAR_AWAY})

    report = client.get("/api/attendance/report/2?period=daily")
    assert report.status_code == 200
    assert set(report.get_json()["data"]) == {"employee", "period", "totalDays", "totalHours", "lateDays"}

    inbox = client.get("/api/notifications/2").get_json()["data"]["notifications"]
    assert [n["type"] for n in inbox] == ["location_issue"]

    marked = client.patch("/api/notifications/employee/2/read-all")
    assert marked.get_json()["data"] == {"updated": 1}

    assert client.delete("/api/notifications/cleanup").status_code == 403


def test_logout_clears_cookie(client, container):
    _login_as(client, container, 2)

    resp = client.post("/api/auth/logout")

    assert resp.status_code == 200
    assert "token=;" in resp.headers["Set-Cookie"]


@pytest.mark.parametrize("body", [[1, 2], "text", 42])
def test_non_object_json_body_is_a_validation_error(client, container, body):
    _login_as(client, container, 2)

    resp = client.post("/api/attendance", json=body)

    assert resp.status_code == 400
    assert resp.get_json()["errors"] == [{"field": "body", "message": "must be a JSON object"}]
    assert client.post("/api/attendance/exit", json=body).status_code == 400


def test_scan_upload_that_is_not_an_image(client, container):
    _login_as(client, container, 2)

    resp = client.post(
        "/api/attendance/scan-qr/image",
        data={"image": (io.BytesIO(b"definitely not a picture"), "qr.png"), "lng": "10.0", "lat": "36.8"},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 400
    assert resp.get_json()["errors"][0]["field"] == "image"


def test_non_utf8_qr_payload_is_rejected():
    with pytest.raises(ValidationError) as exc:
        qr_payload_text(b"\xff\xfe\xfa")

    assert exc.value.message == "Invalid QR code"
    assert qr_payload_text(b"  token \n") == "token"
