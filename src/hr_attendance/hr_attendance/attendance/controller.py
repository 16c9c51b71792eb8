from __future__ import annotations

import io
from typing import Any, Mapping

import qrcode
from flask import Flask, request, send_file
from PIL import Image, UnidentifiedImageError

from ..common import validators as v
from ..common.datetime_utils import now_local, parse_iso_date, parse_iso_datetime
from ..common.http import current_principal, make_auth_required, ok
from ..core.constants import DEFAULT_HISTORY_LIMIT, FACE_DESCRIPTOR_LENGTH
from ..core.enums import CaptureMethod, ReportPeriod, Role
from ..core.exceptions import ValidationError
from ..container import Container
from ..geo.geofence import Coordinates
from .capture.base import CaptureRequest

ANY_ROLE = (Role.EMPLOYEE, Role.STAGIAIRE, Role.ADMIN)
METHODS = [m.value for m in CaptureMethod]
PERIODS = [p.value for p in ReportPeriod]


def _capture_request(data: Mapping[str, Any], *, time_field: str = "entryTime") -> CaptureRequest:
    raw_time = data.get(time_field)
    employee_id = data.get("employeeId")
    return CaptureRequest(
        timestamp=parse_iso_datetime(str(raw_time)) if raw_time else now_local(),
        location=Coordinates.from_geojson(data["location"]["coordinates"]),
        employee_id=int(employee_id) if employee_id not in (None, "") else None,
        qr_data=data.get("qrData"),
        face_descriptor=data.get("faceTemplate"),
    )


def _report_query() -> dict:
    args = v.validate(
        request.args,
        v.one_of("period", PERIODS, optional=True),
        v.iso_date("startDate"),
        v.iso_date("endDate"),
    )
    period = args.get("period")
    start = args.get("startDate")
    end = args.get("endDate")
    return {
        "period": ReportPeriod(period) if period else None,
        "start_date": parse_iso_date(start) if start else None,
        "end_date": parse_iso_date(end) if end else None,
    }


def qr_payload_text(raw: bytes) -> str:
    try:
        return raw.decode("utf-8").strip()
    except UnicodeDecodeError:
        raise ValidationError(
            "Invalid QR code",
            errors=[{"field": "qrData", "message": "QR payload is not UTF-8 text"}],
        )


def _qr_png(token: str) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(token)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container.auth_service)
    service = container.attendance_service

    def _record(method: CaptureMethod, data: Mapping[str, Any]):
        record = service.record_entry(
            principal=current_principal(),
            method=method,
            request=_capture_request(data),
        )
        return ok(record.to_dict(), "Attendance recorded", 201)

    @app.route("/api/attendance", methods=["POST"], endpoint="record_attendance")
    @auth_required(*ANY_ROLE)
    def record_attendance():
        data = v.validate(request.get_json(silent=True))
        method = data.get("method") or CaptureMethod.MANUAL.value
        steps = [v.one_of("method", METHODS, optional=True), v.iso_datetime("entryTime", optional=True), v.location()]
        if method == CaptureMethod.QR.value:
            steps.append(v.required("qrData"))
        else:
            steps.append(v.positive_int("employeeId"))
        if method == CaptureMethod.FACIAL.value:
            steps.append(v.descriptor("faceTemplate", FACE_DESCRIPTOR_LENGTH))
        v.validate(data, *steps)
        return _record(CaptureMethod(method), data)

    @app.route("/api/attendance/employee/<int:employee_id>", methods=["GET"], endpoint="employee_attendance")
    @auth_required(*ANY_ROLE)
    def employee_attendance(employee_id: int):
        v.validate(request.args, v.positive_int("limit", optional=True))
        limit = int(request.args.get("limit") or DEFAULT_HISTORY_LIMIT)
        records = service.list_for_employee(principal=current_principal(), employee_id=employee_id, limit=limit)
        return ok([r.to_dict() for r in records], "Attendance records")

    @app.route("/api/attendance/qr/<int:employee_id>", methods=["GET"], endpoint="issue_qr")
    @auth_required(Role.ADMIN)
    def issue_qr(employee_id: int):
        token, expires_at = service.issue_qr_token(principal=current_principal(), employee_id=employee_id)
        return ok({"qrData": token, "expiresAt": expires_at.isoformat()}, "QR code generated")

    @app.route("/api/attendance/qr/<int:employee_id>/image", methods=["GET"], endpoint="issue_qr_image")
    @auth_required(Role.ADMIN)
    def issue_qr_image(employee_id: int):
        token, _ = service.issue_qr_token(principal=current_principal(), employee_id=employee_id)
        return send_file(_qr_png(token), mimetype="image/png")

    @app.route("/api/attendance/scan-qr", methods=["POST"], endpoint="scan_qr")
    @auth_required(*ANY_ROLE)
    def scan_qr():
        data = v.validate(
            request.get_json(silent=True),
            v.required("qrData"),
            v.iso_datetime("entryTime", optional=True),
            v.location(),
        )
        return _record(CaptureMethod.QR, data)

    @app.route("/api/attendance/scan-qr/image", methods=["POST"], endpoint="scan_qr_image")
    @auth_required(*ANY_ROLE)
    def scan_qr_image():
        """Decode a QR code from an uploaded photo, then proceed as scan-qr."""
        if "image" not in request.files:
            raise ValidationError("Validation errors", errors=[{"field": "image", "message": "image is required"}])

        try:
            img = Image.open(request.files["image"].stream).convert("RGB")
        except (UnidentifiedImageError, OSError):
            raise ValidationError(
                "Validation errors",
                errors=[{"field": "image", "message": "image must be a readable picture"}],
            )

        # pyzbar loads the native zbar library on import; only this endpoint needs it.
        from pyzbar.pyzbar import decode as pyzbar_decode

        decoded = pyzbar_decode(img)
        if not decoded:
            raise ValidationError("No QR code found in image")

        try:
            lng = float(request.form.get("lng", ""))
            lat = float(request.form.get("lat", ""))
        except ValueError:
            raise ValidationError(
                "Validation errors",
                errors=[{"field": "location", "message": "lng and lat form fields are required"}],
            )

        data = v.validate(
            {
                "qrData": qr_payload_text(decoded[0].data),
                "entryTime": request.form.get("entryTime"),
                "location": {"coordinates": [lng, lat]},
            },
            v.iso_datetime("entryTime", optional=True),
            v.location(),
        )
        return _record(CaptureMethod.QR, data)

    @app.route("/api/attendance/facial", methods=["POST"], endpoint="facial_attendance")
    @auth_required(*ANY_ROLE)
    def facial_attendance():
        data = v.validate(
            request.get_json(silent=True),
            v.positive_int("employeeId"),
            v.descriptor("faceTemplate", FACE_DESCRIPTOR_LENGTH),
            v.iso_datetime("entryTime", optional=True),
            v.location(),
        )
        return _record(CaptureMethod.FACIAL, data)

    @app.route("/api/attendance/exit", methods=["POST"], endpoint="record_exit")
    @auth_required(*ANY_ROLE)
    def record_exit():
        data = v.validate(
            request.get_json(silent=True),
            v.positive_int("employeeId"),
            v.iso_datetime("exitTime", optional=True),
            v.location(),
        )
        exit_request = _capture_request(data, time_field="exitTime")
        record = service.record_exit(
            principal=current_principal(),
            employee_id=int(data["employeeId"]),
            exit_time=exit_request.timestamp,
            location=exit_request.location,
        )
        return ok(record.to_dict(), "Exit recorded")

    @app.route("/api/attendance/report/<int:employee_id>", methods=["GET"], endpoint="presence_report")
    @auth_required(*ANY_ROLE)
    def presence_report(employee_id: int):
        report = container.report_service.build_report(
            principal=current_principal(),
            employee_id=employee_id,
            **_report_query(),
        )
        return ok(report.to_dict(), "Presence report")

    @app.route("/api/attendance/reports", methods=["GET"], endpoint="presence_reports")
    @auth_required(Role.ADMIN)
    def presence_reports():
        reports = container.report_service.build_fleet_report(principal=current_principal(), **_report_query())
        return ok([r.to_dict() for r in reports], "Presence reports")
