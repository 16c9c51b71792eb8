from __future__ import annotations

from flask import Flask, request

from ..common import validators as v
from ..common.http import current_principal, make_auth_required, ok
from ..core.constants import AUTH_COOKIE_NAME, FACE_DESCRIPTOR_LENGTH
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container.auth_service)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = v.validate(request.get_json(silent=True), v.required("email", "password"))
        token, employee = container.auth_service.authenticate(data["email"], data["password"])

        resp, status = ok(employee.to_public_dict(), "Login successful")
        resp.set_cookie(
            AUTH_COOKIE_NAME,
            token,
            httponly=True,
            secure=not app.config.get("DEBUG", False) and not app.config.get("TESTING", False),
            samesite="Strict",
        )
        return resp, status

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        resp, status = ok(message="Logged out")
        resp.delete_cookie(AUTH_COOKIE_NAME)
        return resp, status

    @app.route("/api/employees/<int:employee_id>/face-template", methods=["PUT"], endpoint="update_face_template")
    @auth_required(Role.EMPLOYEE, Role.STAGIAIRE, Role.ADMIN)
    def update_face_template(employee_id: int):
        data = v.validate(request.get_json(silent=True), v.descriptor("faceTemplate", FACE_DESCRIPTOR_LENGTH))
        employee = container.employee_service.enroll_face(
            principal=current_principal(),
            employee_id=employee_id,
            descriptor=data["faceTemplate"],
        )
        return ok(employee.to_public_dict(), "Face template updated successfully")
