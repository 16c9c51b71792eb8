from __future__ import annotations

from flask import Flask, request

from ..common import validators as v
from ..common.datetime_utils import now_local
from ..common.http import current_principal, make_auth_required, ok
from ..core.enums import Role
from ..container import Container

ANY_ROLE = (Role.EMPLOYEE, Role.STAGIAIRE, Role.ADMIN)


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container.auth_service)
    service = container.notification_service

    @app.route("/api/notifications/<int:employee_id>", methods=["GET"], endpoint="list_notifications")
    @auth_required(*ANY_ROLE)
    def list_notifications(employee_id: int):
        v.validate(request.args, v.positive_int("limit", optional=True))
        items = service.list_for_employee(
            principal=current_principal(),
            employee_id=employee_id,
            limit=request.args.get("limit"),
        )
        return ok({"notifications": [n.to_dict() for n in items]}, "Notifications")

    @app.route("/api/notifications/<int:notification_id>/read", methods=["PATCH"], endpoint="mark_notification_read")
    @auth_required(*ANY_ROLE)
    def mark_notification_read(notification_id: int):
        notification = service.mark_read(principal=current_principal(), notification_id=notification_id)
        return ok({"notification": notification.to_dict()}, "Notification marked as read")

    @app.route(
        "/api/notifications/employee/<int:employee_id>/read-all",
        methods=["PATCH"],
        endpoint="mark_all_notifications_read",
    )
    @auth_required(*ANY_ROLE)
    def mark_all_notifications_read(employee_id: int):
        updated = service.mark_all_read(principal=current_principal(), employee_id=employee_id)
        return ok({"updated": updated}, "All notifications marked as read")

    @app.route("/api/notifications/cleanup", methods=["DELETE"], endpoint="cleanup_notifications")
    @auth_required(Role.ADMIN)
    def cleanup_notifications():
        deleted = service.sweep(now=now_local())
        return ok({"deleted": deleted}, f"Deleted {deleted} old notifications")
