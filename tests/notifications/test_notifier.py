from datetime import datetime, timedelta

import pytest

from src.hr_attendance.hr_attendance.core.enums import NotificationType, Role
from src.hr_attendance.hr_attendance.core.exceptions import AuthorizationError, NotFoundError
from src.hr_attendance.hr_attendance.employees.model import Principal
from src.hr_attendance.hr_attendance.notifications.mailer import MailSettings, SmtpMailer
from src.hr_attendance.hr_attendance.notifications.notifier import PolicyNotifier
from src.hr_attendance.hr_attendance.notifications.service import NotificationService

EMPLOYEE = Principal(actor_id=2, role=Role.EMPLOYEE)
INTERN = Principal(actor_id=3, role=Role.STAGIAIRE)


class BrokenNotifications:
    def create(self, **kwargs):
        raise ConnectionError("db down")


def test_notify_saves_row_and_mails(container, notifications_repo, mailer):
    container.notifier.notify(2, NotificationType.LOCATION_ISSUE, "outside")

    assert notifications_repo.types_for(2) == [NotificationType.LOCATION_ISSUE]
    assert mailer.sent == [("e2@example.com", "Attendance location issue", "outside")]


def test_notify_swallows_store_and_mail_failures(employees_repo, mailer):
    mailer._fail = True
    notifier = PolicyNotifier(BrokenNotifications(), employees_repo, mailer)
    try:
        notifier.notify(2, NotificationType.EXPIRED_QR, "expired")
        notifier.notify(404, NotificationType.EXPIRED_QR, "nobody")
    finally:
        notifier.shutdown(wait=True)


def test_smtp_mailer_without_host_is_disabled():
    assert SmtpMailer(MailSettings(host="")).send("a@example.com", "s", "b") is False


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 20), ("abc", 20), (0, 1), (-5, 1), (7, 7), ("50", 50), (500, 50)],
)
def test_limit_is_clamped(raw, expected):
    assert NotificationService.clamp_limit(raw) == expected


def test_inbox_is_newest_first_and_private(container, notifications_repo, fixed_now):
    for minutes in (0, 5, 10):
        notifications_repo.create(
            employee_id=2,
            message=f"m{minutes}",
            type=NotificationType.LATE_ARRIVAL,
            created_at=fixed_now + timedelta(minutes=minutes),
        )

    items = container.notification_service.list_for_employee(principal=EMPLOYEE, employee_id=2, limit=2)

    assert [n.message for n in items] == ["m10", "m5"]
    with pytest.raises(AuthorizationError):
        container.notification_service.list_for_employee(principal=INTERN, employee_id=2)


def test_mark_read_and_mark_all(container, notifications_repo, fixed_now):
    service = container.notification_service
    first = notifications_repo.create(
        employee_id=2, message="a", type=NotificationType.LATE_ARRIVAL, created_at=fixed_now
    )
    notifications_repo.create(employee_id=2, message="b", type=NotificationType.LATE_ARRIVAL, created_at=fixed_now)

    assert service.mark_read(principal=EMPLOYEE, notification_id=first).read
    with pytest.raises(AuthorizationError):
        service.mark_read(principal=INTERN, notification_id=first)
    with pytest.raises(NotFoundError):
        service.mark_read(principal=EMPLOYEE, notification_id=999)

    assert service.mark_all_read(principal=EMPLOYEE, employee_id=2) == 1


def test_sweep_deletes_only_old_read_notifications(container, notifications_repo):
    now = datetime(2026, 3, 2, 12, 0)
    old_read = notifications_repo.create(
        employee_id=2, message="old", type=NotificationType.LATE_ARRIVAL, created_at=now - timedelta(days=31)
    )
    notifications_repo.create(
        employee_id=2, message="old unread", type=NotificationType.LATE_ARRIVAL, created_at=now - timedelta(days=31)
    )
    recent_read = notifications_repo.create(
        employee_id=2, message="recent", type=NotificationType.LATE_ARRIVAL, created_at=now - timedelta(days=2)
    )
    notifications_repo.mark_read(old_read)
    notifications_repo.mark_read(recent_read)

    assert container.notification_service.sweep(now=now) == 1
    assert notifications_repo.get_by_id(old_read) is None
    assert notifications_repo.get_by_id(recent_read) is not None
