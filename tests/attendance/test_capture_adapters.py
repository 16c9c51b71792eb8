from datetime import timedelta

import pytest

from src.hr_attendance.hr_attendance.attendance.capture.base import CaptureRequest
from src.hr_attendance.hr_attendance.attendance.capture.facial import FacialCaptureAdapter
from src.hr_attendance.hr_attendance.attendance.capture.manual import ManualCaptureAdapter
from src.hr_attendance.hr_attendance.attendance.capture.qr import QrCaptureAdapter
from src.hr_attendance.hr_attendance.attendance.factory import CaptureAdapterFactory
from src.hr_attendance.hr_attendance.attendance.qr_token import QrTokenCodec
from src.hr_attendance.hr_attendance.core.enums import CaptureMethod, NotificationType, Role
from src.hr_attendance.hr_attendance.core.exceptions import (
    AuthorizationError,
    CredentialRejection,
    NotFoundError,
    ValidationError,
)
from src.hr_attendance.hr_attendance.employees.model import Principal

EMPLOYEE = Principal(actor_id=2, role=Role.EMPLOYEE)
INTERN = Principal(actor_id=3, role=Role.STAGIAIRE)
ADMIN = Principal(actor_id=1, role=Role.ADMIN)


@pytest.fixture
def codec():
    return QrTokenCodec("test-qr-secret")


@pytest.fixture
def qr_adapter(codec, container, policy):
    return QrCaptureAdapter(codec, container.notifier, policy=policy)


def _qr_request(token, fixed_now, office):
    return CaptureRequest(timestamp=fixed_now, location=office, qr_data=token)


def test_manual_adapter_enforces_self_or_admin(fixed_now, office):
    adapter = ManualCaptureAdapter()
    request = CaptureRequest(timestamp=fixed_now, location=office, employee_id=2)

    assert adapter.resolve(request, actor=EMPLOYEE, now=fixed_now).employee_id == 2
    assert adapter.resolve(request, actor=ADMIN, now=fixed_now).method == CaptureMethod.MANUAL
    with pytest.raises(AuthorizationError):
        adapter.resolve(request, actor=INTERN, now=fixed_now)


def test_qr_without_exp_expires_after_fallback_window(
    qr_adapter, codec, fixed_now, office, notifications_repo, mailer
):
    token = codec.issue(2, now=fixed_now - timedelta(minutes=6), validity=None)

    with pytest.raises(CredentialRejection) as exc:
        qr_adapter.resolve(_qr_request(token, fixed_now, office), actor=EMPLOYEE, now=fixed_now)

    assert exc.value.reason == "expired_qr"
    assert exc.value.status_code == 401
    assert notifications_repo.types_for(2) == [NotificationType.EXPIRED_QR]
    assert mailer.sent[0][0] == "e2@example.com"


def test_qr_without_exp_accepted_inside_fallback_window(qr_adapter, codec, fixed_now, office):
    token = codec.issue(2, now=fixed_now - timedelta(minutes=4), validity=None)

    capture = qr_adapter.resolve(_qr_request(token, fixed_now, office), actor=EMPLOYEE, now=fixed_now)

    assert capture.employee_id == 2
    assert capture.method == CaptureMethod.QR


def test_qr_embedded_exp_is_authoritative(qr_adapter, codec, fixed_now, office):
    fresh = codec.issue(2, now=fixed_now - timedelta(hours=6), validity=timedelta(hours=12))
    stale = codec.issue(2, now=fixed_now - timedelta(hours=13), validity=timedelta(hours=12))

    assert qr_adapter.resolve(_qr_request(fresh, fixed_now, office), actor=EMPLOYEE, now=fixed_now).employee_id == 2
    with pytest.raises(CredentialRejection):
        qr_adapter.resolve(_qr_request(stale, fixed_now, office), actor=EMPLOYEE, now=fixed_now)


def test_qr_malformed_or_foreign_token(qr_adapter, fixed_now, office):
    foreign = QrTokenCodec("someone-else").issue(2, now=fixed_now, validity=None)

    for token in ("not-a-token", foreign):
        with pytest.raises(ValidationError) as exc:
            qr_adapter.resolve(_qr_request(token, fixed_now, office), actor=EMPLOYEE, now=fixed_now)
        assert exc.value.errors[0]["field"] == "qrData"


def test_qr_for_another_employee_is_forbidden(qr_adapter, codec, fixed_now, office, notifications_repo):
    token = codec.issue(2, now=fixed_now, validity=None)

    with pytest.raises(AuthorizationError):
        qr_adapter.resolve(_qr_request(token, fixed_now, office), actor=INTERN, now=fixed_now)
    assert notifications_repo.types_for(2) == []


def test_facial_match_and_mismatch(employees_repo, policy, fixed_now, office):
    adapter = FacialCaptureAdapter(employees_repo, policy=policy)
    same = CaptureRequest(timestamp=fixed_now, location=office, employee_id=2, face_descriptor=[0.1] * 128)
    far = CaptureRequest(
        timestamp=fixed_now, location=office, employee_id=2, face_descriptor=[0.1] * 127 + [0.9]
    )

    assert adapter.resolve(same, actor=EMPLOYEE, now=fixed_now).method == CaptureMethod.FACIAL
    with pytest.raises(CredentialRejection) as exc:
        adapter.resolve(far, actor=EMPLOYEE, now=fixed_now)
    assert exc.value.reason == "face_not_recognized"


def test_facial_without_enrolled_template(employees_repo, policy, fixed_now, office):
    adapter = FacialCaptureAdapter(employees_repo, policy=policy)
    request = CaptureRequest(timestamp=fixed_now, location=office, employee_id=3, face_descriptor=[0.1] * 128)

    with pytest.raises(CredentialRejection) as exc:
        adapter.resolve(request, actor=INTERN, now=fixed_now)
    assert exc.value.reason == "no_face_template"

    unknown = CaptureRequest(timestamp=fixed_now, location=office, employee_id=99, face_descriptor=[0.1] * 128)
    with pytest.raises(NotFoundError):
        adapter.resolve(unknown, actor=ADMIN, now=fixed_now)


def test_factory_returns_adapter_per_method(employees_repo, codec, container, policy):
    factory = CaptureAdapterFactory(employees=employees_repo, codec=codec, notifier=container.notifier, policy=policy)

    assert isinstance(factory.for_method(CaptureMethod.MANUAL), ManualCaptureAdapter)
    assert isinstance(factory.for_method("qr"), QrCaptureAdapter)
    assert isinstance(factory.for_method(CaptureMethod.FACIAL), FacialCaptureAdapter)
