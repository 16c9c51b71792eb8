from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ...common.logging import kv
from ...core.enums import CaptureMethod, NotificationType
from ...core.exceptions import CredentialRejection, ValidationError
from ...core.policy import AttendancePolicy
from ...employees.model import Principal
from ...notifications.notifier import PolicyNotifier
from ..qr_token import QrClaims, QrTokenCodec
from .base import CaptureAdapter, CaptureRequest, ResolvedCapture


class QrCaptureAdapter(CaptureAdapter):
    """Employee identity comes from a signed QR token.

    The token's own ``exp`` is authoritative; tokens without one are valid
    for a short fixed window after issuance.
    """

    method = CaptureMethod.QR

    def __init__(
        self,
        codec: QrTokenCodec,
        notifier: PolicyNotifier,
        *,
        policy: AttendancePolicy,
        logger: Optional[logging.Logger] = None,
    ):
        self._codec = codec
        self._notifier = notifier
        self._policy = policy
        self._log = logger or logging.getLogger(__name__)

    def is_expired(self, claims: QrClaims, now: datetime) -> bool:
        if claims.expires_at is not None:
            return now > claims.expires_at
        return now - claims.issued_at > self._policy.qr_fallback_validity

    def resolve(self, request: CaptureRequest, *, actor: Principal, now: datetime) -> ResolvedCapture:
        if not request.qr_data or not request.qr_data.strip():
            raise ValidationError(
                "Validation errors",
                errors=[{"field": "qrData", "message": "qrData is required"}],
            )

        claims = self._codec.decode(request.qr_data)
        self.authorize(actor, claims.employee_id)

        if self.is_expired(claims, now):
            self._log.info(
                "expired qr rejected %s",
                kv(employee_id=claims.employee_id, issued_at=claims.issued_at.isoformat()),
            )
            self._notifier.notify(
                claims.employee_id,
                NotificationType.EXPIRED_QR,
                "An attendance attempt used an expired QR code. Please request a new one.",
            )
            raise CredentialRejection("QR code expired", reason="expired_qr")

        return self.resolved(request, claims.employee_id)
