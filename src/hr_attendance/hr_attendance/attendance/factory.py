from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import CaptureMethod
from ..core.policy import AttendancePolicy
from ..employees.repository import EmployeeRepository
from ..notifications.notifier import PolicyNotifier
from .capture.base import CaptureAdapter
from .capture.facial import FacialCaptureAdapter
from .capture.manual import ManualCaptureAdapter
from .capture.qr import QrCaptureAdapter
from .qr_token import QrTokenCodec


@dataclass
class CaptureAdapterFactory:
    """Factory Pattern: choose the capture adapter for a method."""

    employees: EmployeeRepository
    codec: QrTokenCodec
    notifier: PolicyNotifier
    policy: AttendancePolicy
    logger: Optional[logging.Logger] = None
    _adapters: dict = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        self._adapters = {
            CaptureMethod.MANUAL: ManualCaptureAdapter(),
            CaptureMethod.QR: QrCaptureAdapter(self.codec, self.notifier, policy=self.policy, logger=self.logger),
            CaptureMethod.FACIAL: FacialCaptureAdapter(self.employees, policy=self.policy, logger=self.logger),
        }

    def for_method(self, method: CaptureMethod) -> CaptureAdapter:
        return self._adapters[CaptureMethod(method)]
