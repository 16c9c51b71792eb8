"""Signed QR attendance tokens.

A token is an HS256 JWT with ``sub`` (employee id), ``iat`` and, for tokens
issued here, ``exp``. Expiry is not checked while decoding; the QR capture
adapter applies the expiry rule against the request clock.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import jwt

from ..core.exceptions import ValidationError

QR_ALGORITHM = "HS256"


@dataclass(frozen=True)
class QrClaims:
    employee_id: int
    issued_at: datetime
    expires_at: Optional[datetime] = None


class QrTokenCodec:
    def __init__(self, secret: str):
        self._secret = secret

    def issue(self, employee_id: int, *, now: datetime, validity: Optional[timedelta]) -> str:
        payload = {"sub": str(int(employee_id)), "iat": int(now.timestamp())}
        if validity is not None:
            payload["exp"] = int((now + validity).timestamp())
        return jwt.encode(payload, self._secret, algorithm=QR_ALGORITHM)

    def decode(self, token: str) -> QrClaims:
        try:
            payload = jwt.decode(
                token.strip(),
                self._secret,
                algorithms=[QR_ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": ["sub", "iat"],
                },
            )
            exp = payload.get("exp")
            return QrClaims(
                employee_id=int(payload["sub"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"])),
                expires_at=datetime.fromtimestamp(int(exp)) if exp is not None else None,
            )
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError, OverflowError):
            raise ValidationError(
                "Invalid QR code",
                errors=[{"field": "qrData", "message": "malformed or unsigned QR payload"}],
            )
