from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.enums import ReportPeriod
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ReportWindow:
    """Half-open ``[start, end)`` range of entry timestamps."""

    start: datetime
    end: datetime


def _midnight(d: date) -> datetime:
    return datetime.combine(d, time.min)


def add_month(d: date) -> date:
    year, month = (d.year + 1, 1) if d.month == 12 else (d.year, d.month + 1)
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def resolve_window(
    *,
    period: Optional[ReportPeriod],
    start_date: Optional[date],
    end_date: Optional[date],
    hire_date: date,
    now: datetime,
) -> ReportWindow:
    """Turn the report query into a concrete window.

    * ``period`` anchored at ``start_date`` (today when absent);
    * otherwise an explicit ``start_date``..``end_date`` (inclusive dates);
    * otherwise hire date through today.

    A default start (the hire date) after the end gives an empty window; only
    an explicit ``start_date`` after the end is rejected.
    """
    if period is not None:
        anchor = start_date or now.date()
        if period == ReportPeriod.DAILY:
            end = anchor + timedelta(days=1)
        elif period == ReportPeriod.WEEKLY:
            end = anchor + timedelta(days=7)
        else:
            end = add_month(anchor)
        return ReportWindow(start=_midnight(anchor), end=_midnight(end))

    start = start_date or hire_date
    last = end_date or now.date()
    if last < start:
        if start_date is None:
            # hired after the end of the range: nothing to report yet
            return ReportWindow(start=_midnight(start), end=_midnight(start))
        raise ValidationError(
            "endDate must not be before startDate",
            errors=[{"field": "endDate", "message": "must not be before startDate"}],
        )
    return ReportWindow(start=_midnight(start), end=_midnight(last + timedelta(days=1)))
