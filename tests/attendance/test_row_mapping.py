from datetime import date, datetime

from src.onpoint_payroll.onpoint_payroll.attendance.mysql_attendance_repository import _dump_punches, _to_record
from src.onpoint_payroll.onpoint_payroll.core.enums import AdjustmentStatus, PunchKind
from src.onpoint_payroll.onpoint_payroll.policies.mysql_policy_repository import _parse_weekdays


def _row(**overrides):
    row = {
        "log_id": 7,
        "tenant_id": "acme",
        "employee_id": "emp-1",
        "work_date": date(2026, 1, 12),
        "clock_in": None,
        "clock_out": None,
        "clock_in_2": None,
        "clock_out_2": None,
        "punches": None,
        "adjustment_status": None,
        "adjustment_applied": 0,
        "adjustment_reason": None,
        "requested_clock_in": None,
        "requested_clock_out": None,
        "requested_clock_in_2": None,
        "requested_clock_out_2": None,
    }
    row.update(overrides)
    return row


def test_punch_json_is_parsed_leniently():
    record = _to_record(
        _row(
            punches='[{"type": "in", "time": "2026-01-12T08:00:00Z"},'
            ' {"type": "break", "time": "2026-01-12T10:00:00"},'
            ' {"type": "out", "time": "not a time"}]'
        )
    )

    kinds = [p.kind for p in record.punches]
    assert kinds == [PunchKind.IN, None, PunchKind.OUT]
    assert record.punches[0].timestamp == datetime(2026, 1, 12, 8, 0)
    assert record.punches[2].timestamp is None


def test_broken_punch_json_falls_back_to_legacy_fields():
    record = _to_record(_row(punches="{oops", clock_in=datetime(2026, 1, 12, 8, 0)))

    assert record.punches == ()
    assert record.legacy.primary_in == datetime(2026, 1, 12, 8, 0)


def test_applied_flag_without_status_means_approved():
    record = _to_record(_row(adjustment_applied=1, requested_clock_out="2026-01-12T12:00:00"))

    assert record.is_adjustment_applied
    assert record.adjustment_status == AdjustmentStatus.APPROVED
    assert record.adjustment.requested_out == datetime(2026, 1, 12, 12, 0)


def test_dumped_punches_read_back(punch_record):
    original = punch_record(date(2026, 1, 12), ("in", "08:00"), ("out", "12:00"))

    record = _to_record(_row(punches=_dump_punches(original.punches)))

    assert [(p.kind, p.timestamp) for p in record.punches] == [(p.kind, p.timestamp) for p in original.punches]


def test_working_weekdays_parsing():
    assert _parse_weekdays("0,1,2,3,4,5") == frozenset(range(6))
    assert _parse_weekdays("") == frozenset(range(5))
    assert _parse_weekdays("mon,tue") == frozenset(range(5))
    assert _parse_weekdays("0,9") == frozenset(range(5))
