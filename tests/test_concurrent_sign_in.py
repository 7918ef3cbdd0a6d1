from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

from src.employee_management.employee_management.attendance.model import AlreadySignedIn, Created
from src.employee_management.employee_management.attendance.service import AttendanceService
from src.employee_management.employee_management.leaves.service import LeaveCalendar

from tests.fakes import InMemoryAttendance


class RacingAttendance(InMemoryAttendance):
    """Makes every caller observe "no row yet" before any of them inserts."""

    def __init__(self, employees, parties: int):
        super().__init__(employees)
        self._barrier = threading.Barrier(parties)
        self._first_read = threading.local()

    def get_for_employee_and_date(self, employee_id, work_date):
        if not getattr(self._first_read, "done", False):
            self._first_read.done = True
            result = super().get_for_employee_and_date(employee_id, work_date)
            self._barrier.wait(timeout=5)
            return result
        return super().get_for_employee_and_date(employee_id, work_date)


def test_concurrent_sign_ins_converge_on_one_record(employees, leaves, fixed_now):
    parties = 8
    ledger = RacingAttendance(employees, parties)
    service = AttendanceService(ledger, employees, LeaveCalendar(leaves))

    def attempt(i: int):
        return service.sign_in(7, fixed_now + timedelta(seconds=i))

    with ThreadPoolExecutor(max_workers=parties) as pool:
        results = list(pool.map(attempt, range(parties)))

    created = [r for r in results if isinstance(r, Created)]
    already = [r for r in results if isinstance(r, AlreadySignedIn)]

    assert len(created) == 1
    assert len(already) == parties - 1
    assert len(ledger.all()) == 1
    assert ledger.insert_calls == parties

    winner = created[0].record
    assert all(r.record.sign_in_time == winner.sign_in_time for r in already)


def test_manual_sign_out_racing_the_sweep_writes_once(attendance, employees, leaves, fixed_now):
    service = AttendanceService(attendance, employees, LeaveCalendar(leaves))
    service.sign_in(7, fixed_now)
    evening = fixed_now.replace(hour=18, minute=30)

    with ThreadPoolExecutor(max_workers=2) as pool:
        manual = pool.submit(service.sign_out, 7, evening)
        sweep = pool.submit(service.auto_sign_out, evening)
        manual_record = manual.result()
        closed = sweep.result()

    (record,) = attendance.all()
    assert record.sign_out_time is not None
    assert manual_record.sign_out_time == record.sign_out_time
    # Either the sweep won (closed at the cutoff) or the employee did.
    if closed:
        assert record.auto_signed_out is True
        assert record.sign_out_time == fixed_now.replace(hour=18, minute=0)
    else:
        assert record.auto_signed_out is False
        assert record.sign_out_time == evening
