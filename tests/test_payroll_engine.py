from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from payroll_api.extensions import db
from payroll_api.common.errors import (
    DuplicateRun, InvalidPeriod, NoEligibleEmployees, PersistenceFailure, PayslipImmutableError,
)
from payroll_api.models.payroll.pay_run import PayrollRun
from payroll_api.models.payroll.payslip import Payslip
from payroll_api.services import payroll_engine
from payroll_api.services.payroll_engine import run_payroll, parse_period


def _slips(month, year):
    return Payslip.query.filter_by(month=month, year=year).all()


def test_run_snapshots_eligible_employee_only(make_employee, make_user):
    admin = make_user(role="admin")
    e1 = make_employee(basic=20000, hra=8000, allowances=2000, deductions=1000)
    make_employee(basic=50000, is_active=False)

    run = run_payroll(3, 2025, initiator_id=admin.id)

    assert (run.month, run.year, run.status) == (3, 2025, "PROCESSED")
    assert run.employee_count == 1
    assert run.total_net == Decimal("29000")
    assert run.processed_by == admin.id

    slips = _slips(3, 2025)
    assert len(slips) == 1
    s = slips[0]
    assert s.user_id == e1.user_id
    assert s.payroll_run_id == run.id
    assert s.gross == Decimal("30000")
    assert s.net_pay == Decimal("29000")


def test_second_run_for_same_period_is_rejected(make_employee):
    make_employee(basic=20000, hra=8000, allowances=2000, deductions=1000)
    run_payroll(3, 2025)

    with pytest.raises(DuplicateRun) as ei:
        run_payroll(3, 2025)
    assert ei.value.code == "DUPLICATE_RUN"
    assert PayrollRun.query.filter_by(month=3, year=2025).count() == 1
    assert len(_slips(3, 2025)) == 1


def test_constraint_rejects_duplicate_when_precheck_misses(make_employee, monkeypatch):
    # a concurrent caller committed between our check and our insert
    make_employee(basic=1000)
    run_payroll(5, 2025)
    monkeypatch.setattr(payroll_engine, "find_run", lambda month, year: None)

    with pytest.raises(DuplicateRun):
        run_payroll(5, 2025)
    assert PayrollRun.query.filter_by(month=5, year=2025).count() == 1
    assert len(_slips(5, 2025)) == 1


def test_database_error_writing_run_is_a_persistence_failure(make_employee, monkeypatch):
    make_employee(basic=1000)

    def broken_flush(*a, **kw):
        raise OperationalError("INSERT INTO payroll_runs", {}, Exception("connection lost"))

    monkeypatch.setattr(db.session, "flush", broken_flush)
    with pytest.raises(PersistenceFailure) as ei:
        run_payroll(5, 2025)
    assert ei.value.code == "PERSISTENCE_FAILURE"
    assert ei.value.status_code == 500

    monkeypatch.undo()
    assert PayrollRun.query.filter_by(month=5, year=2025).count() == 0
    assert _slips(5, 2025) == []


def test_no_active_employees(make_employee):
    make_employee(basic=1000, is_active=False)

    with pytest.raises(NoEligibleEmployees) as ei:
        run_payroll(4, 2025)
    assert ei.value.code == "NO_ELIGIBLE_EMPLOYEES"
    assert PayrollRun.query.filter_by(month=4, year=2025).count() == 0


def test_all_linked_users_inactive_means_nothing_to_run(make_employee, make_user):
    make_employee(user=make_user(status="inactive"), basic=1000)
    make_employee(user=make_user(status="suspended"), basic=1000)
    make_employee(user=None, basic=1000)

    with pytest.raises(NoEligibleEmployees):
        run_payroll(4, 2025)
    assert PayrollRun.query.count() == 0


def test_ineligible_employees_are_skipped_not_fatal(make_employee, make_user):
    ok = make_employee(basic=1000)
    make_employee(user=make_user(status="suspended"), basic=2000)
    make_employee(user=None, basic=3000)
    make_employee(basic=4000, is_active=False)

    run = run_payroll(6, 2025)

    assert run.employee_count == 1
    assert [s.user_id for s in _slips(6, 2025)] == [ok.user_id]


def test_null_components_count_as_zero(make_employee):
    make_employee(basic=15000, hra=None, allowances=None, deductions=None)

    run_payroll(7, 2025)

    s = _slips(7, 2025)[0]
    assert s.gross == Decimal("15000")
    assert s.net_pay == Decimal("15000")
    assert s.hra is None and s.deductions is None


def test_summary_equals_sum_of_payslips(make_employee):
    make_employee(basic="10000.10", hra="0.10", allowances="0.10", deductions="0.05")
    make_employee(basic="20000.20", hra="0.20", deductions="1000")
    make_employee(basic="333.33", allowances="0.01")

    run = run_payroll(8, 2025)

    slips = Payslip.query.filter_by(payroll_run_id=run.id).all()
    assert run.employee_count == len(slips) == 3
    assert run.total_net == sum((s.net_pay for s in slips), Decimal("0"))
    assert run.total_net == Decimal("29333.99")


def test_payslips_keep_values_after_salary_change(make_employee, session):
    e = make_employee(basic=20000, hra=8000, allowances=2000, deductions=1000, department="Ops")
    run_payroll(9, 2025)

    e.basic = Decimal("90000")
    e.deductions = Decimal("0")
    e.department = "Finance"
    e.user.full_name = "Renamed Person"
    session.commit()
    session.expire_all()

    s = _slips(9, 2025)[0]
    assert s.basic == Decimal("20000")
    assert s.gross == Decimal("30000")
    assert s.net_pay == Decimal("29000")
    assert s.department == "Ops"
    assert s.full_name != "Renamed Person"


def test_stored_payslip_cannot_be_modified(make_employee, session):
    make_employee(basic=1000)
    run_payroll(10, 2025)
    s = _slips(10, 2025)[0]

    s.net_pay = Decimal("1")
    with pytest.raises(PayslipImmutableError):
        session.commit()
    session.rollback()

    session.delete(_slips(10, 2025)[0])
    with pytest.raises(PayslipImmutableError):
        session.commit()
    session.rollback()
    assert _slips(10, 2025)[0].net_pay == Decimal("1000")


def test_failed_payslip_write_rolls_back_the_run(make_employee, session):
    e = make_employee(basic=1000)
    make_employee(basic=2000)
    # stray payslip for the same user/period under another run
    other = PayrollRun(month=1, year=2020, employee_count=0, total_net=0)
    session.add(other)
    session.flush()
    session.add(Payslip(payroll_run_id=other.id, user_id=e.user_id, month=11, year=2025,
                        gross=Decimal("5"), net_pay=Decimal("5")))
    session.commit()

    with pytest.raises(PersistenceFailure) as ei:
        run_payroll(11, 2025)
    assert ei.value.code == "PERSISTENCE_FAILURE"

    assert PayrollRun.query.filter_by(month=11, year=2025).count() == 0
    # no new payslips; the stray one is still the only one for that user/period
    assert len(_slips(11, 2025)) == 1


def test_different_periods_are_independent(make_employee):
    make_employee(basic=1000)
    a = run_payroll(1, 2025)
    b = run_payroll(2, 2025)
    c = run_payroll(1, 2026)
    assert len({a.id, b.id, c.id}) == 3
    assert Payslip.query.count() == 3


@pytest.mark.parametrize("month,year", [
    (0, 2025), (13, 2025), (None, 2025), ("abc", 2025), (2.5, 2025), (True, 2025),
    (3, None), (3, ""), (3, "20x5"), (3, 99),
    ("1_2", 2025), (3, "20_25"), ("\u0663", 2025),
])
def test_invalid_period(month, year, app):
    with pytest.raises(InvalidPeriod) as ei:
        parse_period(month, year)
    assert ei.value.code == "INVALID_PERIOD"


def test_period_accepts_numeric_strings():
    assert parse_period("3", "2025") == (3, 2025)
    assert parse_period(12.0, 2024) == (12, 2024)


def test_invalid_period_writes_nothing(make_employee):
    make_employee(basic=1000)
    with pytest.raises(InvalidPeriod):
        run_payroll(13, 2025)
    assert db.session.query(PayrollRun).count() == 0
