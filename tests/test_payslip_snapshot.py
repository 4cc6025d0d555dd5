from decimal import Decimal

from payroll_api.services.payslip_snapshot import build_snapshot


def test_snapshot_computes_gross_and_net(make_employee):
    e = make_employee(basic=20000, hra=8000, allowances=2000, deductions=1000, ctc=360000)
    snap = build_snapshot(e, e.user, 3, 2025)

    assert snap.gross == Decimal("30000.00")
    assert snap.net_pay == Decimal("29000.00")
    assert snap.employee_code == e.code
    assert snap.full_name == e.user.full_name
    cols = snap.columns()
    assert cols["ctc"] == Decimal("360000.00")
    assert cols["month"] == 3 and cols["year"] == 2025


def test_snapshot_treats_missing_components_as_zero(make_employee):
    e = make_employee(basic=15000, hra=None, allowances=None, deductions=None)
    snap = build_snapshot(e, e.user, 3, 2025)

    assert snap.gross == Decimal("15000.00")
    assert snap.net_pay == Decimal("15000.00")
    # absent stays absent in the stored snapshot
    assert snap.columns()["hra"] is None
    assert snap.columns()["deductions"] is None


def test_snapshot_does_not_track_later_employee_edits(make_employee, session):
    e = make_employee(basic=10000, department="Ops")
    snap = build_snapshot(e, e.user, 1, 2025)
    e.basic = Decimal("99999")
    e.department = "Finance"
    session.commit()

    assert snap.gross == Decimal("10000.00")
    assert snap.department == "Ops"
