from __future__ import annotations

from typing import Any, Dict, List, Optional

from payroll_api.extensions import db
from payroll_api.common.errors import NotFound
from payroll_api.common.money import ZERO, period_label
from payroll_api.models.user import User
from payroll_api.models.payroll.pay_run import PayrollRun
from payroll_api.models.payroll.payslip import Payslip


MAX_ID = 2**31 - 1  # int4 primary keys


def _id(x: Any) -> Optional[int]:
    if x is None or isinstance(x, bool):
        return None
    s = str(x).strip()
    if not (s.isascii() and s.isdecimal()):
        return None
    v = int(s)
    return v if 0 < v <= MAX_ID else None


def _f(x) -> Optional[float]:
    return float(x) if x is not None else None


# ---------- row serializers ----------
def row_run(r: PayrollRun) -> Dict[str, Any]:
    return {
        "id": r.id,
        "month": r.month,
        "year": r.year,
        "period": period_label(r.month, r.year),
        "status": r.status,
        "summary": {
            "employee_count": r.employee_count or 0,
            "total_net": float(r.total_net or 0),
        },
        "processed_by": r.processed_by,
        "created_at": r.created_at.isoformat() if r.created_at else None,
    }


def row_payslip(p: Payslip) -> Dict[str, Any]:
    return {
        "id": p.id,
        "payroll_run_id": p.payroll_run_id,
        "user_id": p.user_id,
        "month": p.month,
        "year": p.year,
        "employee_code": p.employee_code,
        "full_name": p.full_name,
        "department": p.department,
        "designation": p.designation,
        "salary": {
            "ctc": _f(p.ctc),
            "basic": _f(p.basic),
            "hra": _f(p.hra),
            "allowances": _f(p.allowances),
            "deductions": _f(p.deductions),
        },
        "gross": float(p.gross or 0),
        "net_pay": float(p.net_pay or 0),
        "created_at": p.created_at.isoformat() if p.created_at else None,
    }


# ---------- reads ----------
def list_runs() -> List[PayrollRun]:
    """Most recent period first."""
    return (
        PayrollRun.query
        .order_by(PayrollRun.year.desc(), PayrollRun.month.desc())
        .all()
    )


def get_run(run_id: Any) -> PayrollRun:
    rid = _id(run_id)
    run = db.session.get(PayrollRun, rid) if rid else None
    if run is None:
        raise NotFound("Payroll run not found")
    return run


def list_payslips_for_run(run_id: Any) -> List[Payslip]:
    run = get_run(run_id)
    return (
        Payslip.query
        .filter(Payslip.payroll_run_id == run.id)
        .order_by(Payslip.full_name.asc(), Payslip.id.asc())
        .all()
    )


def payslip_totals(slips: List[Payslip]) -> Dict[str, Any]:
    """Head count and exact Decimal sums of gross and net over a payslip listing."""
    return {
        "employee_count": len(slips),
        "total_gross": sum((p.gross or ZERO for p in slips), ZERO),
        "total_net": sum((p.net_pay or ZERO for p in slips), ZERO),
    }


def get_user(user_id: Any) -> User:
    uid = _id(user_id)
    user = db.session.get(User, uid) if uid else None
    if user is None:
        raise NotFound("User not found")
    return user


def list_my_payslips(user_id: Any) -> List[Payslip]:
    user = get_user(user_id)
    return (
        Payslip.query
        .filter(Payslip.user_id == user.id)
        .order_by(Payslip.year.desc(), Payslip.month.desc())
        .all()
    )


def get_my_payslip(user_id: Any, payslip_id: Any) -> Payslip:
    """
    The caller's own payslip. Someone else's payslip is reported exactly
    like a missing one.
    """
    user = get_user(user_id)
    pid = _id(payslip_id)
    slip = (
        Payslip.query.filter(Payslip.id == pid, Payslip.user_id == user.id).first()
        if pid else None
    )
    if slip is None:
        raise NotFound("Payslip not found")
    return slip
