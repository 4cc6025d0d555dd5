from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from payroll_api.extensions import db
from payroll_api.common.errors import DuplicateRun, InvalidPeriod, NoEligibleEmployees, PersistenceFailure
from payroll_api.common.money import ZERO, period_label
from payroll_api.models.employee import Employee
from payroll_api.models.payroll.pay_run import PayrollRun
from payroll_api.services.payslip_snapshot import build_snapshot

log = logging.getLogger(__name__)

MIN_YEAR, MAX_YEAR = 1900, 9999


def _int(x: Any) -> Optional[int]:
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, int):
        return x
    if isinstance(x, float):
        return int(x) if x.is_integer() else None
    s = str(x).strip()
    return int(s) if s.isascii() and s.isdecimal() else None


def parse_period(month: Any, year: Any) -> Tuple[int, int]:
    m = _int(month)
    if m is None or not 1 <= m <= 12:
        raise InvalidPeriod("month must be an integer between 1 and 12",
                            payload={"month": month})
    y = _int(year)
    if y is None or not MIN_YEAR <= y <= MAX_YEAR:
        raise InvalidPeriod("year must be a 4-digit integer", payload={"year": year})
    return m, y


def find_run(month: int, year: int) -> Optional[PayrollRun]:
    return PayrollRun.query.filter_by(month=month, year=year).first()


def eligible_employees() ->Tuple[List[Employee], int]:
    """
    Active employees whose linked user is active, plus how many active
    employees were skipped (no user, or user inactive/suspended).
    """
    active = (
        Employee.query
        .filter(Employee.is_active.is_(True))
        .order_by(Employee.id)
        .all()
    )
    eligible = [e for e in active if e.user is not None and e.user.status == "active"]
    return eligible, len(active) - len(eligible)


def run_payroll(month: Any, year: Any, initiator_id: Optional[int] = None) -> PayrollRun:
    """
    Process payroll for one period.

    Writes one PayrollRun and one Payslip per eligible employee in a single
    transaction. A period can be processed at most once; the (month, year)
    unique constraint on payroll_runs decides races between concurrent
    callers.
    """
    month, year = parse_period(month, year)
    label = period_label(month, year)
    log.info("payroll run requested for %s by user %s", label, initiator_id)

    if find_run(month, year) is not None:
        log.warning("payroll for %s already processed", label)
        raise DuplicateRun(f"Payroll for {label} has already been processed",
                           payload={"month": month, "year": year})

    employees, skipped = eligible_employees()
    if not employees:
        raise NoEligibleEmployees(f"No eligible employees to process for {label}",
                                  payload={"month": month, "year": year, "skipped": skipped})

    snapshots = []
    total_net: Decimal = ZERO
    for emp in employees:
        snap = build_snapshot(emp, emp.user, month, year)
        snapshots.append(snap)
        total_net += snap.net_pay
    log.info("payroll %s: %d eligible, %d skipped", label, len(snapshots), skipped)

    run = PayrollRun(
        month=month,
        year=year,
        status="PROCESSED",
        employee_count=len(snapshots),
        total_net=total_net,
        processed_by=initiator_id,
    )
    db.session.add(run)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        log.warning("payroll for %s committed concurrently; rejecting duplicate", label)
        raise DuplicateRun(f"Payroll for {label} has already been processed",
                           payload={"month": month, "year": year})
    except SQLAlchemyError as e:
        db.session.rollback()
        log.exception("payroll %s failed while writing the run record", label)
        raise PersistenceFailure("Payroll could not be saved; nothing was processed",
                                 payload={"month": month, "year": year}) from e

    try:
        db.session.add_all([s.to_payslip(run) for s in snapshots])
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        log.exception("payroll %s failed while writing payslips; run rolled back", label)
        raise PersistenceFailure("Payroll could not be saved; nothing was processed",
                                 payload={"month": month, "year": year}) from e

    log.info("payroll %s processed: run=%s employees=%d total_net=%s",
             label, run.id, run.employee_count, run.total_net)
    return run
